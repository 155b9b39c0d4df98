# ============================================================================
# WORKFLOW INPUTS PARSER TESTS
# ============================================================================
# STATUS: Tests - miniwdl-backed input discovery
# PURPOSE: Verify input descriptions and invalid-source handling
# CREATED: 03 MAR 2026
# ============================================================================
"""
Workflow Inputs Parser Tests

Writes small WDL documents to tmp_path and parses them with miniwdl.

Run with:
    pytest tests/test_inputs_parser.py -v
"""

import pytest

from core.errors import CallerInputError, InvalidWorkflowSourceError
from services.inputs_parser import parse_workflow_inputs


HELLO_WDL = """version 1.0

import "tasks/greet.wdl" as greet

workflow hello {
  input {
    String name
    Int count = 3
    File? extra
  }

  call greet.greet as say { input: name = name }

  output {
    String message = say.out
  }
}
"""

GREET_WDL = """version 1.0

task greet {
  input {
    String name
  }

  command <<<
    echo "hello ~{name}"
  >>>

  output {
    String out = read_string(stdout())
  }
}
"""


class TestParseWorkflowInputs:

    def test_describes_required_and_optional_inputs(self, tmp_path):
        (tmp_path / "tasks").mkdir()
        (tmp_path / "tasks" / "greet.wdl").write_text(GREET_WDL)
        source = tmp_path / "main.wdl"
        source.write_text(HELLO_WDL)

        inputs = parse_workflow_inputs(source)

        assert set(inputs) == {"hello.name", "hello.count", "hello.extra"}
        assert inputs["hello.name"] == "String"
        assert inputs["hello.extra"] == "File? (optional)"
        assert inputs["hello.count"].startswith("Int (optional, default = ")

    def test_single_task_document(self, tmp_path):
        source = tmp_path / "greet.wdl"
        source.write_text(GREET_WDL)

        assert parse_workflow_inputs(source) == {"greet.name": "String"}

    def test_syntax_error(self, tmp_path):
        source = tmp_path / "broken.wdl"
        source.write_text("version 1.0\nworkflow {{{\n")

        with pytest.raises(InvalidWorkflowSourceError) as exc_info:
            parse_workflow_inputs(source)

        assert isinstance(exc_info.value, CallerInputError)
        assert exc_info.value.status_code == 400

    def test_missing_import(self, tmp_path):
        source = tmp_path / "main.wdl"
        source.write_text(HELLO_WDL)

        with pytest.raises(InvalidWorkflowSourceError):
            parse_workflow_inputs(source)

    def test_no_workflow(self, tmp_path):
        source = tmp_path / "two_tasks.wdl"
        source.write_text(
            GREET_WDL + "\ntask other {\n  command <<<\n    true\n  >>>\n}\n"
        )

        with pytest.raises(InvalidWorkflowSourceError):
            parse_workflow_inputs(source)
