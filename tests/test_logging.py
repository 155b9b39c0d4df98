# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# STATUS: Tests - Trace fields, formatters, checkpoints
# PURPOSE: Verify log records carry workspace/workflow tracing
# CREATED: 03 MAR 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import json
import logging

import pytest

from core.logging import (
    HumanFormatter,
    StructuredFormatter,
    TraceFilter,
    current_trace,
    log_checkpoint,
    log_context,
)


WORKSPACE_ID = "22222222-2222-2222-2222-222222222222"
WORKFLOW_ID = "11111111-1111-1111-1111-111111111111"


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    handler = _ListHandler()
    handler.addFilter(TraceFilter())
    logger = logging.getLogger("tests.gateway_logging")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    yield logger, handler.records
    logger.removeHandler(handler)


class TestLogContext:

    def test_nested_contexts_merge_and_restore(self):
        with log_context(workspace_id=WORKSPACE_ID, operation="get_status"):
            with log_context(workflow_id=WORKFLOW_ID):
                assert current_trace() == {
                    "workspace_id": WORKSPACE_ID,
                    "workflow_id": WORKFLOW_ID,
                    "operation": "get_status",
                }
            assert "workflow_id" not in current_trace()
        assert current_trace() == {}

    def test_none_keeps_outer_value(self):
        with log_context(workspace_id=WORKSPACE_ID):
            with log_context(workspace_id=None, operation="parse_inputs"):
                assert current_trace()["workspace_id"] == WORKSPACE_ID

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            with log_context(job_id="abc"):
                pass

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with log_context(workspace_id=WORKSPACE_ID):
                raise RuntimeError("boom")
        assert current_trace() == {}


class TestFormatters:

    def test_records_carry_trace(self, captured):
        logger, records = captured
        with log_context(workspace_id=WORKSPACE_ID, operation="submit_workflow"):
            logger.info("Submitting")

        assert records[0].trace == {
            "workspace_id": WORKSPACE_ID,
            "operation": "submit_workflow",
        }

    def test_structured_output(self, captured):
        logger, records = captured
        with log_context(workspace_id=WORKSPACE_ID):
            log_checkpoint("bundle_assembled", {"has_dependencies": True}, logger=logger)

        entry = json.loads(StructuredFormatter().format(records[0]))

        assert entry["message"] == "CHECKPOINT: bundle_assembled"
        assert entry["checkpoint"] == "bundle_assembled"
        assert entry["data"] == {"has_dependencies": True}
        assert entry["workspace_id"] == WORKSPACE_ID
        assert entry["level"] == "INFO"
        assert entry["timestamp"].endswith("+00:00")

    def test_human_output(self, captured):
        logger, records = captured
        with log_context(workspace_id=WORKSPACE_ID, workflow_id=WORKFLOW_ID):
            logger.warning("Label mismatch")

        line = HumanFormatter().format(records[0])

        assert "WARNING" in line
        assert f"[workspace={WORKSPACE_ID}, workflow={WORKFLOW_ID}]" in line
        assert line.endswith(": Label mismatch")

    def test_human_output_without_trace(self, captured):
        logger, records = captured
        logger.info("Starting")

        line = HumanFormatter().format(records[0])

        assert "[" not in line
        assert line.endswith("tests.gateway_logging: Starting")
