# ============================================================================
# MODEL TESTS
# ============================================================================
# STATUS: Tests - Locators, options, and engine payload translation
# PURPOSE: Verify camelCase engine JSON maps onto caller models
# CREATED: 03 MAR 2026
# ============================================================================
"""
Model Tests

Run with:
    pytest tests/test_models.py -v
"""

from uuid import UUID

import pytest

from core.models import (
    StorageLocator,
    SubmitWorkflowRequest,
    WorkflowMetadataResponse,
    WorkflowOptions,
    WorkflowQueryResponse,
    camel_to_snake,
)


WORKFLOW_ID = "11111111-1111-1111-1111-111111111111"


class TestStorageLocator:

    def test_parse(self):
        locator = StorageLocator.from_uri("gs://bucket/pipelines/germline/main.wdl")

        assert locator.scheme == "gs"
        assert locator.container == "bucket"
        assert locator.blob_path == "pipelines/germline/main.wdl"
        assert locator.name == "main.wdl"
        assert locator.extension == ".wdl"
        assert locator.parent_prefix == "pipelines/germline/"
        assert locator.uri == "gs://bucket/pipelines/germline/main.wdl"

    def test_root_object(self):
        locator = StorageLocator.from_uri("az://workflows/main.wdl")
        assert locator.parent_prefix == ""

    def test_no_extension(self):
        assert StorageLocator.from_uri("gs://bucket/dir/Makefile").extension == ""

    @pytest.mark.parametrize("uri", ["", "bucket/main.wdl", "gs://bucket", "gs://bucket/"])
    def test_invalid(self, uri):
        with pytest.raises(ValueError):
            StorageLocator.from_uri(uri)


class TestWorkflowOptions:

    def test_camel_case_converted(self):
        assert camel_to_snake("jesGcsRoot") == "jes_gcs_root"
        assert camel_to_snake("jes_gcs_root") == "jes_gcs_root"

    def test_to_option_dict(self):
        options = WorkflowOptions.model_validate({
            "jes_gcs_root": "gs://bucket/root",
            "readFromCache": False,
            "monitoring_script": "gs://bucket/monitor.sh",
        })

        assert options.to_option_dict() == {
            "jes_gcs_root": "gs://bucket/root",
            "read_from_cache": False,
            "monitoring_script": "gs://bucket/monitor.sh",
        }

    def test_submit_request_defaults(self):
        request = SubmitWorkflowRequest.model_validate({"source_uri": "gs://bucket/main.wdl"})
        assert request.workflow_on_hold is False
        assert request.labels == {}
        assert request.options.to_option_dict() == {}


class TestEngineTranslation:

    def test_metadata_with_nested_failures(self):
        payload = {
            "id": WORKFLOW_ID,
            "status": "Failed",
            "submission": "2026-03-03T10:00:00.000Z",
            "start": "2026-03-03T10:00:05.000Z",
            "end": "2026-03-03T10:30:00.000Z",
            "inputs": {"w.sample": "NA12878"},
            "outputs": {},
            "calls": {
                "w.align": [{
                    "executionStatus": "Failed",
                    "backend": "PAPIv2",
                    "jobId": "projects/p/operations/1",
                    "returnCode": 1,
                    "stderr": "gs://bucket/root/w/align/stderr",
                    "failures": [{"message": "Task failed", "causedBy": []}],
                }]
            },
            "failures": [{
                "message": "Workflow failed",
                "causedBy": [{
                    "message": "Task w.align failed",
                    "causedBy": [{"message": "exit code 1", "causedBy": []}],
                }],
            }],
            "submittedFiles": {"workflow": "version 1.0", "workflowType": "WDL"},
        }

        metadata = WorkflowMetadataResponse.from_engine(payload)

        assert metadata.id == UUID(WORKFLOW_ID)
        assert metadata.status == "Failed"
        assert metadata.submission.year == 2026
        call = metadata.calls["w.align"][0]
        assert call.execution_status == "Failed"
        assert call.job_id == "projects/p/operations/1"
        assert call.return_code == 1
        assert call.failures[0].message == "Task failed"
        assert metadata.failures[0].caused_by[0].caused_by[0].message == "exit code 1"
        assert metadata.submitted_files.workflow_type == "WDL"

    def test_metadata_minimal(self):
        metadata = WorkflowMetadataResponse.from_engine({"id": WORKFLOW_ID})
        assert metadata.calls is None
        assert metadata.failures is None

    def test_query_response(self):
        response = WorkflowQueryResponse.from_engine({
            "results": [
                {"id": WORKFLOW_ID, "name": "w", "status": "Succeeded",
                 "submission": "2026-03-03T10:00:00.000Z"},
            ],
            "totalResultsCount": 1,
        })

        assert response.total_results_count == 1
        assert response.results[0].id == WORKFLOW_ID
        assert response.results[0].status == "Succeeded"
