# ============================================================================
# WORKFLOW GATEWAY MODELS
# ============================================================================
# STATUS: Core model - Caller-facing request/response shapes
# PURPOSE: Submission requests, engine responses, query filters, locators
# CREATED: 03 MAR 2026
# EXPORTS: StorageLocator, WorkflowOptions, SubmitWorkflowRequest, QueryFilters,
#          WorkflowIdAndStatus, WorkflowIdAndLabels, WorkflowMetadataResponse,
#          WorkflowQueryResponse, WorkflowParsedInputsResponse
# ============================================================================
"""
Workflow Gateway Models

The execution engine speaks camelCase JSON; callers get snake_case models.
Translation from engine payloads lives in the from_engine() classmethods so
the workflow service never hands raw engine dicts back to a caller.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from core.contracts import WorkflowType


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_LOCATOR_PATTERN = re.compile(r"^([a-z][a-z0-9+.-]*)://([^/]+)/(.+)$")


def camel_to_snake(name: str) -> str:
    """jesGcsRoot -> jes_gcs_root. Already snake_case names pass through."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


# ============================================================================
# STORAGE LOCATOR
# ============================================================================

class StorageLocator(BaseModel):
    """
    A single object in object storage: <scheme>://<container>/<object path>.

    The scheme is kept only to rebuild the original URI for labels; the
    container and object path are what the storage adapter needs.
    """

    scheme: str
    container: str
    blob_path: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_uri(cls, uri: str) -> "StorageLocator":
        """Parse a URI like gs://bucket/path/to/main.wdl. Raises ValueError."""
        if not uri:
            raise ValueError("Invalid storage URI: input is empty.")
        match = _LOCATOR_PATTERN.match(uri.strip())
        if not match:
            raise ValueError(f"Invalid storage URI: {uri}")
        return cls(scheme=match.group(1), container=match.group(2), blob_path=match.group(3))

    @property
    def uri(self) -> str:
        return f"{self.scheme}://{self.container}/{self.blob_path}"

    @property
    def name(self) -> str:
        return self.blob_path.rsplit("/", 1)[-1]

    @property
    def extension(self) -> str:
        """File extension including the dot, or "" when the name has none."""
        name = self.name
        if "." not in name.lstrip("."):
            return ""
        return "." + name.rsplit(".", 1)[-1]

    @property
    def parent_prefix(self) -> str:
        """Object prefix of the containing directory, with trailing slash ("" at root)."""
        if "/" not in self.blob_path:
            return ""
        return self.blob_path.rsplit("/", 1)[0] + "/"


# ============================================================================
# SUBMISSION
# ============================================================================

class WorkflowOptions(BaseModel):
    """
    Engine options supplied by the caller.

    Known options are typed; anything else is passed through. camelCase
    keys are converted to the snake_case names the engine expects.
    """

    jes_gcs_root: Optional[str] = Field(
        default=None,
        description="Execution root for workflow outputs. Required on submission.",
        examples=["gs://bucket/root"],
    )
    delete_intermediate_output_files: Optional[bool] = None
    memory_retry_multiplier: Optional[float] = None
    write_to_cache: Optional[bool] = None
    read_from_cache: Optional[bool] = None
    final_workflow_log_dir: Optional[str] = None
    final_call_logs_dir: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    def to_option_dict(self) -> Dict[str, Any]:
        """Options as a plain dict with None values dropped."""
        return {
            camel_to_snake(key): value
            for key, value in self.model_dump(exclude_none=True).items()
        }


class SubmitWorkflowRequest(BaseModel):
    """Request to submit a workflow into a workspace."""

    source_uri: Optional[str] = Field(
        default=None,
        description="Storage URI of the main workflow source document",
        examples=["gs://bucket/workflows/main.wdl"],
    )
    source_url: Optional[str] = Field(
        default=None,
        description="Public URL of the workflow source (used when source_uri is absent)",
    )
    workflow_on_hold: bool = Field(
        default=False,
        description="Put the workflow on hold upon submission",
    )
    inputs: Optional[Dict[str, Any]] = Field(default=None, description="Workflow inputs")
    options: WorkflowOptions = Field(default_factory=WorkflowOptions)
    workflow_type: Optional[WorkflowType] = Field(default=None, examples=["WDL"])
    workflow_type_version: Optional[str] = Field(default=None, examples=["1.0"])
    labels: Dict[str, str] = Field(default_factory=dict)
    requested_workflow_id: Optional[UUID] = None
    dependencies_uri: Optional[str] = Field(
        default=None,
        description="Storage URI of a pre-built dependencies ZIP. "
                    "When set, import scanning is skipped.",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "source_uri": "gs://bucket/workflows/main.wdl",
                "inputs": {"main.sample": "NA12878"},
                "options": {"jes_gcs_root": "gs://bucket/root"},
                "workflow_type": "WDL",
                "workflow_type_version": "1.0",
                "labels": {"project": "pilot"},
            }
        }
    }


# ============================================================================
# QUERY
# ============================================================================

class QueryFilters(BaseModel):
    """
    Caller-controlled query filters.

    There are deliberately no label filter fields: the only label filter
    sent to the engine is the workspace binding added by the service.
    """

    submission: Optional[datetime] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    status: Optional[List[str]] = None
    name: Optional[List[str]] = None
    id: Optional[List[str]] = None
    additional_query_result_fields: Optional[List[str]] = None
    include_subworkflows: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


# ============================================================================
# RESPONSES
# ============================================================================

class WorkflowIdAndStatus(BaseModel):
    """Workflow id with its engine-reported status."""

    id: UUID
    status: str

    @classmethod
    def from_engine(cls, payload: Dict[str, Any]) -> "WorkflowIdAndStatus":
        return cls(id=UUID(str(payload["id"])), status=payload["status"])


class WorkflowIdAndLabels(BaseModel):
    """Workflow id with its labels."""

    id: UUID
    labels: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_engine(cls, payload: Dict[str, Any]) -> "WorkflowIdAndLabels":
        return cls(id=UUID(str(payload["id"])), labels=payload.get("labels") or {})


class FailureMessage(BaseModel):
    """A failure with its (possibly nested) causes."""

    message: Optional[str] = None
    caused_by: List["FailureMessage"] = Field(default_factory=list)

    @classmethod
    def from_engine(cls, payload: Dict[str, Any]) -> "FailureMessage":
        return cls(
            message=payload.get("message"),
            caused_by=[cls.from_engine(c) for c in payload.get("causedBy") or []],
        )


FailureMessage.model_rebuild()


def _failures(payload: Optional[List[Dict[str, Any]]]) -> Optional[List[FailureMessage]]:
    if payload is None:
        return None
    return [FailureMessage.from_engine(f) for f in payload]


class CallMetadata(BaseModel):
    """Metadata for one call attempt of a workflow task."""

    inputs: Optional[Dict[str, Any]] = None
    execution_status: Optional[str] = None
    backend: Optional[str] = None
    backend_status: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    job_id: Optional[str] = None
    call_root: Optional[str] = None
    return_code: Optional[int] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    backend_logs: Optional[Dict[str, Any]] = None
    failures: Optional[List[FailureMessage]] = None

    @classmethod
    def from_engine(cls, payload: Dict[str, Any]) -> "CallMetadata":
        return cls(
            inputs=payload.get("inputs"),
            execution_status=payload.get("executionStatus"),
            backend=payload.get("backend"),
            backend_status=payload.get("backendStatus"),
            start=payload.get("start"),
            end=payload.get("end"),
            job_id=payload.get("jobId"),
            call_root=payload.get("callRoot"),
            return_code=payload.get("returnCode"),
            stdout=payload.get("stdout"),
            stderr=payload.get("stderr"),
            backend_logs=payload.get("backendLogs"),
            failures=_failures(payload.get("failures")),
        )


class SubmittedFiles(BaseModel):
    """The documents the workflow was submitted with, as recorded by the engine."""

    workflow: Optional[str] = None
    options: Optional[str] = None
    inputs: Optional[str] = None
    workflow_type: Optional[str] = None
    root: Optional[str] = None
    workflow_url: Optional[str] = None
    labels: Optional[str] = None

    @classmethod
    def from_engine(cls, payload: Dict[str, Any]) -> "SubmittedFiles":
        return cls(
            workflow=payload.get("workflow"),
            options=payload.get("options"),
            inputs=payload.get("inputs"),
            workflow_type=payload.get("workflowType"),
            root=payload.get("root"),
            workflow_url=payload.get("workflowUrl"),
            labels=payload.get("labels"),
        )


class WorkflowMetadataResponse(BaseModel):
    """Workflow metadata with calls and failures."""

    id: UUID
    status: Optional[str] = None
    submission: Optional[datetime] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    inputs: Optional[Dict[str, Any]] = None
    outputs: Optional[Dict[str, Any]] = None
    calls: Optional[Dict[str, List[CallMetadata]]] = None
    failures: Optional[List[FailureMessage]] = None
    submitted_files: Optional[SubmittedFiles] = None

    @classmethod
    def from_engine(cls, payload: Dict[str, Any]) -> "WorkflowMetadataResponse":
        calls = payload.get("calls")
        submitted = payload.get("submittedFiles")
        return cls(
            id=UUID(str(payload["id"])),
            status=payload.get("status"),
            submission=payload.get("submission"),
            start=payload.get("start"),
            end=payload.get("end"),
            inputs=payload.get("inputs"),
            outputs=payload.get("outputs"),
            calls=None if calls is None else {
                name: [CallMetadata.from_engine(c) for c in attempts]
                for name, attempts in calls.items()
            },
            failures=_failures(payload.get("failures")),
            submitted_files=None if submitted is None else SubmittedFiles.from_engine(submitted),
        )


class WorkflowQueryResult(BaseModel):
    """One row of a workflow query."""

    id: str
    name: Optional[str] = None
    status: Optional[str] = None
    submission: Optional[datetime] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def from_engine(cls, payload: Dict[str, Any]) -> "WorkflowQueryResult":
        return cls(
            id=payload["id"],
            name=payload.get("name"),
            status=payload.get("status"),
            submission=payload.get("submission"),
            start=payload.get("start"),
            end=payload.get("end"),
        )


class WorkflowQueryResponse(BaseModel):
    """Workflow query results scoped to one workspace."""

    results: Optional[List[WorkflowQueryResult]] = None
    total_results_count: int = 0

    @classmethod
    def from_engine(cls, payload: Dict[str, Any]) -> "WorkflowQueryResponse":
        results = payload.get("results")
        return cls(
            results=None if results is None else [
                WorkflowQueryResult.from_engine(r) for r in results
            ],
            total_results_count=payload.get("totalResultsCount") or 0,
        )


class WorkflowParsedInputsResponse(BaseModel):
    """Inputs declared by a workflow source document."""

    inputs: Dict[str, str] = Field(default_factory=dict)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "camel_to_snake",
    "StorageLocator",
    "WorkflowOptions",
    "SubmitWorkflowRequest",
    "QueryFilters",
    "WorkflowIdAndStatus",
    "WorkflowIdAndLabels",
    "FailureMessage",
    "CallMetadata",
    "SubmittedFiles",
    "WorkflowMetadataResponse",
    "WorkflowQueryResult",
    "WorkflowQueryResponse",
    "WorkflowParsedInputsResponse",
]
