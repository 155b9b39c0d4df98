# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for caller-facing Pydantic models
# CREATED: 03 MAR 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models for the workflow gateway API and engine payload translation.
"""

from core.models.workflow import (
    camel_to_snake,
    StorageLocator,
    WorkflowOptions,
    SubmitWorkflowRequest,
    QueryFilters,
    WorkflowIdAndStatus,
    WorkflowIdAndLabels,
    FailureMessage,
    CallMetadata,
    SubmittedFiles,
    WorkflowMetadataResponse,
    WorkflowQueryResult,
    WorkflowQueryResponse,
    WorkflowParsedInputsResponse,
)

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
