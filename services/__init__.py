# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Business logic layer
# PURPOSE: Upstream clients, access checks, and workflow orchestration
# CREATED: 03 MAR 2026
# ============================================================================
"""
Services Module

Business logic for the workflow gateway. The workflow service coordinates
the upstream clients, object storage, and scoped temp resources.

Usage:
    from services import WorkflowService

    service = WorkflowService(cromwell, workspace, sam, storage, "debian:stable-slim")
    result = service.submit_workflow(workspace_id, source_uri, None, inputs,
                                     options, labels, "WDL", "1.0", None, token)
"""

from .access_validator import AccessValidator
from .cromwell_client import CromwellClient, CromwellApiError
from .sam_client import SamClient, SamApiError
from .workspace_client import WorkspaceClient, WorkspaceApiError, AccessResult
from .workflow_service import WorkflowService

__all__ = [
    "AccessValidator",
    "CromwellClient",
    "CromwellApiError",
    "SamClient",
    "SamApiError",
    "WorkspaceClient",
    "WorkspaceApiError",
    "AccessResult",
    "WorkflowService",
]
