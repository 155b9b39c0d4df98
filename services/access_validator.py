# ============================================================================
# ACCESS VALIDATOR
# ============================================================================
# STATUS: Service - Workspace role and workflow tenancy checks
# PURPOSE: Gate every workflow read behind workspace access + label match
# CREATED: 03 MAR 2026
# ============================================================================
"""
Access Validator

The engine has no notion of workspaces. A workflow belongs to a workspace
only through its terra-workspace-id label, so every single-workflow read
checks both:

1. the caller has at least READER on the workspace
2. the workflow's label names that same workspace

Any failure reading labels (engine down, unknown id, missing label) is
reported exactly like a mismatch, so callers cannot discover workflows in
other workspaces. Stateless: nothing is cached between calls.
"""

import logging
from typing import Any

from core.contracts import WorkflowLabelKeys
from core.errors import AuthorizationError, TenancyMismatchError, UpstreamServiceError
from services.cromwell_client import CromwellApiError, CromwellClient
from services.workspace_client import AccessResult, WorkspaceApiError, WorkspaceClient

logger = logging.getLogger(__name__)


class AccessValidator:
    """Workspace access and workflow-label validation."""

    def __init__(self, workspace_client: WorkspaceClient, cromwell_client: CromwellClient):
        self._workspace = workspace_client
        self._cromwell = cromwell_client

    def _require(self, result: AccessResult, workspace_id: Any, role: str) -> None:
        if result != AccessResult.OK:
            logger.info(f"Access denied to workspace {workspace_id} ({result.value}, needs {role})")
            raise AuthorizationError(
                f"User does not have {role} access to workspace {workspace_id}"
            )

    def check_workspace_access(self, workspace_id: Any, token: str) -> None:
        """Raise AuthorizationError unless the caller can read the workspace."""
        try:
            result = self._workspace.check_read_access(str(workspace_id), token)
        except WorkspaceApiError as e:
            raise UpstreamServiceError(f"Error checking workspace access: {e}") from e
        self._require(result, workspace_id, "read")

    def check_workspace_write_access(self, workspace_id: Any, token: str) -> None:
        """Raise AuthorizationError unless the caller can write to the workspace."""
        try:
            result = self._workspace.check_write_access(str(workspace_id), token)
        except WorkspaceApiError as e:
            raise UpstreamServiceError(f"Error checking workspace access: {e}") from e
        self._require(result, workspace_id, "write")

    def validate_workflow_label(self, workflow_id: Any, workspace_id: Any) -> None:
        """
        Raise TenancyMismatchError unless the workflow is labelled with
        workspace_id. Comparison is exact on canonical UUID text.
        """
        try:
            payload = self._cromwell.labels(str(workflow_id))
        except CromwellApiError as e:
            logger.info(f"Could not read labels of workflow {workflow_id}: {e}")
            raise TenancyMismatchError(workflow_id, workspace_id) from e

        labels = payload.get("labels") if isinstance(payload, dict) else None
        if not isinstance(labels, dict):
            logger.info(f"Workflow {workflow_id} returned no label map")
            raise TenancyMismatchError(workflow_id, workspace_id)
        bound_to = labels.get(WorkflowLabelKeys.WORKSPACE_ID.value)
        if bound_to != str(workspace_id):
            logger.info(
                f"Workflow {workflow_id} is bound to {bound_to!r}, not {workspace_id}"
            )
            raise TenancyMismatchError(workflow_id, workspace_id)

    def validate_access_and_label(self, workflow_id: Any, workspace_id: Any, token: str) -> None:
        self.check_workspace_access(workspace_id, token)
        self.validate_workflow_label(workflow_id, workspace_id)


__all__ = ["AccessValidator"]
