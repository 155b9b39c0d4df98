# ============================================================================
# WORKSPACE ACCESS SERVICE CLIENT
# ============================================================================
# STATUS: Service - Sync HTTP client for the workspace manager API
# PURPOSE: Role checks and project context for a workspace
# CREATED: 03 MAR 2026
# ============================================================================
"""
Workspace Access Service Client

The workspace manager answers GET /api/workspaces/v1/{id} with 403/404 when
the caller's highest role is below minimumHighestRole. Those two codes are
reported as AccessResult values; anything else non-2xx raises
WorkspaceApiError.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from core.contracts import IamRole
from services.base_client import ApiError, BaseApiClient

logger = logging.getLogger(__name__)


class WorkspaceApiError(ApiError):
    """The workspace manager failed (not an access denial)."""


class AccessResult(str, Enum):
    OK = "ok"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


class WorkspaceClient(BaseApiClient):
    """Sync HTTP client for the workspace manager."""

    error_cls = WorkspaceApiError
    service_label = "Workspace manager"

    def get_workspace(
        self,
        workspace_id: str,
        token: str,
        minimum_role: IamRole = IamRole.READER,
    ) -> Dict[str, Any]:
        """GET /api/workspaces/v1/{id}?minimumHighestRole=ROLE"""
        return self._request(
            "GET",
            f"/api/workspaces/v1/{workspace_id}",
            token=token,
            params={"minimumHighestRole": minimum_role.value},
        )

    def _get_workspace_body(self, workspace_id: str, token: str) -> Dict[str, Any]:
        workspace = self.get_workspace(workspace_id, token)
        if not isinstance(workspace, dict):
            raise WorkspaceApiError(f"Workspace manager returned no workspace body for {workspace_id}")
        return workspace

    def _check_access(self, workspace_id: str, token: str, role: IamRole) -> AccessResult:
        try:
            self.get_workspace(workspace_id, token, minimum_role=role)
        except WorkspaceApiError as e:
            if e.status_code == 403:
                return AccessResult.FORBIDDEN
            if e.status_code == 404:
                return AccessResult.NOT_FOUND
            raise
        return AccessResult.OK

    def check_read_access(self, workspace_id: str, token: str) -> AccessResult:
        return self._check_access(workspace_id, token, IamRole.READER)

    def check_write_access(self, workspace_id: str, token: str) -> AccessResult:
        return self._check_access(workspace_id, token, IamRole.WRITER)

    def get_project_id(self, workspace_id: str, token: str) -> str:
        """
        Return the workspace's cloud project id.

        Raises:
            WorkspaceApiError: if the workspace has no project context.
        """
        workspace = self._get_workspace_body(workspace_id, token)
        context = workspace.get("gcpContext")
        project_id: Optional[str] = context.get("projectId") if isinstance(context, dict) else None
        if not project_id:
            raise WorkspaceApiError(f"Workspace {workspace_id} has no project context")
        return project_id

    def get_highest_role(self, workspace_id: str, token: str) -> Optional[IamRole]:
        workspace = self._get_workspace_body(workspace_id, token)
        role = workspace.get("highestRole")
        if role is None:
            return None
        try:
            return IamRole(role)
        except ValueError:
            logger.warning(f"Unknown role {role!r} on workspace {workspace_id}")
            return None


__all__ = ["WorkspaceClient", "WorkspaceApiError", "AccessResult"]
