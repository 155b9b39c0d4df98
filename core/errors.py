# ============================================================================
# GATEWAY ERRORS
# ============================================================================
# STATUS: Core - Caller-visible error taxonomy
# PURPOSE: Exceptions raised by services and mapped to HTTP by the gateway
# CREATED: 03 MAR 2026
# ============================================================================
"""
Gateway Errors

Every caller-visible failure is a GatewayError subclass carrying the HTTP
status the gateway answers with. External clients raise their own
*ApiError types; the workflow service translates them into these.
"""

from typing import Any, Dict


class GatewayError(Exception):
    """Base class for caller-visible gateway errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "status_code": self.status_code}


class CallerInputError(GatewayError):
    """Missing or malformed caller input. Raised before any external call."""

    status_code = 400


class InvalidWorkflowSourceError(CallerInputError):
    """The workflow source document could not be parsed."""


class AuthorizationError(GatewayError):
    """Caller lacks the required role on the workspace."""

    status_code = 403


class TenancyMismatchError(GatewayError):
    """
    Workflow is not bound to the calling workspace.

    Also raised when the engine cannot return the workflow's labels, so
    callers cannot tell a foreign workflow from an unreachable engine.
    """

    status_code = 400

    def __init__(self, workflow_id: Any, workspace_id: Any):
        super().__init__(
            f"Workflow {workflow_id} is not a member of workspace {workspace_id}"
        )
        self.workflow_id = str(workflow_id)
        self.workspace_id = str(workspace_id)


class DependencyResolutionError(GatewayError):
    """Object storage failed while staging the source or its dependencies."""

    status_code = 500


class EngineError(GatewayError):
    """The execution engine rejected or failed the call."""

    status_code = 502

    def __init__(self, message: str, engine_status: int = 0, engine_body: str = ""):
        super().__init__(message)
        self.engine_status = engine_status
        self.engine_body = engine_body


class UpstreamServiceError(GatewayError):
    """Identity or workspace service failed for a reason other than access denial."""

    status_code = 502


__all__ = [
    "GatewayError",
    "CallerInputError",
    "InvalidWorkflowSourceError",
    "AuthorizationError",
    "TenancyMismatchError",
    "DependencyResolutionError",
    "EngineError",
    "UpstreamServiceError",
]
