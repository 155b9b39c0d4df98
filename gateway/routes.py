# ============================================================================
# GATEWAY ROUTES
# ============================================================================
# STATUS: Gateway - FastAPI routes for workspace-scoped workflows
# PURPOSE: HTTP endpoints for submit, status, labels, metadata, query, inputs
# CREATED: 03 MAR 2026
# ============================================================================
"""
Gateway Routes

FastAPI router for the workflow gateway. All workflow endpoints live under
/api/workspaces/{workspace_id}/cromwell:

- POST /workflows                               Submit a workflow
- GET  /workflows/query                         Query workflows in the workspace
- GET  /workflows/{workflow_id}/status          Workflow status
- GET  /workflows/{workflow_id}/labels          Workflow labels
- GET  /workflows/{workflow_id}/metadata        Workflow metadata
- GET  /parseInputs?uri=                        Inputs declared by a WDL document

Plus GET /api/gateway/health.

Route functions are sync; FastAPI runs them in its threadpool since every
service call blocks on upstream HTTP. GatewayError subclasses raised by the
service are turned into {"message", "status_code"} JSON by the handler
installed with register_error_handlers().
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from core.errors import GatewayError
from core.models import (
    QueryFilters,
    SubmitWorkflowRequest,
    WorkflowIdAndLabels,
    WorkflowIdAndStatus,
    WorkflowMetadataResponse,
    WorkflowParsedInputsResponse,
    WorkflowQueryResponse,
)
from gateway.models import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/workspaces/{workspace_id}/cromwell", tags=["Workflows"])
health_router = APIRouter(prefix="/api/gateway", tags=["Gateway"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# These will be set by the main app at startup

_workflow_service = None
_version = "unknown"


def set_gateway_services(workflow_service, version: Optional[str] = None):
    """Set service instances for dependency injection."""
    global _workflow_service, _version
    _workflow_service = workflow_service
    if version:
        _version = version


def get_workflow_service():
    if _workflow_service is None:
        raise HTTPException(500, "Services not initialized")
    return _workflow_service


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Extract the caller's bearer token from the Authorization header."""
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Access token is null. Try refreshing your access.",
    )


# ============================================================================
# ERROR HANDLING
# ============================================================================

def register_error_handlers(app: FastAPI) -> None:
    """Map GatewayError (and HTTPException) to the gateway's error body."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail), "status_code": exc.status_code},
        )


# ============================================================================
# SUBMISSION
# ============================================================================

@router.post(
    "/workflows",
    response_model=WorkflowIdAndStatus,
    responses=_ERROR_RESPONSES,
    summary="Submit a workflow",
    description="""
    Submit a workflow to the execution engine on behalf of the workspace.

    Requires WRITER on the workspace. `options.jes_gcs_root` is required.
    Reserved labels (terra-workspace-id, terra-user-email, ...) and reserved
    options are set by the gateway; caller values for them are replaced.
    """,
)
def submit_workflow(
    workspace_id: UUID,
    request: SubmitWorkflowRequest,
    token: str = Depends(get_bearer_token),
) -> WorkflowIdAndStatus:
    service = get_workflow_service()
    return service.submit_workflow(
        workspace_id,
        request.source_uri,
        request.source_url,
        request.inputs,
        request.options.to_option_dict(),
        request.labels,
        request.workflow_type.value if request.workflow_type else None,
        request.workflow_type_version,
        request.requested_workflow_id,
        token,
        workflow_on_hold=request.workflow_on_hold,
        dependencies_uri=request.dependencies_uri,
    )


# ============================================================================
# QUERY
# ============================================================================

@router.get(
    "/workflows/query",
    response_model=WorkflowQueryResponse,
    responses=_ERROR_RESPONSES,
    summary="Query workflows in the workspace",
)
def query_workflows(
    workspace_id: UUID,
    submission: Optional[datetime] = Query(default=None),
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    status_filter: Optional[List[str]] = Query(default=None, alias="status"),
    name: Optional[List[str]] = Query(default=None),
    id: Optional[List[str]] = Query(default=None),
    additional_query_result_fields: Optional[List[str]] = Query(
        default=None, alias="additionalQueryResultFields"
    ),
    include_subworkflows: Optional[bool] = Query(default=None, alias="includeSubworkflows"),
    token: str = Depends(get_bearer_token),
) -> WorkflowQueryResponse:
    filters = QueryFilters(
        submission=submission,
        start=start,
        end=end,
        status=status_filter,
        name=name,
        id=id,
        additional_query_result_fields=additional_query_result_fields,
        include_subworkflows=include_subworkflows,
    )
    return get_workflow_service().query_workflows(workspace_id, token, filters)


# ============================================================================
# SINGLE WORKFLOW READS
# ============================================================================

@router.get(
    "/workflows/{workflow_id}/status",
    response_model=WorkflowIdAndStatus,
    responses=_ERROR_RESPONSES,
    summary="Get workflow status",
)
def get_status(
    workspace_id: UUID,
    workflow_id: UUID,
    token: str = Depends(get_bearer_token),
) -> WorkflowIdAndStatus:
    return get_workflow_service().get_status(workspace_id, workflow_id, token)


@router.get(
    "/workflows/{workflow_id}/labels",
    response_model=WorkflowIdAndLabels,
    responses=_ERROR_RESPONSES,
    summary="Get workflow labels",
)
def get_labels(
    workspace_id: UUID,
    workflow_id: UUID,
    token: str = Depends(get_bearer_token),
) -> WorkflowIdAndLabels:
    return get_workflow_service().get_labels(workspace_id, workflow_id, token)


@router.get(
    "/workflows/{workflow_id}/metadata",
    response_model=WorkflowMetadataResponse,
    responses=_ERROR_RESPONSES,
    summary="Get workflow metadata",
)
def get_metadata(
    workspace_id: UUID,
    workflow_id: UUID,
    include_key: Optional[List[str]] = Query(default=None, alias="includeKey"),
    exclude_key: Optional[List[str]] = Query(default=None, alias="excludeKey"),
    expand_sub_workflows: Optional[bool] = Query(default=None, alias="expandSubWorkflows"),
    token: str = Depends(get_bearer_token),
) -> WorkflowMetadataResponse:
    return get_workflow_service().get_metadata(
        workspace_id,
        workflow_id,
        token,
        include_keys=include_key,
        exclude_keys=exclude_key,
        expand_sub_workflows=expand_sub_workflows,
    )


# ============================================================================
# INPUT DISCOVERY
# ============================================================================

@router.get(
    "/parseInputs",
    response_model=WorkflowParsedInputsResponse,
    responses=_ERROR_RESPONSES,
    summary="Describe the inputs of a WDL document",
)
def parse_inputs(
    workspace_id: UUID,
    uri: str = Query(..., description="Storage URI of the WDL document"),
    token: str = Depends(get_bearer_token),
) -> WorkflowParsedInputsResponse:
    inputs = get_workflow_service().parse_inputs(workspace_id, uri, token)
    return WorkflowParsedInputsResponse(inputs=inputs)


# ============================================================================
# HEALTH
# ============================================================================

@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the gateway is up. Does not call upstream services.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(version=_version)


__all__ = [
    "router",
    "health_router",
    "set_gateway_services",
    "get_workflow_service",
    "get_bearer_token",
    "register_error_handlers",
]
