# ============================================================================
# WORKFLOW GATEWAY - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire configuration, upstream clients, and routes
# CREATED: 03 MAR 2026
# ============================================================================
"""
Workflow Gateway Main Application

FastAPI application that:
1. Loads GatewayConfig from the environment
2. Builds one client per upstream service (engine, workspace, identity, storage)
3. Serves the workspace-scoped workflow routes

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8080
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE, CODENAME
from core.config import GatewayConfig
from core.logging import configure_logging
from gateway import gateway_router, health_router, register_error_handlers, set_gateway_services
from infrastructure import BlobRepository, ServiceIdentity
from services import CromwellClient, SamClient, WorkflowService, WorkspaceClient

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = logging.getLogger(__name__)


def build_workflow_service(config: GatewayConfig) -> WorkflowService:
    """Construct the workflow service and its collaborators from config."""
    timeout = httpx.Timeout(
        config.http_timeout_seconds,
        connect=config.http_connect_timeout_seconds,
    )
    storage: Optional[BlobRepository] = None
    if config.has_storage_config:
        storage = BlobRepository(account_name=config.storage_account)
    else:
        logger.warning("WFGW_STORAGE_ACCOUNT not set; source_uri submissions will fail")

    return WorkflowService(
        cromwell_client=CromwellClient(config.cromwell_url, timeout=timeout),
        workspace_client=WorkspaceClient(config.workspace_manager_url, timeout=timeout),
        sam_client=SamClient(
            config.sam_url,
            service_identity=ServiceIdentity(scope=config.service_token_scope),
            timeout=timeout,
        ),
        storage=storage,
        default_docker_image=config.default_docker_image,
        temp_dir=config.temp_dir,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes services on startup.
    """
    config = GatewayConfig.from_env()
    logger.info(f"Starting {CODENAME} v{__version__} (Build {BUILD_DATE})")
    logger.info(
        f"Engine: {config.cromwell_url} | Workspaces: {config.workspace_manager_url} | "
        f"Identity: {config.sam_url}"
    )

    set_gateway_services(build_workflow_service(config), version=__version__)

    yield

    logger.info("Workflow gateway stopped")


# Create FastAPI app
app = FastAPI(
    title=CODENAME,
    description="Workspace-scoped workflow submission and inspection",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health_router)
app.include_router(gateway_router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": CODENAME,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8080"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
