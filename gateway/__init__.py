# ============================================================================
# GATEWAY MODULE
# ============================================================================
# STATUS: Gateway - HTTP surface for workspace-scoped workflows
# PURPOSE: Routers, error mapping, and HTTP-only models
# CREATED: 03 MAR 2026
# ============================================================================
"""
Gateway Module

Contains the FastAPI routers for the workflow gateway. The app in main.py
includes both routers, installs the error handlers, and hands the router a
WorkflowService via set_gateway_services().
"""

from gateway.models import ErrorResponse, HealthResponse
from gateway.routes import (
    router as gateway_router,
    health_router,
    register_error_handlers,
    set_gateway_services,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "gateway_router",
    "health_router",
    "register_error_handlers",
    "set_gateway_services",
]
