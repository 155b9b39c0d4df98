# ============================================================================
# GATEWAY MODELS
# ============================================================================
# STATUS: Gateway - HTTP-only response models
# PURPOSE: Pydantic models for health and error responses
# CREATED: 03 MAR 2026
# ============================================================================
"""
Gateway Models

HTTP-surface models that have no meaning outside the API. Workflow request
and response models live in core.models so services can return them.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error the gateway returns."""

    message: str = Field(..., description="Human-readable error message")
    status_code: int = Field(..., description="HTTP status code")

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "Workflow 11111111-1111-1111-1111-111111111111 is not a "
                           "member of workspace 22222222-2222-2222-2222-222222222222",
                "status_code": 400,
            }
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(
        default="healthy",
        description="Health status",
    )
    service: str = Field(
        default="workflow-gateway",
        description="Service name",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Current server timestamp",
    )
    version: str = Field(
        ...,
        description="Gateway version",
    )


__all__ = [
    "ErrorResponse",
    "HealthResponse",
]
