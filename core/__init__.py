# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export reserved keys, error taxonomy, and models
# CREATED: 03 MAR 2026
# ============================================================================

from core.contracts import IamRole, WorkflowLabelKeys, WorkflowOptionKeys, WorkflowType
from core.errors import (
    GatewayError,
    CallerInputError,
    InvalidWorkflowSourceError,
    AuthorizationError,
    TenancyMismatchError,
    DependencyResolutionError,
    EngineError,
    UpstreamServiceError,
)
from core.models import StorageLocator, QueryFilters

__all__ = [
    # Enums
    "IamRole",
    "WorkflowLabelKeys",
    "WorkflowOptionKeys",
    "WorkflowType",
    # Errors
    "GatewayError",
    "CallerInputError",
    "InvalidWorkflowSourceError",
    "AuthorizationError",
    "TenancyMismatchError",
    "DependencyResolutionError",
    "EngineError",
    "UpstreamServiceError",
    # Models
    "StorageLocator",
    "QueryFilters",
]
