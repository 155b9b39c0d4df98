# ============================================================================
# RESERVED KEYS & ENUMS
# ============================================================================
# STATUS: Foundation - Reserved label/option keys and role enums
# PURPOSE: Single source of truth for system-owned keys sent to the engine
# CREATED: 03 MAR 2026
# EXPORTS: WorkflowLabelKeys, WorkflowOptionKeys, IamRole, WorkflowType
# ============================================================================
"""
Base contracts for the workflow gateway.

Labels and options are plain string-keyed mappings on the wire. The keys
listed here are owned by the gateway: whatever the caller sends for them is
replaced before the submission bundle is serialized.
"""

from enum import Enum


# ============================================================================
# RESERVED KEYS
# ============================================================================

class WorkflowLabelKeys(str, Enum):
    """Label keys written by the gateway on every submission."""
    WORKSPACE_ID = "terra-workspace-id"
    USER_EMAIL = "terra-user-email"
    WORKFLOW_SOURCE_URL = "terra-workflow-source-url"
    # Deprecated alias of WORKFLOW_SOURCE_URL, still read by older consumers
    GCS_SOURCE_URI = "terra-gcs-source-uri"


class WorkflowOptionKeys(str, Enum):
    """
    Option keys the engine understands that the gateway manages.

    JES_GCS_ROOT is the one caller-supplied reserved key: it is required
    and passed through unchanged. The rest are always overwritten.
    """
    JES_GCS_ROOT = "jes_gcs_root"
    USER_SERVICE_ACCOUNT_JSON = "user_service_account_json"
    CALL_CACHE_HIT_PATH_PREFIXES = "call_cache_hit_path_prefixes"
    GOOGLE_PROJECT = "google_project"
    GOOGLE_COMPUTE_SERVICE_ACCOUNT = "google_compute_service_account"
    DEFAULT_RUNTIME_ATTRIBUTES = "default_runtime_attributes"


RESERVED_LABEL_KEYS = frozenset(k.value for k in WorkflowLabelKeys)


# ============================================================================
# ENUMS
# ============================================================================

class IamRole(str, Enum):
    """Workspace roles, lowest to highest."""
    DISCOVERER = "DISCOVERER"
    READER = "READER"
    APPLICATION = "APPLICATION"
    WRITER = "WRITER"
    OWNER = "OWNER"


class WorkflowType(str, Enum):
    """Workflow languages accepted by the engine."""
    WDL = "WDL"
    CWL = "CWL"


__all__ = [
    "WorkflowLabelKeys",
    "WorkflowOptionKeys",
    "RESERVED_LABEL_KEYS",
    "IamRole",
    "WorkflowType",
]
