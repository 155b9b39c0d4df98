# ============================================================================
# OPTION & LABEL PRESETS
# ============================================================================
# STATUS: Service - Reserved option/label injection
# PURPOSE: Overlay caller options and labels with gateway-owned values
# CREATED: 03 MAR 2026
# ============================================================================
"""
Option & Label Presets

Pure functions. Callers' dicts are never mutated; a new dict is returned
with every reserved key set by the gateway. jes_gcs_root is the single
reserved option the caller supplies, and it is kept as given. Reserved
labels the gateway does not write are removed.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from core.contracts import RESERVED_LABEL_KEYS, WorkflowLabelKeys, WorkflowOptionKeys
from core.errors import CallerInputError


@dataclass(frozen=True)
class PresetContext:
    """Values resolved from the workspace and identity services for one submission."""
    workspace_id: str
    user_email: str
    project_id: str
    service_account_json: str
    compute_service_account: str
    default_docker_image: str
    source_uri: Optional[str] = None


def validate_required_options(options: Optional[Mapping[str, Any]]) -> None:
    """Raise CallerInputError unless options carry a non-blank jes_gcs_root."""
    root = (options or {}).get(WorkflowOptionKeys.JES_GCS_ROOT.value)
    if not isinstance(root, str) or not root.strip():
        raise CallerInputError(
            f"workflow options must include a {WorkflowOptionKeys.JES_GCS_ROOT.value} value"
        )


def inject_option_presets(
    options: Optional[Mapping[str, Any]],
    context: PresetContext,
) -> Dict[str, Any]:
    """Return options with the reserved engine options overwritten."""
    result = dict(options or {})
    jes_gcs_root = result.get(WorkflowOptionKeys.JES_GCS_ROOT.value)

    result[WorkflowOptionKeys.USER_SERVICE_ACCOUNT_JSON.value] = context.service_account_json
    result[WorkflowOptionKeys.CALL_CACHE_HIT_PATH_PREFIXES.value] = [jes_gcs_root]
    result[WorkflowOptionKeys.GOOGLE_PROJECT.value] = context.project_id
    result[WorkflowOptionKeys.GOOGLE_COMPUTE_SERVICE_ACCOUNT.value] = context.compute_service_account
    result[WorkflowOptionKeys.DEFAULT_RUNTIME_ATTRIBUTES.value] = {
        "docker": context.default_docker_image
    }
    return result


def inject_label_presets(
    labels: Optional[Mapping[str, str]],
    context: PresetContext,
) -> Dict[str, str]:
    """
    Return labels with every reserved key owned by the gateway.

    Caller values for reserved keys are dropped. The source labels are only
    written when the workflow came from a storage locator.
    """
    result = {
        key: value for key, value in (labels or {}).items()
        if key not in RESERVED_LABEL_KEYS
    }
    result[WorkflowLabelKeys.WORKSPACE_ID.value] = str(context.workspace_id)
    result[WorkflowLabelKeys.USER_EMAIL.value] = context.user_email
    if context.source_uri:
        result[WorkflowLabelKeys.WORKFLOW_SOURCE_URL.value] = context.source_uri
        result[WorkflowLabelKeys.GCS_SOURCE_URI.value] = context.source_uri
    return result


__all__ = [
    "PresetContext",
    "validate_required_options",
    "inject_option_presets",
    "inject_label_presets",
]
