# ============================================================================
# GATEWAY CONFIGURATION
# ============================================================================
# STATUS: Core - Configuration management
# PURPOSE: Environment-based configuration for the workflow gateway
# CREATED: 03 MAR 2026
# ============================================================================
"""
Gateway Configuration

Loads configuration from environment variables with sensible defaults.
A single GatewayConfig is built at startup and handed to each client at
construction; nothing reads the environment after that.

Environment variables:
    WFGW_CROMWELL_URL             Execution engine base URL
    WFGW_WORKSPACE_MANAGER_URL    Workspace access service base URL
    WFGW_SAM_URL                  Identity service base URL
    WFGW_STORAGE_ACCOUNT          Azure storage account holding workflow sources
    WFGW_DEFAULT_DOCKER_IMAGE     Image injected into default_runtime_attributes
    WFGW_HTTP_TIMEOUT_SECONDS     Read timeout for outbound HTTP calls
    WFGW_SERVICE_TOKEN_SCOPE      Scope for the gateway's own identity token
    WFGW_TEMP_DIR                 Parent directory for submission bundles
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GatewayConfig:
    """Configuration for the workflow gateway."""

    # Upstream services
    cromwell_url: str = "http://localhost:8000"
    workspace_manager_url: str = "http://localhost:8081"
    sam_url: str = "http://localhost:8082"

    # Object storage
    storage_account: str = ""

    # Submission presets
    default_docker_image: str = "debian:stable-slim"

    # Outbound HTTP
    http_timeout_seconds: float = 60.0
    http_connect_timeout_seconds: float = 30.0

    # Gateway identity (used for identity-service calls on the caller's behalf)
    service_token_scope: str = "api://identity-service/.default"

    # Temp bundle location (None = system default)
    temp_dir: Optional[str] = None

    # App info
    log_level: str = "INFO"
    version: str = "0.3.0"
    service_name: str = "workflow-gateway"

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Load configuration from environment variables."""
        return cls(
            cromwell_url=os.environ.get("WFGW_CROMWELL_URL", "http://localhost:8000"),
            workspace_manager_url=os.environ.get(
                "WFGW_WORKSPACE_MANAGER_URL", "http://localhost:8081"
            ),
            sam_url=os.environ.get("WFGW_SAM_URL", "http://localhost:8082"),
            storage_account=os.environ.get("WFGW_STORAGE_ACCOUNT", ""),
            default_docker_image=os.environ.get(
                "WFGW_DEFAULT_DOCKER_IMAGE", "debian:stable-slim"
            ),
            http_timeout_seconds=float(os.environ.get("WFGW_HTTP_TIMEOUT_SECONDS", 60)),
            http_connect_timeout_seconds=float(
                os.environ.get("WFGW_HTTP_CONNECT_TIMEOUT_SECONDS", 30)
            ),
            service_token_scope=os.environ.get(
                "WFGW_SERVICE_TOKEN_SCOPE", "api://identity-service/.default"
            ),
            temp_dir=os.environ.get("WFGW_TEMP_DIR") or None,
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            version=os.environ.get("APP_VERSION", "0.3.0"),
            service_name=os.environ.get("SERVICE_NAME", "workflow-gateway"),
        )

    @property
    def has_storage_config(self) -> bool:
        """Check if an object storage account is configured."""
        return bool(self.storage_account)


__all__ = ["GatewayConfig"]
