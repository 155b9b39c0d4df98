# ============================================================================
# IDENTITY SERVICE CLIENT
# ============================================================================
# STATUS: Service - Sync HTTP client for the identity (Sam) API
# PURPOSE: Resolve caller email, compute identity, and service-account keys
# CREATED: 03 MAR 2026
# ============================================================================
"""
Identity Service Client

User-scoped lookups use the caller's token. The service-account key is
fetched with the gateway's own token (ServiceIdentity), since callers are
not allowed to read key material directly.
"""

import logging
from typing import Optional

import httpx

from infrastructure.auth import ServiceIdentity
from services.base_client import ApiError, BaseApiClient

logger = logging.getLogger(__name__)


class SamApiError(ApiError):
    """The identity service rejected or failed a call."""


class SamClient(BaseApiClient):
    """Sync HTTP client for the identity service."""

    error_cls = SamApiError
    service_label = "Identity service"

    def __init__(
        self,
        base_url: str,
        service_identity: ServiceIdentity,
        timeout: Optional[httpx.Timeout] = None,
    ):
        super().__init__(base_url, timeout)
        self._service_identity = service_identity

    def get_user_email(self, token: str) -> str:
        """GET /register/user/v2/self/info"""
        info = self._request("GET", "/register/user/v2/self/info", token=token)
        email = info.get("userEmail") if isinstance(info, dict) else None
        if not email:
            raise SamApiError("Identity service returned no userEmail")
        return email

    def get_pet_service_account(self, project_id: str, token: str) -> str:
        """GET /api/google/v1/user/petServiceAccount/{project} (returns a JSON string)"""
        account = self._request(
            "GET", f"/api/google/v1/user/petServiceAccount/{project_id}", token=token
        )
        if not isinstance(account, str) or not account:
            raise SamApiError(f"Identity service returned no compute identity for {project_id}")
        return account

    def get_pet_service_account_key(self, project_id: str, user_email: str) -> str:
        """
        GET /api/google/v1/petServiceAccount/{project}/{email}/key

        Returns the key document as raw JSON text, passed through unchanged
        into the workflow options.
        """
        try:
            service_token = self._service_identity.get_token()
        except Exception as e:
            raise SamApiError(f"Gateway identity unavailable: {e}") from e

        logger.debug(f"Fetching service-account key for {user_email} in {project_id}")
        return self._request(
            "GET",
            f"/api/google/v1/petServiceAccount/{project_id}/{user_email}/key",
            token=service_token,
            raw=True,
        )


__all__ = ["SamClient", "SamApiError"]
