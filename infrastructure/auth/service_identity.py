# ============================================================================
# GATEWAY SERVICE IDENTITY
# ============================================================================
# STATUS: Infrastructure - Gateway's own OAuth token
# PURPOSE: Token for identity-service calls made as the gateway, not the user
# CREATED: 03 MAR 2026
# ============================================================================
"""
Gateway service identity.

Fetching a user's service-account key from the identity service is done
with the gateway's own credentials. The token is acquired through
azure-identity (Managed Identity in deployment, az login locally), cached,
and refreshed when within 5 minutes of expiry.

Environment Variables:
---------------------
AZURE_CLIENT_ID=<guid>  # User-assigned MI client ID (optional)

Usage:
------
```python
from infrastructure.auth import ServiceIdentity

identity = ServiceIdentity(scope="api://identity-service/.default")
token = identity.get_token()
```
"""

import os
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Refresh tokens when less than 5 minutes until expiry
TOKEN_REFRESH_BUFFER_SECS = 300


@dataclass
class TokenCache:
    """Simple in-memory token cache."""
    token: Optional[str] = None
    expires_at: Optional[datetime] = None

    def get_if_valid(self, min_ttl_seconds: int = 0) -> Optional[str]:
        """Get token if valid and has sufficient TTL."""
        if not self.token or not self.expires_at:
            return None

        remaining = (self.expires_at - datetime.now(timezone.utc)).total_seconds()
        if remaining <= min_ttl_seconds:
            return None

        return self.token

    def set(self, token: str, expires_at: datetime) -> None:
        """Cache a new token."""
        self.token = token
        self.expires_at = expires_at

    def invalidate(self) -> None:
        """Clear the cache."""
        self.token = None
        self.expires_at = None


class ServiceIdentity:
    """Acquires and caches the gateway's own bearer token."""

    def __init__(self, scope: str, credential: Any = None):
        self.scope = scope
        self._credential = credential
        self._cache = TokenCache()
        self._lock = threading.Lock()

    def _get_credential(self):
        if self._credential is None:
            from azure.identity import ManagedIdentityCredential, DefaultAzureCredential

            client_id = os.environ.get("AZURE_CLIENT_ID")
            if client_id:
                logger.info(f"Using user-assigned Managed Identity: {client_id[:8]}...")
                self._credential = ManagedIdentityCredential(client_id=client_id)
            else:
                logger.info("Using DefaultAzureCredential (system MI or az login)")
                self._credential = DefaultAzureCredential()
        return self._credential

    def get_token(self) -> str:
        """
        Get the gateway's bearer token.

        Raises:
            azure.core.exceptions.ClientAuthenticationError: if acquisition fails.
        """
        with self._lock:
            cached = self._cache.get_if_valid(min_ttl_seconds=TOKEN_REFRESH_BUFFER_SECS)
            if cached:
                return cached

            try:
                token_response = self._get_credential().get_token(*self.scope.split())
            except Exception as e:
                logger.error(f"Service token acquisition failed: {type(e).__name__}: {e}")
                raise

            expires_at = datetime.fromtimestamp(token_response.expires_on, tz=timezone.utc)
            self._cache.set(token_response.token, expires_at)
            logger.info(f"Service token acquired, expires: {expires_at.isoformat()}")
            return token_response.token


__all__ = ["ServiceIdentity", "TokenCache"]
