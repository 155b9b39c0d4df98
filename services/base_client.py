# ============================================================================
# UPSTREAM HTTP CLIENT BASE
# ============================================================================
# STATUS: Service - Shared sync httpx plumbing for upstream REST APIs
# PURPOSE: One request path, one error type per upstream service
# CREATED: 03 MAR 2026
# ============================================================================
"""
Upstream HTTP Client Base

Sync httpx client shared by the execution engine, workspace, and identity
clients. Each subclass declares its own ApiError subclass; every failure
(non-2xx, connection error, timeout) is raised as that type so callers can
tell which collaborator failed.
"""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

# 30s connect, 60s read
DEFAULT_TIMEOUT = httpx.Timeout(connect=30.0, read=60.0, write=30.0, pool=30.0)


class ApiError(Exception):
    """An upstream call failed. status_code is 0 when no response was received."""

    def __init__(self, message: str, status_code: int = 0, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.args[0]} ({self.status_code}): {self.body}"
        return self.args[0]


class BaseApiClient:
    """Sync HTTP client for one upstream REST API."""

    error_cls = ApiError
    service_label = "upstream"

    def __init__(self, base_url: str, timeout: Optional[httpx.Timeout] = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout or DEFAULT_TIMEOUT

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        raw: bool = False,
    ) -> Any:
        """
        Make a request and return the parsed JSON body (or text when raw).

        Raises:
            error_cls: on connection failure, timeout, or non-2xx status.
        """
        url = f"{self._base_url}{path}"
        headers = {"Authorization": f"Bearer {token}"} if token else None

        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json_body,
                    data=data,
                    files=files,
                )
        except httpx.ConnectError as e:
            logger.error(f"Cannot reach {self.service_label} at {url}: {e}")
            raise self.error_cls(f"{self.service_label} unreachable: {e}") from e
        except httpx.TimeoutException as e:
            logger.error(f"{self.service_label} timeout: {url}: {e}")
            raise self.error_cls(f"{self.service_label} timeout: {e}") from e
        except httpx.HTTPError as e:
            logger.exception(f"Unexpected HTTP error calling {self.service_label}: {e}")
            raise self.error_cls(f"{self.service_label} request failed: {e}") from e

        if resp.status_code >= 400:
            logger.warning(f"{self.service_label} returned {resp.status_code}: {method} {path}")
            raise self.error_cls(
                f"{self.service_label} error",
                status_code=resp.status_code,
                body=resp.text,
            )

        if raw:
            return resp.text

        try:
            return resp.json()
        except ValueError:
            return resp.text


__all__ = ["ApiError", "BaseApiClient", "DEFAULT_TIMEOUT"]
