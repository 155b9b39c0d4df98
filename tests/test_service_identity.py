# ============================================================================
# SERVICE IDENTITY TESTS
# ============================================================================
# STATUS: Tests - Gateway token cache
# PURPOSE: Verify caching and refresh-before-expiry
# CREATED: 03 MAR 2026
# ============================================================================
"""
Service Identity Tests

The azure-identity credential is a MagicMock.

Run with:
    pytest tests/test_service_identity.py -v
"""

import time
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from infrastructure.auth import ServiceIdentity


def _credential(*expires_in_seconds):
    credential = MagicMock()
    credential.get_token.side_effect = [
        SimpleNamespace(token=f"token-{i}", expires_on=int(time.time()) + ttl)
        for i, ttl in enumerate(expires_in_seconds)
    ]
    return credential


class TestServiceIdentity:

    def test_token_cached(self):
        credential = _credential(3600)
        identity = ServiceIdentity("api://identity-service/.default", credential=credential)

        assert identity.get_token() == "token-0"
        assert identity.get_token() == "token-0"
        credential.get_token.assert_called_once_with("api://identity-service/.default")

    def test_refreshed_near_expiry(self):
        credential = _credential(60, 3600)
        identity = ServiceIdentity("api://identity-service/.default", credential=credential)

        assert identity.get_token() == "token-0"
        assert identity.get_token() == "token-1"
        assert credential.get_token.call_count == 2

    def test_failure_propagates(self):
        credential = MagicMock()
        credential.get_token.side_effect = RuntimeError("no managed identity")
        identity = ServiceIdentity("api://identity-service/.default", credential=credential)

        with pytest.raises(RuntimeError):
            identity.get_token()
