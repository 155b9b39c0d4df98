# ============================================================================
# AUTHENTICATION MODULE
# ============================================================================
# STATUS: Infrastructure - Azure identity for the gateway itself
# PURPOSE: Gateway service token for identity-service calls
# CREATED: 03 MAR 2026
# ============================================================================
"""
Authentication module for the workflow gateway.

Usage:
    from infrastructure.auth import ServiceIdentity

    token = ServiceIdentity(scope=config.service_token_scope).get_token()
"""

from infrastructure.auth.service_identity import ServiceIdentity, TokenCache

__all__ = [
    'ServiceIdentity',
    'TokenCache',
]
