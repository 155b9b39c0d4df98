# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration
# PURPOSE: Centralized configuration management
# CREATED: 03 MAR 2026
# ============================================================================
"""
Configuration Module

Provides the GatewayConfig dataclass, built once from the environment.
"""

from core.config.settings import GatewayConfig

__all__ = [
    "GatewayConfig",
]
