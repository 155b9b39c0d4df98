# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# STATUS: Tests - GatewayConfig environment loading
# PURPOSE: Verify WFGW_ variables and defaults
# CREATED: 03 MAR 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

from core.config import GatewayConfig


class TestGatewayConfig:

    def test_defaults(self, monkeypatch):
        for name in ("WFGW_CROMWELL_URL", "WFGW_STORAGE_ACCOUNT", "WFGW_TEMP_DIR",
                     "WFGW_DEFAULT_DOCKER_IMAGE"):
            monkeypatch.delenv(name, raising=False)

        config = GatewayConfig.from_env()

        assert config.cromwell_url == "http://localhost:8000"
        assert config.default_docker_image == "debian:stable-slim"
        assert config.temp_dir is None
        assert config.has_storage_config is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("WFGW_CROMWELL_URL", "http://cromwell:8000")
        monkeypatch.setenv("WFGW_STORAGE_ACCOUNT", "wfgwsources")
        monkeypatch.setenv("WFGW_HTTP_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("WFGW_DEFAULT_DOCKER_IMAGE", "ubuntu:22.04")
        monkeypatch.setenv("WFGW_TEMP_DIR", "/scratch")

        config = GatewayConfig.from_env()

        assert config.cromwell_url == "http://cromwell:8000"
        assert config.storage_account == "wfgwsources"
        assert config.has_storage_config is True
        assert config.http_timeout_seconds == 12.5
        assert config.default_docker_image == "ubuntu:22.04"
        assert config.temp_dir == "/scratch"
