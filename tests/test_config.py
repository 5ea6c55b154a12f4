"""
Unit tests for environment-driven settings
"""

import pytest

from core.config import Settings, load_settings
from core.errors import ConfigError

ENV_VARS = [
    "UNITY_BRIDGE_URL", "UNITY_TIMEOUT", "UNITY_CAMERA_TIMEOUT", "UNITY_SCENE_TIMEOUT",
    "UNITY_EXECUTE_TIMEOUT", "MCP_LOG_LEVEL", "SYSTEM_INFO_TIMEZONE", "SYSTEM_INFO_PORTS",
    "AGENT_MODEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    """Test reading settings from the environment"""

    def test_defaults(self):
        settings = load_settings(dotenv=False)

        assert settings == Settings()
        assert settings.bridge_url == "http://localhost:7777"
        assert settings.default_timeout == 10.0
        assert settings.camera_timeout == 20.0
        assert settings.scene_timeout == 15.0
        assert settings.execute_timeout == 30.0
        assert settings.system_info_ports == (1337, 3000, 3001, 8080, 5000)

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("UNITY_BRIDGE_URL", "http://10.0.0.5:9000/")
        monkeypatch.setenv("UNITY_EXECUTE_TIMEOUT", "120")
        monkeypatch.setenv("MCP_LOG_LEVEL", "debug")
        monkeypatch.setenv("SYSTEM_INFO_PORTS", "8080, 9090")
        monkeypatch.setenv("AGENT_MODEL", "openai/gpt-4o-mini")

        settings = load_settings(dotenv=False)

        assert settings.bridge_url == "http://10.0.0.5:9000"
        assert settings.bridge_port == 9000
        assert settings.execute_timeout == 120.0
        assert settings.log_level == "DEBUG"
        assert settings.system_info_ports == (8080, 9090)
        assert settings.agent_model == "openai/gpt-4o-mini"

    def test_blank_value_keeps_default(self, monkeypatch):
        monkeypatch.setenv("UNITY_TIMEOUT", "  ")
        assert load_settings(dotenv=False).default_timeout == 10.0

    @pytest.mark.parametrize("value", ["ten", "0", "-5"])
    def test_bad_timeout(self, monkeypatch, value):
        monkeypatch.setenv("UNITY_CAMERA_TIMEOUT", value)
        with pytest.raises(ConfigError, match="UNITY_CAMERA_TIMEOUT"):
            load_settings(dotenv=False)

    def test_bad_port_list(self, monkeypatch):
        monkeypatch.setenv("SYSTEM_INFO_PORTS", "3000,http")
        with pytest.raises(ConfigError, match="SYSTEM_INFO_PORTS"):
            load_settings(dotenv=False)


class TestBridgePort:
    """Test the port derived from the bridge URL"""

    @pytest.mark.parametrize("url,port", [
        ("http://localhost:7777", 7777),
        ("http://unity.local", 80),
        ("https://unity.local", 443),
    ])
    def test_bridge_port(self, url, port):
        assert Settings(bridge_url=url).bridge_port == port
