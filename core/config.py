# =============================================================================
# core/config.py  —  Environment-driven Settings
# =============================================================================
#
# All tunables come from environment variables.  A .env file in the working
# directory is loaded first (python-dotenv), so local overrides never need
# to be exported by hand.  Real environment variables win over .env values.
#
#   UNITY_BRIDGE_URL        Base URL of the Unity bridge  (http://localhost:7777)
#   UNITY_TIMEOUT           Default request timeout, seconds          (10)
#   UNITY_CAMERA_TIMEOUT    camera_screenshot timeout, seconds        (20)
#   UNITY_SCENE_TIMEOUT     scene_hierarchy timeout, seconds          (15)
#   UNITY_EXECUTE_TIMEOUT   execute (C# code) timeout, seconds        (30)
#   MCP_LOG_LEVEL           Logging level for the MCP server          (INFO)
#   SYSTEM_INFO_TIMEZONE    Zone used by terminal.system_info         (Europe/Moscow)
#   SYSTEM_INFO_PORTS       Ports reported by terminal.system_info    (1337,3000,3001,8080,5000)
#   AGENT_MODEL             LiteLlm model string for the ADK agent    (openrouter/openai/gpt-4o)
# =============================================================================

import os
from dataclasses import dataclass
from urllib.parse import urlsplit

from dotenv import load_dotenv

from core.errors import ConfigError


DEFAULT_BRIDGE_URL = "http://localhost:7777"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    bridge_url: str = DEFAULT_BRIDGE_URL
    default_timeout: float = 10.0
    camera_timeout: float = 20.0
    scene_timeout: float = 15.0
    execute_timeout: float = 30.0
    log_level: str = "INFO"
    system_info_timezone: str = "Europe/Moscow"
    system_info_ports: tuple[int, ...] = (1337, 3000, 3001, 8080, 5000)
    agent_model: str = "openrouter/openai/gpt-4o"

    @property
    def bridge_port(self) -> int:
        """Port of the bridge URL (80/443 when the URL leaves it implicit)."""
        parts = urlsplit(self.bridge_url)
        if parts.port:
            return parts.port
        return 443 if parts.scheme == "https" else 80


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _ports_env(name: str, default: tuple[int, ...]) -> tuple[int, ...]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a comma-separated list of ports, got {raw!r}") from None


def load_settings(dotenv: bool = True) -> Settings:
    """Read Settings from the environment (and .env, unless disabled).

    Raises:
        ConfigError: If a numeric or port-list variable cannot be parsed.
    """
    if dotenv:
        load_dotenv()

    defaults = Settings()
    return Settings(
        bridge_url=os.getenv("UNITY_BRIDGE_URL", defaults.bridge_url).rstrip("/"),
        default_timeout=_float_env("UNITY_TIMEOUT", defaults.default_timeout),
        camera_timeout=_float_env("UNITY_CAMERA_TIMEOUT", defaults.camera_timeout),
        scene_timeout=_float_env("UNITY_SCENE_TIMEOUT", defaults.scene_timeout),
        execute_timeout=_float_env("UNITY_EXECUTE_TIMEOUT", defaults.execute_timeout),
        log_level=os.getenv("MCP_LOG_LEVEL", defaults.log_level).upper(),
        system_info_timezone=os.getenv("SYSTEM_INFO_TIMEZONE", defaults.system_info_timezone),
        system_info_ports=_ports_env("SYSTEM_INFO_PORTS", defaults.system_info_ports),
        agent_model=os.getenv("AGENT_MODEL", defaults.agent_model),
    )
