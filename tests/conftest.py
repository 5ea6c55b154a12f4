"""Shared fixtures for the tool server tests"""

import json

import httpx
import pytest

from core.config import Settings
from core.gateway import BridgeGateway


@pytest.fixture
def settings() -> Settings:
    """Settings with short, distinct timeouts so tests can tell them apart"""
    return Settings(
        bridge_url="http://localhost:7777",
        default_timeout=1.0,
        camera_timeout=2.0,
        scene_timeout=3.0,
        execute_timeout=4.0,
        system_info_timezone="UTC",
        system_info_ports=(3000, 3001),
    )


class RecordingBridge:
    """A fake Unity bridge: records every request, answers with a canned reply"""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.reply = httpx.Response(200, json={"status": "ok"})
        self.error: Exception | None = None

    def respond(self, status_code: int = 200, **kwargs) -> None:
        self.reply = httpx.Response(status_code, **kwargs)

    def fail(self, exc: Exception) -> None:
        self.error = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.reply

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content.decode("utf-8"))


@pytest.fixture
def bridge() -> RecordingBridge:
    return RecordingBridge()


@pytest.fixture
def gateway(bridge) -> BridgeGateway:
    """Gateway wired to the fake bridge through httpx.MockTransport"""
    return BridgeGateway("http://localhost:7777", transport=httpx.MockTransport(bridge.handler))
