"""
Tests for the Unity bridge tools, end to end through the registry
"""

import pytest

from core.errors import SchemaValidationError
from core.models import ImageBlock, TextBlock
from core.registry import ToolRegistry
from tools.unity import create_unity_module

PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4nGNgYGD4DwABBAEAwS2OUAAAAABJRU5ErkJggg=="


@pytest.fixture
def registry(settings, gateway) -> ToolRegistry:
    return ToolRegistry([create_unity_module(settings, gateway)])


class TestUnityModule:
    """Test the module declaration"""

    def test_tool_names(self, registry):
        assert [entry.qualified_name for entry in registry.descriptors()] == [
            "unity_screenshot",
            "unity_camera_screenshot",
            "unity_scene_hierarchy",
            "unity_execute",
        ]

    def test_ambient_extras_disabled(self, registry):
        flags = registry.modules[0].flags
        assert flags.disable_system_info is True
        assert flags.disable_debug_logs is True

    def test_execute_description_carries_code_rules(self, registry):
        description = registry.get("unity_execute").descriptor.description
        assert "Execute()" in description
        assert "namespace" in description


class TestCameraScreenshot:
    """Test unity_camera_screenshot"""

    @pytest.mark.asyncio
    async def test_legacy_image_reply(self, registry, bridge):
        bridge.respond(json={"image": PNG_B64})

        response = await registry.call(
            "unity_camera_screenshot", {"position": [0, 1, 2], "target": [0, 0, 0]}
        )

        assert response.is_error is False
        assert response.content == [
            TextBlock("Unity Screenshot"),
            ImageBlock(PNG_B64, "image/png"),
        ]

    @pytest.mark.asyncio
    async def test_request_body_gets_defaults(self, registry, bridge):
        await registry.call("unity_camera_screenshot", {"position": [0, 1, 2], "target": [0, 0, 0]})

        assert str(bridge.requests[0].url).endswith("/api/camera_screenshot")
        assert bridge.last_json == {
            "position": [0, 1, 2],
            "target": [0, 0, 0],
            "fov": 60,
            "width": 1920,
            "height": 1080,
        }

    @pytest.mark.asyncio
    async def test_dimensions_sent_as_integers(self, registry, bridge):
        await registry.call("unity_camera_screenshot", {
            "position": [0, 1, 2], "target": [0, 0, 0], "width": 800.0, "height": 600.0, "fov": 45,
        })

        body = bridge.last_json
        assert body["width"] == 800 and isinstance(body["width"], int)
        assert body["height"] == 600
        assert body["fov"] == 45

    @pytest.mark.asyncio
    async def test_uses_camera_timeout(self, registry, bridge):
        await registry.call("unity_camera_screenshot", {"position": [0, 1, 2], "target": [0, 0, 0]})
        assert bridge.requests[0].extensions["timeout"]["read"] == 2.0

    @pytest.mark.asyncio
    async def test_missing_target_is_rejected_before_request(self, registry, bridge):
        with pytest.raises(SchemaValidationError) as exc_info:
            await registry.call("unity_camera_screenshot", {"position": [0, 1, 2]})

        assert exc_info.value.field == "target"
        assert bridge.requests == []

    @pytest.mark.asyncio
    async def test_width_out_of_range(self, registry, bridge):
        with pytest.raises(SchemaValidationError):
            await registry.call("unity_camera_screenshot", {
                "position": [0, 1, 2], "target": [0, 0, 0], "width": 8192,
            })
        assert bridge.requests == []


class TestOtherUnityTools:
    """Test screenshot, scene_hierarchy and execute"""

    @pytest.mark.asyncio
    async def test_screenshot_current_shape(self, registry, bridge):
        bridge.respond(json={"messages": [{"type": "image", "content": PNG_B64, "text": "Game View"}]})

        response = await registry.call("unity_screenshot", {})

        assert str(bridge.requests[0].url).endswith("/api/screenshot")
        assert bridge.last_json == {}
        assert bridge.requests[0].extensions["timeout"]["read"] == 1.0
        assert response.content == [TextBlock("Game View"), ImageBlock(PNG_B64)]

    @pytest.mark.asyncio
    async def test_scene_hierarchy_defaults_to_summary(self, registry, bridge):
        bridge.respond(json={"messages": [{"type": "text", "content": "Main Camera\nCube"}]})

        response = await registry.call("unity_scene_hierarchy", {})

        assert bridge.last_json == {"detailed": False}
        assert bridge.requests[0].extensions["timeout"]["read"] == 3.0
        assert response.text() == "Main Camera\nCube"

    @pytest.mark.asyncio
    async def test_execute_legacy_reply(self, registry, bridge):
        bridge.respond(json={"message": "Executed", "data": "Cube"})

        response = await registry.call("unity_execute", {"code": "return GameObject.Find(\"Cube\").name;"})

        assert bridge.last_json == {"code": "return GameObject.Find(\"Cube\").name;"}
        assert bridge.requests[0].extensions["timeout"]["read"] == 4.0
        assert response.content == [TextBlock("Executed"), TextBlock("Cube")]

    @pytest.mark.asyncio
    async def test_execute_compile_error_has_no_footer(self, registry, bridge):
        bridge.respond(500, json={"errors": [{"Level": "Error", "Message": "CS1002: ; expected"}]})

        response = await registry.call("unity_execute", {"code": "return 1"})

        assert response.is_error is True
        assert response.content[-1] == TextBlock("Unity Logs:\nError: CS1002: ; expected")
        assert not any(block.text.startswith("System: ") for block in response.content
                       if isinstance(block, TextBlock))
