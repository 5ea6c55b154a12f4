"""
Tests for the FastMCP wiring
"""

import pytest
from fastmcp.exceptions import ToolError as FastMCPToolError
from mcp.types import ImageContent, TextContent

from core.models import ImageBlock, TextBlock, ToolResponse
from core.registry import ModuleFlags, ToolDescriptor, ToolModule, ToolRegistry
from tools.mcp_server import RegistryTool, build_registry, create_server, to_mcp_content


def make_registry() -> ToolRegistry:
    async def shot(args):
        return ToolResponse(content=[TextBlock("Unity Screenshot"), ImageBlock("QUJD")])

    async def down(args):
        return ToolResponse(content=[TextBlock("Unity Connection Error: refused")], is_error=True)

    schema = {"type": "object", "properties": {"n": {"type": "number"}}, "required": []}
    return ToolRegistry([ToolModule(
        "demo", "demo tools",
        [ToolDescriptor("shot", "Takes a shot", schema, shot),
         ToolDescriptor("down", "Always fails", schema, down)],
        ModuleFlags(disable_system_info=True, disable_debug_logs=True),
    )])


class TestContentConversion:
    """Test ToolResponse → MCP content"""

    def test_order_and_types(self):
        content = to_mcp_content(ToolResponse(content=[TextBlock("caption"), ImageBlock("QUJD")]))

        assert isinstance(content[0], TextContent)
        assert content[0].text == "caption"
        assert isinstance(content[1], ImageContent)
        assert content[1].data == "QUJD"
        assert content[1].model_dump(by_alias=True)["mimeType"] == "image/png"


class TestRegistryTool:
    """Test registry dispatch through the FastMCP tool class"""

    @pytest.mark.asyncio
    async def test_run_returns_blocks(self):
        registry = make_registry()
        tool = RegistryTool.from_registered(registry, registry.get("demo_shot"))

        result = await tool.run({})

        assert [block.type for block in result.content] == ["text", "image"]
        assert result.is_error is False

    @pytest.mark.asyncio
    async def test_upstream_failure_sets_is_error(self):
        registry = make_registry()
        tool = RegistryTool.from_registered(registry, registry.get("demo_down"))

        result = await tool.run({})

        assert result.is_error is True
        assert result.content[0].text == "Unity Connection Error: refused"

    @pytest.mark.asyncio
    async def test_validation_error_becomes_fastmcp_error(self):
        registry = make_registry()
        tool = RegistryTool.from_registered(registry, registry.get("demo_shot"))

        with pytest.raises(FastMCPToolError, match="Invalid argument 'n'"):
            await tool.run({"n": "three"})

    def test_schema_and_description_are_published(self):
        registry = make_registry()
        tool = RegistryTool.from_registered(registry, registry.get("demo_shot"))

        assert tool.name == "demo_shot"
        assert tool.description == "Takes a shot"
        assert tool.parameters["properties"] == {"n": {"type": "number"}}


class TestServer:
    """Test server assembly"""

    @pytest.mark.asyncio
    async def test_every_registry_tool_is_listed(self, settings):
        server = create_server(build_registry(settings))

        names = {tool.name for tool in await server.list_tools()}

        assert names == {
            "unity_screenshot", "unity_camera_screenshot", "unity_scene_hierarchy", "unity_execute",
            "terminal_echo", "terminal_system_info", "terminal_check_port",
            "terminal_find_process", "terminal_safe_curl", "terminal_wait_for_user",
        }

    @pytest.mark.asyncio
    async def test_empty_registry_stays_empty(self):
        server = create_server(ToolRegistry([]))
        assert list(await server.list_tools()) == []
