# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (every module in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the ToolRegistry from the tool modules (unity, terminal) and
#   exposes every registered tool through a FastMCP server.
#
# HOW IT WORKS (the flow):
#   1. The agent lists tools; FastMCP reports each tool's qualified name
#      ("unity_camera_screenshot"), description and JSON schema
#   2. The agent calls a tool by name with a JSON arguments object
#   3. RegistryTool.run() hands the call to ToolRegistry.call(), which
#      validates the arguments and awaits the handler
#   4. The ToolResponse blocks are converted to MCP text/image content;
#      is_error is carried through so the client knows a call failed
#
# ERRORS:
#   Validation failures, unknown tools, handler failures and user
#   cancellations are re-raised as FastMCP ToolError, which the client
#   receives as an error result (the server keeps running).  Unity
#   connection problems are NOT errors at this level: they arrive as
#   normalized content with is_error=True.
#
# RUNNING THIS SERVER:
#   python -m tools.mcp_server          (stdio transport, from the repo root)
# =============================================================================

import json
import logging
import sys
from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError as FastMCPToolError
from fastmcp.tools import Tool, ToolResult
from mcp.types import ImageContent, TextContent
from pydantic import PrivateAttr

from core.config import Settings, load_settings
from core.errors import ToolError
from core.models import ImageBlock, ToolResponse
from core.registry import RegisteredTool, ToolRegistry
from tools.terminal import create_terminal_module
from tools.unity import create_unity_module

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR: stdout carries the MCP JSON-RPC stream, and anything
# else written there corrupts it.
#
# ANSI COLOR CODES:
#   CYAN for incoming requests (tool name + parameters)
#   GREEN for responses
#   YELLOW for intermediate status messages
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

_MAX_LOGGED_CHARS = 500

logger = logging.getLogger("mcp_server")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, params: dict) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str[:_MAX_LOGGED_CHARS]}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, response: ToolResponse) -> ToolResponse:
    """Log the response (images summarized by size) in GREEN, then return it."""
    summary = [
        {"type": "image", "bytes": len(block.data)} if isinstance(block, ImageBlock) else block.to_dict()
        for block in response.content
    ]
    rendered = json.dumps(summary, ensure_ascii=False, separators=(",", ":"))[:_MAX_LOGGED_CHARS]
    logger.info(f"{_GREEN}  ← {tool_name} response (is_error={response.is_error}): {rendered}{_RESET}")
    return response


# =============================================================================
# MCP content conversion
# =============================================================================
def to_mcp_content(response: ToolResponse) -> list[TextContent | ImageContent]:
    """ToolResponse blocks → MCP content, preserving order."""
    content: list[TextContent | ImageContent] = []
    for block in response.content:
        if isinstance(block, ImageBlock):
            content.append(ImageContent(type="image", data=block.data, mimeType=block.mime_type))
        else:
            content.append(TextContent(type="text", text=block.text))
    return content


class RegistryTool(Tool):
    """A FastMCP tool that dispatches into the ToolRegistry."""

    _registry: Optional[ToolRegistry] = PrivateAttr(default=None)
    _quiet: bool = PrivateAttr(default=False)

    @classmethod
    def from_registered(cls, registry: ToolRegistry, entry: RegisteredTool) -> "RegistryTool":
        tool = cls(
            name=entry.qualified_name,
            description=entry.descriptor.description,
            parameters=entry.descriptor.input_schema,
        )
        tool._registry = registry
        tool._quiet = entry.module.flags.disable_debug_logs
        return tool

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        if not self._quiet:
            _log_request(self.name, arguments or {})
        try:
            response = await self._registry.call(self.name, arguments)
        except ToolError as exc:
            _log_status(f"{self.name} failed: {exc}")
            raise FastMCPToolError(str(exc)) from exc

        if self._quiet:
            _log_status(f"{self.name} returned {len(response.content)} block(s)")
        else:
            _log_response(self.name, response)
        return ToolResult(content=to_mcp_content(response), is_error=response.is_error)


# =============================================================================
# Assembly
# =============================================================================
def build_registry(settings: Optional[Settings] = None) -> ToolRegistry:
    """All tool modules, checked for name collisions."""
    settings = settings or load_settings()
    return ToolRegistry([
        create_unity_module(settings),
        create_terminal_module(settings),
    ])


def create_server(registry: Optional[ToolRegistry] = None) -> FastMCP:
    """A FastMCP server exposing every tool in `registry`."""
    if registry is None:
        registry = build_registry()
    server = FastMCP("unity-bridge")
    for entry in registry.descriptors():
        server.add_tool(RegistryTool.from_registered(registry, entry))
    return server


# =============================================================================
# Server entry point
# =============================================================================
# The agent spawns this module as a subprocess and talks to it over stdio.
# =============================================================================
if __name__ == "__main__":
    _settings = load_settings()
    configure_logging(_settings.log_level)
    _registry = build_registry(_settings)
    _log_status(f"Serving {len(_registry)} tools against {_settings.bridge_url}")
    create_server(_registry).run()
