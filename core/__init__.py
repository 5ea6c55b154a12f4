# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the framework-agnostic logic of the Unity bridge
# tool server:
#
#   models.py        content blocks, ToolResponse, upstream response shapes
#   normalizer.py    any bridge reply → ToolResponse
#   gateway.py       the one HTTP call per bridge tool
#   registry.py      tool descriptors, modules, name checks, dispatch
#   schema.py        argument validation against each tool's JSON schema
#   interaction.py   dialogs / terminal prompts for the human
#   system.py        subprocess helpers for the terminal tools
#   config.py        environment settings
#   errors.py        error taxonomy
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or Google ADK.  The MCP server
#   (tools/mcp_server.py) and the agent (agent/) are wiring around it.
# =============================================================================
