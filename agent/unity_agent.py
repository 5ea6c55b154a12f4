# =============================================================================
# agent/unity_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that drives the Unity bridge tools: it
#   receives the user's request, reasons about it, calls MCP tools and
#   reports back.
#
# HOW IT WORKS (simplified):
#
#   ┌──────────────────────────────────────────────────────────────────┐
#   │                       Google ADK Agent                           │
#   │   System prompt ──▶ LLM (via LiteLlm) ──▶ MCP tool connection    │
#   └──────────────────────────────────────────────────────────────────┘
#                                                      │ stdio
#                                                      ▼
#                                          ┌─────────────────────┐
#                                          │  FastMCP Server     │
#                                          │  (tools/mcp_server) │
#                                          └─────────────────────┘
#                                                      │ HTTP
#                                                      ▼
#                                          ┌─────────────────────┐
#                                          │  Unity bridge       │
#                                          │  localhost:7777     │
#                                          └─────────────────────┘
#
# MCP CONNECTION:
#   ADK starts `python -m tools.mcp_server` as a subprocess (same
#   interpreter, repo root as working directory) and talks to it over
#   stdin/stdout.  Tools are discovered automatically.
#
# MODEL:
#   AGENT_MODEL (default "openrouter/openai/gpt-4o") is handed to LiteLlm,
#   which reads the provider API key (e.g. OPENROUTER_API_KEY) from the
#   environment.
# =============================================================================

import os
import sys
from typing import Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import McpToolset, StdioConnectionParams
from mcp import StdioServerParameters

from agent.prompt import get_unity_assistant_prompt
from core.config import Settings, load_settings

# Spawning the server and listing its tools can take a few seconds
MCP_CONNECT_TIMEOUT = 30.0


def create_agent(settings: Optional[Settings] = None) -> Agent:
    """Create the Unity assistant agent wired to our MCP tool server."""
    settings = settings or load_settings()
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = McpToolset(
        connection_params=StdioConnectionParams(
            server_params=StdioServerParameters(
                command=sys.executable,
                args=["-m", "tools.mcp_server"],
                cwd=project_root,
                env={**os.environ},
            ),
            timeout=MCP_CONNECT_TIMEOUT,
        ),
    )

    return Agent(
        name="unity_assistant",
        model=LiteLlm(model=settings.agent_model),
        instruction=get_unity_assistant_prompt(),
        tools=[mcp_tools],
    )
