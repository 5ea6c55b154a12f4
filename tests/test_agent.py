"""
Tests for the agent wiring (no model is called and no server is spawned)
"""

import sys

from google.adk.tools.mcp_tool import McpToolset

from agent.prompt import UNITY_ASSISTANT_PROMPT, get_unity_assistant_prompt
from agent.unity_agent import create_agent
from core.config import Settings
from tools.mcp_server import build_registry


class TestPrompt:
    """Test the system prompt"""

    def test_names_the_published_unity_tools(self, settings):
        prompt = get_unity_assistant_prompt()
        for entry in build_registry(settings).descriptors():
            if entry.module.namespace == "unity":
                assert entry.qualified_name in prompt

    def test_mentions_the_human_prompt_tool(self):
        assert "terminal_wait_for_user" in UNITY_ASSISTANT_PROMPT

    def test_explains_connection_errors(self):
        assert "Unity Connection Error" in UNITY_ASSISTANT_PROMPT


class TestCreateAgent:
    """Test agent construction"""

    def test_agent_uses_configured_model_and_mcp_server(self):
        agent = create_agent(Settings(agent_model="openai/gpt-4o-mini"))

        assert agent.name == "unity_assistant"
        assert agent.model.model == "openai/gpt-4o-mini"

        toolset = agent.tools[0]
        assert isinstance(toolset, McpToolset)

        server = toolset.connection_params.server_params
        assert server.command == sys.executable
        assert server.args == ["-m", "tools.mcp_server"]
