# =============================================================================
# main.py  —  Entry Point for the Unity Assistant Agent
# =============================================================================
#
# HOW TO RUN:
#   python main.py
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (agent/unity_agent.py), which spawns the
#      MCP tool server (tools/mcp_server.py) as a subprocess
#   2. Sets up an interactive session
#   3. Sends each user message to the agent
#   4. Streams the agent's events, printing every tool call as it happens
#   5. Displays the agent's final answer
#
# PREREQUISITES:
#   - Unity open with the Bridge window listening (UNITY_BRIDGE_URL,
#     default http://localhost:7777)
#   - A provider API key for the model in AGENT_MODEL (e.g.
#     OPENROUTER_API_KEY) in the environment or a .env file
# =============================================================================

import asyncio

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.unity_agent import create_agent
from core.config import load_settings

APP_NAME = "unity_assistant"
USER_ID = "local_user"


async def run_agent():
    """Run the Unity assistant interactively until the user quits."""

    # =========================================================================
    # Step 1: Create the agent
    # =========================================================================
    # load_settings() also loads .env, so LiteLlm sees the API key.
    settings = load_settings()

    print("=" * 70)
    print("  UNITY ASSISTANT AGENT")
    print(f"  Bridge: {settings.bridge_url}   Model: {settings.agent_model}")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent(settings)

    # =========================================================================
    # Step 2: Create a Runner and Session
    # =========================================================================
    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(
        app_name=APP_NAME,
        user_id=USER_ID,
    )

    print("✅ Agent initialized and ready!\n")

    # =========================================================================
    # Step 3: Interactive loop
    # =========================================================================
    print("💬 Ask the agent to inspect or change your Unity scene.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

        # =====================================================================
        # Step 4: Stream the agent's response
        # =====================================================================
        # Tool calls are printed as they happen; the last text part is the
        # answer.
        # =====================================================================
        final_response = ""

        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if part.text:
                        final_response = part.text

                    if part.function_call:
                        print(f"  🔧 Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())
