# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer is the only place that knows about an LLM.  It:
#     1. Receives the user's request ("add a red cube next to the player")
#     2. Decides which bridge tools to call, and in what order
#     3. Reads the normalized results (text + screenshots)
#     4. Reports back, or asks the human when it is unsure
#
# WHAT THE AGENT IS NOT:
#   - It is NOT the bridge protocol (that's core/gateway.py + normalizer.py)
#   - It is NOT the tool definitions (that's tools/)
#
# The agent reaches the tools over MCP only, so any MCP client can replace
# it without touching core/ or tools/.
# =============================================================================
