# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the tool modules and the FastMCP server that
# publishes them.
#
# ARCHITECTURAL ROLE:
#   tools/ declares WHAT the agent can do.  Each tool module file:
#     1. Builds a core.registry.ToolModule (namespace + descriptors + flags)
#     2. Gives every tool a JSON schema and a description the LLM reads
#     3. Keeps handlers thin: build a request, delegate to core/
#
#   mcp_server.py collects the modules into one ToolRegistry and serves
#   every tool as "<namespace>_<name>" (e.g. "unity_execute").
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT parse Unity responses (core/normalizer.py does)
#   - They do NOT validate arguments (core/schema.py does, before the
#     handler runs)
#   - They do NOT know about Google ADK
# =============================================================================
