# =============================================================================
# tools/__init__.py
# =============================================================================
# This package exposes the InsumerAPI catalog over MCP using FastMCP.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the agent runtime and the
#   insumer/ package.  It:
#     1. Registers one MCP tool per insumer.catalog operation
#     2. Logs every call to stderr (stdout carries the MCP protocol)
#     3. Turns failure envelopes into MCP error results
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate or build requests (insumer.client does)
#   - They do NOT interpret API responses (the InsumerAPI is authoritative)
# =============================================================================
