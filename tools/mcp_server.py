# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers every operation in insumer.catalog as an MCP tool.  Each tool
#   is a thin wrapper around InsumerClient.invoke(); it handles logging and
#   turns the ResultEnvelope into an MCP tool result.
#
# HOW IT WORKS (the flow):
#   1. The agent runtime calls a tool by name via MCP (e.g. "insumer_attest")
#   2. FastMCP routes the call to the matching InsumerTool below
#   3. InsumerTool hands the raw arguments to InsumerClient, which validates,
#      sends one HTTP request to the InsumerAPI, and wraps the answer
#   4. Success  → text content holding the upstream JSON
#      Failure  → ToolError, which FastMCP reports with isError: true
#
# REGISTRATION:
#   Tools are InsumerTool instances built from the catalog table, not
#   @mcp.tool() functions.  Their inputSchema comes from insumer.schemas and
#   FastMCP passes the raw arguments through; InsumerClient validates them,
#   keeping "field omitted" and "field set to null" distinct.
#
# RUNNING THIS SERVER:
#   main.py builds the server with create_server(settings) and runs it over
#   stdio:  python main.py   (or the `insumer-mcp` console script)
# =============================================================================

import json
import logging
import sys
from typing import Any, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool, ToolResult
from mcp.types import TextContent, ToolAnnotations
from pydantic import Field

from insumer.catalog import CATALOG, Operation
from insumer.client import InsumerClient
from insumer.config import Settings
from insumer.models import ResultEnvelope

SERVER_NAME = "insumer"
SERVER_INSTRUCTIONS = (
    "Tools for the InsumerAPI: on-chain attestation, wallet trust profiles, "
    "token-holder discount codes, and merchant onboarding. Every tool returns "
    "the API's JSON response ({ok, data, error, meta}) unchanged."
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to the agent runtime over
# STDOUT.  Anything else printed to stdout would corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for successful responses
#     - RED for error responses
#     - YELLOW for intermediate status messages
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (JSON output)
_RED = "\033[31m"      # Error responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

logger = logging.getLogger("insumer.mcp")


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, params: dict[str, Any]) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, envelope: ResultEnvelope) -> None:
    """Log the relayed body as compact JSON, RED when it is an error."""
    color = _RED if envelope.is_error else _GREEN
    compact = json.dumps(envelope.body, separators=(",", ":"), ensure_ascii=False)
    logger.info(f"{color}  ← {tool_name} response: {compact}{_RESET}")


# =============================================================================
# InsumerTool: one catalog entry exposed over MCP
# =============================================================================
class InsumerTool(Tool):
    """MCP tool backed by a catalog operation."""

    operation: str
    client: Any = Field(exclude=True)

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        _log_request(self.name, arguments)

        envelope = await self.client.invoke(self.operation, arguments)
        if envelope.status_code is not None:
            _log_status(f"HTTP {envelope.status_code}")
        _log_response(self.name, envelope)

        text = envelope.to_text()
        if envelope.is_error:
            raise ToolError(text)
        return ToolResult(content=[TextContent(type="text", text=text)])


def build_tool(operation: Operation, client: InsumerClient) -> InsumerTool:
    """Wrap one catalog operation as a FastMCP tool."""
    return InsumerTool(
        name=operation.name,
        description=operation.description,
        parameters=operation.input_schema(),
        annotations=ToolAnnotations(
            read_only_hint=operation.read_only,
            open_world_hint=True,
        ),
        operation=operation.name,
        client=client,
    )


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
# The name "insumer" becomes the server identity in MCP.  Settings (the API
# key) are passed in rather than read here, so tests can build a server with
# a fake key, or none at all, and a mock HTTP transport.
# =============================================================================
def create_server(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    """Build the FastMCP server with every catalog operation registered."""
    client = InsumerClient(settings, transport=transport)
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    for operation in CATALOG:
        mcp.add_tool(build_tool(operation, client))

    logger.debug("Registered %d tools", len(CATALOG))
    return mcp
