# =============================================================================
# insumer/__init__.py
# =============================================================================
# This package contains the framework-agnostic half of the InsumerAPI tool
# adapter: input schemas, the operation catalog, the HTTP dispatcher and the
# result envelope.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP.  The only outside world it
#   touches is the InsumerAPI itself (through httpx).  The MCP layer in
#   tools/ registers what this package describes; it adds no logic of its own.
#
# WHAT THIS PACKAGE DOES NOT DO:
#   No attestation, signing, balance lookups, discount math or credit
#   accounting happens here.  The remote API is authoritative for all of it.
# =============================================================================

from insumer.catalog import CATALOG, Operation, get_operation
from insumer.client import InsumerClient
from insumer.config import API_BASE, ConfigurationError, Settings, load_settings
from insumer.models import HttpCall, ResultEnvelope, ToolRequest

__all__ = [
    "API_BASE",
    "CATALOG",
    "ConfigurationError",
    "HttpCall",
    "InsumerClient",
    "Operation",
    "ResultEnvelope",
    "Settings",
    "ToolRequest",
    "get_operation",
    "load_settings",
]
