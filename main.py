# =============================================================================
# main.py  —  Entry Point for the InsumerAPI MCP Server
# =============================================================================
#
# HOW TO RUN:
#   INSUMER_API_KEY=insr_live_... python main.py
#   (or put INSUMER_API_KEY in a .env file next to this script)
#
#   insumer-mcp                      start even without a key (default)
#   insumer-mcp --require-api-key    refuse to start without a key
#   docker run -i IMAGE --require-api-key
#
# WHAT HAPPENS:
#   1. Loads .env into the environment
#   2. Reads INSUMER_API_KEY into an immutable Settings object
#   3. Builds the FastMCP server with every InsumerAPI tool registered
#   4. Serves MCP over stdio until the agent runtime disconnects
#
# FAILURE:
#   Anything that stops the server from starting or running is logged to
#   stderr and the process exits with status 1.
# =============================================================================

import argparse
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from insumer.config import ConfigurationError, load_settings
from tools.mcp_server import configure_logging, create_server

logger = logging.getLogger("insumer")


def _parse_args(argv: Optional[list[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="insumer-mcp",
        description="Serve the InsumerAPI tools over MCP (stdio).",
    )
    parser.add_argument(
        "--require-api-key",
        action="store_true",
        help="Refuse to start when INSUMER_API_KEY is not set.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    """Start the MCP server over stdio.

    Args:
        argv: Command-line arguments; defaults to sys.argv[1:].  With
            --require-api-key the server refuses to start without
            INSUMER_API_KEY instead of failing authenticated tool calls
            individually.
    """
    args = _parse_args(argv)
    configure_logging()

    # Load .env BEFORE reading settings so a local key file works.
    load_dotenv()

    try:
        settings = load_settings(require_api_key=args.require_api_key)
        mcp = create_server(settings)
        mcp.run()
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(1)
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
