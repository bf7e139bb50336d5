"""MCP server entry point — FastMCP app and Graph API client lifecycle."""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import normalize
from .platforms import FacebookClient, InstagramClient
from .token_storage import build_facebook_client, build_instagram_client

logger = logging.getLogger(__name__)

mcp = FastMCP("social-analytics")

# ---------------------------------------------------------------------------
# Shared client instances
# ---------------------------------------------------------------------------

_instagram: InstagramClient | None = None
_facebook: FacebookClient | None = None


def get_instagram_client() -> InstagramClient:
    """Return the shared InstagramClient, creating it on first call.

    Reads credentials from OS keychain first, falls back to env vars.
    """
    global _instagram
    if _instagram is None:
        _instagram = build_instagram_client()
    return _instagram


def get_facebook_client() -> FacebookClient:
    """Return the shared FacebookClient, creating it on first call."""
    global _facebook
    if _facebook is None:
        _facebook = build_facebook_client()
    return _facebook


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _success_response(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def _error_response(exc: Exception) -> str:
    """Format any exception as the normalized JSON error envelope."""
    normalized = normalize(exc)
    return json.dumps({"isError": True, "error": normalized.to_dict()}, indent=2, default=str)


# ---------------------------------------------------------------------------
# Register tool modules — each module calls @mcp.tool() at import time
# ---------------------------------------------------------------------------

from .tools import register_all_tools  # noqa: E402

register_all_tools()


def main() -> None:
    """Entry point for the console script."""
    # stdout carries the MCP stdio protocol; logs go to stderr.
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.info("Social Analytics MCP server starting")
    mcp.run()
