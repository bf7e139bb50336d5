"""MCP tools, one module per platform facade."""

from __future__ import annotations

import importlib

PLATFORM_TOOL_MODULES = ("instagram", "facebook")


def register_all_tools() -> list[str]:
    """Import each platform's tool module so its @mcp.tool() functions attach to the server.

    Returns the imported module names.
    """
    return [
        importlib.import_module(f"{__name__}.{platform}").__name__
        for platform in PLATFORM_TOOL_MODULES
    ]
