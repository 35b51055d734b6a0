"""
MCP tools for the Elasticsearch security provider.

Each module registers its tools with the FastMCP server instance.
"""

from .connection import register_connection_tools
from .api_keys import register_api_key_tools


def register_all_tools(mcp) -> None:
    """
    Register all tools with the FastMCP server instance.

    Args:
        mcp: The FastMCP server instance
    """
    register_connection_tools(mcp)
    register_api_key_tools(mcp)


__all__ = [
    "register_all_tools",
    "register_connection_tools",
    "register_api_key_tools",
]
