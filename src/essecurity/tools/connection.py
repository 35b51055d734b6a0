"""
Connection tools for the Elasticsearch security MCP server.

These tools show and change the cluster connection and check its health.
"""

import json
from typing import Optional

from ..context import get_context
from ..errors import ProviderError, format_error


def register_connection_tools(mcp) -> None:
    """Register connection management tools with the FastMCP server."""

    @mcp.tool(name="get-connection-settings")
    def get_connection_settings() -> str:
        """Get current Elasticsearch connection settings."""
        ctx = get_context()
        password_display = "*" * 8 if ctx.password else "Not set"
        return (
            "Current connection settings:\n"
            f"URL: {ctx.url}\n"
            f"Username: {ctx.username or 'Not set'}\n"
            f"Password: {password_display}"
        )

    @mcp.tool(name="update-connection-settings")
    def update_connection_settings(
        url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> str:
        """
        Update Elasticsearch connection settings.

        Args:
            url: New Elasticsearch URL
            username: New basic-auth username
            password: New basic-auth password

        Returns:
            Confirmation message with the updated URL
        """
        ctx = get_context()
        ctx.update_connection(url, username, password)
        return f"Successfully updated connection settings to URL: {ctx.url}"

    @mcp.tool(name="health-check")
    def health_check() -> str:
        """Check Elasticsearch cluster health."""
        ctx = get_context()
        try:
            is_healthy = ctx.es_client.health_check()
        except ProviderError as e:
            return format_error(e)
        status = "available" if is_healthy else "unavailable"
        return f"Elasticsearch is {status}"

    @mcp.tool(name="get-cluster-info")
    def get_cluster_info() -> str:
        """Get Elasticsearch cluster name and version."""
        ctx = get_context()
        try:
            info = ctx.es_client.get_info()
        except ProviderError as e:
            return format_error(e)
        return f"Cluster info:\n{json.dumps(info, indent=2)}"
