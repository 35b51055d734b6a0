"""
API key resource tools for the Elasticsearch security MCP server.

These tools drive the ``essecurity_api_key`` lifecycle: previewing request
bodies, planning changes, and creating, reading, updating and invalidating
keys. State goes in and comes out as JSON objects; the caller persists it.
"""

import json
from typing import Any, Dict, List, Optional

from ..body import build_create_body, build_update_body
from ..context import get_context
from ..errors import ProviderError, format_error
from ..models import ApiKeyResource
from ..provider import plan_change


def register_api_key_tools(mcp) -> None:
    """Register API key resource tools with the FastMCP server."""

    @mcp.tool(name="build-api-key-body")
    def build_api_key_body(
        name: str,
        role_descriptors: List[Dict[str, Any]],
        for_update: bool = False,
    ) -> str:
        """
        Show the request body that create or update would send.

        Args:
            name: Name of the API key
            role_descriptors: Role descriptors, each with name, cluster and indices
            for_update: Build the update body (without the name) instead of create

        Returns:
            JSON request body
        """
        try:
            resource = ApiKeyResource.from_dict(
                {"name": name, "role_descriptors": role_descriptors}
            )
        except ProviderError as e:
            return format_error(e)
        body = build_update_body(resource) if for_update else build_create_body(resource)
        return json.dumps(body, indent=2)

    @mcp.tool(name="plan-api-key")
    def plan_api_key(
        name: str,
        role_descriptors: List[Dict[str, Any]],
        state: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Decide what applying the configuration would do.

        Args:
            name: Name of the API key
            role_descriptors: Desired role descriptors
            state: Previously persisted state, if the key exists

        Returns:
            One of create, update, replace or noop
        """
        desired = {"name": name, "role_descriptors": role_descriptors}
        try:
            action = plan_change(state, desired)
        except ProviderError as e:
            return format_error(e)
        return f"Planned action: {action}"

    @mcp.tool(name="create-api-key")
    def create_api_key(name: str, role_descriptors: List[Dict[str, Any]]) -> str:
        """
        Create an API key.

        Args:
            name: Name of the API key
            role_descriptors: Role descriptors, each with name, cluster and indices

        Returns:
            JSON state including id, api_key and encoded
        """
        ctx = get_context()
        try:
            state = ctx.api_keys.create({"name": name, "role_descriptors": role_descriptors})
        except ProviderError as e:
            ctx.logger.error("Create API key failed", kind=e.kind, error=e.message)
            return format_error(e)
        return json.dumps(state, indent=2)

    @mcp.tool(name="read-api-key")
    def read_api_key(state: Dict[str, Any], refresh: bool = False) -> str:
        """
        Read an API key from persisted state.

        Args:
            state: Previously persisted state
            refresh: Ask the cluster whether the key is still active

        Returns:
            JSON state, or a notice that the key is gone
        """
        ctx = get_context()
        try:
            current = ctx.api_keys.read(state, refresh=refresh)
        except ProviderError as e:
            return format_error(e)
        if current is None:
            return "API key is no longer active; remove it from state"
        return json.dumps(current, indent=2)

    @mcp.tool(name="update-api-key")
    def update_api_key(
        name: str, role_descriptors: List[Dict[str, Any]], state: Dict[str, Any]
    ) -> str:
        """
        Replace the role descriptors of an existing API key.

        Args:
            name: Name of the API key (must match the state)
            role_descriptors: New role descriptors
            state: Previously persisted state

        Returns:
            JSON state
        """
        ctx = get_context()
        try:
            updated = ctx.api_keys.update(
                {"name": name, "role_descriptors": role_descriptors}, state
            )
        except ProviderError as e:
            ctx.logger.error("Update API key failed", kind=e.kind, error=e.message)
            return format_error(e)
        return json.dumps(updated, indent=2)

    @mcp.tool(name="delete-api-key")
    def delete_api_key(state: Dict[str, Any]) -> str:
        """
        Invalidate an API key.

        Args:
            state: Previously persisted state

        Returns:
            Confirmation of invalidation
        """
        ctx = get_context()
        try:
            ctx.api_keys.delete(state)
        except ProviderError as e:
            ctx.logger.error("Delete API key failed", kind=e.kind, error=e.message)
            return format_error(e)
        return f"Successfully invalidated API key: {state.get('id')}"
