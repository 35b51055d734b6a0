"""
Request bodies for the security API key endpoints.

``build_body`` turns the typed resource into the ``role_descriptors`` object
shared by create and update. Role names become keys, so a descriptor that
repeats an earlier name replaces it (last write wins). Callers that need
stricter semantics must check uniqueness before building.
"""

from typing import Any, Dict

from .models import ApiKeyResource, IndexBody, RoleDescriptorBody


def build_body(resource: ApiKeyResource) -> Dict[str, Any]:
    """Build ``{"role_descriptors": {...}}`` without touching the input."""
    role_descriptors: Dict[str, RoleDescriptorBody] = {}

    for role_descriptor in resource.role_descriptors:
        index = [
            IndexBody(names=list(entry.names), privileges=list(entry.privileges))
            for entry in role_descriptor.indices
        ]
        role_descriptors[role_descriptor.name] = RoleDescriptorBody(
            cluster=list(role_descriptor.cluster),
            index=index,
        )

    return {
        "role_descriptors": {
            name: body.to_json() for name, body in role_descriptors.items()
        }
    }


def build_create_body(resource: ApiKeyResource) -> Dict[str, Any]:
    """Create requests also carry the key name"""
    body = build_body(resource)
    body["name"] = resource.name
    return body


def build_update_body(resource: ApiKeyResource) -> Dict[str, Any]:
    """Update requests cannot rename a key, so only role descriptors are sent"""
    return build_body(resource)


def build_invalidate_body(key_id: str) -> Dict[str, Any]:
    return {"ids": [key_id]}
