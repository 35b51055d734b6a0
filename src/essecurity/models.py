"""
Data model for the ``essecurity_api_key`` resource.

The declarative host hands attributes over as plain dicts; ``from_dict``
turns them into typed records and rejects malformed input before any request
is made. ``role_descriptors`` and ``indices`` are sets on the host side, so
their order carries no meaning. ``cluster``, ``names`` and ``privileges`` are
ordered and reach the request body exactly as supplied. Exact repeats in the
set-typed attributes are dropped on decode.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import ConfigurationError, ResponseDecodeError


def _string_list(value: Any, attribute: str, required: bool = False) -> List[str]:
    if value is None:
        if required:
            raise ConfigurationError(f"Missing required attribute '{attribute}'")
        return []
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            f"Attribute '{attribute}' must be a list of strings, got {type(value).__name__}"
        )
    for item in value:
        if not isinstance(item, str):
            raise ConfigurationError(
                f"Attribute '{attribute}' must contain only strings, got {type(item).__name__}"
            )
    return list(value)


def _object_list(value: Any, attribute: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            f"Attribute '{attribute}' must be a list of objects, got {type(value).__name__}"
        )
    for item in value:
        if not isinstance(item, dict):
            raise ConfigurationError(
                f"Attribute '{attribute}' must contain only objects, got {type(item).__name__}"
            )
    return list(value)


def _distinct(items: List[Any]) -> List[Any]:
    """Drop exact repeats from a set-typed attribute, keeping first-seen order."""
    unique: List[Any] = []
    for item in items:
        if item not in unique:
            unique.append(item)
    return unique


def _optional_string(data: Dict[str, Any], attribute: str) -> Optional[str]:
    value = data.get(attribute)
    if value is not None and not isinstance(value, str):
        raise ConfigurationError(
            f"Attribute '{attribute}' must be a string, got {type(value).__name__}"
        )
    return value


def _required_string(data: Dict[str, Any], attribute: str) -> str:
    value = _optional_string(data, attribute)
    if value is None:
        raise ConfigurationError(f"Missing required attribute '{attribute}'")
    return value


@dataclass
class Index:
    """Index privileges entry"""

    names: List[str]
    privileges: List[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Index":
        return cls(
            names=_string_list(data.get("names"), "indices.names", required=True),
            privileges=_string_list(
                data.get("privileges"), "indices.privileges", required=True
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"names": list(self.names), "privileges": list(self.privileges)}


@dataclass
class RoleDescriptor:
    """Named bundle of cluster and index privileges"""

    name: str
    cluster: List[str] = field(default_factory=list)
    indices: List[Index] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoleDescriptor":
        return cls(
            name=_required_string(data, "name"),
            cluster=_string_list(data.get("cluster"), "cluster"),
            indices=_distinct(
                [
                    Index.from_dict(item)
                    for item in _object_list(data.get("indices"), "indices")
                ]
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "cluster": list(self.cluster),
            "indices": [index.to_dict() for index in self.indices],
        }


@dataclass
class ApiKeyResource:
    """
    Managed API key.

    ``id``, ``api_key`` and ``encoded`` are assigned by the cluster on create
    and stay ``None`` until then.
    """

    name: str
    role_descriptors: List[RoleDescriptor] = field(default_factory=list)
    id: Optional[str] = None
    api_key: Optional[str] = field(default=None, repr=False)
    encoded: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> "ApiKeyResource":
        """Decode host-supplied attributes, raising ConfigurationError if malformed."""
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Resource attributes must be an object, got {type(data).__name__}"
            )
        if data.get("role_descriptors") is None:
            raise ConfigurationError("Missing required attribute 'role_descriptors'")
        return cls(
            name=_required_string(data, "name"),
            role_descriptors=_distinct(
                [
                    RoleDescriptor.from_dict(item)
                    for item in _object_list(data["role_descriptors"], "role_descriptors")
                ]
            ),
            id=_optional_string(data, "id"),
            api_key=_optional_string(data, "api_key"),
            encoded=_optional_string(data, "encoded"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """State representation handed back to the host."""
        return {
            "id": self.id,
            "api_key": self.api_key,
            "encoded": self.encoded,
            "name": self.name,
            "role_descriptors": [rd.to_dict() for rd in self.role_descriptors],
        }

    def canonical_role_descriptors(self) -> str:
        """Order-insensitive fingerprint of the set-typed attributes."""
        canonical = []
        for rd in self.role_descriptors:
            indices = sorted(
                json.dumps(index.to_dict(), sort_keys=True) for index in rd.indices
            )
            canonical.append(
                json.dumps(
                    {"name": rd.name, "cluster": rd.cluster, "indices": indices},
                    sort_keys=True,
                )
            )
        return json.dumps(sorted(canonical))


@dataclass
class IndexBody:
    """Wire shape of one index grant"""

    names: List[str]
    privileges: List[str]

    def to_json(self) -> Dict[str, Any]:
        return {"names": list(self.names), "privileges": list(self.privileges)}


@dataclass
class RoleDescriptorBody:
    """Wire shape of one role descriptor, keyed by role name in the request"""

    cluster: List[str]
    index: List[IndexBody]

    def to_json(self) -> Dict[str, Any]:
        return {
            "cluster": list(self.cluster),
            "index": [entry.to_json() for entry in self.index],
        }


@dataclass
class CreatedApiKey:
    """Identifiers returned by the create endpoint"""

    id: str
    api_key: str = field(repr=False)
    encoded: str = field(repr=False)
    name: Optional[str] = None
    expiration: Optional[int] = None

    @classmethod
    def from_response(cls, payload: Any) -> "CreatedApiKey":
        if not isinstance(payload, dict):
            raise ResponseDecodeError(
                f"Expected a JSON object from create API key, got {type(payload).__name__}"
            )
        values = {}
        for attribute in ("id", "api_key", "encoded"):
            value = payload.get(attribute)
            if not isinstance(value, str):
                found = "missing" if value is None else type(value).__name__
                raise ResponseDecodeError(
                    f"Field '{attribute}' in create API key response must be a string ({found})"
                )
            values[attribute] = value
        name = payload.get("name")
        expiration = payload.get("expiration")
        return cls(
            name=name if isinstance(name, str) else None,
            expiration=expiration if isinstance(expiration, int) else None,
            **values,
        )
