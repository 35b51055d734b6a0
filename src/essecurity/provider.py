"""
Provider surface for the declarative host.

``Provider`` describes itself (metadata and schema) and turns host settings
into an ``ElasticsearchClient``. ``ApiKeyResourceHandler`` implements the
lifecycle of the ``essecurity_api_key`` resource on top of that client.

Every operation is a single sequential request with no retry. If the process
dies after a successful create but before the host persists the returned
state, the key remains on the cluster and is not cleaned up here.
"""

from typing import Any, Dict, Optional

import httpx

from . import __version__
from .body import build_create_body, build_invalidate_body, build_update_body
from .client import ElasticsearchClient
from .config import config
from .errors import ConfigurationError
from .logging import ProviderLogger
from .models import ApiKeyResource, CreatedApiKey
from .security import validate_url

logger = ProviderLogger()

PROVIDER_TYPE_NAME = "essecurity"
API_KEY_RESOURCE_TYPE = f"{PROVIDER_TYPE_NAME}_api_key"

PLAN_CREATE = "create"
PLAN_UPDATE = "update"
PLAN_REPLACE = "replace"
PLAN_NOOP = "noop"

PROVIDER_SCHEMA: Dict[str, Any] = {
    "url": {
        "type": "string",
        "required": True,
        "description": "Elasticsearch URL",
    },
    "username": {
        "type": "string",
        "required": True,
        "description": "Username to use to connect to elasticsearch using basic auth",
    },
    "password": {
        "type": "string",
        "required": True,
        "sensitive": True,
        "description": "Password to use to connect to elasticsearch using basic auth",
    },
}

API_KEY_RESOURCE_SCHEMA: Dict[str, Any] = {
    "id": {
        "type": "string",
        "computed": True,
        "description": "API Key Identifier",
    },
    "api_key": {
        "type": "string",
        "computed": True,
        "sensitive": True,
        "description": "Generated API Key",
    },
    "encoded": {
        "type": "string",
        "computed": True,
        "sensitive": True,
        "description": (
            "API key credentials which is the Base64-encoding of the UTF-8 "
            "representation of the id and api_key joined by a colon (:)."
        ),
    },
    "name": {
        "type": "string",
        "required": True,
        "requires_replace": True,
        "description": "Name of the API Key to create",
    },
    "role_descriptors": {
        "type": "set",
        "required": True,
        "description": "Role Descriptors for the API Key",
        "attributes": {
            "name": {"type": "string", "required": True},
            "cluster": {
                "type": "list",
                "element_type": "string",
                "optional": True,
                "description": "A list of cluster privileges",
            },
            "indices": {
                "type": "set",
                "optional": True,
                "description": "A list of indices permissions entries",
                "attributes": {
                    "names": {
                        "type": "list",
                        "element_type": "string",
                        "required": True,
                        "description": (
                            "A list of indices (or index name patterns) to which "
                            "the permissions in this entry apply"
                        ),
                    },
                    "privileges": {
                        "type": "list",
                        "element_type": "string",
                        "required": True,
                        "description": (
                            "The index level privileges that the owners of the "
                            "role have on the specified indices."
                        ),
                    },
                },
            },
        },
    },
}


def plan_change(prior_state: Optional[Dict[str, Any]], desired: Dict[str, Any]) -> str:
    """
    Classify the change needed to move from prior state to the desired config.

    Returns one of ``create``, ``update``, ``replace`` or ``noop``.
    """
    planned = ApiKeyResource.from_dict(desired)
    if prior_state is None:
        return PLAN_CREATE
    prior = ApiKeyResource.from_dict(prior_state)
    if prior.id is None:
        return PLAN_CREATE
    if planned.name != prior.name:
        return PLAN_REPLACE
    if planned.canonical_role_descriptors() != prior.canonical_role_descriptors():
        return PLAN_UPDATE
    return PLAN_NOOP


class ApiKeyResourceHandler:
    """Create, read, update and delete ``essecurity_api_key`` resources"""

    type_name = API_KEY_RESOURCE_TYPE
    schema = API_KEY_RESOURCE_SCHEMA

    def __init__(self, client: ElasticsearchClient):
        self.client = client

    def plan(self, prior_state: Optional[Dict[str, Any]], desired: Dict[str, Any]) -> str:
        return plan_change(prior_state, desired)

    def create(self, plan: Dict[str, Any]) -> Dict[str, Any]:
        """Create the key and return the new state including its credentials."""
        resource = ApiKeyResource.from_dict(plan)
        body = build_create_body(resource)

        result = self.client.api_keys.create_api_key(body)
        # A malformed response here leaves the key on the cluster untracked.
        created = CreatedApiKey.from_response(result)

        resource.id = created.id
        resource.api_key = created.api_key
        resource.encoded = created.encoded
        # Credentials stay out of the logs entirely, masked or not
        logger.info("Created API key", id=created.id, name=resource.name)
        return resource.to_dict()

    def read(self, state: Dict[str, Any], refresh: bool = False) -> Optional[Dict[str, Any]]:
        """
        Return the persisted state.

        With ``refresh`` the cluster is asked whether the key still exists;
        a missing or invalidated key yields None so the host can plan a new
        create. Role descriptors are not reconciled against the cluster.
        """
        resource = ApiKeyResource.from_dict(state)
        if not refresh or resource.id is None:
            return resource.to_dict()

        remote = self.client.api_keys.get_api_key(resource.id)
        if remote is None or remote.get("invalidated"):
            logger.warning(
                "API key no longer active on cluster",
                id=resource.id,
                found=remote is not None,
            )
            return None
        return resource.to_dict()

    def update(self, plan: Dict[str, Any], prior_state: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the key's role descriptors; identifiers carry over from prior state."""
        resource = ApiKeyResource.from_dict(plan)
        prior = ApiKeyResource.from_dict(prior_state)
        if prior.id is None:
            raise ConfigurationError("Cannot update an API key without a known id")
        if resource.name != prior.name:
            raise ConfigurationError(
                f"Renaming API key '{prior.name}' to '{resource.name}' requires replacement"
            )

        resource.id = prior.id
        resource.api_key = prior.api_key
        resource.encoded = prior.encoded

        body = build_update_body(resource)
        result = self.client.api_keys.update_api_key(resource.id, body)
        logger.info("Updated API key", id=resource.id, updated=result.get("updated"))
        return resource.to_dict()

    def delete(self, state: Dict[str, Any]) -> None:
        """Invalidate the key named by the state's id."""
        resource = ApiKeyResource.from_dict(state)
        if resource.id is None:
            raise ConfigurationError("Cannot invalidate an API key without a known id")

        result = self.client.api_keys.invalidate_api_key(build_invalidate_body(resource.id))
        logger.info(
            "Invalidated API key",
            id=resource.id,
            invalidated=result.get("invalidated_api_keys"),
            error_count=result.get("error_count"),
        )


class Provider:
    """Elasticsearch security provider"""

    def __init__(self, version: str = __version__):
        self.version = version

    def metadata(self) -> Dict[str, str]:
        return {"type_name": PROVIDER_TYPE_NAME, "version": self.version}

    def schema(self) -> Dict[str, Any]:
        return {
            "provider": PROVIDER_SCHEMA,
            "resources": {API_KEY_RESOURCE_TYPE: API_KEY_RESOURCE_SCHEMA},
        }

    def configure(
        self, settings: Dict[str, Any], http_client: Optional[httpx.Client] = None
    ) -> ElasticsearchClient:
        """
        Build the client every resource of this provider will use.

        Args:
            settings: ``url``, ``username`` and ``password``
            http_client: Optional client to send requests through

        Raises:
            ConfigurationError: A setting is missing or malformed
        """
        for attribute in PROVIDER_SCHEMA:
            value = settings.get(attribute)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(
                    f"Provider attribute '{attribute}' must be a non-empty string"
                )
        if not validate_url(settings["url"]):
            raise ConfigurationError(
                f"Provider attribute 'url' is not a valid http(s) URL: {settings['url']}"
            )

        return ElasticsearchClient(
            settings["url"],
            username=settings["username"],
            password=settings["password"],
            verify_tls=config.ES_VERIFY_TLS,
            http_client=http_client,
        )

    def resources(self, client: ElasticsearchClient) -> Dict[str, ApiKeyResourceHandler]:
        """Resource handlers bound to a configured client, keyed by type name."""
        return {API_KEY_RESOURCE_TYPE: ApiKeyResourceHandler(client)}
