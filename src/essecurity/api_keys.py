from typing import Dict, Any, Optional
from urllib.parse import quote

from .errors import RemoteAPIError
from .http_client import ClusterConnection
from .logging import ProviderLogger

logger = ProviderLogger()

API_KEY_ENDPOINT = "/_security/api_key"


class ApiKeyManager:
    """Manage Elasticsearch security API keys"""

    def __init__(self, connection: ClusterConnection):
        self.connection = connection

    def create_api_key(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new API key using POST /_security/api_key"""
        logger.debug(
            "Creating API key",
            name=body.get("name"),
            roles=sorted(body.get("role_descriptors", {})),
        )
        return self.connection.request_json(
            "POST", API_KEY_ENDPOINT, "creating API key", json=body
        )

    def update_api_key(self, key_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the role descriptors of a key using PUT /_security/api_key/{id}"""
        logger.debug(
            "Updating API key",
            id=key_id,
            roles=sorted(body.get("role_descriptors", {})),
        )
        return self.connection.request_json(
            "PUT",
            f"{API_KEY_ENDPOINT}/{quote(key_id, safe='')}",
            "updating API key",
            json=body,
        )

    def invalidate_api_key(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Invalidate keys using DELETE /_security/api_key"""
        logger.debug("Invalidating API key", ids=body.get("ids"))
        return self.connection.request_json(
            "DELETE", API_KEY_ENDPOINT, "invalidating API key", json=body
        )

    def get_api_key(self, key_id: str) -> Optional[Dict[str, Any]]:
        """
        Get information about one key using GET /_security/api_key?id={id}.

        Returns None when the cluster does not know the key.
        """
        try:
            result = self.connection.request_json(
                "GET", API_KEY_ENDPOINT, "reading API key", params={"id": key_id}
            )
        except RemoteAPIError as e:
            if e.status_code == 404:
                return None
            raise
        for key in result.get("api_keys") or []:
            if isinstance(key, dict) and key.get("id") == key_id:
                return key
        return None
