"""
HTTP client with connection pooling.

This module provides a shared pool of httpx clients keyed by cluster URL so
repeated operations against the same cluster reuse connections.
"""

import base64
import httpx
from typing import Any, Optional, Dict
import threading

from .config import config
from .errors import RemoteAPIError, ResponseDecodeError, TransportError
from .logging import ProviderLogger

logger = ProviderLogger()


def basic_auth_headers(
    username: Optional[str] = None, password: Optional[str] = None
) -> Dict[str, str]:
    """
    Get headers for requests, including basic authentication if provided.

    Args:
        username: Optional basic-auth username
        password: Optional basic-auth password

    Returns:
        Dictionary of headers
    """
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if username:
        token = base64.b64encode(
            f"{username}:{password or ''}".encode("utf-8")
        ).decode("ascii")
        headers["Authorization"] = f"Basic {token}"
    return headers


class HTTPClientPool:
    """
    Thread-safe HTTP client pool for managing persistent connections.

    This class provides a singleton pattern for httpx.Client instances
    with connection pooling enabled.
    """

    _instance: Optional["HTTPClientPool"] = None
    _lock = threading.Lock()
    _clients: Dict[str, httpx.Client] = {}

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def get_client(
        self,
        base_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30.0,
        verify: bool = True,
        max_connections: int = 10,
        max_keepalive_connections: int = 5,
    ) -> tuple[httpx.Client, Dict[str, str]]:
        """
        Get or create an HTTP client for a specific base URL.

        Credentials are not part of the pool key so that password rotation
        does not leave stale clients behind. They are returned as headers and
        must be passed per request.

        Args:
            base_url: Base URL for the client
            username: Optional basic-auth username (used in returned headers)
            password: Optional basic-auth password (used in returned headers)
            timeout: Request timeout in seconds
            verify: Whether to verify the server TLS certificate
            max_connections: Maximum number of connections in pool
            max_keepalive_connections: Maximum keepalive connections

        Returns:
            Tuple of (httpx.Client instance, headers dict with auth)
        """
        client_key = f"{base_url}:{timeout}:{verify}"

        if client_key not in self._clients:
            with self._lock:
                if client_key not in self._clients:
                    limits = httpx.Limits(
                        max_connections=max_connections,
                        max_keepalive_connections=max_keepalive_connections,
                    )
                    timeout_config = httpx.Timeout(timeout, connect=10.0)

                    self._clients[client_key] = httpx.Client(
                        base_url=base_url,
                        timeout=timeout_config,
                        limits=limits,
                        verify=verify,
                        http2=True,
                    )

        headers = basic_auth_headers(username, password)
        return self._clients[client_key], headers

    def close_all(self) -> None:
        """Close all HTTP clients and clean up resources."""
        with self._lock:
            for client in self._clients.values():
                try:
                    client.close()
                except Exception as e:
                    # Log but don't fail on cleanup errors
                    logger.error(f"Error closing HTTP client: {e}")
            self._clients.clear()


# Global singleton instance
_http_pool: Optional[HTTPClientPool] = None


def get_http_pool() -> HTTPClientPool:
    """Get the global HTTP client pool instance."""
    global _http_pool
    if _http_pool is None:
        _http_pool = HTTPClientPool()
    return _http_pool


class ClusterConnection:
    """
    One cluster endpoint plus the credentials used to reach it.

    Requests go through a pooled client unless an ``httpx.Client`` is
    injected, which tests use to plug in a mock transport. Every request is
    a single attempt: failures are raised, never retried.
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        verify_tls: bool = False,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.url = url.rstrip("/")
        self.username = username
        self.password = password
        self.verify_tls = verify_tls
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self._http_client = http_client

    def _client(self) -> tuple[httpx.Client, Dict[str, str]]:
        if self._http_client is not None:
            return self._http_client, basic_auth_headers(self.username, self.password)
        return get_http_pool().get_client(
            self.url,
            self.username,
            self.password,
            timeout=self.timeout,
            verify=self.verify_tls,
            max_connections=config.HTTP_MAX_CONNECTIONS,
            max_keepalive_connections=config.HTTP_MAX_KEEPALIVE,
        )

    def request(
        self,
        method: str,
        endpoint: str,
        purpose: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """
        Send one request and return the response if its status is a success.

        Args:
            method: HTTP method
            endpoint: Path relative to the cluster URL
            purpose: Phrase used in error messages, e.g. "creating API key"
            json: Optional JSON body
            params: Optional query parameters
            timeout: Per-request timeout override

        Raises:
            TransportError: The request never got a response
            RemoteAPIError: The cluster answered with a non-success status
        """
        client, headers = self._client()
        has_auth = "Authorization" in headers
        logger.debug(
            f"Cluster request: {method} {endpoint}",
            url=self.url,
            method=method,
            has_auth_header=has_auth,
        )
        kwargs: Dict[str, Any] = {"headers": headers}
        if json is not None:
            kwargs["json"] = json
        if params:
            kwargs["params"] = params
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            response = client.request(method, f"{self.url}{endpoint}", **kwargs)
        except httpx.TransportError as e:
            logger.error(
                f"Request failed while {purpose}",
                endpoint=endpoint,
                error_type=type(e).__name__,
            )
            raise TransportError(f"Error getting response: {e}") from e

        if response.status_code == 401:
            logger.error(
                "Authentication failed",
                endpoint=endpoint,
                has_auth_header=has_auth,
                response_text=response.text[:200],
            )
        if response.is_error:
            raise RemoteAPIError(response.status_code, purpose, response.text[:200])
        return response

    def request_json(
        self,
        method: str,
        endpoint: str,
        purpose: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Like ``request`` but decode the body, which must be a JSON object."""
        response = self.request(method, endpoint, purpose, json, params, timeout)
        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseDecodeError(f"Error parsing the response body: {e}") from e
        if not isinstance(payload, dict):
            raise ResponseDecodeError(
                f"Expected a JSON object while {purpose}, got {type(payload).__name__}"
            )
        logger.debug(
            f"[{response.status_code}] Response received while {purpose}",
            keys=sorted(payload.keys()),
        )
        return payload
