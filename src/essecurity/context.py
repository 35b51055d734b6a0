"""
Server context for shared state management.

The tool surface has no host to hand it a configured client, so this context
keeps the connection settings and builds the provider client lazily. Resource
handlers still receive the client explicitly from here.
"""

import threading
from dataclasses import dataclass, field
from typing import Optional

from .client import ElasticsearchClient
from .config import config
from .logging import ProviderLogger
from .provider import ApiKeyResourceHandler, Provider


@dataclass
class ServerContext:
    """
    Connection settings plus lazily-built clients shared by all MCP tools.
    """

    url: str = field(default_factory=lambda: config.ES_URL)
    username: Optional[str] = field(default_factory=lambda: config.ES_USERNAME)
    password: Optional[str] = field(
        default_factory=lambda: config.ES_PASSWORD, repr=False
    )
    log_dir: Optional[str] = field(default_factory=lambda: config.LOG_DIR)

    # Lazy-initialized clients
    _provider: Optional[Provider] = field(default=None, repr=False)
    _es_client: Optional[ElasticsearchClient] = field(default=None, repr=False)
    _logger: Optional[ProviderLogger] = field(default=None, repr=False)

    @property
    def provider(self) -> Provider:
        if self._provider is None:
            self._provider = Provider()
        return self._provider

    @property
    def es_client(self) -> ElasticsearchClient:
        """Get or create the Elasticsearch client."""
        if self._es_client is None:
            self._es_client = self.provider.configure(
                {
                    "url": self.url,
                    "username": self.username,
                    "password": self.password,
                }
            )
        return self._es_client

    @property
    def api_keys(self) -> ApiKeyResourceHandler:
        """Resource handler bound to the current client."""
        return ApiKeyResourceHandler(self.es_client)

    @property
    def logger(self) -> ProviderLogger:
        """Get or create the logger."""
        if self._logger is None:
            self._logger = ProviderLogger("essecurity", self.log_dir)
        return self._logger

    def update_connection(
        self,
        url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """
        Update connection settings; the client is rebuilt on next use.

        Args:
            url: New Elasticsearch URL (optional)
            username: New basic-auth username (optional)
            password: New basic-auth password (optional)
        """
        if url:
            self.url = url
        if username is not None:
            self.username = username.strip() or None
        if password is not None:
            self.password = password or None

        self._es_client = None

        self.logger.info(
            "Updated Elasticsearch connection settings",
            url=self.url,
            username=self.username,
            has_password=bool(self.password),
        )

    def cleanup(self) -> None:
        """Clean shutdown of resources."""
        if self._logger:
            self._logger.info("Shutting down MCP server")
            self._logger.shutdown()


# Global context instance - initialized lazily with thread safety
_context: Optional[ServerContext] = None
_context_lock = threading.Lock()


def get_context() -> ServerContext:
    """
    Get the global server context, creating it if necessary.

    Uses double-checked locking pattern for thread-safe lazy initialization.
    """
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                _context = ServerContext()
    return _context


def set_context(context: ServerContext) -> None:
    """Set the global server context."""
    global _context
    _context = context


def reset_context() -> None:
    """Reset the global context (useful for testing)."""
    global _context
    with _context_lock:
        if _context:
            _context.cleanup()
        _context = None
