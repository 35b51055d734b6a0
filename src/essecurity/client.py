import httpx
from typing import Optional, Dict, Any

from .api_keys import ApiKeyManager
from .config import config
from .errors import ProviderError
from .http_client import ClusterConnection
from .logging import ProviderLogger

logger = ProviderLogger()


class ElasticsearchClient:
    def __init__(
        self,
        url: str = "http://localhost:9200",
        username: Optional[str] = None,
        password: Optional[str] = None,
        verify_tls: bool = False,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize Elasticsearch client.

        ``Provider.configure`` always supplies credentials. Direct construction
        may omit them for unauthenticated calls such as a health check.
        """
        self.connection = ClusterConnection(
            url,
            username=username,
            password=password,
            verify_tls=verify_tls,
            http_client=http_client,
        )
        self.url = self.connection.url
        self.username = username
        self.api_keys = ApiKeyManager(self.connection)
        if username:
            logger.debug(
                "ElasticsearchClient initialized with basic auth",
                url=self.url,
                username=username,
                verify_tls=verify_tls,
            )
        else:
            logger.warning(
                "ElasticsearchClient constructed directly without credentials; "
                "only unauthenticated endpoints will answer",
                url=self.url,
            )

    def health_check(self) -> bool:
        """Check cluster health using GET /_cluster/health"""
        try:
            data = self.connection.request_json(
                "GET",
                "/_cluster/health",
                "checking cluster health",
                timeout=config.HEALTH_CHECK_TIMEOUT,
            )
        except ProviderError as e:
            logger.warning("Health check failed", error=e.message, kind=e.kind)
            return False
        return data.get("status") in ("green", "yellow")

    def get_info(self) -> Dict[str, Any]:
        """Get cluster name and version using GET /"""
        return self.connection.request_json("GET", "/", "getting cluster info")
