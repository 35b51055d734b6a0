"""
Configuration management for the provider.

Connection and runtime settings are read from environment variables once at
import time and can be validated before a client is built.
"""

import os
from typing import Optional, List
from urllib.parse import urlparse


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration with validation."""

    # Elasticsearch connection
    ES_URL: str = os.getenv("ES_URL", "http://localhost:9200")
    ES_USERNAME: Optional[str] = os.getenv("ES_USERNAME")
    ES_PASSWORD: Optional[str] = os.getenv("ES_PASSWORD")
    # Clusters are commonly fronted by self-signed certificates
    ES_VERIFY_TLS: bool = _env_flag("ES_VERIFY_TLS", "false")

    # Parse PORT with error handling
    _port_str = os.getenv("PORT")
    PORT: Optional[int] = None
    if _port_str:
        try:
            PORT = int(_port_str)
        except ValueError:
            PORT = None

    # HTTP client settings
    HTTP_MAX_CONNECTIONS: int = int(os.getenv("HTTP_MAX_CONNECTIONS", "10"))
    HTTP_MAX_KEEPALIVE: int = int(os.getenv("HTTP_MAX_KEEPALIVE", "5"))
    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "30.0"))

    # Logging
    LOG_DIR: Optional[str] = os.getenv("LOG_DIR")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Health check settings
    HEALTH_CHECK_TIMEOUT: float = float(os.getenv("HEALTH_CHECK_TIMEOUT", "5.0"))

    @classmethod
    def validate(cls) -> List[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        parsed = urlparse(cls.ES_URL)
        if not parsed.scheme or not parsed.netloc:
            errors.append("ES_URL must be a valid URL")
        elif parsed.scheme not in ("http", "https"):
            errors.append("ES_URL must use http or https scheme")

        if cls.ES_PASSWORD and not cls.ES_USERNAME:
            errors.append("ES_PASSWORD is set but ES_USERNAME is missing")

        if cls.HTTP_MAX_CONNECTIONS < 1:
            errors.append("HTTP_MAX_CONNECTIONS must be at least 1")
        if cls.HTTP_MAX_KEEPALIVE < 1:
            errors.append("HTTP_MAX_KEEPALIVE must be at least 1")
        if cls.HTTP_MAX_KEEPALIVE > cls.HTTP_MAX_CONNECTIONS:
            errors.append("HTTP_MAX_KEEPALIVE cannot exceed HTTP_MAX_CONNECTIONS")

        if cls.HTTP_TIMEOUT < 0.1:
            errors.append("HTTP_TIMEOUT must be at least 0.1 seconds")
        if cls.HTTP_TIMEOUT > 600.0:  # Max 10 minutes
            errors.append("HTTP_TIMEOUT exceeds safe limit of 10 minutes")

        if cls.HEALTH_CHECK_TIMEOUT < 0.1:
            errors.append("HEALTH_CHECK_TIMEOUT must be at least 0.1 seconds")
        if cls.HEALTH_CHECK_TIMEOUT > 30.0:
            errors.append("HEALTH_CHECK_TIMEOUT exceeds safe limit of 30 seconds")

        if cls.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown LOG_LEVEL: {cls.LOG_LEVEL}")

        return errors


# Global config instance
config = Config()
