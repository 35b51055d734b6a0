"""Tests for HTTP client pool."""

import pytest
from essecurity.http_client import HTTPClientPool, basic_auth_headers, get_http_pool


class TestHTTPClientPool:
    """Test HTTP client pool functionality."""

    def test_singleton_pattern(self):
        """Test that HTTPClientPool implements singleton pattern."""
        pool1 = HTTPClientPool()
        pool2 = HTTPClientPool()
        assert pool1 is pool2

    def test_get_http_pool_returns_singleton(self):
        """Test that get_http_pool() returns the same instance."""
        pool1 = get_http_pool()
        pool2 = get_http_pool()
        assert pool1 is pool2

    def test_get_client_returns_tuple(self):
        """Test that get_client() returns (client, headers) tuple."""
        pool = get_http_pool()
        result = pool.get_client("http://localhost:9200")
        assert isinstance(result, tuple)
        assert len(result) == 2
        client, headers = result
        assert client is not None
        assert isinstance(headers, dict)

    def test_get_client_with_credentials(self):
        """Test that get_client() includes basic auth when a username is provided."""
        pool = get_http_pool()
        _, headers = pool.get_client("http://localhost:9200", "user", "pw")
        assert headers["Authorization"] == "Basic dXNlcjpwdw=="

    def test_get_client_without_credentials(self):
        """Test that get_client() excludes auth header without a username."""
        pool = get_http_pool()
        _, headers = pool.get_client("http://localhost:9200")
        assert "Authorization" not in headers
        assert headers["Content-Type"] == "application/json"

    def test_get_client_reuses_client(self):
        """Test that get_client() reuses clients for same URL."""
        pool = get_http_pool()
        client1, _ = pool.get_client("http://localhost:9200")
        client2, _ = pool.get_client("http://localhost:9200")
        assert client1 is client2

    def test_rotated_password_reuses_client(self):
        """Test that changing credentials keeps the client but changes headers."""
        pool = get_http_pool()
        client1, headers1 = pool.get_client("http://localhost:9200", "user", "old")
        client2, headers2 = pool.get_client("http://localhost:9200", "user", "new")
        assert client1 is client2
        assert headers1 != headers2

    def test_tls_verification_is_part_of_key(self):
        """Test that verified and unverified clients are pooled separately."""
        pool = get_http_pool()
        verified, _ = pool.get_client("https://localhost:9200", verify=True)
        unverified, _ = pool.get_client("https://localhost:9200", verify=False)
        assert verified is not unverified


class TestBasicAuthHeaders:
    """Test header construction."""

    def test_empty_password(self):
        headers = basic_auth_headers("user")
        # base64("user:")
        assert headers["Authorization"] == "Basic dXNlcjo="
