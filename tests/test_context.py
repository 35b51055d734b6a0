"""Tests for server context management."""

import pytest
from essecurity.client import ElasticsearchClient
from essecurity.context import ServerContext, get_context, reset_context, set_context
from essecurity.errors import ConfigurationError


class TestServerContext:
    """Test ServerContext functionality."""

    def teardown_method(self):
        """Reset context after each test."""
        reset_context()

    def test_default_initialization(self):
        """Test that ServerContext initializes with defaults."""
        ctx = ServerContext()
        assert ctx.url is not None

    def test_lazy_client_initialization(self):
        """Test that the client is built on first use."""
        ctx = ServerContext(url="http://localhost:9200", username="elastic", password="pw")
        assert ctx._es_client is None
        client = ctx.es_client
        assert isinstance(client, ElasticsearchClient)
        assert ctx.es_client is client

    def test_missing_credentials(self):
        """Test that building a client without credentials fails cleanly."""
        ctx = ServerContext(url="http://localhost:9200", username=None, password=None)
        with pytest.raises(ConfigurationError):
            ctx.es_client

    def test_api_key_handler_uses_context_client(self):
        ctx = ServerContext(url="http://localhost:9200", username="elastic", password="pw")
        assert ctx.api_keys.client is ctx.es_client

    def test_update_connection(self):
        """Test updating connection settings rebuilds the client."""
        ctx = ServerContext(url="http://localhost:9200", username="elastic", password="pw")
        old_client = ctx.es_client
        ctx.update_connection(url="http://newhost:9200", username="admin", password="new")
        assert ctx.url == "http://newhost:9200"
        assert ctx.username == "admin"
        assert ctx.password == "new"
        assert ctx.es_client is not old_client
        assert ctx.es_client.url == "http://newhost:9200"

    def test_repr_hides_password(self):
        ctx = ServerContext(url="http://localhost:9200", username="elastic", password="hunter2")
        assert "hunter2" not in repr(ctx)


class TestContextSingleton:
    """Test global context singleton functionality."""

    def teardown_method(self):
        """Reset context after each test."""
        reset_context()

    def test_get_context_returns_singleton(self):
        """Test that get_context() returns the same instance."""
        ctx1 = get_context()
        ctx2 = get_context()
        assert ctx1 is ctx2

    def test_set_context(self):
        """Test setting a custom context."""
        custom_ctx = ServerContext(url="http://custom:9200")
        set_context(custom_ctx)
        retrieved_ctx = get_context()
        assert retrieved_ctx is custom_ctx
        assert retrieved_ctx.url == "http://custom:9200"

    def test_reset_context(self):
        """Test resetting the global context."""
        ctx1 = get_context()
        reset_context()
        ctx2 = get_context()
        assert ctx1 is not ctx2
