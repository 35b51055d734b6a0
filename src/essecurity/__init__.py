"""Manage Elasticsearch security API keys from a declarative host."""

__version__ = "0.1.0"
