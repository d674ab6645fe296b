"""Client module - main client interface."""

from avfeed.core.client.client import AlphaVantageClient

__all__ = ["AlphaVantageClient"]
