"""Lazily constructed Notion API client handle."""

import asyncio
import logging
from typing import Optional

from notion_client import AsyncClient

from shared.config import get_notion_config

logger = logging.getLogger(__name__)


class MissingCredentialError(ValueError):
    """Raised when no Notion integration token is configured."""


class NotionClientProvider:
    """Owns a single authenticated Notion client, built on first use."""

    def __init__(self, api_key: Optional[str] = None):
        """
        Initialize the provider.

        No client is constructed here; that is deferred to the first call
        that needs one.

        Args:
            api_key: Notion integration token. When omitted, NOTION_API_KEY is
                read from the environment when the client is built.
        """
        self._api_key = api_key
        self._client: Optional[AsyncClient] = None
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        """Whether the client has been constructed."""
        return self._client is not None

    def initialize_client(self) -> AsyncClient:
        """
        Construct and cache the Notion client.

        Returns:
            The authenticated AsyncClient

        Raises:
            MissingCredentialError: If the token is unset or empty
        """
        api_key = self._api_key
        if api_key is None:
            api_key = get_notion_config()["api_key"]

        if not api_key:
            raise MissingCredentialError("NOTION_API_KEY environment variable is required")

        self._client = AsyncClient(auth=api_key)
        logger.info("Notion client initialized")
        return self._client

    async def get_client(self) -> AsyncClient:
        """Return the cached client, constructing it once if needed."""
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is None:
                self.initialize_client()
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP transport, if a client was built."""
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("Notion client closed")
