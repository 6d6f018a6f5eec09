"""Notion Sync Connector - fetches, pushes and syncs records with a Notion database."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from notion_client.errors import APIResponseError

from shared.config import get_notion_config
from shared.models import LocalRecord, RemoteRecord, SyncError, SyncResult

from services.notion_sync.client import NotionClientProvider
from services.notion_sync.transforms import local_to_remote

logger = logging.getLogger(__name__)

PULL = "pull"
PUSH = "push"
BIDIRECTIONAL = "bidirectional"
DIRECTIONS = (PULL, PUSH, BIDIRECTIONAL)


class NotionSyncConnector:
    """Handles record synchronization against a Notion database."""

    def __init__(
        self,
        provider: NotionClientProvider,
        default_database_id: Optional[str] = None
    ):
        """
        Initialize the connector.

        Args:
            provider: Owner of the Notion client handle
            default_database_id: Database used when an operation omits one.
                Falls back to NOTION_DATABASE_ID, read on each call.
        """
        self.provider = provider
        self.default_database_id = default_database_id

    def _resolve_database_id(self, database_id: Optional[str]) -> str:
        if database_id:
            return database_id
        if self.default_database_id:
            return self.default_database_id
        return get_notion_config()["database_id"]

    async def fetch_records(
        self,
        database_id: Optional[str] = None,
        filter: Optional[Dict[str, Any]] = None
    ) -> List[RemoteRecord]:
        """
        Fetch records from a Notion database.

        Only the first page of query results is returned; pagination is not
        followed.

        Args:
            database_id: Notion database ID, or None for the default
            filter: Optional Notion filter object, passed through unchanged

        Returns:
            List of RemoteRecord

        Raises:
            MissingCredentialError: If no Notion token is configured
            APIResponseError: If Notion API request fails
        """
        client = await self.provider.get_client()

        query = {"database_id": self._resolve_database_id(database_id)}
        if filter:
            query["filter"] = filter

        try:
            response = await client.databases.query(**query)
        except APIResponseError as e:
            logger.error(f"Notion API error fetching records from database {query['database_id']}: {e}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error fetching records: {e}", exc_info=True)
            raise

        if response.get("has_more"):
            logger.warning(
                f"Database {query['database_id']} has more results than one page; "
                f"only the first page was fetched"
            )

        return [RemoteRecord.from_api_response(page) for page in response.get("results", [])]

    async def push_record(
        self,
        database_id: Optional[str],
        properties: Dict[str, Any],
        page_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create or update a page in Notion.

        Args:
            database_id: Notion database ID for creation, or None for the default
            properties: Notion page properties
            page_id: Existing page to update; None creates a new page

        Returns:
            The raw Notion page object

        Raises:
            MissingCredentialError: If no Notion token is configured
            APIResponseError: If Notion API request fails
        """
        client = await self.provider.get_client()

        try:
            if page_id:
                logger.info(f"Updating Notion page: {page_id}")
                return await client.pages.update(
                    page_id=page_id,
                    properties=properties
                )

            target_database_id = self._resolve_database_id(database_id)
            logger.info(f"Creating Notion page in database: {target_database_id}")
            return await client.pages.create(
                parent={"database_id": target_database_id},
                properties=properties
            )

        except APIResponseError as e:
            action = f"updating page {page_id}" if page_id else "creating page"
            logger.error(f"Notion API error {action}: {e}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error pushing record: {e}", exc_info=True)
            raise

    async def sync_records(
        self,
        database_id: Optional[str] = None,
        direction: str = PULL,
        mcp_records: Optional[Sequence[LocalRecord]] = None
    ) -> SyncResult:
        """
        Sync records between the caller and Notion.

        Pull failures abort the whole sync. Push failures are recorded per
        record in the result and the remaining records are still pushed.

        Args:
            database_id: Notion database ID, or None for the default
            direction: 'pull', 'push' or 'bidirectional'
            mcp_records: Local records to push, in order

        Returns:
            SyncResult with pulled pages, push responses and push errors

        Raises:
            ValueError: If direction is not recognized
            MissingCredentialError: If no Notion token is configured
            APIResponseError: If the pull phase fails
        """
        if direction not in DIRECTIONS:
            raise ValueError(f"Invalid sync direction: {direction}. Expected one of {', '.join(DIRECTIONS)}")

        records = list(mcp_records or [])

        # Fail the whole call on a missing credential, not once per record.
        # A push with nothing to push never needs the client.
        if direction != PUSH or records:
            await self.provider.get_client()

        results = SyncResult()

        if direction in (PULL, BIDIRECTIONAL):
            results.pulled = await self.fetch_records(database_id)
            logger.info(f"Pulled {len(results.pulled)} records from Notion")

        if direction in (PUSH, BIDIRECTIONAL):
            for record in records:
                properties = record.properties if record.properties is not None else local_to_remote(record)
                try:
                    pushed = await self.push_record(
                        database_id,
                        properties,
                        record.notion_page_id or None
                    )
                    results.pushed.append(pushed)
                except Exception as e:
                    results.errors.append(SyncError(record=record, error=str(e)))

            logger.info(
                f"Pushed {len(results.pushed)} records to Notion, "
                f"{len(results.errors)} failed"
            )

        return results
