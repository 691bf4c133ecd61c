"""API fetcher retrieving database pages and block trees from the Notion REST API."""

import logging
from typing import Any, Dict, List, Optional

import requests

from models import Block
from notion_api import NotionClient
from .base_fetcher import BaseFetcher, NetworkFailure

logger = logging.getLogger('notion_markdown_sync.fetcher.api')

PUBLISHED_FILTER = {
    "and": [
        {
            "property": "status",
            "select": {
                "equals": "published"
            }
        },
    ]
}

# Child pages are synced as pages of their own, never inlined
NON_DESCENDING_TYPES = {'child_page', 'child_database'}


class NotionFetcher(BaseFetcher):
    """Fetches Notion database pages and their block trees via the REST API."""

    def __init__(
        self,
        config: Dict[str, Any],
        logger: Optional[logging.Logger] = None,
        client: Optional[NotionClient] = None
    ):
        """
        Initialize API fetcher with configuration.

        Args:
            config: Configuration dictionary with notion and advanced settings
            logger: Logger instance (optional)
            client: Pre-built NotionClient (optional, built from config otherwise)
        """
        super().__init__(config, logger)

        self.database_id = config.get('notion', {}).get('database_id')
        if not self.database_id:
            raise ValueError("notion.database_id is required for the Notion fetcher")

        self.client = client or NotionClient.from_config(config)
        self.api_calls = 0

        self.logger.debug(f"Initialized NotionFetcher for database {self.database_id}")

    def list_pages(self, published_only: bool = False) -> List[Dict[str, Any]]:
        """
        Query the database for pages.

        Args:
            published_only: Only return pages whose status is "published"

        Returns:
            List of raw page records

        Raises:
            NetworkFailure: If the query fails
        """
        query_filter = PUBLISHED_FILTER if published_only else None
        self.logger.info(f"Querying database {self.database_id} (published only: {published_only})")

        try:
            self.api_calls += 1
            return self.client.query_database(self.database_id, filter=query_filter)
        except requests.exceptions.RequestException as e:
            raise NetworkFailure(f"Failed to query database {self.database_id}: {e}") from e

    def get_block_tree(self, page_id: str) -> List[Block]:
        """
        Fetch a page's blocks with all nested children.

        Args:
            page_id: Page identifier

        Returns:
            Top-level blocks in document order

        Raises:
            NetworkFailure: If any children request fails
        """
        blocks = self._fetch_children(page_id)
        self.logger.debug(f"Fetched block tree for page {page_id} ({len(blocks)} top-level blocks)")
        return blocks

    def _fetch_children(self, block_id: str) -> List[Block]:
        """Recursively fetch and build the children of a block."""
        try:
            self.api_calls += 1
            raw_children = self.client.list_block_children(block_id)
        except requests.exceptions.RequestException as e:
            raise NetworkFailure(f"Failed to fetch blocks of {block_id}: {e}") from e

        blocks = []
        for raw in raw_children:
            children = ()
            if raw.get('has_children') and raw.get('type') not in NON_DESCENDING_TYPES:
                children = tuple(self._fetch_children(raw['id']))
            blocks.append(Block.from_api(raw, children))

        return blocks
