"""Abstract base fetcher interface and the fetch error taxonomy."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from models import Block


class FetcherError(Exception):
    """Base exception for fetcher-related errors."""
    pass


class NetworkFailure(FetcherError):
    """A remote call (listing, block fetch, image download) failed."""
    pass


class MalformedPageData(FetcherError):
    """A page record lacks a property the pipeline cannot do without."""
    pass


class BaseFetcher(ABC):
    """Abstract base class for remote content sources."""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None):
        """
        Initialize base fetcher with configuration and logger.

        Args:
            config: Configuration dictionary
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.config = config
        self.logger = logger or logging.getLogger('notion_markdown_sync.fetcher')

    @abstractmethod
    def list_pages(self, published_only: bool = False) -> List[Dict[str, Any]]:
        """
        Fetch raw page records from the content database.

        Args:
            published_only: Ask the service to return only published pages

        Returns:
            List of raw, loosely-typed page records
        """
        pass

    @abstractmethod
    def get_block_tree(self, page_id: str) -> List[Block]:
        """
        Fetch the complete block tree of a page.

        Args:
            page_id: Page identifier

        Returns:
            Top-level blocks in document order, children populated
        """
        pass
