"""Notion REST API client with retry logic and cursor pagination."""

import json
import logging
import time
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from rate_limiter import RateLimiter

logger = logging.getLogger('notion_markdown_sync.client')

DEFAULT_BASE_URL = 'https://api.notion.com/v1'
DEFAULT_API_VERSION = '2022-06-28'
MAX_PAGE_SIZE = 100


class NotionClient:
    """Notion REST API client with bearer authentication, retries and pagination."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_factor: float = 2.0,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Notion client with authentication and retry configuration.

        Args:
            api_key: Notion integration token
            base_url: API root (e.g., "https://api.notion.com/v1")
            api_version: Value of the Notion-Version header
            timeout: HTTP request timeout in seconds
            max_retries: Maximum retry attempts for transient errors
            retry_backoff_factor: Exponential backoff factor
            rate_limiter: Optional gate applied before every request
            session: Optional pre-built session (mainly for tests)
        """
        if not api_key:
            raise ValueError("Notion client requires an api_key")

        self.base_url = base_url.rstrip('/') + '/'
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limiter = rate_limiter

        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {api_key}',
            'Notion-Version': api_version,
            'Content-Type': 'application/json',
        })

        # Database queries are POSTs, so POST is retried as well
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=retry_backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS", "POST"],
            respect_retry_after_header=True
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        logger.debug(f"Client configured for {self.base_url} with timeout={timeout}s, "
                     f"max_retries={max_retries}, backoff_factor={retry_backoff_factor}")

    def _make_request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """
        Make an HTTP request to the Notion API and decode the JSON body.

        Args:
            method: HTTP method (GET, POST)
            endpoint: Path relative to the API root (e.g., "blocks/<id>/children")
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON response

        Raises:
            requests.exceptions.HTTPError: For HTTP errors
            requests.exceptions.Timeout: For timeout errors
            requests.exceptions.RequestException: For other request errors
        """
        if self.rate_limiter is not None:
            self.rate_limiter.acquire()

        url = urljoin(self.base_url, endpoint.lstrip('/'))

        start_time = time.time()
        logger.debug(f"API Request: {method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            elapsed = time.time() - start_time
            logger.debug(f"API Response: {response.status_code} {url} ({elapsed:.3f}s)")

            response.raise_for_status()
            return response.json()

        except requests.exceptions.Timeout:
            logger.error(f"Request timeout after {self.timeout}s: {method} {url}")
            raise

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"HTTP Error {status_code}: {method} {url}")

            if e.response is not None:
                try:
                    error_data = e.response.json()
                    logger.error(f"Error details: {json.dumps(error_data, indent=2)}")
                except ValueError:
                    logger.error(f"Error response: {e.response.text[:500]}")

            raise

        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {method} {url} - {str(e)}")
            raise

    def _paginate(self, method: str, endpoint: str, body: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
        """Yield results across all pages of a cursor-paginated endpoint."""
        cursor = None

        while True:
            if method == 'POST':
                payload = dict(body or {})
                payload['page_size'] = MAX_PAGE_SIZE
                if cursor:
                    payload['start_cursor'] = cursor
                data = self._make_request('POST', endpoint, json=payload)
            else:
                params = {'page_size': MAX_PAGE_SIZE}
                if cursor:
                    params['start_cursor'] = cursor
                data = self._make_request('GET', endpoint, params=params)

            yield from data.get('results', [])

            if not data.get('has_more'):
                break

            cursor = data.get('next_cursor')
            if not cursor:
                break

    def query_database(self, database_id: str, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Fetch all pages of a database, optionally filtered server-side.

        Args:
            database_id: Notion database id
            filter: Optional Notion filter object

        Returns:
            List of raw page records
        """
        body = {'filter': filter} if filter else {}
        pages = list(self._paginate('POST', f'databases/{database_id}/query', body))
        logger.info(f"Fetched {len(pages)} pages from database {database_id}")
        return pages

    def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        """
        Fetch all direct children of a block or page.

        Args:
            block_id: Block or page id

        Returns:
            List of raw block records in document order
        """
        children = list(self._paginate('GET', f'blocks/{block_id}/children'))
        logger.debug(f"Fetched {len(children)} child blocks of {block_id}")
        return children

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'NotionClient':
        """
        Initialize Notion client from configuration dictionary.

        Args:
            config: Configuration dictionary with notion and advanced settings

        Returns:
            NotionClient instance
        """
        notion_config = config.get('notion', {})
        advanced_config = config.get('advanced', {})

        rate_limit = float(advanced_config.get('rate_limit', 0.0))

        return cls(
            api_key=notion_config.get('api_key'),
            base_url=notion_config.get('base_url', DEFAULT_BASE_URL),
            api_version=notion_config.get('api_version', DEFAULT_API_VERSION),
            timeout=advanced_config.get('request_timeout', 30),
            max_retries=advanced_config.get('max_retries', 3),
            retry_backoff_factor=advanced_config.get('retry_backoff_factor', 2.0),
            rate_limiter=RateLimiter(rate_limit) if rate_limit > 0 else None
        )


__all__ = ['NotionClient']
