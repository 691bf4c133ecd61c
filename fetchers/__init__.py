"""Fetchers package for retrieving pages and block trees from Notion."""

from .base_fetcher import BaseFetcher, FetcherError, MalformedPageData, NetworkFailure
from .page_metadata import PageMetadataExtractor, resolve_locale, sanitize_slug
from .api_fetcher import NotionFetcher, PUBLISHED_FILTER

__all__ = [
    'BaseFetcher',
    'FetcherError',
    'MalformedPageData',
    'NetworkFailure',
    'NotionFetcher',
    'PUBLISHED_FILTER',
    'PageMetadataExtractor',
    'resolve_locale',
    'sanitize_slug'
]
