"""Normalization of raw Notion page records into Page values."""

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse

from models import Page
from .base_fetcher import MalformedPageData

logger = logging.getLogger('notion_markdown_sync.fetcher.page_metadata')

DEFAULT_TITLE = 'Untitled'
DEFAULT_COLLECTION = 'etc'
DEFAULT_CATEGORY = 'unknown'
DOCS_COLLECTION = 'docs'


def sanitize_slug(text: str) -> str:
    """
    Convert a title into a URL-safe slug.

    Word characters are kept (including non-ASCII letters), everything else
    except whitespace and hyphens is dropped, and whitespace runs become
    single hyphens.

    Args:
        text: Title or other free text

    Returns:
        Slug, possibly empty when the text has no word characters
    """
    slug = text.strip().lower()
    slug = re.sub(r'[^\w\s-]', '', slug)
    slug = re.sub(r'[\s_]+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def resolve_locale(collection: str, declared_locale: str, default_locale: str) -> str:
    """
    Resolve the output locale of a page.

    Docs written in the default locale live at the collection root, so their
    locale collapses to the empty string. Every other page keeps its declared
    locale unchanged.
    """
    if collection == DOCS_COLLECTION and declared_locale == default_locale:
        return ''
    return declared_locale


class PageMetadataExtractor:
    """Turns the loosely-typed property bag of a page record into a Page."""

    def __init__(self, default_locale: str = 'en', logger: Optional[logging.Logger] = None):
        """
        Args:
            default_locale: Locale whose docs are written at the collection root
            logger: Logger instance (optional)
        """
        self.default_locale = default_locale
        self.logger = logger or logging.getLogger('notion_markdown_sync.fetcher.page_metadata')

    def extract(self, record: Dict[str, Any]) -> Page:
        """
        Extract a Page from a raw page record.

        Args:
            record: Raw page object as returned by a database query

        Returns:
            Normalized, immutable Page

        Raises:
            MalformedPageData: If the record has no id or no title span
        """
        page_id = record.get('id')
        if not page_id:
            raise MalformedPageData("Page record has no id")

        properties = record.get('properties') or {}

        title = self._extract_title(page_id, properties)
        slug = self._first_plain_text(properties.get('slug'), 'rich_text') or sanitize_slug(title)
        if not slug:
            self.logger.warning(f"Page {page_id} title '{title}' yields an empty slug, using the page id")
            slug = page_id

        collection = self._select_name(properties.get('collection')) or DEFAULT_COLLECTION
        declared_locale = self._select_name(properties.get('locale')) or ''

        page = Page(
            id=page_id,
            title=title,
            slug=slug,
            type=record.get('object', 'page'),
            cover=self._extract_cover(record.get('cover')),
            tags=tuple(self._extract_tags(properties.get('tags'))),
            collection=collection,
            locale=resolve_locale(collection, declared_locale, self.default_locale),
            category=self._select_name(properties.get('category')) or DEFAULT_CATEGORY,
            status=self._select_name(properties.get('status')),
            publish_date=self._extract_publish_date(properties.get('publish_date')),
            description=self._first_plain_text(properties.get('description'), 'rich_text'),
            created_time=self._parse_timestamp(record.get('created_time')),
            last_edited_time=self._parse_timestamp(record.get('last_edited_time')),
            icon=record.get('icon'),
            archived=bool(record.get('archived', False))
        )

        self.logger.debug(f"Extracted page metadata: {page.title} [{page.id}]")
        return page

    def extract_all(self, records: List[Dict[str, Any]]) -> List[Page]:
        """Extract every record, preserving order."""
        return [self.extract(record) for record in records]

    def _extract_title(self, page_id: str, properties: Dict[str, Any]) -> str:
        """Read the first span of the title property."""
        title_property = properties.get('title')
        if title_property is None:
            title_property = next(
                (prop for prop in properties.values()
                 if isinstance(prop, dict) and prop.get('type') == 'title'),
                None
            )

        if title_property is None:
            raise MalformedPageData(f"Page {page_id} has no title property")

        spans = title_property.get('title')
        if not spans:
            raise MalformedPageData(f"Page {page_id} has an empty title")

        return spans[0].get('plain_text') or DEFAULT_TITLE

    @staticmethod
    def _first_plain_text(prop: Optional[Dict[str, Any]], key: str) -> Optional[str]:
        """Plain text of the first rich-text span of a property, if any."""
        if not prop:
            return None
        spans = prop.get(key) or []
        if not spans:
            return None
        return spans[0].get('plain_text') or None

    @staticmethod
    def _select_name(prop: Optional[Dict[str, Any]]) -> Optional[str]:
        """Name of the selected option of a select property."""
        if not prop:
            return None
        selected = prop.get('select')
        if not selected:
            return None
        return selected.get('name') or None

    @staticmethod
    def _extract_tags(prop: Optional[Dict[str, Any]]) -> List[str]:
        """Tag names in source order; duplicates are kept."""
        if not prop:
            return []
        return [tag.get('name', '') for tag in prop.get('multi_select') or []]

    @staticmethod
    def _extract_cover(cover: Optional[Dict[str, Any]]) -> Optional[str]:
        """External cover URL first, then the hosted file URL."""
        if not cover:
            return None
        external = cover.get('external') or {}
        hosted = cover.get('file') or {}
        return external.get('url') or hosted.get('url') or None

    def _extract_publish_date(self, prop: Optional[Dict[str, Any]]) -> Optional[date]:
        """Start date of the publish_date property."""
        if not prop:
            return None
        date_value = prop.get('date') or {}
        start = date_value.get('start')
        if not start:
            return None
        parsed = self._parse_timestamp(start)
        return parsed.date() if parsed else None

    def _parse_timestamp(self, value: Optional[str]) -> Optional[datetime]:
        """Parse an ISO 8601 string, returning None when it is absent or invalid."""
        if not value:
            return None
        try:
            return isoparse(value)
        except (ValueError, TypeError) as e:
            self.logger.warning(f"Failed to parse date string '{value}': {str(e)}")
            return None


__all__ = ['PageMetadataExtractor', 'sanitize_slug', 'resolve_locale']
