"""Data models for the Notion to Markdown sync pipeline."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger('notion_markdown_sync')


@dataclass(frozen=True)
class Page:
    """A synchronized Notion page with its normalized metadata.

    Instances are created once by the metadata extractor and never mutated.
    """

    id: str
    title: str
    slug: str
    type: str = 'page'
    cover: Optional[str] = None
    tags: Tuple[str, ...] = ()
    collection: str = 'etc'
    locale: str = ''
    category: str = 'unknown'
    status: Optional[str] = None
    publish_date: Optional[date] = None
    description: Optional[str] = None
    created_time: Optional[datetime] = None
    last_edited_time: Optional[datetime] = None
    icon: Optional[Dict[str, Any]] = None
    archived: bool = False

    @property
    def has_cover(self) -> bool:
        """Check if the page declares a cover image."""
        return bool(self.cover)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize page to dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'type': self.type,
            'cover': self.cover,
            'tags': list(self.tags),
            'collection': self.collection,
            'locale': self.locale,
            'category': self.category,
            'status': self.status,
            'publish_date': self.publish_date.isoformat() if self.publish_date else None,
            'description': self.description,
            'created_time': self.created_time.isoformat() if self.created_time else None,
            'last_edited_time': self.last_edited_time.isoformat() if self.last_edited_time else None,
            'icon': self.icon,
            'archived': self.archived
        }


@dataclass(frozen=True)
class Block:
    """One node of a page's content tree.

    ``payload`` is the type-specific part of the API record (for an image
    block, the value under the ``image`` key). Children keep document order.
    """

    id: str
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    children: Tuple['Block', ...] = ()
    has_children: bool = False

    @classmethod
    def from_api(cls, raw: Dict[str, Any], children: Tuple['Block', ...] = ()) -> 'Block':
        """Build a block from a raw Notion block record."""
        block_type = raw.get('type', 'unsupported')
        payload = raw.get(block_type) or {}
        return cls(
            id=raw.get('id', ''),
            type=block_type,
            payload=payload,
            children=tuple(children),
            has_children=bool(raw.get('has_children', False))
        )

    def walk(self):
        """Yield this block and all descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class SyncStatus:
    """Per-page outcome of a sync run, used for reporting."""

    page_id: str
    page_title: str
    status: str  # "written", "skipped"
    output_path: Optional[str] = None
    reading_time: Optional[str] = None
    timestamp: Optional[str] = None

    def __post_init__(self) -> None:
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = datetime.utcnow().isoformat()


__all__ = [
    'Page',
    'Block',
    'SyncStatus'
]
