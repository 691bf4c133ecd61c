"""Shared fixtures for building Notion API records."""

import pytest


def _span(text, **annotations):
    return {
        'type': 'text',
        'text': {'content': text, 'link': None},
        'plain_text': text,
        'href': None,
        'annotations': {
            'bold': False,
            'italic': False,
            'strikethrough': False,
            'underline': False,
            'code': False,
            'color': 'default',
            **annotations
        }
    }


@pytest.fixture
def span():
    """Factory for a rich-text span."""
    return _span


@pytest.fixture
def make_block():
    """Factory for a raw block record as returned by blocks/{id}/children."""
    counter = {'n': 0}

    def factory(block_type, payload=None, has_children=False, block_id=None):
        counter['n'] += 1
        return {
            'object': 'block',
            'id': block_id or f'block-{counter["n"]}',
            'type': block_type,
            'has_children': has_children,
            block_type: payload or {}
        }

    return factory


@pytest.fixture
def make_record():
    """Factory for a raw page record as returned by a database query."""

    def factory(
        title='Release Notes',
        page_id='page-1',
        collection='blog',
        locale='en',
        slug=None,
        tags=(),
        category=None,
        status=None,
        cover=None,
        publish_date=None,
        description=None
    ):
        properties = {
            'title': {'id': 'title', 'type': 'title', 'title': [_span(title)] if title is not None else []},
            'collection': {'type': 'select', 'select': {'name': collection} if collection else None},
            'locale': {'type': 'select', 'select': {'name': locale} if locale else None},
            'tags': {'type': 'multi_select', 'multi_select': [{'name': tag} for tag in tags]},
            'category': {'type': 'select', 'select': {'name': category} if category else None},
            'status': {'type': 'select', 'select': {'name': status} if status else None},
            'slug': {'type': 'rich_text', 'rich_text': [_span(slug)] if slug else []},
            'description': {'type': 'rich_text', 'rich_text': [_span(description)] if description else []},
            'publish_date': {'type': 'date', 'date': {'start': publish_date} if publish_date else None},
        }
        return {
            'object': 'page',
            'id': page_id,
            'created_time': '2024-01-02T03:04:05.000Z',
            'last_edited_time': '2024-02-03T04:05:06.000Z',
            'cover': cover,
            'icon': {'type': 'emoji', 'emoji': '📝'},
            'archived': False,
            'properties': properties
        }

    return factory


@pytest.fixture
def config(tmp_path):
    """Minimal validated configuration writing into tmp_path."""
    return {
        'notion': {
            'api_key': 'secret_test',
            'database_id': 'db-1',
            'base_url': 'https://api.notion.com/v1',
            'api_version': '2022-06-28',
        },
        'sync': {
            'published_only': False,
            'throttle_ms': 334,
            'default_doc_locale': 'en',
            'show_progress': False,
        },
        'export': {
            'content_root': str(tmp_path / 'content'),
            'images_directory': str(tmp_path / 'images'),
        },
        'converters': {
            'image_alt_fallback': 'CDV Group Valve Image is loading',
        },
        'advanced': {
            'request_timeout': 30,
            'max_retries': 3,
            'retry_backoff_factor': 2.0,
            'rate_limit': 0.0,
        },
        'logging': {},
    }
