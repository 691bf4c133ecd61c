"""YAML frontmatter generation for synced pages."""

from datetime import date, datetime
from typing import Any, Dict

import yaml

from models import Page

FRONTMATTER_FIELDS = (
    'id', 'type', 'slug', 'title', 'cover', 'coverAlt', 'coverFileName',
    'tags', 'created_time', 'last_edited_time', 'icon', 'archived',
    'category', 'locale', 'status', 'publish_date', 'description',
    'reading_time',
)


class PlainString(str):
    """A string emitted without forced quoting."""


class FrontmatterDumper(yaml.SafeDumper):
    """SafeDumper that double-quotes strings and writes dates as YAML timestamps."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_quoted(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    return dumper.represent_scalar('tag:yaml.org,2002:str', value, style='"')


def _represent_plain(dumper: yaml.SafeDumper, value: PlainString) -> yaml.ScalarNode:
    return dumper.represent_scalar('tag:yaml.org,2002:str', str(value))


def _represent_datetime(dumper: yaml.SafeDumper, value: datetime) -> yaml.ScalarNode:
    return dumper.represent_scalar('tag:yaml.org,2002:timestamp', format_timestamp(value))


def _represent_date(dumper: yaml.SafeDumper, value: date) -> yaml.ScalarNode:
    return dumper.represent_scalar('tag:yaml.org,2002:timestamp', value.isoformat())


FrontmatterDumper.add_representer(str, _represent_quoted)
FrontmatterDumper.add_representer(PlainString, _represent_plain)
FrontmatterDumper.add_representer(datetime, _represent_datetime)
FrontmatterDumper.add_representer(date, _represent_date)


def format_timestamp(value: datetime) -> str:
    """ISO 8601 with a ``Z`` suffix for UTC, the way Notion reports times."""
    text = value.isoformat()
    if text.endswith('+00:00'):
        text = text[:-len('+00:00')] + 'Z'
    return text


def build_frontmatter_fields(
    page: Page,
    reading_time: str,
    cover_file_name: str = ''
) -> Dict[str, Any]:
    """
    Collect the frontmatter values of a page in their fixed order.

    Args:
        page: Page metadata
        reading_time: Estimated reading time of the body
        cover_file_name: Local file name of the downloaded cover, if any

    Returns:
        Ordered mapping of frontmatter fields
    """
    return {
        'id': page.id,
        'type': page.type,
        'slug': page.slug,
        'title': page.title,
        'cover': page.cover or '',
        'coverAlt': page.title,
        'coverFileName': cover_file_name or '',
        'tags': list(page.tags),
        'created_time': page.created_time,
        'last_edited_time': page.last_edited_time,
        'icon': _plain_strings(page.icon),
        'archived': page.archived,
        'category': PlainString(page.category),
        'locale': page.locale,
        'status': page.status or '',
        'publish_date': page.publish_date if page.publish_date else False,
        'description': page.description or '',
        'reading_time': reading_time,
    }


def _plain_strings(value: Any) -> Any:
    """Icon values are written plain so emoji appear as themselves, not as escapes."""
    if isinstance(value, dict):
        return {key: _plain_strings(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain_strings(item) for item in value]
    if isinstance(value, str):
        return PlainString(value)
    return value


def _plain_keys(value: Any) -> Any:
    """Mapping keys stay unquoted, only values are double-quoted."""
    if isinstance(value, dict):
        return {PlainString(key): _plain_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain_keys(item) for item in value]
    return value


def render_frontmatter(fields: Dict[str, Any]) -> str:
    """Render frontmatter fields as a ``---`` delimited YAML block."""
    yaml_str = yaml.dump(
        _plain_keys(fields),
        Dumper=FrontmatterDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=4096
    )
    return f"---\n{yaml_str}---"


def render_document(page: Page, body: str, reading_time: str, cover_file_name: str = '') -> str:
    """
    Build the full document: frontmatter, a blank line, then the body.

    Args:
        page: Page metadata
        body: Assembled markdown body
        reading_time: Estimated reading time
        cover_file_name: Local cover file name, if any

    Returns:
        Complete file contents
    """
    frontmatter = render_frontmatter(build_frontmatter_fields(page, reading_time, cover_file_name))
    return f"{frontmatter}\n\n{body}\n"


__all__ = [
    'FRONTMATTER_FIELDS',
    'build_frontmatter_fields',
    'format_timestamp',
    'render_document',
    'render_frontmatter'
]
