"""Rendering of Notion rich-text spans to inline markdown."""

import logging
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger('notion_markdown_sync.converters.rich_text')


def plain_text(spans: Optional[Iterable[Dict[str, Any]]]) -> str:
    """Concatenate the plain text of all spans."""
    if not spans:
        return ''
    return ''.join(span.get('plain_text', '') for span in spans)


def _wrap(text: str, marker_open: str, marker_close: Optional[str] = None) -> str:
    """
    Wrap text in markers, keeping surrounding whitespace outside of them.

    ``** bold**`` is not bold in most renderers, so leading and trailing
    whitespace is moved outside the markers.
    """
    if marker_close is None:
        marker_close = marker_open

    stripped = text.strip()
    if not stripped:
        return text

    leading = text[:len(text) - len(text.lstrip())]
    trailing = text[len(text.rstrip()):]
    return f"{leading}{marker_open}{stripped}{marker_close}{trailing}"


def render_span(span: Dict[str, Any]) -> str:
    """
    Render one rich-text span with its annotations.

    Args:
        span: Rich-text object (text, mention or equation)

    Returns:
        Inline markdown
    """
    span_type = span.get('type', 'text')

    if span_type == 'equation':
        expression = (span.get('equation') or {}).get('expression') or span.get('plain_text', '')
        return f"${expression}$"

    text = span.get('plain_text')
    if text is None:
        text = ((span.get('text') or {}).get('content')) or ''

    if not text:
        return ''

    annotations = span.get('annotations') or {}

    if annotations.get('code'):
        text = _wrap(text, '`')
    if annotations.get('bold'):
        text = _wrap(text, '**')
    if annotations.get('italic'):
        text = _wrap(text, '_')
    if annotations.get('strikethrough'):
        text = _wrap(text, '~~')
    if annotations.get('underline'):
        text = _wrap(text, '<u>', '</u>')

    href = span.get('href') or (((span.get('text') or {}).get('link')) or {}).get('url')
    if href:
        text = f"[{text}]({href})"

    return text


def rich_text_to_markdown(spans: Optional[Iterable[Dict[str, Any]]]) -> str:
    """
    Render a rich-text array to inline markdown.

    Args:
        spans: Rich-text objects, or None

    Returns:
        Inline markdown (empty string for no spans)
    """
    if not spans:
        return ''
    return ''.join(render_span(span) for span in spans)


__all__ = ['plain_text', 'render_span', 'rich_text_to_markdown']
