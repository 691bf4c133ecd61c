"""Converters package for Notion block tree to Markdown conversion."""

import logging
from typing import Any, Dict, Iterable, Optional

from models import Block
from .block_converter import BlockConverter
from .markdown_assembler import MarkdownAssembler
from .reading_time import estimate as estimate_reading_time
from .rich_text import plain_text, rich_text_to_markdown
from .transform_registry import BlockTransformRegistry, youtube_embed_url

logger = logging.getLogger('notion_markdown_sync.converters')


def blocks_to_markdown(
    blocks: Iterable[Block],
    config: Optional[Dict[str, Any]] = None,
    registry: Optional[BlockTransformRegistry] = None
) -> str:
    """
    Convenience function converting a block tree to a markdown body.

    Uses the default registry (custom embed, image and video rendering)
    unless one is given.

    Example:
        >>> from converters import blocks_to_markdown
        >>> body = blocks_to_markdown(fetcher.get_block_tree(page.id))
    """
    registry = registry or BlockTransformRegistry.with_defaults(config)
    return MarkdownAssembler(registry).assemble(blocks)


__all__ = [
    'blocks_to_markdown',
    'BlockConverter',
    'BlockTransformRegistry',
    'MarkdownAssembler',
    'estimate_reading_time',
    'plain_text',
    'rich_text_to_markdown',
    'youtube_embed_url'
]
