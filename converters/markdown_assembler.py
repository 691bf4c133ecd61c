"""Assembly of a page's block tree into one markdown document body."""

import logging
from typing import Iterable, List, Optional

from models import Block
from .block_converter import LIST_TYPES
from .transform_registry import BlockTransformRegistry

logger = logging.getLogger('notion_markdown_sync.converters.markdown_assembler')


class MarkdownAssembler:
    """
    Walks a block tree depth-first and concatenates fragments in document order.

    Fragments are neither reordered, deduplicated nor cached. Consecutive list
    items are separated by a single newline, every other pair of blocks by a
    blank line.
    """

    def __init__(self, registry: BlockTransformRegistry, logger: Optional[logging.Logger] = None):
        """
        Args:
            registry: Transform registry applied to every node
            logger: Logger instance (optional)
        """
        self.registry = registry
        self.logger = logger or logging.getLogger('notion_markdown_sync.converters.markdown_assembler')

    def assemble(self, blocks: Iterable[Block]) -> str:
        """
        Convert a block tree to a markdown body.

        Args:
            blocks: Top-level blocks of a page

        Returns:
            Markdown body, or an empty string when there is no content
        """
        return self._render_blocks(list(blocks)).strip('\n')

    def _render_blocks(self, blocks: List[Block]) -> str:
        parts: List[str] = []
        previous_type: Optional[str] = None

        for block in blocks:
            rendered = self._render_block(block)
            if not rendered:
                continue

            if parts:
                tight = block.type in LIST_TYPES and previous_type in LIST_TYPES
                parts.append('\n' if tight else '\n\n')

            parts.append(rendered)
            previous_type = block.type

        return ''.join(parts)

    def _render_block(self, block: Block) -> str:
        fragment = self.registry.transform(block)

        converter = self.registry.converter
        if not block.children or converter.renders_own_children(block):
            return converter.nest(block, fragment, '')

        children_markdown = self._render_blocks(list(block.children))
        return converter.nest(block, fragment, children_markdown)


__all__ = ['MarkdownAssembler']
