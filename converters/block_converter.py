"""Generic Notion block to markdown conversion.

Each supported block type has a ``convert_<type>`` method returning the
markdown fragment for the block itself. How a block's children attach to
that fragment is decided by :meth:`BlockConverter.nest`, so the assembler
can stay a plain tree walk.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from models import Block
from .rich_text import plain_text, rich_text_to_markdown

logger = logging.getLogger('notion_markdown_sync.converters.block_converter')

LIST_TYPES = {'bulleted_list_item', 'numbered_list_item', 'to_do'}
INDENT = '    '


def indent_lines(text: str, prefix: str = INDENT) -> str:
    """Prefix every non-empty line of text."""
    return '\n'.join(prefix + line if line else line for line in text.split('\n'))


def quote_lines(text: str) -> str:
    """Turn text into a markdown blockquote."""
    return '\n'.join(f"> {line}" if line else '>' for line in text.split('\n'))


def media_url(payload: Dict[str, Any]) -> Optional[str]:
    """URL of a file-like payload, hosted file first."""
    hosted = payload.get('file') or {}
    external = payload.get('external') or {}
    return hosted.get('url') or external.get('url')


class BlockConverter:
    """Converts single Notion blocks to markdown fragments."""

    def __init__(self, logger: Optional[logging.Logger] = None, config: Optional[Dict[str, Any]] = None):
        """Initialize block converter with logger and configuration."""
        self.logger = logger or logging.getLogger('notion_markdown_sync.converters.block_converter')
        self.config = config or {}
        self.unsupported_types: List[str] = []

    def convert(self, block: Block) -> str:
        """
        Convert one block, without its children.

        Args:
            block: Block to convert

        Returns:
            Markdown fragment (empty for unsupported or empty blocks)
        """
        handler = getattr(self, f'convert_{block.type}', None)
        if handler is None:
            self.logger.debug(f"Unsupported block type '{block.type}' ({block.id}), skipping")
            if block.type not in self.unsupported_types:
                self.unsupported_types.append(block.type)
            return ''
        return handler(block)

    def rich_text(self, spans: Optional[List[Dict[str, Any]]]) -> str:
        """Render rich-text spans to inline markdown."""
        return rich_text_to_markdown(spans)

    def renders_own_children(self, block: Block) -> bool:
        """True when ``convert`` already consumed the block's children."""
        return block.type == 'table'

    def nest(self, block: Block, fragment: str, children_markdown: str) -> str:
        """
        Attach rendered children to a block's own fragment.

        Args:
            block: Parent block
            fragment: Markdown of the parent block itself
            children_markdown: Assembled markdown of the children

        Returns:
            Combined markdown
        """
        if not children_markdown:
            if block.type == 'toggle':
                return self._details(fragment, '')
            return fragment

        if block.type in LIST_TYPES:
            return f"{fragment}\n{indent_lines(children_markdown)}"

        if block.type == 'toggle':
            return self._details(fragment, children_markdown)

        if block.type in ('quote', 'callout'):
            return f"{fragment}\n>\n{quote_lines(children_markdown)}"

        if not fragment:
            return children_markdown

        return f"{fragment}\n\n{children_markdown}"

    @staticmethod
    def _details(summary: str, body: str) -> str:
        """Render an HTML disclosure widget for toggles."""
        if body:
            return f"<details>\n<summary>{summary}</summary>\n\n{body}\n\n</details>"
        return f"<details>\n<summary>{summary}</summary>\n</details>"

    # Text blocks

    def convert_paragraph(self, block: Block) -> str:
        return self.rich_text(block.payload.get('rich_text'))

    def _heading(self, block: Block, level: int) -> str:
        text = self.rich_text(block.payload.get('rich_text'))
        if not text:
            return ''
        return f"{'#' * level} {text}"

    def convert_heading_1(self, block: Block) -> str:
        return self._heading(block, 1)

    def convert_heading_2(self, block: Block) -> str:
        return self._heading(block, 2)

    def convert_heading_3(self, block: Block) -> str:
        return self._heading(block, 3)

    def convert_bulleted_list_item(self, block: Block) -> str:
        return f"- {self.rich_text(block.payload.get('rich_text'))}"

    def convert_numbered_list_item(self, block: Block) -> str:
        # Renderers number consecutive "1." items themselves
        return f"1. {self.rich_text(block.payload.get('rich_text'))}"

    def convert_to_do(self, block: Block) -> str:
        mark = 'x' if block.payload.get('checked') else ' '
        return f"- [{mark}] {self.rich_text(block.payload.get('rich_text'))}"

    def convert_toggle(self, block: Block) -> str:
        return self.rich_text(block.payload.get('rich_text'))

    def convert_quote(self, block: Block) -> str:
        return quote_lines(self.rich_text(block.payload.get('rich_text')))

    def convert_callout(self, block: Block) -> str:
        """Callouts become blockquotes led by their emoji icon."""
        text = self.rich_text(block.payload.get('rich_text'))
        icon = block.payload.get('icon') or {}
        if icon.get('type') == 'emoji' and icon.get('emoji'):
            text = f"{icon['emoji']} {text}"
        return quote_lines(text)

    def convert_code(self, block: Block) -> str:
        language = block.payload.get('language') or ''
        if language == 'plain text':
            language = 'text'
        code = plain_text(block.payload.get('rich_text'))
        return f"```{language}\n{code}\n```"

    def convert_equation(self, block: Block) -> str:
        expression = block.payload.get('expression', '')
        return f"$$\n{expression}\n$$"

    def convert_divider(self, block: Block) -> str:
        return '---'

    # Links

    def convert_bookmark(self, block: Block) -> str:
        url = block.payload.get('url')
        if not url:
            return ''
        caption = plain_text(block.payload.get('caption')) or url
        return f"[{caption}]({url})"

    def convert_link_preview(self, block: Block) -> str:
        url = block.payload.get('url')
        return f"[{url}]({url})" if url else ''

    def convert_link_to_page(self, block: Block) -> str:
        target = block.payload.get('page_id') or block.payload.get('database_id')
        return f"[{target}](https://www.notion.so/{target.replace('-', '')})" if target else ''

    def convert_child_page(self, block: Block) -> str:
        return block.payload.get('title', '')

    def convert_child_database(self, block: Block) -> str:
        return block.payload.get('title', '')

    # Media

    def convert_image(self, block: Block) -> str:
        url = media_url(block.payload) or ''
        alt = plain_text(block.payload.get('caption')) or 'image'
        return f"![{alt}]({url})"

    def _file_link(self, block: Block, default_name: str) -> str:
        url = media_url(block.payload)
        if not url:
            return ''
        name = (block.payload.get('name')
                or plain_text(block.payload.get('caption'))
                or self._name_from_url(url)
                or default_name)
        return f"[{name}]({url})"

    def convert_file(self, block: Block) -> str:
        return self._file_link(block, 'file')

    def convert_pdf(self, block: Block) -> str:
        return self._file_link(block, 'pdf')

    def convert_audio(self, block: Block) -> str:
        return self._file_link(block, 'audio')

    def convert_video(self, block: Block) -> str:
        return self._file_link(block, 'video')

    def convert_embed(self, block: Block) -> str:
        url = block.payload.get('url')
        return f"[{url}]({url})" if url else ''

    @staticmethod
    def _name_from_url(url: str) -> str:
        path = url.split('?', 1)[0].rstrip('/')
        return path.rsplit('/', 1)[-1] if '/' in path else ''

    # Layout

    def convert_column_list(self, block: Block) -> str:
        return ''

    def convert_column(self, block: Block) -> str:
        return ''

    def convert_synced_block(self, block: Block) -> str:
        return ''

    def convert_table_of_contents(self, block: Block) -> str:
        return ''

    def convert_breadcrumb(self, block: Block) -> str:
        return ''

    def convert_table(self, block: Block) -> str:
        """Render a table and its rows as a GFM table."""
        rows = [child for child in block.children if child.type == 'table_row']
        if not rows:
            return ''

        width = block.payload.get('table_width') or max(len(r.payload.get('cells', [])) for r in rows)
        body = []
        for row in rows:
            cells = [self._table_cell(cell) for cell in row.payload.get('cells', [])]
            cells += [''] * (width - len(cells))
            body.append(f"| {' | '.join(cells)} |")

        separator = f"|{'|'.join([' --- '] * width)}|"

        # GFM requires a header row, so header-less tables get an empty one
        if block.payload.get('has_column_header', False):
            lines = [body[0], separator] + body[1:]
        else:
            lines = [f"|{'|'.join(['   '] * width)}|", separator] + body

        return '\n'.join(lines)

    def convert_table_row(self, block: Block) -> str:
        cells = [self._table_cell(cell) for cell in block.payload.get('cells', [])]
        return f"| {' | '.join(cells)} |"

    def _table_cell(self, spans: List[Dict[str, Any]]) -> str:
        return re.sub(r'\s*\n\s*', ' ', self.rich_text(spans)).replace('|', '\\|')


__all__ = ['BlockConverter', 'LIST_TYPES', 'indent_lines', 'quote_lines', 'media_url']
