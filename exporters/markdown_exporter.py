"""Markdown file writer for synced Notion pages."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from models import Page
from .frontmatter import render_document
from .path_resolver import OutputPathResolver


class EmptyContent(Exception):
    """Raised when a page converts to an empty body. Nothing is written."""

    def __init__(self, page_id: str):
        super().__init__(f"No content for page {page_id}")
        self.page_id = page_id


class MarkdownExporter:
    """
    Writes converted pages to the content directory.

    Each page becomes one UTF-8 file made of the YAML frontmatter, a blank
    line and the markdown body. Existing files are overwritten.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        resolver: Optional[OutputPathResolver] = None,
        logger: Optional[logging.Logger] = None,
        output_dir: Optional[str] = None
    ):
        """
        Initialize the markdown exporter.

        Args:
            config: Configuration dictionary with export settings
            resolver: Output path resolver (built from config when missing)
            logger: Logger instance
            output_dir: Optional content root override (takes precedence over config)
        """
        self.config = config
        self.logger = logger or logging.getLogger('notion_markdown_sync.exporters.markdown_exporter')

        export_config = config.get('export', {})
        content_root = output_dir or export_config.get('content_root', 'src/content')
        self.resolver = resolver or OutputPathResolver(content_root, logger=self.logger)

        self.stats = {
            'pages_written': 0,
            'pages_empty': 0
        }

    def write_page(
        self,
        page: Page,
        body: str,
        reading_time: str,
        cover_file_name: str = ''
    ) -> Path:
        """
        Write one page to its resolved destination.

        Args:
            page: Page metadata
            body: Assembled markdown body
            reading_time: Estimated reading time
            cover_file_name: Local cover file name, if any

        Returns:
            Path of the written file

        Raises:
            EmptyContent: If the body is empty
        """
        if not body.strip():
            self.stats['pages_empty'] += 1
            raise EmptyContent(page.id)

        page_file = self.resolver.resolve_and_prepare(page.collection, page.locale, page.slug)
        full_content = render_document(page, body, reading_time, cover_file_name)
        page_file.write_text(full_content, encoding='utf-8')

        self.stats['pages_written'] += 1
        self.logger.debug(f"Wrote {page_file}")
        return page_file

    def get_stats(self) -> Dict[str, int]:
        """Get export statistics."""
        return self.stats.copy()


__all__ = ['EmptyContent', 'MarkdownExporter']
