"""
Sync orchestrator running the fetch, convert and write loop.

Pages are handled strictly one after another: fetch the block tree,
assemble the markdown body, estimate the reading time, download the cover,
write the file, then pause for the throttle interval before the next page.
"""

import logging
import sys
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from models import Page, SyncStatus
from converters import BlockTransformRegistry, MarkdownAssembler, estimate_reading_time
from exporters import EmptyContent, ImageDownloader, MarkdownExporter
from fetchers import BaseFetcher, NotionFetcher, PageMetadataExtractor
from logger import log_section, ProgressTracker
from rate_limiter import DEFAULT_THROTTLE_MS, RateLimiter

logger = logging.getLogger('notion_markdown_sync.orchestrator')


class SyncOrchestrator:
    """Central coordinator of a sync run: List → Convert → Write, one page at a time."""

    def __init__(
        self,
        config: Dict[str, Any],
        fetcher: BaseFetcher,
        extractor: PageMetadataExtractor,
        assembler: MarkdownAssembler,
        exporter: MarkdownExporter,
        image_downloader: Optional[ImageDownloader] = None,
        rate_limiter: Optional[RateLimiter] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize sync orchestrator.

        Args:
            config: Configuration dictionary
            fetcher: Remote content source
            extractor: Page metadata extractor
            assembler: Block tree to markdown assembler
            exporter: Page writer
            image_downloader: Cover image downloader (covers are not downloaded when missing)
            rate_limiter: Throttle applied between pages (no throttling when missing)
            logger: Optional logger instance
        """
        self.config = config
        self.fetcher = fetcher
        self.extractor = extractor
        self.assembler = assembler
        self.exporter = exporter
        self.image_downloader = image_downloader
        self.rate_limiter = rate_limiter or RateLimiter(0)
        self.logger = logger or logging.getLogger('notion_markdown_sync.orchestrator')

        sync_config = config.get('sync', {})
        self.published_only = sync_config.get('published_only', False)
        self.show_progress = sync_config.get('show_progress', True)

    @classmethod
    def from_config(cls, config: Dict[str, Any], logger: Optional[logging.Logger] = None) -> 'SyncOrchestrator':
        """
        Build an orchestrator with the default collaborators.

        Args:
            config: Validated configuration dictionary
            logger: Optional logger instance

        Returns:
            Ready-to-run orchestrator
        """
        sync_config = config.get('sync', {})
        registry = BlockTransformRegistry.with_defaults(config)

        return cls(
            config=config,
            fetcher=NotionFetcher(config),
            extractor=PageMetadataExtractor(default_locale=sync_config.get('default_doc_locale', 'en')),
            assembler=MarkdownAssembler(registry),
            exporter=MarkdownExporter(config),
            image_downloader=ImageDownloader.from_config(config),
            rate_limiter=RateLimiter.from_milliseconds(sync_config.get('throttle_ms', DEFAULT_THROTTLE_MS)),
            logger=logger
        )

    def run(self, published_only: Optional[bool] = None) -> List[SyncStatus]:
        """
        Synchronize every page of the database.

        Args:
            published_only: Only sync published pages (defaults to sync.published_only)

        Returns:
            One SyncStatus per page, in listing order

        Raises:
            FetcherError: If listing, fetching or downloading fails
            OSError: If a file cannot be written
        """
        if published_only is None:
            published_only = self.published_only

        log_section("Sync: Notion → Markdown")

        records = self.fetcher.list_pages(published_only=published_only)
        pages = self.extractor.extract_all(records)

        if not pages:
            self.logger.warning("No pages to sync")

        results: List[SyncStatus] = []

        with ProgressTracker(total_items=len(pages), item_type='pages') as tracker:
            for page in self._progress(pages):
                status = self.sync_page(page)
                results.append(status)
                tracker.increment(written=status.status == 'written')
                self.rate_limiter.pause()

        self.logger.info("Successfully synced posts with Notion")
        return results

    def sync_page(self, page: Page) -> SyncStatus:
        """
        Fetch, convert and write a single page.

        Args:
            page: Page metadata

        Returns:
            Outcome of the page ("written" or "skipped")
        """
        self.logger.info(f"Fetching from Notion & Converting to Markdown: {page.title} [{page.id}]")

        blocks = self.fetcher.get_block_tree(page.id)
        body = self.assembler.assemble(blocks)
        reading_time = estimate_reading_time(body)

        cover_file_name = ''
        if page.has_cover and self.image_downloader is not None:
            cover_file_name = self.image_downloader.download_image(page.cover, is_cover=True)

        try:
            output_path = self.exporter.write_page(page, body, reading_time, cover_file_name)
        except EmptyContent as e:
            self.logger.warning(str(e))
            return SyncStatus(
                page_id=page.id,
                page_title=page.title,
                status='skipped',
                reading_time=reading_time
            )

        return SyncStatus(
            page_id=page.id,
            page_title=page.title,
            status='written',
            output_path=str(output_path),
            reading_time=reading_time
        )

    def _progress(self, pages: List[Page]):
        show = self.show_progress and sys.stdout.isatty()
        return tqdm(pages, desc="Syncing pages", unit="page", disable=not show)


__all__ = ['SyncOrchestrator']
