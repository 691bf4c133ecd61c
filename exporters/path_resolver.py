"""Output path resolution for synced pages."""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger('notion_markdown_sync.exporters.path_resolver')

MARKDOWN_SUFFIX = '.md'


class OutputPathResolver:
    """
    Maps ``(collection, locale, slug)`` to ``<content_root>/<collection>/<locale>/<slug>.md``.

    An empty locale is left out of the path instead of producing an empty
    path segment, so default-locale docs land directly in their collection.
    """

    def __init__(self, content_root: Union[str, Path], logger: Optional[logging.Logger] = None):
        """
        Args:
            content_root: Root directory of the site's content collections
            logger: Logger instance (optional)
        """
        self.content_root = Path(content_root)
        self.logger = logger or logging.getLogger('notion_markdown_sync.exporters.path_resolver')

    def resolve(self, collection: str, locale: str, slug: str) -> Path:
        """
        Compute the destination file path. Pure, no filesystem access.

        Args:
            collection: Collection bucket (e.g., "blog", "docs")
            locale: Resolved locale, possibly empty
            slug: URL-safe page slug

        Returns:
            Destination file path
        """
        directory = self.content_root / collection
        if locale:
            directory = directory / locale
        return directory / f"{slug}{MARKDOWN_SUFFIX}"

    def ensure_directory(self, file_path: Path) -> Path:
        """
        Create every directory above ``file_path``. Safe to repeat.

        Args:
            file_path: Destination file path

        Returns:
            The containing directory
        """
        directory = file_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"OS error creating directory {directory}: {e}")
            raise
        return directory

    def resolve_and_prepare(self, collection: str, locale: str, slug: str) -> Path:
        """Resolve the destination path and make sure its directory exists."""
        file_path = self.resolve(collection, locale, slug)
        self.ensure_directory(file_path)
        return file_path


__all__ = ['OutputPathResolver']
