"""Image downloader for page covers and inline images."""

import hashlib
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

import requests

from fetchers.base_fetcher import NetworkFailure

COVERS_SUBDIRECTORY = 'covers'
DEFAULT_EXTENSION = '.png'
IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.gif', '.webp', '.svg', '.avif', '.bmp', '.ico', '.tif', '.tiff'}


class ImageDownloader:
    """
    Downloads remote images into the site's public images directory.

    File names are the MD5 of the URL without its query string plus the
    image extension, so signed Notion file URLs that only differ in their
    expiry parameters map to the same file. Existing files are not
    downloaded again.
    """

    def __init__(
        self,
        images_dir: Union[str, Path],
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the image downloader.

        Args:
            images_dir: Directory receiving downloaded images
            session: HTTP session (optional, created when missing)
            timeout: Request timeout in seconds
            logger: Logger instance
        """
        self.images_dir = Path(images_dir)
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logger or logging.getLogger('notion_markdown_sync.exporters.image_downloader')

        self.stats = {
            'downloaded': 0,
            'reused': 0
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any], logger: Optional[logging.Logger] = None) -> 'ImageDownloader':
        """Build a downloader from the ``export`` and ``advanced`` config sections."""
        export_config = config.get('export', {})
        advanced_config = config.get('advanced', {})
        return cls(
            images_dir=export_config.get('images_directory', 'public/images'),
            timeout=advanced_config.get('request_timeout', 30),
            logger=logger
        )

    def download_image(self, url: str, is_cover: bool = False) -> str:
        """
        Download an image unless it is already present.

        Args:
            url: Remote image URL
            is_cover: Store under the covers subdirectory

        Returns:
            File name of the stored image (relative to its directory)

        Raises:
            NetworkFailure: If the download fails
        """
        target_dir = self.images_dir / COVERS_SUBDIRECTORY if is_cover else self.images_dir
        base_name = self._hash_url(url)
        extension = self._extension_from_url(url)

        if extension:
            target = target_dir / f"{base_name}{extension}"
            if target.exists():
                self.logger.debug(f"Image already downloaded: {target}")
                self.stats['reused'] += 1
                return target.name

        response = self._fetch(url)

        if not extension:
            extension = self._extension_from_content_type(response.headers.get('Content-Type', ''))
            target = target_dir / f"{base_name}{extension}"

        target_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(response.content)
        self.stats['downloaded'] += 1
        self.logger.info(f"Downloaded image: {target}")

        return target.name

    def _fetch(self, url: str) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Failed to download image {url}: {e}")
            raise NetworkFailure(f"Failed to download image {url}: {e}") from e
        return response

    @staticmethod
    def _hash_url(url: str) -> str:
        stripped = url.split('?', 1)[0]
        return hashlib.md5(stripped.encode('utf-8')).hexdigest()

    @staticmethod
    def _extension_from_url(url: str) -> str:
        suffix = Path(urlparse(url).path).suffix.lower()
        return suffix if suffix in IMAGE_EXTENSIONS else ''

    @staticmethod
    def _extension_from_content_type(content_type: str) -> str:
        mime_type = content_type.split(';', 1)[0].strip()
        if not mime_type:
            return DEFAULT_EXTENSION
        extension = mimetypes.guess_extension(mime_type)
        if extension == '.jpe':
            extension = '.jpg'
        return extension or DEFAULT_EXTENSION


__all__ = ['ImageDownloader', 'COVERS_SUBDIRECTORY']
