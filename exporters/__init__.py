"""Exporters package for writing synced pages and their images."""

from .frontmatter import build_frontmatter_fields, render_document, render_frontmatter
from .image_downloader import ImageDownloader
from .markdown_exporter import EmptyContent, MarkdownExporter
from .path_resolver import OutputPathResolver

__all__ = [
    'EmptyContent',
    'ImageDownloader',
    'MarkdownExporter',
    'OutputPathResolver',
    'build_frontmatter_fields',
    'render_document',
    'render_frontmatter'
]
