"""Per-block-type transform registry with the site's custom block renderings."""

import logging
from typing import Any, Callable, Dict, List, Optional

from models import Block
from .block_converter import BlockConverter, media_url

logger = logging.getLogger('notion_markdown_sync.converters.transform_registry')

DEFAULT_IMAGE_ALT = 'CDV Group Valve Image is loading'

YOUTUBE_EMBED_BASE = 'https://www.youtube.com/embed/'
VIDEO_IFRAME_TITLE = 'YouTube video player'
VIDEO_IFRAME_ALLOW = (
    'accelerometer; autoplay; clipboard-write; encrypted-media; '
    'gyroscope; picture-in-picture; web-share'
)

TransformFn = Callable[[Block, 'BlockTransformRegistry'], str]


def youtube_embed_url(url: str) -> str:
    """
    Rewrite a YouTube watch URL to its embeddable form.

    The query string is cut at the first ``&`` before the ``v=`` value is
    taken, so ``watch?v=abc&t=30s`` yields ``abc`` while ``watch?t=30s&v=abc``
    is left as it is. URLs that are not YouTube watch URLs pass through.

    Args:
        url: Video URL

    Returns:
        Embed URL, or the input unchanged
    """
    if 'youtube.com' not in url or '/watch' not in url:
        return url

    head = url.split('&')[0]
    if '?v=' not in head:
        logger.warning(f"YouTube watch URL without a leading v= parameter, leaving as is: {url}")
        return url

    video_id = head.split('?v=')[1]
    return f"{YOUTUBE_EMBED_BASE}{video_id}"


def transform_embed(block: Block, registry: 'BlockTransformRegistry') -> str:
    """Render an embed as a captioned iframe; embeds without a URL are dropped."""
    url = block.payload.get('url')
    if not url:
        return ''

    caption = registry.rich_text_to_markdown(block.payload.get('caption'))
    return (
        f"<figure>\n"
        f"  <iframe src=\"{url}\"></iframe>\n"
        f"  <figcaption>{caption}</figcaption>\n"
        f"</figure>"
    )


def transform_image(block: Block, registry: 'BlockTransformRegistry') -> str:
    """Render an image with the first caption span as alt text."""
    image = block.payload
    logger.debug(f"Image block: {image}")

    # Missing URLs give an empty link target rather than an error
    image_url = media_url(image) or ''

    caption = image.get('caption') or []
    alt = (caption[0].get('plain_text') if caption else None) or registry.image_alt_fallback

    return f"![{alt}]({image_url})"


def transform_video(block: Block, registry: 'BlockTransformRegistry') -> str:
    """
    Render a video as an embedded player.

    The caption is accepted on the block but not rendered.
    """
    video = block.payload
    video_url = (video.get('external') or {}).get('url') or (video.get('file') or {}).get('url')
    if not video_url:
        logger.warning(f"Video block {block.id} has no URL, skipping")
        return ''

    url = youtube_embed_url(video_url)

    return (
        f'<iframe width="100%" height="480" src="{url}" title="{VIDEO_IFRAME_TITLE}" '
        f'frameborder="0" allow="{VIDEO_IFRAME_ALLOW}" allowfullscreen></iframe>'
    )


class BlockTransformRegistry:
    """
    Holds conversion rules keyed by block type.

    Registered handlers win; every other type goes through the generic
    :class:`BlockConverter`. Handlers receive the registry so they can render
    nested rich text (captions) with the same rules.
    """

    def __init__(
        self,
        converter: Optional[BlockConverter] = None,
        image_alt_fallback: str = DEFAULT_IMAGE_ALT,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            converter: Generic converter used for unregistered types
            image_alt_fallback: Alt text for images without a caption
            logger: Logger instance (optional)
        """
        self.converter = converter or BlockConverter()
        self.image_alt_fallback = image_alt_fallback
        self.logger = logger or logging.getLogger('notion_markdown_sync.converters.transform_registry')
        self._transforms: Dict[str, TransformFn] = {}

    @classmethod
    def with_defaults(cls, config: Optional[Dict[str, Any]] = None, **kwargs) -> 'BlockTransformRegistry':
        """
        Create a registry with the embed, image and video overrides installed.

        Args:
            config: Configuration dictionary (reads converters.image_alt_fallback)
            **kwargs: Passed to the constructor

        Returns:
            Configured registry
        """
        config = config or {}
        kwargs.setdefault(
            'image_alt_fallback',
            config.get('converters', {}).get('image_alt_fallback', DEFAULT_IMAGE_ALT)
        )
        registry = cls(**kwargs)
        registry.register('embed', transform_embed)
        registry.register('image', transform_image)
        registry.register('video', transform_video)
        return registry

    def register(self, block_type: str, transform_fn: TransformFn) -> None:
        """Install or override the handler for a block type."""
        if block_type in self._transforms:
            self.logger.debug(f"Overriding transform for '{block_type}'")
        self._transforms[block_type] = transform_fn

    def unregister(self, block_type: str) -> None:
        """Remove a handler, falling back to the generic converter."""
        self._transforms.pop(block_type, None)

    def has_transform(self, block_type: str) -> bool:
        return block_type in self._transforms

    @property
    def registered_types(self) -> List[str]:
        return sorted(self._transforms)

    def transform(self, block: Block) -> str:
        """
        Convert one block into a markdown fragment.

        Args:
            block: Block to convert

        Returns:
            Markdown fragment
        """
        transform_fn = self._transforms.get(block.type)
        if transform_fn is None:
            return self.converter.convert(block)

        self.logger.debug(f"Applying custom transform for '{block.type}' ({block.id})")
        return transform_fn(block, self)

    def rich_text_to_markdown(self, spans: Optional[List[Dict[str, Any]]]) -> str:
        """Convert nested rich-text spans such as captions."""
        return self.converter.rich_text(spans)


__all__ = [
    'BlockTransformRegistry',
    'DEFAULT_IMAGE_ALT',
    'transform_embed',
    'transform_image',
    'transform_video',
    'youtube_embed_url'
]
