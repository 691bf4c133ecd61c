"""Tests for the block transform registry and the custom embed, image and video renderings."""

import unittest

from converters import BlockTransformRegistry, youtube_embed_url
from converters.transform_registry import DEFAULT_IMAGE_ALT
from models import Block


def caption(text):
    return [{'type': 'text', 'plain_text': text, 'text': {'content': text}, 'annotations': {}}]


class TestYoutubeEmbedUrl(unittest.TestCase):
    def test_watch_url_with_extra_params(self):
        result = youtube_embed_url('https://www.youtube.com/watch?v=abc123&t=30s')
        self.assertIn('/embed/abc123', result)
        self.assertEqual(result, 'https://www.youtube.com/embed/abc123')

    def test_embed_url_unchanged(self):
        url = 'https://www.youtube.com/embed/abc123'
        self.assertEqual(youtube_embed_url(url), url)

    def test_non_youtube_url_unchanged(self):
        url = 'https://vimeo.com/12345'
        self.assertEqual(youtube_embed_url(url), url)

    def test_watch_url_without_leading_v_is_unchanged(self):
        url = 'https://www.youtube.com/watch?t=30s&v=abc123'
        with self.assertLogs('notion_markdown_sync.converters.transform_registry', level='WARNING'):
            self.assertEqual(youtube_embed_url(url), url)


class TestImageTransform(unittest.TestCase):
    def setUp(self):
        self.registry = BlockTransformRegistry.with_defaults()

    def test_hosted_file_preferred_over_external(self):
        block = Block(id='b1', type='image', payload={
            'type': 'file',
            'file': {'url': 'https://files.example/x.png'},
            'external': {'url': 'https://cdn.example/y.png'},
            'caption': caption('Logo'),
        })
        self.assertEqual(self.registry.transform(block), '![Logo](https://files.example/x.png)')

    def test_external_url_used_without_hosted_file(self):
        block = Block(id='b1', type='image', payload={
            'type': 'external',
            'external': {'url': 'https://cdn.example/y.png'},
            'caption': caption('Logo'),
        })
        self.assertEqual(self.registry.transform(block), '![Logo](https://cdn.example/y.png)')

    def test_missing_caption_uses_fallback_alt(self):
        block = Block(id='b1', type='image', payload={
            'external': {'url': 'https://cdn.example/y.png'},
            'caption': [],
        })
        self.assertEqual(self.registry.transform(block), f'![{DEFAULT_IMAGE_ALT}](https://cdn.example/y.png)')

    def test_configured_fallback_alt(self):
        registry = BlockTransformRegistry.with_defaults({'converters': {'image_alt_fallback': 'Picture'}})
        block = Block(id='b1', type='image', payload={'external': {'url': 'https://cdn.example/y.png'}})
        self.assertEqual(registry.transform(block), '![Picture](https://cdn.example/y.png)')

    def test_missing_url_degenerates(self):
        block = Block(id='b1', type='image', payload={'caption': caption('Logo')})
        self.assertEqual(self.registry.transform(block), '![Logo]()')


class TestEmbedTransform(unittest.TestCase):
    def setUp(self):
        self.registry = BlockTransformRegistry.with_defaults()

    def test_embed_with_caption(self):
        block = Block(id='b1', type='embed', payload={
            'url': 'https://maps.example/embed',
            'caption': caption('Our office'),
        })
        self.assertEqual(
            self.registry.transform(block),
            '<figure>\n'
            '  <iframe src="https://maps.example/embed"></iframe>\n'
            '  <figcaption>Our office</figcaption>\n'
            '</figure>'
        )

    def test_embed_without_caption(self):
        block = Block(id='b1', type='embed', payload={'url': 'https://maps.example/embed'})
        self.assertIn('<figcaption></figcaption>', self.registry.transform(block))

    def test_embed_without_url_is_empty(self):
        block = Block(id='b1', type='embed', payload={'caption': caption('x')})
        self.assertEqual(self.registry.transform(block), '')


class TestVideoTransform(unittest.TestCase):
    def setUp(self):
        self.registry = BlockTransformRegistry.with_defaults()

    def test_youtube_video_becomes_embed_iframe(self):
        block = Block(id='b1', type='video', payload={
            'type': 'external',
            'external': {'url': 'https://www.youtube.com/watch?v=abc123&t=30s'},
            'caption': caption('ignored caption'),
        })

        result = self.registry.transform(block)

        self.assertTrue(result.startswith('<iframe width="100%" height="480"'))
        self.assertIn('src="https://www.youtube.com/embed/abc123"', result)
        self.assertIn('title="YouTube video player"', result)
        self.assertIn('allowfullscreen', result)
        self.assertNotIn('ignored caption', result)

    def test_hosted_video_accepted(self):
        block = Block(id='b1', type='video', payload={'file': {'url': 'https://files.example/v.mp4'}})
        self.assertIn('src="https://files.example/v.mp4"', self.registry.transform(block))

    def test_video_without_url_is_empty(self):
        block = Block(id='b1', type='video', payload={})
        with self.assertLogs('notion_markdown_sync.converters.transform_registry', level='WARNING'):
            self.assertEqual(self.registry.transform(block), '')


class TestRegistry(unittest.TestCase):
    def test_defaults_registered(self):
        registry = BlockTransformRegistry.with_defaults()
        self.assertEqual(registry.registered_types, ['embed', 'image', 'video'])

    def test_unregistered_type_uses_generic_converter(self):
        registry = BlockTransformRegistry.with_defaults()
        block = Block(id='b1', type='divider')
        self.assertEqual(registry.transform(block), '---')

    def test_register_overrides_handler(self):
        registry = BlockTransformRegistry.with_defaults()
        registry.register('divider', lambda block, reg: '***')
        self.assertTrue(registry.has_transform('divider'))
        self.assertEqual(registry.transform(Block(id='b1', type='divider')), '***')

    def test_handler_receives_registry(self):
        registry = BlockTransformRegistry()
        seen = []
        registry.register('paragraph', lambda block, reg: seen.append(reg) or 'x')
        registry.transform(Block(id='b1', type='paragraph'))
        self.assertIs(seen[0], registry)

    def test_unregister_falls_back(self):
        registry = BlockTransformRegistry.with_defaults()
        registry.unregister('image')
        self.assertFalse(registry.has_transform('image'))
        block = Block(id='b1', type='image', payload={'external': {'url': 'https://cdn.example/y.png'}})
        self.assertEqual(registry.transform(block), '![image](https://cdn.example/y.png)')

    def test_rich_text_to_markdown_for_captions(self):
        registry = BlockTransformRegistry()
        spans = [{'type': 'text', 'plain_text': 'bold', 'annotations': {'bold': True}}]
        self.assertEqual(registry.rich_text_to_markdown(spans), '**bold**')


if __name__ == '__main__':
    unittest.main()
