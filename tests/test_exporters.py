"""Tests for output paths, frontmatter and page writing."""

from datetime import date, datetime, timezone

import pytest
import yaml

from converters.reading_time import count_words, estimate
from exporters import EmptyContent, MarkdownExporter, OutputPathResolver
from exporters.frontmatter import FRONTMATTER_FIELDS, format_timestamp, render_document
from models import Page


def make_page(**overrides):
    values = dict(
        id='page-1',
        title='Release Notes',
        slug='release-notes',
        collection='blog',
        locale='en',
        tags=('product', 'changelog'),
        created_time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        last_edited_time=datetime(2024, 2, 3, 4, 5, 6, tzinfo=timezone.utc),
        icon={'type': 'emoji', 'emoji': '📝'},
    )
    values.update(overrides)
    return Page(**values)


class TestOutputPathResolver:
    """Destination path computation."""

    def test_resolve_layout(self, tmp_path):
        resolver = OutputPathResolver(tmp_path)
        assert resolver.resolve('blog', 'en', 'release-notes') == tmp_path / 'blog' / 'en' / 'release-notes.md'

    def test_empty_locale_is_elided(self, tmp_path):
        resolver = OutputPathResolver(tmp_path)
        assert resolver.resolve('docs', '', 'intro') == tmp_path / 'docs' / 'intro.md'

    def test_resolve_is_pure(self, tmp_path):
        resolver = OutputPathResolver(tmp_path / 'content')

        first = resolver.resolve('blog', 'de', 'hallo')
        second = resolver.resolve('blog', 'de', 'hallo')

        assert first == second
        assert not (tmp_path / 'content').exists()

    def test_ensure_directory_is_idempotent(self, tmp_path):
        resolver = OutputPathResolver(tmp_path)
        path = resolver.resolve('blog', 'en', 'post')

        resolver.ensure_directory(path)
        resolver.ensure_directory(path)

        assert path.parent.is_dir()

    def test_resolve_and_prepare(self, tmp_path):
        path = OutputPathResolver(tmp_path).resolve_and_prepare('etc', 'fr', 'page')
        assert path.parent.is_dir()
        assert not path.exists()


class TestFrontmatter:
    """YAML frontmatter rendering."""

    def test_field_order(self):
        document = render_document(make_page(), 'Body', '1 min read')
        keys = [line.split(':', 1)[0] for line in document.split('\n')
                if line and not line.startswith((' ', '-', '#'))]
        assert keys == list(FRONTMATTER_FIELDS) + ['Body']

    def test_string_values_are_double_quoted(self):
        document = render_document(make_page(), 'Body', '1 min read')
        assert 'title: "Release Notes"' in document
        assert 'coverAlt: "Release Notes"' in document
        assert 'reading_time: "1 min read"' in document
        assert 'slug: "release-notes"' in document

    def test_absent_values(self):
        document = render_document(make_page(), 'Body', '1 min read')
        assert 'cover: ""' in document
        assert 'coverFileName: ""' in document
        assert 'status: ""' in document
        assert 'description: ""' in document
        assert 'publish_date: false' in document
        assert 'category: unknown' in document
        assert 'archived: false' in document

    def test_timestamps_are_plain(self):
        document = render_document(make_page(publish_date=date(2024, 3, 1)), 'Body', '1 min read')
        assert 'created_time: 2024-01-02T03:04:05Z' in document
        assert 'last_edited_time: 2024-02-03T04:05:06Z' in document
        assert 'publish_date: 2024-03-01' in document

    def test_emoji_icon_written_as_character(self):
        document = render_document(make_page(), 'Body', '1 min read')
        assert '  emoji: 📝\n' in document
        assert '\\U0001F4DD' not in document

    def test_external_icon_parses_back(self):
        icon = {'type': 'external', 'external': {'url': 'https://example.com/icon.png'}}
        document = render_document(make_page(icon=icon), 'Body', '1 min read')

        data = yaml.safe_load(document.split('---\n')[1])

        assert data['icon'] == icon

    def test_document_shape(self):
        document = render_document(make_page(), 'Hello world', '1 min read', 'abc.png')
        assert document.startswith('---\n')
        assert '\n---\n\nHello world\n' in document
        assert document.endswith('Hello world\n')

    def test_frontmatter_parses_back(self):
        document = render_document(make_page(), 'Body', '1 min read', 'abc.png')
        frontmatter = document.split('---\n')[1]

        data = yaml.safe_load(frontmatter)

        assert data['title'] == 'Release Notes'
        assert data['tags'] == ['product', 'changelog']
        assert data['coverFileName'] == 'abc.png'
        assert data['icon'] == {'type': 'emoji', 'emoji': '📝'}
        assert data['created_time'] == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_format_timestamp(self):
        assert format_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc)) == '2024-01-01T00:00:00Z'


class TestReadingTime:
    """Reading time estimation."""

    def test_short_text(self):
        assert estimate('a few words') == '1 min read'

    def test_empty_text(self):
        assert estimate('') == '0 min read'

    def test_rounds_up(self):
        assert estimate(' '.join(['word'] * 250)) == '2 min read'

    def test_exact_minutes(self):
        assert estimate(' '.join(['word'] * 400)) == '2 min read'

    def test_count_words(self):
        assert count_words('one  two\nthree') == 3

    def test_count_words_cjk_per_character(self):
        assert count_words('这是一个测试') == 6
        assert count_words('hello 世界') == 3
        assert count_words('ひらがなカタカナ') == 8
        assert count_words('안녕 하세요') == 5

    def test_estimate_unspaced_cjk(self):
        assert estimate('这是一个测试句子' * 125) == '5 min read'


class TestMarkdownExporter:
    """Writing pages to disk."""

    def test_writes_file(self, config, tmp_path):
        exporter = MarkdownExporter(config)

        path = exporter.write_page(make_page(), '# Hello', '1 min read')

        assert path == tmp_path / 'content' / 'blog' / 'en' / 'release-notes.md'
        content = path.read_text(encoding='utf-8')
        assert 'title: "Release Notes"' in content
        assert content.endswith('# Hello\n')

    def test_overwrites_existing_file(self, config):
        exporter = MarkdownExporter(config)
        exporter.write_page(make_page(), 'first version', '1 min read')

        path = exporter.write_page(make_page(), 'second', '1 min read')

        content = path.read_text(encoding='utf-8')
        assert 'second' in content
        assert 'first version' not in content

    def test_empty_body_raises(self, config, tmp_path):
        exporter = MarkdownExporter(config)

        with pytest.raises(EmptyContent) as exc_info:
            exporter.write_page(make_page(), '', '0 min read')

        assert str(exc_info.value) == 'No content for page page-1'
        assert not (tmp_path / 'content').exists()

    def test_output_dir_override(self, config, tmp_path):
        exporter = MarkdownExporter(config, output_dir=str(tmp_path / 'other'))
        path = exporter.write_page(make_page(locale=''), 'x', '1 min read')
        assert path == tmp_path / 'other' / 'blog' / 'release-notes.md'
