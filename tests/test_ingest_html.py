"""Tests for docchunk.ingest.html module."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from docchunk.exceptions import ConfigError
from docchunk.ingest.html import HtmlReader, parse_tree
from docchunk.types import NodeKind

if TYPE_CHECKING:
    from pathlib import Path

    from docchunk.config import DocchunkConfig


@pytest.fixture
def reader() -> HtmlReader:
    return HtmlReader()


def _write(tmp_path: Path, html: str, name: str = "page.html") -> Path:
    path = tmp_path / name
    path.write_text(html, encoding="utf-8")
    return path


class TestParseTree:
    def test_wraps_in_document(self):
        root = parse_tree("<p>Hi</p>")
        assert root.is_document
        assert root.children[0].tag == "p"

    def test_class_tokens(self):
        root = parse_tree('<p class="lead Intro">x</p>')
        assert root.children[0].classes == ("lead", "Intro")

    def test_doctype_is_not_text(self):
        root = parse_tree("<!DOCTYPE html><p>x</p>")
        assert root.children[0].kind is NodeKind.COMMENT

    def test_accepts_bytes(self):
        root = parse_tree(b"<p>plain bytes</p>")
        assert root.children[0].children[0].text == "plain bytes"

    def test_malformed_markup_is_repaired(self):
        root = parse_tree("<div><p>unclosed")
        assert root.children[0].tag == "div"


class TestHtmlReader:
    def test_supported_extensions(self, reader: HtmlReader):
        assert reader.supported_extensions() == frozenset({".html", ".htm"})

    def test_full_page(self, reader: HtmlReader, tmp_path: Path, config: DocchunkConfig):
        path = _write(
            tmp_path,
            "<html><head><script>var x = 1;</script></head>"
            "<body><h1>Title</h1><p>Body text here.</p></body></html>",
        )
        assert reader.chunk_file(path, config) == ["Title", "Body text here."]

    def test_section_breaks(self, reader: HtmlReader, tmp_path: Path, config: DocchunkConfig):
        path = _write(tmp_path, "<p>Paragraph 1.</p><h2>Heading</h2><p>Paragraph 2.</p>")
        config.chunk.max_words = 2
        assert reader.chunk_file(path, config) == ["Paragraph 1.", "Heading", "Paragraph 2."]

    def test_excluded_classes_from_config(
        self, reader: HtmlReader, tmp_path: Path, config: DocchunkConfig
    ):
        path = _write(tmp_path, '<p>This is visible.</p><p class="Ignore-Me">Hidden.</p>')
        config.html.exclude_classes = ["ignore-me"]
        assert reader.chunk_file(path, config) == ["This is visible."]

    def test_excluded_tags_from_config(
        self, reader: HtmlReader, tmp_path: Path, config: DocchunkConfig
    ):
        path = _write(tmp_path, "<p>Kept.</p><aside>Dropped.</aside>")
        config.html.exclude_tags = ["aside"]
        assert reader.chunk_file(path, config) == ["Kept."]

    def test_greedy_merge_can_be_disabled(
        self, reader: HtmlReader, tmp_path: Path, config: DocchunkConfig
    ):
        path = _write(tmp_path, "<p>a b</p><p>c d</p><p>e f</p>")
        config.chunk.max_words = 4
        assert reader.chunk_file(path, config) == ["a b c d", "e f"]
        config.html.greedy_sibling_merge = False
        assert reader.chunk_file(path, config) == ["a b", "c d", "e f"]

    def test_granularity_is_ignored(
        self, reader: HtmlReader, tmp_path: Path, config: DocchunkConfig
    ):
        path = _write(tmp_path, "<p>One. Two.</p>")
        config.chunk.granularity = "word"
        assert reader.chunk_file(path, config) == ["One. Two."]

    def test_heading_splits_short_page(
        self, reader: HtmlReader, tmp_path: Path, config: DocchunkConfig
    ):
        path = _write(tmp_path, "<p>one two</p><h2>Break</h2><p>three four</p>")
        assert reader.chunk_file(path, config) == ["one two", "Break", "three four"]

    def test_custom_section_break_tags(
        self, reader: HtmlReader, tmp_path: Path, config: DocchunkConfig
    ):
        path = _write(tmp_path, "<p>one two</p><h2>Break</h2><p>three four</p>")
        config.html.section_break_tags = []
        assert reader.chunk_file(path, config) == ["one two Break three four"]

    def test_many_unclosed_paragraphs(self, reader: HtmlReader, config: DocchunkConfig):
        data = "".join(f"<p>para {i}\n" for i in range(2500)).encode()
        config.chunk.max_words = 50
        passages = reader.chunk_bytes(data, config)
        assert sum(len(p.split()) for p in passages) == 5000

    @pytest.mark.parametrize("key", ["exclude_tags", "exclude_classes", "section_break_tags"])
    def test_string_instead_of_list(self, reader: HtmlReader, config: DocchunkConfig, key: str):
        setattr(config.html, key, "script")
        with pytest.raises(ConfigError, match="list of strings"):
            reader.chunk_bytes(b"<p>x</p>", config)

    def test_invalid_budget(self, reader: HtmlReader, config: DocchunkConfig):
        config.chunk.max_words = -1
        with pytest.raises(ConfigError):
            reader.chunk_bytes(b"<p>x</p>", config)

    def test_non_utf8_bytes(self, reader: HtmlReader, config: DocchunkConfig):
        data = '<meta charset="latin-1"><p>Caf\xe9</p>'.encode("latin-1")
        assert reader.chunk_bytes(data, config) == ["Café"]
