"""Tests for docchunk.chunk.linear: bounded packing."""

from __future__ import annotations

import pytest

from docchunk.chunk.linear import (
    chunk_text,
    count_words,
    pack,
    pack_pages,
    pack_paragraphs,
    pack_sentences,
    pack_words,
    split_paragraphs,
    split_sentences,
    split_words,
)
from docchunk.exceptions import ConfigError
from docchunk.types import ChunkerConfig, Granularity, TextUnit

# ---------------------------------------------------------------------------
# Tokenizers
# ---------------------------------------------------------------------------


class TestCountWords:
    def test_empty_string(self):
        assert count_words("") == 0

    def test_mixed_whitespace(self):
        assert count_words("one\ttwo\nthree  four") == 4


class TestSplitWords:
    def test_each_word_is_one_unit(self):
        units = split_words("one two\nthree")
        assert [u.text for u in units] == ["one", "two", "three"]
        assert all(u.word_count == 1 for u in units)

    def test_whitespace_only(self):
        assert split_words("  \n\t ") == []


class TestSplitSentences:
    def test_splits_on_terminal_punctuation(self):
        units = split_sentences("First one. Second one! Third one? Fourth")
        assert [u.text for u in units] == ["First one.", "Second one!", "Third one?", "Fourth"]

    def test_newline_after_period_is_a_boundary(self):
        units = split_sentences("Line one.\nLine two.")
        assert [u.text for u in units] == ["Line one.", "Line two."]

    def test_no_split_without_whitespace(self):
        units = split_sentences("Version 1.2 is out.")
        assert [u.text for u in units] == ["Version 1.2 is out."]

    def test_word_counts(self):
        units = split_sentences("A b c. D e.")
        assert [u.word_count for u in units] == [3, 2]


class TestSplitParagraphs:
    def test_blank_line_runs_separate_paragraphs(self):
        units = split_paragraphs("P1\n\nP2\n\n  \n\nP3")
        assert [u.text for u in units] == ["P1", "P2", "P3"]

    def test_single_newline_stays_in_paragraph(self):
        units = split_paragraphs("line one\nline two\n\nnext")
        assert units[0] == TextUnit(text="line one\nline two", word_count=4)
        assert units[1].text == "next"

    def test_windows_line_endings(self):
        units = split_paragraphs("A\r\n\r\nB")
        assert [u.text for u in units] == ["A", "B"]

    def test_paragraphs_are_trimmed(self):
        units = split_paragraphs("   padded   \n\n")
        assert [u.text for u in units] == ["padded"]


# ---------------------------------------------------------------------------
# Generic packer
# ---------------------------------------------------------------------------


def _units(*counts: int) -> list[TextUnit]:
    return [TextUnit(text=f"u{i}", word_count=c) for i, c in enumerate(counts)]


class TestPack:
    def test_empty_stream(self):
        assert pack([], 5) == []

    def test_fills_up_to_budget(self):
        assert pack(_units(2, 3, 1), 5) == ["u0 u1", "u2"]

    def test_exact_budget_is_allowed(self):
        assert pack(_units(2, 3), 5) == ["u0 u1"]

    def test_oversized_unit_is_emitted_alone(self):
        assert pack(_units(1, 9, 1), 5) == ["u0", "u1", "u2"]

    def test_oversized_first_unit(self):
        assert pack(_units(9, 1), 5) == ["u0", "u1"]

    def test_separator(self):
        assert pack(_units(1, 1), 5, separator="\n") == ["u0\nu1"]

    def test_budget_respected_except_single_units(self):
        counts = [3, 1, 4, 1, 5, 9, 2, 6, 5, 3, 5]
        units = _units(*counts)
        by_text = {u.text: u.word_count for u in units}
        chunks = pack(units, 7)
        for chunk in chunks:
            members = chunk.split()
            total = sum(by_text[m] for m in members)
            assert total <= 7 or len(members) == 1
        assert " ".join(chunks).split() == [u.text for u in units]

    def test_idempotent(self):
        units = _units(2, 2, 2, 2, 2)
        assert pack(units, 5) == pack(units, 5)

    @pytest.mark.parametrize("max_words", [0, -1])
    def test_non_positive_budget_raises(self, max_words):
        with pytest.raises(ConfigError, match="positive"):
            pack(_units(1), max_words)

    def test_budget_checked_before_consuming_units(self):
        consumed = []

        def stream():
            consumed.append(True)
            yield TextUnit(text="x", word_count=1)

        with pytest.raises(ConfigError):
            pack(stream(), 0)
        assert consumed == []


# ---------------------------------------------------------------------------
# Granularity variants
# ---------------------------------------------------------------------------


class TestPackWords:
    def test_three_word_chunks(self):
        assert pack_words("one two three four five", 3) == ["one two three", "four five"]

    def test_line_breaks_do_not_matter(self):
        assert pack_words("one two three\nfour five", 3) == ["one two three", "four five"]

    def test_never_exceeds_budget(self):
        text = " ".join(f"w{i}" for i in range(23))
        chunks = pack_words(text, 4)
        assert all(count_words(c) <= 4 for c in chunks)
        assert len(chunks) == 6


class TestPackSentences:
    def test_sentences_are_not_merged_over_budget(self):
        text = "This is sentence one. And this is the second sentence.\nShort."
        assert pack_sentences(text, 5) == [
            "This is sentence one.",
            "And this is the second sentence.",
            "Short.",
        ]

    def test_long_sentence_is_kept_whole(self):
        assert pack_sentences("This is a long sentence. Short.", 4) == [
            "This is a long sentence.",
            "Short.",
        ]

    def test_short_sentences_merge(self):
        assert pack_sentences("One. Two. Three.", 2) == ["One. Two.", "Three."]


class TestPackParagraphs:
    def test_three_paragraphs(self):
        text = "Paragraph 1.\n\nParagraph 2 with more words.\n\nP3"
        assert pack_paragraphs(text, 5) == [
            "Paragraph 1.",
            "Paragraph 2 with more words.",
            "P3",
        ]

    def test_small_paragraphs_join_with_newline(self):
        assert pack_paragraphs("P1\n\nP2\n\n  \n\nP3", 100) == ["P1\nP2\nP3"]

    def test_long_paragraph_is_kept_whole(self):
        text = "Paragraph 1 has many words.\n\nParagraph 2."
        assert pack_paragraphs(text, 3) == ["Paragraph 1 has many words.", "Paragraph 2."]


class TestPackPages:
    def test_chunks_never_span_pages(self):
        assert pack_pages(["a b c d", "e"], 3) == ["a b c", "d", "e"]

    def test_empty_pages_are_skipped(self):
        assert pack_pages(["", "a b", "   "], 3) == ["a b"]

    def test_invalid_budget_with_no_pages(self):
        with pytest.raises(ConfigError):
            pack_pages([], 0)


class TestChunkText:
    @pytest.mark.parametrize(
        ("granularity", "expected"),
        [
            (Granularity.WORD, ["One two. Three", "four. Five six."]),
            (Granularity.SENTENCE, ["One two.", "Three four.", "Five six."]),
            (Granularity.PARAGRAPH, ["One two. Three four.", "Five six."]),
        ],
    )
    def test_dispatches_on_granularity(self, granularity, expected):
        text = "One two. Three four.\n\nFive six."
        config = ChunkerConfig(max_words_per_chunk=3, granularity=granularity)
        assert chunk_text(text, config) == expected

    def test_page_treats_text_as_one_page(self):
        config = ChunkerConfig(max_words_per_chunk=2, granularity=Granularity.PAGE)
        assert chunk_text("a b c", config) == ["a b", "c"]

    def test_empty_text(self):
        config = ChunkerConfig(max_words_per_chunk=2)
        assert chunk_text("", config) == []
