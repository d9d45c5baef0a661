"""Linear bounded packing of word, sentence, paragraph and page units.

Every linear granularity goes through the same greedy policy:
- Units are appended in document order
- The running chunk is emitted before a unit that would push it over budget
- A single unit larger than the budget becomes its own chunk, unsplit
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from docchunk.exceptions import UnsupportedGranularityError
from docchunk.types import Granularity, TextUnit, check_max_words

if TYPE_CHECKING:
    from collections.abc import Iterable

    from docchunk.types import ChunkerConfig

__all__ = [
    "chunk_text",
    "count_words",
    "pack",
    "pack_pages",
    "pack_paragraphs",
    "pack_sentences",
    "pack_words",
    "split_paragraphs",
    "split_sentences",
    "split_words",
]

logger = logging.getLogger(__name__)

# Sentence boundary: whitespace following terminal punctuation
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")

# Paragraph boundary: one or more blank lines
_PARAGRAPH_BOUNDARY_RE = re.compile(r"\r?\n(?:[ \t]*\r?\n)+")

WORD_SEPARATOR = " "
SENTENCE_SEPARATOR = " "
PARAGRAPH_SEPARATOR = "\n"


def count_words(text: str) -> int:
    """Count whitespace-separated words in text."""
    return len(text.split())


def split_words(text: str) -> list[TextUnit]:
    return [TextUnit(text=word, word_count=1) for word in text.split()]


def split_sentences(text: str) -> list[TextUnit]:
    """Split text on ``.``, ``!`` or ``?`` followed by whitespace."""
    units: list[TextUnit] = []
    for sentence in _SENTENCE_BOUNDARY_RE.split(text):
        sentence = sentence.strip()
        if sentence:
            units.append(TextUnit(text=sentence, word_count=count_words(sentence)))
    return units


def split_paragraphs(text: str) -> list[TextUnit]:
    """Split text on blank-line runs, dropping blank paragraphs."""
    units: list[TextUnit] = []
    for paragraph in _PARAGRAPH_BOUNDARY_RE.split(text):
        paragraph = paragraph.strip()
        if paragraph:
            units.append(TextUnit(text=paragraph, word_count=count_words(paragraph)))
    return units


def pack(
    units: Iterable[TextUnit],
    max_words: int,
    separator: str = WORD_SEPARATOR,
) -> list[str]:
    """Greedily pack units into chunks of at most ``max_words`` words.

    Args:
        units: Units in document order.
        max_words: Word budget per chunk.
        separator: String placed between units inside a chunk.

    Returns:
        Chunks in document order. A unit whose own word count exceeds
        ``max_words`` is emitted alone.

    Raises:
        ConfigError: If ``max_words`` is not positive.
    """
    check_max_words(max_words)

    chunks: list[str] = []
    current: list[str] = []
    current_words = 0

    for unit in units:
        if current_words + unit.word_count > max_words and current:
            chunks.append(separator.join(current).strip())
            current = []
            current_words = 0
        current.append(unit.text)
        current_words += unit.word_count

    if current:
        chunks.append(separator.join(current).strip())

    return [c for c in chunks if c]


def pack_words(text: str, max_words: int) -> list[str]:
    return pack(split_words(text), max_words, WORD_SEPARATOR)


def pack_sentences(text: str, max_words: int) -> list[str]:
    return pack(split_sentences(text), max_words, SENTENCE_SEPARATOR)


def pack_paragraphs(text: str, max_words: int) -> list[str]:
    return pack(split_paragraphs(text), max_words, PARAGRAPH_SEPARATOR)


def pack_pages(pages: Iterable[str], max_words: int) -> list[str]:
    """Word-pack each page on its own; chunks never span two pages."""
    check_max_words(max_words)

    chunks: list[str] = []
    for page in pages:
        chunks.extend(pack_words(page, max_words))
    return chunks


def chunk_text(text: str, config: ChunkerConfig) -> list[str]:
    """Chunk a single linear text at the configured granularity.

    Page granularity treats the whole text as one page.

    Raises:
        UnsupportedGranularityError: If the granularity is unknown.
    """
    max_words = config.max_words_per_chunk
    granularity = config.granularity

    if granularity is Granularity.WORD:
        chunks = pack_words(text, max_words)
    elif granularity is Granularity.SENTENCE:
        chunks = pack_sentences(text, max_words)
    elif granularity is Granularity.PARAGRAPH:
        chunks = pack_paragraphs(text, max_words)
    elif granularity is Granularity.PAGE:
        chunks = pack_pages([text], max_words)
    else:
        raise UnsupportedGranularityError(f"Unsupported granularity: {granularity!r}")

    logger.debug(
        "Packed %d chars into %d chunks (granularity=%s, max_words=%d)",
        len(text),
        len(chunks),
        granularity.value,
        max_words,
    )
    return chunks
