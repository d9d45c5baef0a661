"""PDF reader — page-aware chunking with PyMuPDF.

Words, sentences and paragraphs are extracted page by page and packed
across the whole document. Page granularity packs each page on its own so
no chunk spans two pages.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docchunk.chunk.linear import (
    PARAGRAPH_SEPARATOR,
    SENTENCE_SEPARATOR,
    WORD_SEPARATOR,
    pack,
    pack_pages,
    split_paragraphs,
    split_sentences,
    split_words,
)
from docchunk.exceptions import ParseError, UnsupportedGranularityError
from docchunk.ingest.base import BaseReader
from docchunk.types import Granularity

if TYPE_CHECKING:
    from docchunk.config import DocchunkConfig
    from docchunk.types import TextUnit

__all__ = ["PdfReader"]

logger = logging.getLogger(__name__)

# PyMuPDF text extraction flags: preserve ligatures + whitespace, suppress images
_TEXT_FLAGS = 11


class PdfReader(BaseReader):
    """Reader for PDF documents."""

    MAX_FILE_SIZE: int = 200 * 1024 * 1024  # 200 MB

    def chunk_bytes(self, data: bytes, config: DocchunkConfig, *, name: str = "<bytes>") -> list[str]:
        """Chunk a PDF at the configured granularity.

        Raises:
            ParseError: If the PDF cannot be opened.
        """
        chunker_config = config.chunker_config()

        pages = _extract_pages(data, name)
        max_words = chunker_config.max_words_per_chunk
        granularity = chunker_config.granularity

        if granularity is Granularity.PAGE:
            return pack_pages(pages, max_words)

        units: list[TextUnit] = []
        if granularity is Granularity.WORD:
            for page in pages:
                units.extend(split_words(page))
            return pack(units, max_words, WORD_SEPARATOR)
        if granularity is Granularity.SENTENCE:
            for page in pages:
                units.extend(split_sentences(page))
            return pack(units, max_words, SENTENCE_SEPARATOR)
        if granularity is Granularity.PARAGRAPH:
            for page in pages:
                units.extend(split_paragraphs(page))
            return pack(units, max_words, PARAGRAPH_SEPARATOR)

        raise UnsupportedGranularityError(f"Unsupported granularity: {granularity!r}")

    def supported_extensions(self) -> frozenset[str]:
        """Return supported file extensions."""
        return frozenset({".pdf"})


def _extract_pages(data: bytes, name: str) -> list[str]:
    """Return the plain text of every page, in page order."""
    try:
        import pymupdf
    except ImportError as e:
        raise ParseError("pymupdf is required for PDF reading: pip install pymupdf") from e

    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        logger.debug("PDF open failure (%s): %s", type(e).__name__, e, exc_info=True)
        raise ParseError(f"Failed to open PDF {name}: {e}") from e

    try:
        pages = [page.get_text("text", flags=_TEXT_FLAGS) for page in doc]
    except RuntimeError as e:
        logger.error("Failed to extract text from %s: %s", name, e)
        raise ParseError(f"Failed to extract text from PDF {name}: {e}") from e
    finally:
        doc.close()

    logger.debug("Extracted %d pages from %s", len(pages), name)
    return pages
