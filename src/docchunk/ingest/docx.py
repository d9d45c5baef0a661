"""DOCX reader — paragraph-based chunking with python-docx.

Word-processing documents carry no reliable page breaks, so page
granularity approximates a page as a fixed number of paragraphs.
"""

from __future__ import annotations

import io
import logging
import zipfile
from typing import TYPE_CHECKING

from docchunk.chunk.linear import (
    PARAGRAPH_SEPARATOR,
    SENTENCE_SEPARATOR,
    WORD_SEPARATOR,
    count_words,
    pack,
    pack_pages,
    split_sentences,
    split_words,
)
from docchunk.exceptions import ParseError, UnsupportedGranularityError
from docchunk.ingest.base import BaseReader
from docchunk.types import Granularity, TextUnit

if TYPE_CHECKING:
    from docchunk.config import DocchunkConfig

__all__ = ["PARAGRAPHS_PER_PAGE", "DocxReader"]

logger = logging.getLogger(__name__)

PARAGRAPHS_PER_PAGE = 20


class DocxReader(BaseReader):
    """Reader for Office Open XML word-processing documents."""

    def chunk_bytes(self, data: bytes, config: DocchunkConfig, *, name: str = "<bytes>") -> list[str]:
        """Chunk a DOCX document at the configured granularity.

        Raises:
            ParseError: If the document cannot be opened.
        """
        chunker_config = config.chunker_config()

        paragraphs = _extract_paragraphs(data, name)
        max_words = chunker_config.max_words_per_chunk
        granularity = chunker_config.granularity

        if granularity is Granularity.PAGE:
            pages = [
                "\n".join(paragraphs[i : i + PARAGRAPHS_PER_PAGE])
                for i in range(0, len(paragraphs), PARAGRAPHS_PER_PAGE)
            ]
            return pack_pages(pages, max_words)

        units: list[TextUnit] = []
        if granularity is Granularity.WORD:
            for paragraph in paragraphs:
                units.extend(split_words(paragraph))
            return pack(units, max_words, WORD_SEPARATOR)
        if granularity is Granularity.SENTENCE:
            for paragraph in paragraphs:
                units.extend(split_sentences(paragraph))
            return pack(units, max_words, SENTENCE_SEPARATOR)
        if granularity is Granularity.PARAGRAPH:
            for paragraph in paragraphs:
                text = paragraph.strip()
                if text:
                    units.append(TextUnit(text=text, word_count=count_words(text)))
            return pack(units, max_words, PARAGRAPH_SEPARATOR)

        raise UnsupportedGranularityError(f"Unsupported granularity: {granularity!r}")

    def supported_extensions(self) -> frozenset[str]:
        """Return supported file extensions."""
        return frozenset({".docx"})


def _extract_paragraphs(data: bytes, name: str) -> list[str]:
    """Return the text of every paragraph in the body, tables included."""
    try:
        import docx
        from docx.opc.exceptions import PackageNotFoundError
        from docx.oxml.ns import qn
        from docx.text.paragraph import Paragraph
    except ImportError as e:
        raise ParseError("python-docx is required for DOCX reading: pip install python-docx") from e

    try:
        document = docx.Document(io.BytesIO(data))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        logger.debug("DOCX open failure (%s): %s", type(e).__name__, e, exc_info=True)
        raise ParseError(f"Failed to open DOCX {name}: {e}") from e

    body = document.element.body
    # Paragraph.text renders w:tab and w:br as "\t" and "\n"
    paragraphs = [Paragraph(p, document).text for p in body.iter(qn("w:p"))]

    logger.debug("Extracted %d paragraphs from %s", len(paragraphs), name)
    return paragraphs
