"""Plain text reader — word, sentence and paragraph chunking.

Plain text has no page structure, so page granularity is rejected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docchunk.chunk.linear import chunk_text
from docchunk.exceptions import UnsupportedGranularityError
from docchunk.ingest.base import BaseReader, decode_text
from docchunk.types import Granularity

if TYPE_CHECKING:
    from docchunk.config import DocchunkConfig

__all__ = ["TextReader"]

logger = logging.getLogger(__name__)


class TextReader(BaseReader):
    """Reader for plain text files."""

    def chunk_bytes(self, data: bytes, config: DocchunkConfig, *, name: str = "<bytes>") -> list[str]:
        """Chunk plain text at the configured granularity.

        Raises:
            UnsupportedGranularityError: For page granularity.
        """
        chunker_config = config.chunker_config()
        if chunker_config.granularity is Granularity.PAGE:
            raise UnsupportedGranularityError("Page granularity is not supported for plain text")

        text = decode_text(data, name)
        logger.debug("Read %s: %d chars", name, len(text))
        return chunk_text(text, chunker_config)

    def supported_extensions(self) -> frozenset[str]:
        """Return supported file extensions."""
        return frozenset({".txt", ".text"})
