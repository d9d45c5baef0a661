"""Document chunking facade for docchunk.

Composes format detection → reader → chunker for files and URLs, plus the
batched "in parts" views over the resulting chunk list.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docchunk.chunk.batch import batched, check_part_size
from docchunk.config import default_config
from docchunk.exceptions import ParseError
from docchunk.ingest import detect_file_type, detect_url_format, fetch_url, get_reader
from docchunk.ingest.detect import DocFormat

if TYPE_CHECKING:
    from pathlib import Path

    from docchunk.config import DocchunkConfig

__all__ = ["DocumentChunker"]

logger = logging.getLogger(__name__)


class DocumentChunker:
    """Chunks documents from disk or the web.

    The reader is chosen from the file extension (or URL path and
    ``Content-Type``) unless ``reader_name`` is given.

    Usage::

        chunker = DocumentChunker(config)
        chunks = chunker.extract_chunks(Path("manual.pdf"))
        parts = chunker.extract_chunks_in_parts_from_url("https://example.com/a.html", 10)
    """

    def __init__(self, config: DocchunkConfig | None = None, reader_name: str = "") -> None:
        self.config = config if config is not None else default_config()
        self.reader_name = reader_name

    def extract_chunks(self, path: Path) -> list[str]:
        """Chunk a document file.

        Raises:
            ConfigError: If the configuration is invalid.
            ParseError: If the format is unknown or the file cannot be read.
        """
        self.config.chunker_config()

        reader_name = self.reader_name
        if not reader_name:
            info = detect_file_type(path)
            if not info.reader_name:
                raise ParseError(f"Unsupported document format: {path.name}")
            reader_name = info.reader_name

        reader = get_reader(reader_name)
        logger.info("Chunking %s with %s reader", path, reader_name)
        return reader.chunk_file(path, self.config)

    def extract_chunks_from_url(self, url: str) -> list[str]:
        """Fetch and chunk a document.

        Raises:
            ConfigError: If the configuration is invalid.
            FetchError: If the document cannot be retrieved.
            ParseError: If the format is unknown or the document cannot be parsed.
        """
        self.config.chunker_config()

        fetched = fetch_url(url, timeout=self.config.fetch.timeout)

        reader_name = self.reader_name
        if not reader_name:
            fmt = detect_url_format(fetched.url, fetched.content_type)
            if fmt is DocFormat.UNKNOWN:
                raise ParseError(
                    f"Unsupported document format for {url}"
                    f" (Content-Type: {fetched.content_type or 'unknown'})"
                )
            reader_name = fmt.value

        reader = get_reader(reader_name)
        reader.check_size(len(fetched.content), url)
        chunks = reader.chunk_bytes(fetched.content, self.config, name=url)
        logger.info("Chunked %s into %d chunks", url, len(chunks))
        return chunks

    def extract_chunks_in_parts(self, path: Path, part_size: int) -> list[list[str]]:
        """Chunk a document file and group the chunks ``part_size`` at a time.

        Raises:
            ConfigError: If ``part_size`` is smaller than 1.
        """
        check_part_size(part_size)
        return batched(self.extract_chunks(path), part_size)

    def extract_chunks_in_parts_from_url(self, url: str, part_size: int) -> list[list[str]]:
        """Fetch and chunk a document, grouping chunks ``part_size`` at a time.

        Raises:
            ConfigError: If ``part_size`` is smaller than 1.
        """
        check_part_size(part_size)
        return batched(self.extract_chunks_from_url(url), part_size)
