"""Abstract base class for document readers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from docchunk.exceptions import ParseError

if TYPE_CHECKING:
    from pathlib import Path

    from docchunk.config import DocchunkConfig

__all__ = ["BaseReader", "decode_text"]

logger = logging.getLogger(__name__)


class BaseReader(ABC):
    """Base class for all document readers.

    A reader turns the raw bytes of one document format into chunks, using
    the linear packer or the tree aggregator. Subclasses must implement
    ``chunk_bytes`` and ``supported_extensions``.
    """

    MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50 MB

    @abstractmethod
    def chunk_bytes(self, data: bytes, config: DocchunkConfig, *, name: str = "<bytes>") -> list[str]:
        """Chunk a document held in memory.

        Args:
            data: Raw document bytes.
            config: Chunking configuration.
            name: Label used in log and error messages.

        Returns:
            Chunks in document order.

        Raises:
            ConfigError: If the configuration is invalid for this reader.
            ParseError: If the document cannot be parsed.
        """

    @abstractmethod
    def supported_extensions(self) -> frozenset[str]:
        """Return the set of file extensions this reader handles.

        Extensions include the leading dot and are lower-case, e.g. ``{".pdf"}``.
        """

    def can_read(self, path: Path) -> bool:
        """Check whether this reader can handle the given file."""
        return path.suffix.lower() in self.supported_extensions()

    def check_size(self, size: int, name: str) -> None:
        """Reject documents larger than ``MAX_FILE_SIZE``.

        Raises:
            ParseError: If *size* exceeds the limit.
        """
        if size > self.MAX_FILE_SIZE:
            raise ParseError(
                f"Document {name} ({size} bytes) exceeds maximum size"
                f" ({self.MAX_FILE_SIZE} bytes)"
            )

    def chunk_file(self, path: Path, config: DocchunkConfig) -> list[str]:
        """Read a file from disk and chunk it.

        Raises:
            ConfigError: If the configuration is invalid.
            ParseError: If the file is missing, too large, or unreadable.
        """
        config.chunker_config()

        if not path.exists():
            raise ParseError(f"File not found: {path}")

        if not path.is_file():
            raise ParseError(f"Not a file: {path}")

        self.check_size(path.stat().st_size, path.name)

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error("Cannot read %s: %s", path, e)
            raise ParseError(f"Cannot read file {path.name}: {e}") from e

        chunks = self.chunk_bytes(data, config, name=path.name)
        logger.info("Chunked %s into %d chunks", path.name, len(chunks))
        return chunks


def decode_text(data: bytes, name: str = "<bytes>") -> str:
    """Decode UTF-8 bytes, replacing undecodable bytes and dropping a BOM."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("UTF-8 decode failed for %s, retrying with replacement", name)
        text = data.decode("utf-8", errors="replace")

    if text.startswith("\ufeff"):
        text = text[1:]
    return text
