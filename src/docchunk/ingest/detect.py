"""Document format detection by extension, magic bytes, or MIME type.

Maps a file path or a fetched URL to the name of the reader that handles it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from docchunk.exceptions import ParseError

if TYPE_CHECKING:
    from pathlib import Path

__all__ = [
    "DocFormat",
    "FileInfo",
    "detect_file_type",
    "detect_url_format",
    "get_supported_extensions",
]

logger = logging.getLogger(__name__)


class DocFormat(str, Enum):
    """Structural document format; the value doubles as the reader name."""

    TEXT = "text"
    PDF = "pdf"
    DOCX = "docx"
    HTML = "html"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FileInfo:
    """Result of file type detection."""

    path: Path
    format: DocFormat
    reader_name: str
    confidence: float


_EXTENSION_MAP: dict[str, DocFormat] = {
    ".txt": DocFormat.TEXT,
    ".text": DocFormat.TEXT,
    ".pdf": DocFormat.PDF,
    ".docx": DocFormat.DOCX,
    ".html": DocFormat.HTML,
    ".htm": DocFormat.HTML,
}

_CONTENT_TYPE_MAP: dict[str, DocFormat] = {
    "text/plain": DocFormat.TEXT,
    "application/pdf": DocFormat.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocFormat.DOCX,
    "text/html": DocFormat.HTML,
    "application/xhtml+xml": DocFormat.HTML,
}

# DOCX files are ZIP containers; the extension decides between ZIP flavours
_MAGIC_SIGNATURES: list[tuple[bytes, DocFormat]] = [
    (b"%PDF-", DocFormat.PDF),
    (b"PK\x03\x04", DocFormat.DOCX),
]

_MAGIC_READ_SIZE = 8


def _check_magic_bytes(path: Path) -> DocFormat | None:
    """Read file header and return detected format, or ``None``."""
    try:
        with path.open("rb") as f:
            header = f.read(_MAGIC_READ_SIZE)
    except OSError as exc:
        logger.debug("Cannot read magic bytes from %s: %s", path.name, exc)
        return None

    for signature, fmt in _MAGIC_SIGNATURES:
        if header[: len(signature)] == signature:
            return fmt

    return None


def _reader_name(fmt: DocFormat) -> str:
    return "" if fmt is DocFormat.UNKNOWN else fmt.value


def detect_file_type(path: Path) -> FileInfo:
    """Detect a document's format by extension and magic bytes.

    Raises:
        ParseError: If *path* does not exist or is not a file.
    """
    if not path.exists():
        raise ParseError(f"File does not exist: {path}")

    if not path.is_file():
        raise ParseError(f"Not a file: {path}")

    ext_format = _EXTENSION_MAP.get(path.suffix.lower())
    magic_format = _check_magic_bytes(path)

    if ext_format is not None and magic_format is not None:
        final_format = ext_format
        confidence = 1.0 if ext_format == magic_format else 0.7
    elif ext_format is not None:
        final_format = ext_format
        confidence = 0.9
    elif magic_format is not None:
        final_format = magic_format
        confidence = 0.8
    else:
        final_format = DocFormat.UNKNOWN
        confidence = 0.0

    logger.debug(
        "Detected %s: format=%s, confidence=%.1f",
        path.name,
        final_format.value,
        confidence,
    )

    return FileInfo(
        path=path,
        format=final_format,
        reader_name=_reader_name(final_format),
        confidence=confidence,
    )


def detect_url_format(url: str, content_type: str = "") -> DocFormat:
    """Detect a fetched document's format from its URL path or MIME type.

    The URL's file extension wins; the ``Content-Type`` header is the
    fallback.
    """
    path = urlparse(url).path.lower()
    for ext, fmt in _EXTENSION_MAP.items():
        if path.endswith(ext):
            return fmt

    mime = content_type.split(";", 1)[0].strip().lower()
    return _CONTENT_TYPE_MAP.get(mime, DocFormat.UNKNOWN)


_SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(_EXTENSION_MAP.keys())


def get_supported_extensions() -> frozenset[str]:
    """Return all file extensions recognized by the detection module."""
    return _SUPPORTED_EXTENSIONS
