"""Ingestion: format readers that feed the chunking engine."""

from docchunk.exceptions import ParseError
from docchunk.ingest.base import BaseReader
from docchunk.ingest.detect import (
    DocFormat,
    FileInfo,
    detect_file_type,
    detect_url_format,
    get_supported_extensions,
)
from docchunk.ingest.docx import DocxReader
from docchunk.ingest.fetch import FetchedDocument, fetch_url, is_url
from docchunk.ingest.html import HtmlReader
from docchunk.ingest.pdf import PdfReader
from docchunk.ingest.text import TextReader

__all__ = [
    "BaseReader",
    "DocFormat",
    "DocxReader",
    "FetchedDocument",
    "FileInfo",
    "HtmlReader",
    "PdfReader",
    "TextReader",
    "detect_file_type",
    "detect_url_format",
    "fetch_url",
    "get_reader",
    "get_supported_extensions",
    "is_url",
]

_READER_MAP: dict[str, type[BaseReader]] = {
    "text": TextReader,
    "pdf": PdfReader,
    "docx": DocxReader,
    "html": HtmlReader,
}


def get_reader(reader_name: str) -> BaseReader:
    """Return a reader instance for the given reader name.

    Args:
        reader_name: Reader identifier (e.g. ``"pdf"``, ``"html"``).

    Returns:
        A new reader instance.

    Raises:
        ParseError: If no reader is registered for the given name.
    """
    cls = _READER_MAP.get(reader_name)
    if cls is None:
        raise ParseError(f"No reader for format: {reader_name!r}")
    return cls()
