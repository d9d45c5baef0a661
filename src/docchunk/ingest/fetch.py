"""URL retrieval for documents served over HTTP(S)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from docchunk.exceptions import FetchError

__all__ = ["MAX_DOWNLOAD_SIZE", "FetchedDocument", "fetch_url", "is_url"]

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30  # seconds
_USER_AGENT = "docchunk"

# Largest body accepted; matches the largest reader file limit (PDF)
MAX_DOWNLOAD_SIZE = 200 * 1024 * 1024  # 200 MB


@dataclass(frozen=True)
class FetchedDocument:
    """Raw bytes of a retrieved document plus its declared MIME type."""

    url: str
    content: bytes
    content_type: str = ""


def is_url(source: str) -> bool:
    """Return True if *source* is an http or https URL."""
    return urlparse(source).scheme in ("http", "https")


def fetch_url(
    url: str,
    timeout: int = _DEFAULT_TIMEOUT,
    max_bytes: int = MAX_DOWNLOAD_SIZE,
) -> FetchedDocument:
    """Download a document.

    Args:
        url: An ``http`` or ``https`` URL.
        timeout: Socket timeout in seconds.
        max_bytes: Largest response body accepted.

    Returns:
        The response body and ``Content-Type`` header.

    Raises:
        FetchError: On unsupported schemes, HTTP errors, connection errors,
            or a body larger than ``max_bytes``.
    """
    if not is_url(url):
        raise FetchError(f"Only http and https URLs are supported, got {url!r}")

    req = Request(url, headers={"User-Agent": _USER_AGENT})
    logger.info("Fetching %s", url)

    try:
        with urlopen(req, timeout=timeout) as resp:
            body = resp.read(max_bytes + 1)
            content_type = resp.headers.get("Content-Type", "") or ""
    except HTTPError as e:
        raise FetchError(f"HTTP error fetching {url} (HTTP {e.code}): {e.reason}") from e
    except (ConnectionError, TimeoutError, URLError) as e:
        raise FetchError(f"Cannot reach {url}: {e}") from e

    if len(body) > max_bytes:
        raise FetchError(f"Response from {url} exceeds maximum size ({max_bytes} bytes)")

    logger.debug("Fetched %d bytes from %s (%s)", len(body), url, content_type)
    return FetchedDocument(url=url, content=body, content_type=content_type)
