"""Regroup a chunk sequence into fixed-size parts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docchunk.exceptions import ConfigError

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["batched", "check_part_size"]


def check_part_size(size: int) -> None:
    """Validate a part size.

    Raises:
        ConfigError: If *size* is not an integer >= 1.
    """
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise ConfigError(f"part size must be >= 1, got {size!r}")


def batched(chunks: Sequence[str], size: int) -> list[list[str]]:
    """Split chunks into consecutive lists of ``size`` items.

    The last list may be shorter.

    Raises:
        ConfigError: If ``size`` is smaller than 1.
    """
    check_part_size(size)

    return [list(chunks[i : i + size]) for i in range(0, len(chunks), size)]
