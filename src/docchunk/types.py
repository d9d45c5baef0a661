"""Data contracts for docchunk.

Frozen dataclasses that flow between stages:
  document → list[TextUnit] | TextNode tree → list[str] chunks
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from docchunk.exceptions import ConfigError, UnsupportedGranularityError

__all__ = [
    "DOCUMENT_TAG",
    "ChunkerConfig",
    "Granularity",
    "NodeKind",
    "TextNode",
    "TextUnit",
    "check_max_words",
]

# Tag carried by the synthetic wrapper node at the root of a parsed tree
DOCUMENT_TAG = "#document"


class Granularity(str, Enum):
    """Atomic unit used when packing linear text into chunks."""

    WORD = "word"
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"
    PAGE = "page"

    @classmethod
    def parse(cls, value: Granularity | str) -> Granularity:
        """Return the granularity named by *value* (case-insensitive).

        Raises:
            UnsupportedGranularityError: If *value* names no granularity.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(g.value for g in cls)
            raise UnsupportedGranularityError(
                f"Unsupported granularity {value!r}. Expected one of: {choices}"
            ) from None


@dataclass(frozen=True)
class ChunkerConfig:
    """Word budget and granularity requested from a chunker."""

    max_words_per_chunk: int
    granularity: Granularity = Granularity.PARAGRAPH

    def __post_init__(self) -> None:
        check_max_words(self.max_words_per_chunk)
        object.__setattr__(self, "granularity", Granularity.parse(self.granularity))


def check_max_words(max_words: int) -> None:
    """Validate a word budget.

    Raises:
        ConfigError: If *max_words* is not a positive integer.
    """
    if isinstance(max_words, bool) or not isinstance(max_words, int) or max_words <= 0:
        raise ConfigError(f"max words per chunk must be a positive integer, got {max_words!r}")


@dataclass(frozen=True)
class TextUnit:
    """One atomic piece of text at the active granularity."""

    text: str
    word_count: int


class NodeKind(str, Enum):
    """Kind of a node in a parsed markup tree."""

    TEXT = "text"
    ELEMENT = "element"
    COMMENT = "comment"


@dataclass(frozen=True)
class TextNode:
    """A read-only node of a parsed markup tree.

    ``tag`` is lower-case for elements and ``None`` for text and comment
    nodes. ``text`` is only meaningful for text nodes.
    """

    kind: NodeKind
    tag: str | None = None
    classes: tuple[str, ...] = ()
    children: tuple[TextNode, ...] = ()
    text: str = ""

    @classmethod
    def document(cls, *children: TextNode) -> TextNode:
        """Build the synthetic root wrapper around *children*."""
        return cls(kind=NodeKind.ELEMENT, tag=DOCUMENT_TAG, children=tuple(children))

    @classmethod
    def element(cls, tag: str, *children: TextNode, classes: tuple[str, ...] = ()) -> TextNode:
        return cls(kind=NodeKind.ELEMENT, tag=tag.lower(), classes=classes, children=tuple(children))

    @classmethod
    def text_leaf(cls, text: str) -> TextNode:
        return cls(kind=NodeKind.TEXT, text=text)

    @classmethod
    def comment(cls, text: str = "") -> TextNode:
        return cls(kind=NodeKind.COMMENT, text=text)

    @property
    def is_document(self) -> bool:
        return self.kind is NodeKind.ELEMENT and self.tag == DOCUMENT_TAG
