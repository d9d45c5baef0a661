"""HTML reader — structural passage aggregation.

Parses markup with BeautifulSoup, converts the soup into an immutable
``TextNode`` tree, and hands it to the tree aggregator. Granularity is not
used: passages follow the document structure, bounded by the word budget.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, ProcessingInstruction, Tag

from docchunk.chunk.tree import aggregate
from docchunk.ingest.base import BaseReader
from docchunk.types import TextNode

if TYPE_CHECKING:
    from collections.abc import Iterator

    from bs4 import PageElement

    from docchunk.config import DocchunkConfig

__all__ = ["HtmlReader", "parse_tree"]

logger = logging.getLogger(__name__)

# Non-content markup that is treated like a comment
_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


def _class_tokens(tag: Tag) -> tuple[str, ...]:
    value = tag.get("class")
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(value)


def _leaf(element: PageElement) -> TextNode:
    if isinstance(element, _NON_TEXT_STRINGS):
        return TextNode.comment(str(element))
    return TextNode.text_leaf(str(element))


def _convert(soup: BeautifulSoup) -> TextNode:
    """Convert the soup into a ``TextNode`` tree without recursing.

    ``html.parser`` nests unclosed tags, so sloppy pages produce very deep
    trees; an explicit stack keeps the depth off the interpreter stack.
    """
    # (tag, its remaining children, its converted children)
    stack: list[tuple[Tag, Iterator[PageElement], list[TextNode]]] = [
        (soup, iter(soup.children), [])
    ]
    while True:
        tag, children, converted = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            if not stack:
                return TextNode.document(*converted)
            node = TextNode.element(tag.name, *converted, classes=_class_tokens(tag))
            stack[-1][2].append(node)
        elif isinstance(child, Tag):
            stack.append((child, iter(child.children), []))
        else:
            converted.append(_leaf(child))


def parse_tree(markup: str | bytes) -> TextNode:
    """Parse HTML into a ``TextNode`` tree rooted at a document wrapper.

    Entities are decoded. Malformed markup is repaired by the parser.
    """
    return _convert(BeautifulSoup(markup, "html.parser"))


class HtmlReader(BaseReader):
    """Reader for HTML documents."""

    def chunk_bytes(self, data: bytes, config: DocchunkConfig, *, name: str = "<bytes>") -> list[str]:
        """Aggregate the HTML tree into passages of at most ``max_words`` words.

        A passage holding the text of a single node may exceed the budget.
        """
        chunker_config = config.chunker_config()
        policy = config.exclusion_policy()

        root = parse_tree(data)
        passages = aggregate(
            root,
            chunker_config.max_words_per_chunk,
            is_excluded=policy,
            greedy_sibling_merge=config.html.greedy_sibling_merge,
            section_break_tags=config.section_break_tags(),
        )
        logger.debug("Aggregated %s into %d passages", name, len(passages))
        return passages

    def supported_extensions(self) -> frozenset[str]:
        """Return supported file extensions."""
        return frozenset({".html", ".htm"})
