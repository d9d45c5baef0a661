"""Structural chunk aggregation over a parsed markup tree.

Walks the tree post-order and decides, per subtree, whether its text can
stay together as one candidate unit for the parent or has to be emitted as
several passages:
- Small consecutive siblings are merged greedily up to the word budget
- A section-break tag closes the current greedy run and becomes its own
  passage, so text on either side of it is never merged
- Excluded subtrees (comments, excluded tags or classes) contribute nothing
- Passages keep document order; text from different runs never interleaves
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docchunk.types import NodeKind, check_max_words

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from docchunk.types import TextNode

__all__ = [
    "DEFAULT_EXCLUDED_CLASSES",
    "DEFAULT_EXCLUDED_TAGS",
    "DEFAULT_SECTION_BREAK_TAGS",
    "AggregateUnit",
    "ExclusionPolicy",
    "aggregate",
]

logger = logging.getLogger(__name__)

DEFAULT_SECTION_BREAK_TAGS: frozenset[str] = frozenset({
    "article",
    "br",
    "div",
    "footer",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "header",
    "hr",
    "main",
    "nav",
})

DEFAULT_EXCLUDED_TAGS: frozenset[str] = frozenset({"noscript", "script", "style"})

DEFAULT_EXCLUDED_CLASSES: frozenset[str] = frozenset()


def _normalize(names: Iterable[str]) -> frozenset[str]:
    return frozenset(n.strip().lower() for n in names if n.strip())


@dataclass(frozen=True)
class ExclusionPolicy:
    """Decides which nodes are left out of the output entirely.

    Comments are always excluded. Elements are excluded when their tag is
    in ``tags`` or when any token of their class attribute is in
    ``classes``. Both sets are compared case-insensitively.
    """

    tags: frozenset[str] = DEFAULT_EXCLUDED_TAGS
    classes: frozenset[str] = DEFAULT_EXCLUDED_CLASSES

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _normalize(self.tags))
        object.__setattr__(self, "classes", _normalize(self.classes))

    def __call__(self, node: TextNode) -> bool:
        if node.kind is NodeKind.COMMENT:
            return True
        if node.tag is not None and node.tag.lower() in self.tags:
            return True
        if node.kind is NodeKind.ELEMENT and self.classes:
            return any(cls.lower() in self.classes for cls in node.classes)
        return False


@dataclass
class AggregateUnit:
    """Text gathered from one node and its descendants.

    ``num_words`` always equals the word count of ``segments``. ``passages``
    is non-empty only when the subtree had to be split.
    """

    tag: str | None = None
    segments: list[str] = field(default_factory=list)
    num_words: int = 0
    passages: list[str] = field(default_factory=list)

    def fits(self, other: AggregateUnit, max_words: int) -> bool:
        """Return True if both units together stay within ``max_words``."""
        return self.num_words + other.num_words <= max_words

    def add(self, other: AggregateUnit) -> None:
        """Append the segments and word count of *other*."""
        if not other.segments:
            return
        self.num_words += other.num_words
        self.segments.extend(other.segments)

    def passage(self) -> str:
        """Join the non-blank segments into a single passage."""
        return " ".join(s for s in self.segments if s.strip())

    def copy(self) -> AggregateUnit:
        return AggregateUnit(
            tag=self.tag,
            segments=list(self.segments),
            num_words=self.num_words,
        )


def _add_passage(passages: list[str], unit: AggregateUnit) -> None:
    text = unit.passage()
    if text.strip():
        passages.append(text)


@dataclass
class _Frame:
    """Working state of one container while its children are visited."""

    node: TextNode
    unit: AggregateUnit
    whole: AggregateUnit = field(default_factory=AggregateUnit)
    greedy_run: AggregateUnit = field(default_factory=AggregateUnit)
    passages: list[str] = field(default_factory=list)
    still_whole: bool = True
    broken: bool = False
    next_child: int = 0


class _Aggregator:
    """Per-call settings plus an iterative post-order walk.

    The walk keeps its own frame stack, so arbitrarily deep trees (such as
    long runs of unclosed ``<p>`` tags) do not hit the interpreter's
    recursion limit.
    """

    def __init__(
        self,
        max_words: int,
        is_excluded: Callable[[TextNode], bool],
        greedy: bool,
        section_break_tags: frozenset[str],
    ) -> None:
        self.max_words = max_words
        self.is_excluded = is_excluded
        self.greedy = greedy
        self.section_break_tags = section_break_tags

    def visit(self, root: TextNode) -> AggregateUnit:
        unit = self._visit_leaf(root, parent_is_document=False)
        if unit is not None:
            return unit

        stack = [_Frame(node=root, unit=AggregateUnit(tag=root.tag))]
        while True:
            frame = stack[-1]
            if frame.next_child < len(frame.node.children):
                child = frame.node.children[frame.next_child]
                frame.next_child += 1
                child_unit = self._visit_leaf(child, parent_is_document=frame.node.is_document)
                if child_unit is None:
                    stack.append(_Frame(node=child, unit=AggregateUnit(tag=child.tag)))
                else:
                    self._absorb(frame, child_unit)
                continue

            stack.pop()
            done = self._finish(frame)
            if not stack:
                return done
            self._absorb(stack[-1], done)

    def _visit_leaf(self, node: TextNode, *, parent_is_document: bool) -> AggregateUnit | None:
        """Return the unit of a node without children to walk, else None."""
        current = AggregateUnit(tag=node.tag)

        if self.is_excluded(node):
            return current

        if node.kind is NodeKind.TEXT:
            # Stray text directly under the document wrapper is not content
            if not parent_is_document:
                text = node.text.strip()
                if text:
                    current.num_words = len(text.split())
                    current.segments.append(text)
            return current

        if node.kind is NodeKind.COMMENT:
            return current

        return None

    def _is_section_break(self, unit: AggregateUnit) -> bool:
        return (unit.tag or "").lower() in self.section_break_tags

    def _absorb(self, frame: _Frame, child_unit: AggregateUnit) -> None:
        if child_unit.passages:
            frame.still_whole = False
            if self.greedy:
                _add_passage(frame.passages, frame.greedy_run)
                frame.greedy_run = AggregateUnit()
            frame.passages.extend(child_unit.passages)
            return

        frame.whole.add(child_unit)

        if not self.greedy:
            _add_passage(frame.passages, child_unit)
        elif self._is_section_break(child_unit):
            # A break closes the run before it and stands alone
            _add_passage(frame.passages, frame.greedy_run)
            _add_passage(frame.passages, child_unit)
            frame.greedy_run = AggregateUnit()
            frame.broken = True
        elif frame.greedy_run.fits(child_unit, self.max_words):
            frame.greedy_run.add(child_unit)
        else:
            _add_passage(frame.passages, frame.greedy_run)
            frame.greedy_run = child_unit.copy()

    def _finish(self, frame: _Frame) -> AggregateUnit:
        current = frame.unit

        if self.greedy:
            _add_passage(frame.passages, frame.greedy_run)
            if frame.broken and len(frame.passages) > 1:
                frame.still_whole = False

        if not frame.still_whole or not current.fits(frame.whole, self.max_words):
            _add_passage(current.passages, current)
            current.passages.extend(frame.passages)
            return current

        current.add(frame.whole)
        return current


def aggregate(
    root: TextNode,
    max_words: int,
    is_excluded: Callable[[TextNode], bool] | None = None,
    greedy_sibling_merge: bool = True,
    section_break_tags: Iterable[str] = DEFAULT_SECTION_BREAK_TAGS,
) -> list[str]:
    """Aggregate the text of a node tree into word-bounded passages.

    Args:
        root: Root of the tree, usually the synthetic document wrapper.
        max_words: Maximum words in a passage built from several nodes.
            A passage holding a single node's text may exceed it.
        is_excluded: Predicate selecting nodes to drop. Defaults to an
            :class:`ExclusionPolicy` with the default tag set.
        greedy_sibling_merge: Merge consecutive small siblings into one
            passage while they fit. When False each sibling becomes its own
            passage unless the whole parent fits.
        section_break_tags: Tags that close the current greedy run and are
            emitted as passages of their own.

    Returns:
        Passages in document order.

    Raises:
        ConfigError: If ``max_words`` is not positive.
    """
    check_max_words(max_words)

    aggregator = _Aggregator(
        max_words=max_words,
        is_excluded=is_excluded if is_excluded is not None else ExclusionPolicy(),
        greedy=greedy_sibling_merge,
        section_break_tags=_normalize(section_break_tags),
    )
    root_unit = aggregator.visit(root)

    if not root_unit.passages:
        _add_passage(root_unit.passages, root_unit)

    logger.debug(
        "Aggregated tree into %d passages (max_words=%d, greedy=%s)",
        len(root_unit.passages),
        max_words,
        greedy_sibling_merge,
    )
    return root_unit.passages
