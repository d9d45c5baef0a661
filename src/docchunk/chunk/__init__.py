"""Chunking engine: linear bounded packing and structural tree aggregation."""

from docchunk.chunk.batch import batched, check_part_size
from docchunk.chunk.linear import (
    chunk_text,
    count_words,
    pack,
    pack_pages,
    pack_paragraphs,
    pack_sentences,
    pack_words,
)
from docchunk.chunk.tree import AggregateUnit, ExclusionPolicy, aggregate

__all__ = [
    "AggregateUnit",
    "ExclusionPolicy",
    "aggregate",
    "batched",
    "check_part_size",
    "chunk_text",
    "count_words",
    "pack",
    "pack_pages",
    "pack_paragraphs",
    "pack_sentences",
    "pack_words",
]
