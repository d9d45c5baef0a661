"""Shared fixtures for docchunk tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from docchunk.config import DocchunkConfig, default_config

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def config() -> DocchunkConfig:
    return default_config()


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a PDF with one text page per argument."""
    import pymupdf

    def _make(*pages: str, name: str = "sample.pdf") -> Path:
        path = tmp_path / name
        doc = pymupdf.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text(pymupdf.Point(72, 72), text, fontsize=11, fontname="helv")
        doc.save(str(path))
        doc.close()
        return path

    return _make


@pytest.fixture
def make_docx(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a DOCX with one paragraph per argument."""
    import docx

    def _make(*paragraphs: str, name: str = "sample.docx") -> Path:
        path = tmp_path / name
        document = docx.Document()
        for text in paragraphs:
            document.add_paragraph(text)
        document.save(str(path))
        return path

    return _make
