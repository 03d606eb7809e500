from __future__ import annotations

import pytest

from xlsxmodel import Document, DocumentOptions, Sheet


@pytest.fixture()
def document() -> Document:
    return Document()


@pytest.fixture()
def sheet(document: Document) -> Sheet:
    return document.add_sheet("Sheet1")


@pytest.fixture()
def small_limit_sheet() -> Sheet:
    doc = Document(options=DocumentOptions(hyperlink_limit=3))
    return doc.add_sheet("Limited")
