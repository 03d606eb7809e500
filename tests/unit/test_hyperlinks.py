from __future__ import annotations

import pytest

from tests.helpers import DOCUMENT_REL_NS, children, hyperlinks_xml
from xlsxmodel import Bounds, Document, DocumentOptions, Sheet
from xlsxmodel.errors import (
    HyperlinkTargetError,
    InvalidLinkShapeError,
    LimitExceededError,
    OverlapConflictError,
)
from xlsxmodel.hyperlinks import HyperlinkInfo
from xlsxmodel.parser.namespaces import RELATION_TYPE_DRAWING, RELATION_TYPE_HYPERLINK
from xlsxmodel.primitives import TargetMode
from xlsxmodel.styles import DEFAULT_DIRECT_STYLE, NAMED_STYLE_HYPERLINK, Font, StyleInfo


def test_add_returns_default_hyperlink_style(sheet: Sheet) -> None:
    style_id = sheet.hyperlinks.add(Bounds(0, 0, 0, 0), "https://a")

    assert style_id == sheet.document.styles.default_for(NAMED_STYLE_HYPERLINK)
    assert style_id != DEFAULT_DIRECT_STYLE


def test_add_with_same_bounds_replaces(sheet: Sheet) -> None:
    sheet.add_hyperlink(Bounds(0, 0, 0, 0), "https://a")
    sheet.add_hyperlink(Bounds(0, 0, 0, 0), "https://b")

    assert len(sheet.hyperlinks) == 1
    assert sheet.hyperlinks.get("A1").target == "https://b"


def test_overlap_is_rejected_and_first_entry_kept(sheet: Sheet) -> None:
    sheet.add_hyperlink(Bounds(0, 0, 1, 1), "https://a")

    with pytest.raises(OverlapConflictError) as excinfo:
        sheet.hyperlinks.add(Bounds(1, 1, 2, 2), "https://b")

    assert excinfo.value.existing == Bounds(0, 0, 1, 1)
    assert len(sheet.hyperlinks) == 1
    assert sheet.hyperlinks.get("B2").target == "https://a"
    assert sheet.relationships.get_id_by_target("https://b") is None


def test_limit_exceeded_leaves_collection_unchanged(small_limit_sheet: Sheet) -> None:
    for col in range(3):
        small_limit_sheet.hyperlinks.add(Bounds(0, col, 0, col), f"https://example.com/{col}")
    relationships_before = len(small_limit_sheet.relationships)

    with pytest.raises(LimitExceededError) as excinfo:
        small_limit_sheet.hyperlinks.add(Bounds(5, 5, 5, 5), "https://example.com/extra")

    assert excinfo.value.limit == 3
    assert len(small_limit_sheet.hyperlinks) == 3
    assert len(small_limit_sheet.relationships) == relationships_before


def test_replace_is_exempt_from_limit(small_limit_sheet: Sheet) -> None:
    for col in range(3):
        small_limit_sheet.hyperlinks.add(Bounds(0, col, 0, col), f"https://example.com/{col}")

    small_limit_sheet.hyperlinks.add(Bounds(0, 1, 0, 1), "https://example.com/new")

    assert len(small_limit_sheet.hyperlinks) == 3
    assert small_limit_sheet.hyperlinks.get("B1").target == "https://example.com/new"


def test_invalid_link_shape(sheet: Sheet) -> None:
    with pytest.raises(InvalidLinkShapeError):
        sheet.hyperlinks.add(Bounds(0, 0, 0, 0), 42)
    assert len(sheet.hyperlinks) == 0
    assert sheet.relationships is None


def test_too_long_target_is_rejected() -> None:
    doc = Document(options=DocumentOptions(max_target_length=10))
    sheet = doc.add_sheet("Sheet1")
    with pytest.raises(HyperlinkTargetError):
        sheet.hyperlinks.add(Bounds(0, 0, 0, 0), "https://example.com/long")
    assert len(sheet.hyperlinks) == 0


def test_same_target_shares_one_relationship(sheet: Sheet) -> None:
    sheet.add_hyperlink("A1", "https://example.com")
    sheet.add_hyperlink("C3:D4", "https://example.com")

    assert len(sheet.relationships) == 1
    rids = {record.rid for record in sheet.hyperlinks}
    assert rids == {sheet.relationships.get_id_by_target("https://example.com")}


def test_internal_location_needs_no_relationship(sheet: Sheet) -> None:
    sheet.add_hyperlink("A1", "#Summary")
    sheet.add_hyperlink("A2", "'Other sheet'!B2")

    assert sheet.relationships is None
    assert sheet.hyperlinks.get("A1").location == "Summary"
    assert sheet.hyperlinks.get("A2").location == "'Other sheet'!B2"
    assert sheet.hyperlinks.get("A2").target is None


def test_caller_style_is_returned_instead_of_default(sheet: Sheet) -> None:
    custom = sheet.document.add_styles(StyleInfo(font=Font(bold=True)))
    link = HyperlinkInfo.to_url("https://example.com", tooltip="Open", style_id=custom)

    assert sheet.add_hyperlink("B2", link) == custom
    assert sheet.cell_by_ref("B2").style_id == custom


def test_get_reads_current_cell_style(sheet: Sheet) -> None:
    default_style = sheet.add_hyperlink("A1:B2", HyperlinkInfo.to_mail("me@example.com", subject="Hi there"))
    assert sheet.hyperlinks.get("B2").style_id == default_style

    italic = sheet.document.add_styles(StyleInfo(font=Font(italic=True)))
    sheet.set_style("B2", italic)

    info = sheet.hyperlinks.get("B2")
    assert info.style_id == italic
    assert info.target == "mailto:me@example.com?subject=Hi%20there"
    assert sheet.hyperlinks.get("A1").style_id == default_style


def test_get_returns_none_outside_any_hyperlink(sheet: Sheet) -> None:
    assert sheet.hyperlinks.get("A1") is None
    sheet.add_hyperlink("A1", "https://a")
    assert sheet.hyperlinks.get("Z99") is None


def test_remove_clears_every_touching_entry(sheet: Sheet) -> None:
    sheet.add_hyperlink(Bounds(0, 0, 0, 0), "https://inside")
    sheet.add_hyperlink(Bounds(5, 5, 7, 7), "https://partial")
    sheet.add_hyperlink(Bounds(10, 10, 10, 10), "https://disjoint")

    sheet.hyperlinks.remove(Bounds(0, 0, 5, 5))

    assert [record.bounds for record in sheet.hyperlinks] == [Bounds(10, 10, 10, 10)]
    assert sheet.hyperlinks.get("K11").target == "https://disjoint"


def test_default_style_registered_once_across_calls(sheet: Sheet) -> None:
    styles = sheet.document.styles
    sheet.add_hyperlink("A1", "https://a")
    size = len(styles)
    sheet.add_hyperlink("A2", "https://b")
    with pytest.raises(OverlapConflictError):
        sheet.add_hyperlink("A1:A3", "https://c")

    assert len(styles) == size


def test_to_target_shapes() -> None:
    assert HyperlinkInfo.to_target("https://example.com").target == "https://example.com"
    assert HyperlinkInfo.to_target("mailto:x@example.com").target == "mailto:x@example.com"
    assert HyperlinkInfo.to_target("#Totals").location == "Totals"
    assert HyperlinkInfo.to_target("Data!$A$1:$B$2").location == "Data!A1:B2"
    assert HyperlinkInfo.to_target("reports/q1.xlsx").target == "reports/q1.xlsx"
    assert HyperlinkInfo.to_ref("C3").location == "C3"


def test_load_and_serialize(sheet: Sheet) -> None:
    relationships = sheet.attach_relationships_if_required()
    rid = relationships.add_link("hyperlink", "https://example.com")
    sheet.hyperlinks.load(
        hyperlinks_xml(
            {"ref": "A1:B1", "r:id": rid, "tooltip": "Home"},
            {"ref": "D4", "location": "Sheet1!A1", "display": "Back"},
        )
    )

    assert sheet.hyperlinks.get("B1").target == "https://example.com"
    assert sheet.hyperlinks.get("B1").tooltip == "Home"

    items = children(sheet.hyperlinks.to_element(), "hyperlink")
    assert [item.attrib["ref"] for item in items] == ["A1:B1", "D4"]
    assert items[0].attrib[f"{{{DOCUMENT_REL_NS}}}id"] == rid
    assert items[1].attrib["location"] == "Sheet1!A1"


def test_load_rejects_overlapping_entries(sheet: Sheet) -> None:
    with pytest.raises(OverlapConflictError):
        sheet.hyperlinks.load(hyperlinks_xml({"ref": "A1:B2", "location": "X"}, {"ref": "B2", "location": "Y"}))


def test_empty_collection_serializes_to_nothing(sheet: Sheet) -> None:
    assert sheet.hyperlinks.to_element() is None


def test_hyperlink_never_reuses_a_non_hyperlink_relationship(sheet: Sheet) -> None:
    relationships = sheet.attach_relationships_if_required()
    drawing_rid = relationships.add_relation(RELATION_TYPE_DRAWING, "../drawings/drawing1.xml")

    sheet.add_hyperlink("A1", HyperlinkInfo.to_file("../drawings/drawing1.xml"))

    rid = next(iter(sheet.hyperlinks)).rid
    assert rid != drawing_rid
    relationship = relationships.get(rid)
    assert relationship.type == RELATION_TYPE_HYPERLINK
    assert relationship.mode == TargetMode.EXTERNAL
    assert sheet.hyperlink("A1").target == "../drawings/drawing1.xml"


def test_to_target_splits_file_and_location() -> None:
    cell_link = HyperlinkInfo.to_target("report.xlsx#Sheet1!A1")
    assert (cell_link.target, cell_link.location) == ("report.xlsx", "Sheet1!A1")

    named_link = HyperlinkInfo.to_target("docs/report.xlsx#Totals")
    assert (named_link.target, named_link.location) == ("docs/report.xlsx", "Totals")

    quoted = HyperlinkInfo.to_target("'Q#1'!B2")
    assert (quoted.target, quoted.location) == (None, "'Q#1'!B2")


def test_file_link_with_location_keeps_both(sheet: Sheet) -> None:
    sheet.add_hyperlink("A1", "report.xlsx#Sheet1!A1")

    info = sheet.hyperlink("A1")
    assert info.target == "report.xlsx"
    assert info.location == "Sheet1!A1"
    assert len(sheet.relationships) == 1


def test_get_does_not_create_cells(sheet: Sheet) -> None:
    sheet.hyperlinks.load(hyperlinks_xml({"ref": "A1:C3", "location": "Sheet1!Z1"}))

    info = sheet.hyperlinks.get("B2")

    assert info.style_id == DEFAULT_DIRECT_STYLE
    assert sheet.cells == {}
