from __future__ import annotations

import pytest

from tests.helpers import child, children
from xlsxmodel.errors import UnknownStyleCategoryError
from xlsxmodel.primitives import UnderlineType
from xlsxmodel.styles import (
    DEFAULT_DIRECT_STYLE,
    HYPERLINK_COLOR,
    NAMED_STYLE_HYPERLINK,
    Fill,
    Font,
    StyleInfo,
    StyleRegistry,
)


def test_equal_definitions_share_an_id() -> None:
    registry = StyleRegistry()
    first = registry.add_styles(StyleInfo(font=Font(bold=True)))
    second = registry.add_styles(StyleInfo(font=Font(bold=True)))
    assert first == second
    assert len(registry) == 2


def test_different_definitions_get_distinct_ids() -> None:
    registry = StyleRegistry()
    bold = registry.add_styles(StyleInfo(font=Font(bold=True)))
    italic = registry.add_styles(StyleInfo(font=Font(italic=True)))
    assert bold != italic
    assert registry.get(bold) == StyleInfo(font=Font(bold=True))
    assert registry.get(italic) == StyleInfo(font=Font(italic=True))


def test_sentinel_is_never_a_real_id() -> None:
    registry = StyleRegistry()
    ids = {registry.add_styles(StyleInfo(number_format=f"0.{'0' * n}")) for n in range(5)}
    assert DEFAULT_DIRECT_STYLE not in ids
    assert registry.get(DEFAULT_DIRECT_STYLE) is None


def test_default_for_registers_once() -> None:
    registry = StyleRegistry()
    size_before = len(registry)

    first = registry.default_for(NAMED_STYLE_HYPERLINK)
    second = registry.default_for(NAMED_STYLE_HYPERLINK)

    assert first == second
    assert len(registry) == size_before + 1
    style = registry.get(first)
    assert style.named_style == NAMED_STYLE_HYPERLINK
    assert style.font.underline == UnderlineType.SINGLE
    assert style.font.color == HYPERLINK_COLOR


def test_default_for_reuses_an_equal_explicit_definition() -> None:
    registry = StyleRegistry()
    explicit = registry.add_styles(
        StyleInfo(
            font=Font.default(underline=UnderlineType.SINGLE, color="#0563C1"),
            named_style=NAMED_STYLE_HYPERLINK,
        )
    )
    assert registry.default_for(NAMED_STYLE_HYPERLINK) == explicit


def test_default_for_unknown_category() -> None:
    with pytest.raises(UnknownStyleCategoryError):
        StyleRegistry().default_for("Heading 7")


def test_diff_styles_have_their_own_ids() -> None:
    registry = StyleRegistry()
    red = StyleInfo(fill=Fill(color="#FF0000"))
    assert registry.add_diff_styles(red) == 0
    assert registry.add_diff_styles(red) == 0
    assert registry.add_diff_styles(StyleInfo(font=Font(bold=True))) == 1
    assert registry.diff_count == 2
    assert registry.get_diff(0) == red


def test_add_styles_rejects_non_definitions() -> None:
    with pytest.raises(TypeError):
        StyleRegistry().add_styles({"bold": True})


def test_style_sheet_element() -> None:
    registry = StyleRegistry()
    link = registry.default_for(NAMED_STYLE_HYPERLINK)
    registry.add_diff_styles(StyleInfo(fill=Fill(color="#FFC7CE")))

    root = registry.to_element()

    xfs = children(child(root, "cellXfs"), "xf")
    assert len(xfs) == len(registry)
    font_id = int(xfs[link].attrib["fontId"])
    font = children(child(root, "fonts"), "font")[font_id]
    assert child(font, "color").attrib["rgb"] == "FF0563C1"
    assert "val" not in child(font, "u").attrib

    names = [item.attrib["name"] for item in children(child(root, "cellStyles"), "cellStyle")]
    assert NAMED_STYLE_HYPERLINK in names
    assert child(root, "dxfs").attrib["count"] == "1"
