"""Document-wide style registry.

Style definitions are compared by content: registering an equal definition a
second time returns the identifier minted the first time. Cell styles
(``cellXfs``) and differential styles used by conditional formatting
(``dxfs``) are kept in separate identifier spaces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable
from xml.etree import ElementTree as ET

from .errors import UnknownStyleCategoryError
from .parser.namespaces import qn
from .primitives import UNDERLINE_TYPE, UnderlineType

logger = logging.getLogger(__name__)

DEFAULT_DIRECT_STYLE = -1

NAMED_STYLE_NORMAL = "Normal"
NAMED_STYLE_HYPERLINK = "Hyperlink"

HYPERLINK_COLOR = "#0563C1"

_BUILTIN_STYLE_IDS = {
    NAMED_STYLE_NORMAL: 0,
    NAMED_STYLE_HYPERLINK: 8,
}


@dataclass(frozen=True, slots=True)
class Font:
    name: str | None = None
    size: float | None = None
    bold: bool = False
    italic: bool = False
    strike: bool = False
    underline: UnderlineType = UnderlineType.UNSET
    color: str | None = None

    @classmethod
    def default(cls, **overrides) -> Font:
        values = {"name": "Calibri", "size": 11.0}
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True, slots=True)
class Fill:
    pattern: str = "solid"
    color: str | None = None
    background: str | None = None


@dataclass(frozen=True, slots=True)
class Alignment:
    horizontal: str | None = None
    vertical: str | None = None
    wrap_text: bool = False


@dataclass(frozen=True, slots=True)
class StyleInfo:
    font: Font | None = None
    fill: Fill | None = None
    alignment: Alignment | None = None
    number_format: str | None = None
    named_style: str | None = None


def _hyperlink_style() -> StyleInfo:
    return StyleInfo(
        font=Font.default(underline=UnderlineType.SINGLE, color=HYPERLINK_COLOR),
        named_style=NAMED_STYLE_HYPERLINK,
    )


def _normal_style() -> StyleInfo:
    return StyleInfo(font=Font.default(), named_style=NAMED_STYLE_NORMAL)


DEFAULT_CATEGORIES: dict[str, Callable[[], StyleInfo]] = {
    NAMED_STYLE_NORMAL: _normal_style,
    NAMED_STYLE_HYPERLINK: _hyperlink_style,
}


@dataclass(slots=True)
class _StyleTable:
    items: list[StyleInfo] = field(default_factory=list)
    index: dict[StyleInfo, int] = field(default_factory=dict)

    def add(self, info: StyleInfo) -> tuple[int, bool]:
        existing = self.index.get(info)
        if existing is not None:
            return existing, False
        style_id = len(self.items)
        self.items.append(info)
        self.index[info] = style_id
        return style_id, True

    def get(self, style_id: int) -> StyleInfo | None:
        if 0 <= style_id < len(self.items):
            return self.items[style_id]
        return None


class StyleRegistry:
    def __init__(self) -> None:
        self._direct = _StyleTable()
        self._diff = _StyleTable()
        self._defaults: dict[str, int] = {}
        # cellXfs[0] is the workbook default and must always exist
        self._direct.add(StyleInfo())

    def add_styles(self, info: StyleInfo) -> int:
        if not isinstance(info, StyleInfo):
            raise TypeError(f"Expected StyleInfo, got {type(info).__name__}")
        style_id, created = self._direct.add(info)
        if created:
            logger.debug("Registered cell style %d: %s", style_id, info)
        return style_id

    def add_diff_styles(self, info: StyleInfo) -> int:
        if not isinstance(info, StyleInfo):
            raise TypeError(f"Expected StyleInfo, got {type(info).__name__}")
        style_id, created = self._diff.add(info)
        if created:
            logger.debug("Registered differential style %d: %s", style_id, info)
        return style_id

    def default_for(self, category: str) -> int:
        cached = self._defaults.get(category)
        if cached is not None:
            return cached
        factory = DEFAULT_CATEGORIES.get(category)
        if factory is None:
            raise UnknownStyleCategoryError(category)
        style_id = self.add_styles(factory())
        self._defaults[category] = style_id
        return style_id

    def get(self, style_id: int) -> StyleInfo | None:
        if style_id == DEFAULT_DIRECT_STYLE:
            return None
        return self._direct.get(style_id)

    def get_diff(self, style_id: int) -> StyleInfo | None:
        return self._diff.get(style_id)

    def __len__(self) -> int:
        return len(self._direct.items)

    @property
    def diff_count(self) -> int:
        return len(self._diff.items)

    def to_element(self) -> ET.Element:
        root = ET.Element(qn("styleSheet"))

        num_fmts: dict[str, int] = {}
        fonts: list[Font] = [Font.default()]
        fills: list[Fill | None] = [None, Fill(pattern="gray125")]
        xfs: list[dict[str, str]] = []
        for info in self._direct.items:
            xf = {"numFmtId": "0", "fontId": "0", "fillId": "0", "borderId": "0", "xfId": "0"}
            if info.number_format:
                fmt_id = num_fmts.setdefault(info.number_format, 164 + len(num_fmts))
                xf["numFmtId"] = str(fmt_id)
                xf["applyNumberFormat"] = "1"
            if info.font is not None:
                if info.font not in fonts:
                    fonts.append(info.font)
                xf["fontId"] = str(fonts.index(info.font))
                xf["applyFont"] = "1"
            if info.fill is not None:
                if info.fill not in fills:
                    fills.append(info.fill)
                xf["fillId"] = str(fills.index(info.fill))
                xf["applyFill"] = "1"
            xfs.append(xf)

        if num_fmts:
            fmts_elem = ET.SubElement(root, qn("numFmts"), count=str(len(num_fmts)))
            for code, fmt_id in num_fmts.items():
                ET.SubElement(fmts_elem, qn("numFmt"), numFmtId=str(fmt_id), formatCode=code)

        fonts_elem = ET.SubElement(root, qn("fonts"), count=str(len(fonts)))
        for font in fonts:
            fonts_elem.append(_font_element(font))

        fills_elem = ET.SubElement(root, qn("fills"), count=str(len(fills)))
        for fill in fills:
            fills_elem.append(_fill_element(fill))

        borders_elem = ET.SubElement(root, qn("borders"), count="1")
        ET.SubElement(borders_elem, qn("border"))

        style_xfs = ET.SubElement(root, qn("cellStyleXfs"), count="1")
        ET.SubElement(style_xfs, qn("xf"), numFmtId="0", fontId="0", fillId="0", borderId="0")

        xfs_elem = ET.SubElement(root, qn("cellXfs"), count=str(len(xfs)))
        for info, attrs in zip(self._direct.items, xfs):
            xf_elem = ET.SubElement(xfs_elem, qn("xf"), attrs)
            if info.alignment is not None:
                xf_elem.set("applyAlignment", "1")
                xf_elem.append(_alignment_element(info.alignment))

        named = sorted({info.named_style for info in self._direct.items if info.named_style})
        cell_styles = ET.SubElement(root, qn("cellStyles"), count=str(max(1, len(named))))
        if not named:
            named = [NAMED_STYLE_NORMAL]
        for name in named:
            attrs = {"name": name, "xfId": "0"}
            if name in _BUILTIN_STYLE_IDS:
                attrs["builtinId"] = str(_BUILTIN_STYLE_IDS[name])
            ET.SubElement(cell_styles, qn("cellStyle"), attrs)

        dxfs_elem = ET.SubElement(root, qn("dxfs"), count=str(len(self._diff.items)))
        for info in self._diff.items:
            dxf = ET.SubElement(dxfs_elem, qn("dxf"))
            if info.font is not None:
                dxf.append(_font_element(info.font))
            if info.number_format:
                ET.SubElement(dxf, qn("numFmt"), numFmtId="164", formatCode=info.number_format)
            if info.fill is not None:
                dxf.append(_fill_element(info.fill))
            if info.alignment is not None:
                dxf.append(_alignment_element(info.alignment))

        return root


def _color_attr(color: str) -> str:
    value = color.lstrip("#").upper()
    if len(value) == 6:
        value = "FF" + value
    return value


def _font_element(font: Font) -> ET.Element:
    elem = ET.Element(qn("font"))
    if font.bold:
        ET.SubElement(elem, qn("b"))
    if font.italic:
        ET.SubElement(elem, qn("i"))
    if font.strike:
        ET.SubElement(elem, qn("strike"))
    if font.underline != UnderlineType.UNSET:
        u_elem = ET.SubElement(elem, qn("u"))
        # single is the schema default for <u/>
        if font.underline != UnderlineType.SINGLE:
            UNDERLINE_TYPE.set_attr(u_elem, "val", font.underline)
    if font.size is not None:
        ET.SubElement(elem, qn("sz"), val=f"{font.size:g}")
    if font.color:
        ET.SubElement(elem, qn("color"), rgb=_color_attr(font.color))
    if font.name:
        ET.SubElement(elem, qn("name"), val=font.name)
    return elem


def _fill_element(fill: Fill | None) -> ET.Element:
    elem = ET.Element(qn("fill"))
    pattern = ET.SubElement(elem, qn("patternFill"), patternType=fill.pattern if fill else "none")
    if fill is not None and fill.color:
        ET.SubElement(pattern, qn("fgColor"), rgb=_color_attr(fill.color))
    if fill is not None and fill.background:
        ET.SubElement(pattern, qn("bgColor"), rgb=_color_attr(fill.background))
    return elem


def _alignment_element(alignment: Alignment) -> ET.Element:
    elem = ET.Element(qn("alignment"))
    if alignment.horizontal:
        elem.set("horizontal", alignment.horizontal)
    if alignment.vertical:
        elem.set("vertical", alignment.vertical)
    if alignment.wrap_text:
        elem.set("wrapText", "1")
    return elem
