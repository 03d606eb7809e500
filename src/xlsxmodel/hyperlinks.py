from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Union
from urllib.parse import quote
from xml.etree import ElementTree as ET

from .errors import (
    HyperlinkTargetError,
    InvalidLinkShapeError,
    LimitExceededError,
    OverlapConflictError,
    ReferenceParseError,
)
from .model import Bounds, HyperlinkRecord
from .parser.namespaces import RELATION_TYPE_HYPERLINK, RID_ATTR, qn
from .parser.utils import parse_bounds, split_sheet_ref, to_indexes
from .styles import DEFAULT_DIRECT_STYLE, NAMED_STYLE_HYPERLINK

if TYPE_CHECKING:
    from .document import Sheet

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HyperlinkInfo:
    """Caller-facing description of a hyperlink.

    ``target`` is an external address (URL, ``mailto:``, file) and is stored
    through the sheet's relationships. ``location`` points inside the
    workbook (``Sheet1!A1`` or a defined name) and is stored inline.
    """

    target: str | None = None
    location: str | None = None
    tooltip: str | None = None
    display: str | None = None
    style_id: int = DEFAULT_DIRECT_STYLE

    @classmethod
    def to_target(cls, target: str, **kwargs) -> HyperlinkInfo:
        value = target.strip()
        if value.startswith("#"):
            return cls.to_bookmark(value[1:], **kwargs)
        if "://" in value or value.lower().startswith("mailto:"):
            return cls(target=value, **kwargs)

        path, hash_sign, location = value.partition("#")
        if hash_sign and not value.startswith("'"):
            return cls.to_file(path, location=location or None, **kwargs)

        sheet, ref = split_sheet_ref(value)
        if sheet is not None:
            try:
                return cls.to_ref(ref, sheet, **kwargs)
            except ReferenceParseError:
                pass
        return cls.to_file(value, **kwargs)

    @classmethod
    def to_url(cls, url: str, **kwargs) -> HyperlinkInfo:
        return cls(target=url, **kwargs)

    @classmethod
    def to_mail(cls, address: str, subject: str | None = None, **kwargs) -> HyperlinkInfo:
        target = f"mailto:{address}"
        if subject:
            target += f"?subject={quote(subject)}"
        return cls(target=target, **kwargs)

    @classmethod
    def to_file(cls, path: str, location: str | None = None, **kwargs) -> HyperlinkInfo:
        return cls(target=path, location=location, **kwargs)

    @classmethod
    def to_ref(cls, ref: str, sheet: str | None = None, **kwargs) -> HyperlinkInfo:
        bounds = parse_bounds(ref)
        if sheet is None:
            return cls(location=bounds.ref, **kwargs)
        if sheet.replace("_", "").isalnum():
            return cls(location=f"{sheet}!{bounds.ref}", **kwargs)
        escaped = sheet.replace("'", "''")
        return cls(location=f"'{escaped}'!{bounds.ref}", **kwargs)

    @classmethod
    def to_bookmark(cls, name: str, **kwargs) -> HyperlinkInfo:
        return cls(location=name, **kwargs)


LinkInput = Union[str, HyperlinkInfo]


@dataclass(slots=True)
class _ResolvedLink:
    target: str | None
    location: str | None
    tooltip: str | None
    display: str | None
    style_id: int


def _normalize_link(link: LinkInput) -> HyperlinkInfo:
    if isinstance(link, str):
        return HyperlinkInfo.to_target(link)
    if isinstance(link, HyperlinkInfo):
        return link
    raise InvalidLinkShapeError(link)


def _resolve_link(info: HyperlinkInfo, max_target_length: int) -> _ResolvedLink:
    if not info.target and not info.location:
        raise HyperlinkTargetError("", "hyperlink requires a target or a location")
    if info.target and len(info.target) > max_target_length:
        raise HyperlinkTargetError(info.target, f"exceeds Excel limit ({max_target_length}) for length")
    return _ResolvedLink(
        target=info.target or None,
        location=info.location or None,
        tooltip=info.tooltip,
        display=info.display,
        style_id=info.style_id,
    )


class Hyperlinks:
    """Non-overlapping hyperlinks of one sheet.

    Adding a hyperlink with exactly the bounds of an existing one replaces
    it; any other intersection is rejected. Removing clears every hyperlink
    that touches the given bounds.
    """

    def __init__(self, sheet: Sheet) -> None:
        self._sheet = sheet
        self._items: list[HyperlinkRecord] = []
        self._default_style_id: int | None = None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[HyperlinkRecord]:
        return iter(self._items)

    def add(self, bounds: Bounds, link: LinkInput) -> int:
        default_style_id = self._ensure_default_style()
        info = _normalize_link(link)

        existing_index: int | None = None
        for index, item in enumerate(self._items):
            if item.bounds.equals(bounds):
                existing_index = index
            elif item.bounds.overlaps(bounds):
                raise OverlapConflictError(item.bounds, bounds)

        options = self._sheet.document.options
        resolved = _resolve_link(info, options.max_target_length)

        if existing_index is None and len(self._items) >= options.hyperlink_limit:
            raise LimitExceededError(options.hyperlink_limit)

        rid = None
        if resolved.target:
            self._sheet.attach_relationships_if_required()
            relationships = self._sheet.relationships
            rid = relationships.get_id_by_target(resolved.target, RELATION_TYPE_HYPERLINK)
            if rid is None:
                rid = relationships.add_link(RELATION_TYPE_HYPERLINK, resolved.target)

        record = HyperlinkRecord(
            bounds=bounds,
            rid=rid,
            location=resolved.location,
            tooltip=resolved.tooltip,
            display=resolved.display,
        )
        if existing_index is None:
            self._items.append(record)
            logger.debug("Added hyperlink %s on sheet %s", bounds, self._sheet.name)
        else:
            self._items[existing_index] = record
            logger.debug("Replaced hyperlink %s on sheet %s", bounds, self._sheet.name)

        if resolved.style_id == DEFAULT_DIRECT_STYLE:
            return default_style_id
        return resolved.style_id

    def get(self, ref: str) -> HyperlinkInfo | None:
        if not self._items:
            return None

        col, row = to_indexes(ref)
        for item in self._items:
            if not item.bounds.contains(col, row):
                continue
            target = None
            if item.rid and self._sheet.relationships is not None:
                target = self._sheet.relationships.get_target_by_id(item.rid)
            cell = self._sheet.cells.get((col, row))
            return HyperlinkInfo(
                target=target,
                location=item.location,
                tooltip=item.tooltip,
                display=item.display,
                style_id=cell.style_id if cell is not None else DEFAULT_DIRECT_STYLE,
            )
        return None

    def remove(self, bounds: Bounds) -> None:
        if not self._items:
            return
        kept = [item for item in self._items if not item.bounds.overlaps(bounds)]
        removed = len(self._items) - len(kept)
        self._items = kept
        if removed:
            logger.debug("Removed %d hyperlink(s) touching %s on sheet %s", removed, bounds, self._sheet.name)

    def load(self, element: ET.Element) -> None:
        """Populate from a decoded ``<hyperlinks>`` element."""
        for link_elem in element.findall(qn("hyperlink")):
            bounds = parse_bounds(link_elem.attrib.get("ref", ""))
            for item in self._items:
                if item.bounds.overlaps(bounds):
                    raise OverlapConflictError(item.bounds, bounds)
            limit = self._sheet.document.options.hyperlink_limit
            if len(self._items) >= limit:
                raise LimitExceededError(limit)
            self._items.append(
                HyperlinkRecord(
                    bounds=bounds,
                    rid=link_elem.attrib.get(RID_ATTR),
                    location=link_elem.attrib.get("location"),
                    tooltip=link_elem.attrib.get("tooltip"),
                    display=link_elem.attrib.get("display"),
                )
            )

    def to_element(self) -> ET.Element | None:
        if not self._items:
            return None
        root = ET.Element(qn("hyperlinks"))
        for item in self._items:
            elem = ET.SubElement(root, qn("hyperlink"), ref=item.bounds.ref)
            if item.rid:
                elem.set(RID_ATTR, item.rid)
            if item.location:
                elem.set("location", item.location)
            if item.tooltip:
                elem.set("tooltip", item.tooltip)
            if item.display:
                elem.set("display", item.display)
        return root

    def _ensure_default_style(self) -> int:
        if self._default_style_id is None:
            self._default_style_id = self._sheet.document.styles.default_for(NAMED_STYLE_HYPERLINK)
        return self._default_style_id
