from __future__ import annotations

import logging
from typing import Iterable, Union
from xml.etree import ElementTree as ET

from .conditional import ConditionalFormatting, RuleInfo
from .hyperlinks import HyperlinkInfo, Hyperlinks, LinkInput
from .model import Bounds, Cell, DocumentOptions
from .parser.utils import iter_cells_in_bounds, parse_bounds, parse_sqref, to_indexes
from .relationships import RelationshipTable
from .styles import DEFAULT_DIRECT_STYLE, StyleInfo, StyleRegistry

logger = logging.getLogger(__name__)

BoundsLike = Union[str, Bounds]


def _to_bounds(value: BoundsLike) -> Bounds:
    if isinstance(value, Bounds):
        return value
    return parse_bounds(value)


def _to_bounds_list(value: BoundsLike | Iterable[BoundsLike]) -> list[Bounds]:
    if isinstance(value, Bounds):
        return [value]
    if isinstance(value, str):
        return parse_sqref(value)
    return [_to_bounds(item) for item in value]


class Document:
    """One open workbook. Every sheet shares the document's style registry."""

    def __init__(self, *, options: DocumentOptions | None = None) -> None:
        self.options = options or DocumentOptions()
        self.styles = StyleRegistry()
        self.sheets: list[Sheet] = []

    def add_sheet(self, name: str) -> Sheet:
        if any(sheet.name == name for sheet in self.sheets):
            raise ValueError(f"Sheet already exists: {name}")
        sheet = Sheet(self, name, f"xl/worksheets/sheet{len(self.sheets) + 1}.xml")
        self.sheets.append(sheet)
        logger.debug("Added sheet %s (%s)", name, sheet.path)
        return sheet

    def sheet(self, name: str) -> Sheet:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        raise KeyError(name)

    def add_styles(self, info: StyleInfo) -> int:
        return self.styles.add_styles(info)


class Sheet:
    def __init__(self, document: Document, name: str, path: str) -> None:
        self.document = document
        self.name = name
        self.path = path
        self.cells: dict[tuple[int, int], Cell] = {}
        self.relationships: RelationshipTable | None = None
        self.hyperlinks = Hyperlinks(self)
        self.conditional_formatting: list[ConditionalFormatting] = []

    def attach_relationships_if_required(self) -> RelationshipTable:
        if self.relationships is None:
            self.relationships = RelationshipTable(self.path)
            logger.debug("Attached relationships to %s", self.path)
        return self.relationships

    def load_relationships(self, root: ET.Element) -> None:
        self.relationships = RelationshipTable.from_element(self.path, root)

    def cell(self, col: int, row: int) -> Cell:
        key = (col, row)
        cell = self.cells.get(key)
        if cell is None:
            cell = Cell(col=col, row=row, style_id=DEFAULT_DIRECT_STYLE)
            self.cells[key] = cell
        return cell

    def cell_by_ref(self, ref: str) -> Cell:
        col, row = to_indexes(ref)
        return self.cell(col, row)

    def set_style(self, target: BoundsLike, style_id: int) -> None:
        for col, row in iter_cells_in_bounds(_to_bounds(target)):
            self.cell(col, row).style_id = style_id

    def add_hyperlink(self, target: BoundsLike, link: LinkInput) -> int:
        bounds = _to_bounds(target)
        style_id = self.hyperlinks.add(bounds, link)
        self.set_style(bounds, style_id)
        return style_id

    def hyperlink(self, ref: str) -> HyperlinkInfo | None:
        return self.hyperlinks.get(ref)

    def remove_hyperlink(self, target: BoundsLike) -> None:
        self.hyperlinks.remove(_to_bounds(target))

    def add_conditional(
        self,
        target: BoundsLike | Iterable[BoundsLike],
        *rules: RuleInfo,
        pivot: bool = False,
    ) -> ConditionalFormatting:
        formatting = ConditionalFormatting(bounds=_to_bounds_list(target), rules=list(rules), pivot=pivot)
        formatting.validate()

        next_priority = max(
            (rule.rule.priority for item in self.conditional_formatting for rule in item.rules),
            default=0,
        )
        for rule in formatting.rules:
            if not rule.rule.priority:
                next_priority += 1
                rule.rule.priority = next_priority
            else:
                next_priority = max(next_priority, rule.rule.priority)

        self.conditional_formatting.append(formatting)
        logger.debug("Added %d conditional rule(s) for %s on sheet %s", len(rules), formatting.sqref, self.name)
        return formatting

    def remove_conditional(self, target: BoundsLike) -> None:
        bounds = _to_bounds(target)
        self.conditional_formatting = [
            item for item in self.conditional_formatting if not item.overlaps(bounds)
        ]

    def conditional_elements(self) -> list[ET.Element]:
        return [item.to_element(self.document.styles) for item in self.conditional_formatting]
