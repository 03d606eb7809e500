from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

from ..errors import MissingRequiredFieldError
from ..model import Bounds
from ..parser.namespaces import qn
from ..parser.utils import format_sqref, indexes_to_ref
from .rule import RuleInfo

if TYPE_CHECKING:
    from ..styles import StyleRegistry


@dataclass(slots=True)
class ConditionalFormatting:
    """Rules applied to one or more ranges (``<conditionalFormatting>``)."""

    bounds: list[Bounds]
    rules: list[RuleInfo] = field(default_factory=list)
    pivot: bool = False

    @property
    def sqref(self) -> str:
        return format_sqref(self.bounds)

    @property
    def anchor(self) -> str | None:
        if not self.bounds:
            return None
        first = self.bounds[0]
        return indexes_to_ref(first.first_col, first.first_row)

    def validate(self) -> None:
        if not self.bounds:
            raise MissingRequiredFieldError("conditional_formatting", "bounds")
        if not self.rules:
            raise MissingRequiredFieldError("conditional_formatting", "rules")
        for rule in self.rules:
            rule.validate()

    def overlaps(self, bounds: Bounds) -> bool:
        return any(item.overlaps(bounds) for item in self.bounds)

    def to_element(self, registry: StyleRegistry) -> ET.Element:
        self.validate()
        elem = ET.Element(qn("conditionalFormatting"), sqref=self.sqref)
        if self.pivot:
            elem.set("pivot", "1")
        for rule in self.rules:
            elem.append(rule.to_element(registry, anchor=self.anchor))
        return elem
