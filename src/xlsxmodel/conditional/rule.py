from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable
from xml.etree import ElementTree as ET

from ..errors import MissingRequiredFieldError
from ..model import ConditionalRule
from ..parser.namespaces import qn
from ..primitives import CONDITION_TYPE, ConditionType

if TYPE_CHECKING:
    from ..styles import StyleInfo, StyleRegistry
    from .variants import RuleVariant

logger = logging.getLogger(__name__)

Option = Callable[["RuleInfo"], None]


class RuleInfo:
    """One conditional formatting rule under construction.

    A rule starts uninitialized. The first option applied fixes its variant
    and type; options from a different variant after that are rejected.
    """

    def __init__(self, *options: Option) -> None:
        self.rule: ConditionalRule | None = None
        self.variant: RuleVariant | None = None
        self.style: StyleInfo | None = None
        self.set(*options)

    @property
    def initialized(self) -> bool:
        return self.rule is not None

    @property
    def type(self) -> ConditionType:
        return self.rule.type if self.rule is not None else ConditionType.UNSET

    def set(self, *options: Option) -> RuleInfo:
        for option in options:
            option(self)
        return self

    def ensure_initialized(self, variant: RuleVariant) -> ConditionalRule:
        if self.rule is None:
            self.variant = variant
            self.rule = ConditionalRule(type=variant.rule_type)
            variant.apply_defaults(self.rule)
            logger.debug("Initialized conditional rule as %s", variant.name)
        elif self.variant is not variant:
            raise ValueError(
                f"Rule is already initialized as '{self.variant.name}', can't apply '{variant.name}' options"
            )
        return self.rule

    def validate(self) -> None:
        if self.rule is None or self.variant is None:
            raise MissingRequiredFieldError("rule", "type")
        self.variant.validate(self.rule)

    def to_element(self, registry: StyleRegistry, anchor: str | None = None) -> ET.Element:
        self.validate()
        rule = self.rule

        elem = ET.Element(qn("cfRule"))
        CONDITION_TYPE.set_attr(elem, "type", rule.type)
        if self.style is not None:
            elem.set("dxfId", str(registry.add_diff_styles(self.style)))
        elem.set("priority", str(rule.priority or 1))
        if rule.stop_if_true:
            elem.set("stopIfTrue", "1")

        self.variant.write_attributes(rule, elem)
        for formula in self.variant.formulas(rule, anchor):
            ET.SubElement(elem, qn("formula")).text = formula
        self.variant.write_children(rule, elem)
        return elem


def new_rule(*options: Option) -> RuleInfo:
    return RuleInfo(*options)
