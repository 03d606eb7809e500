from __future__ import annotations

from xml.etree import ElementTree as ET

from ..errors import MissingRequiredFieldError
from ..model import ConditionalRule, ValuePoint
from ..parser.namespaces import qn
from ..primitives import CONDITION_OPERATOR, CONDITION_VALUE_TYPE, ConditionOperator, ConditionType, ConditionValueType
from ..styles import StyleInfo
from .rule import Option, RuleInfo

# value types that need an explicit value next to them
_VALUED_TYPES = {
    ConditionValueType.NUMBER,
    ConditionValueType.PERCENT,
    ConditionValueType.FORMULA,
    ConditionValueType.PERCENTILE,
}


def _color_attr(color: str) -> str:
    value = color.lstrip("#").upper()
    if len(value) == 6:
        value = "FF" + value
    return value


def _quote_text(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


class RuleVariant:
    name = "rule"
    rule_type = ConditionType.UNSET

    def apply_defaults(self, rule: ConditionalRule) -> None:
        pass

    def validate(self, rule: ConditionalRule) -> None:
        pass

    def formulas(self, rule: ConditionalRule, anchor: str | None) -> list[str]:
        return list(rule.formulas)

    def write_attributes(self, rule: ConditionalRule, elem: ET.Element) -> None:
        pass

    def write_children(self, rule: ConditionalRule, elem: ET.Element) -> None:
        pass

    def _require(self, condition: bool, field_name: str) -> None:
        if not condition:
            raise MissingRequiredFieldError(self.name, field_name)

    def _option(self, mutate) -> Option:
        def apply(r: RuleInfo) -> None:
            mutate(r, r.ensure_initialized(self))

        return apply

    def styles(self, style: StyleInfo) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            r.style = style

        return self._option(mutate)

    def priority(self, value: int) -> Option:
        if value < 1:
            raise ValueError("Rule priority must be >= 1")

        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.priority = value

        return self._option(mutate)

    def stop_if_true(self, value: bool = True) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.stop_if_true = value

        return self._option(mutate)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class DuplicateRule(RuleVariant):
    name = "duplicate"
    rule_type = ConditionType.DUPLICATE_VALUES


class UniqueRule(RuleVariant):
    name = "unique"
    rule_type = ConditionType.UNIQUE_VALUES


class RankRule(RuleVariant):
    """Top/bottom N items. N counts items unless the value type is a percentage."""

    name = "rank"
    rule_type = ConditionType.TOP10

    def apply_defaults(self, rule: ConditionalRule) -> None:
        rule.rank = 10

    def top(self, rank: int = 10) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.rank = rank
            rule.bottom = False

        return self._option(mutate)

    def bottom(self, rank: int = 10) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.rank = rank
            rule.bottom = True

        return self._option(mutate)

    def value_type(self, value_type: ConditionValueType) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.value_type = ConditionValueType(value_type)

        return self._option(mutate)

    def validate(self, rule: ConditionalRule) -> None:
        self._require(rule.value_type != ConditionValueType.UNSET, "value_type")
        self._require(rule.rank is not None and rule.rank > 0, "rank")

    def write_attributes(self, rule: ConditionalRule, elem: ET.Element) -> None:
        if rule.value_type in {ConditionValueType.PERCENT, ConditionValueType.PERCENTILE}:
            elem.set("percent", "1")
        if rule.bottom:
            elem.set("bottom", "1")
        elem.set("rank", str(rule.rank))


class AverageRule(RuleVariant):
    name = "average"
    rule_type = ConditionType.ABOVE_AVERAGE

    def above(self, equal: bool = False) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.above_average = True
            rule.equal_average = equal

        return self._option(mutate)

    def below(self, equal: bool = False) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.above_average = False
            rule.equal_average = equal

        return self._option(mutate)

    def std_dev(self, value: int) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.std_dev = value

        return self._option(mutate)

    def write_attributes(self, rule: ConditionalRule, elem: ET.Element) -> None:
        if not rule.above_average:
            elem.set("aboveAverage", "0")
        if rule.equal_average:
            elem.set("equalAverage", "1")
        if rule.std_dev:
            elem.set("stdDev", str(rule.std_dev))


class ValueRule(RuleVariant):
    """Compares cell values against one or two formulas (``cellIs``)."""

    name = "value"
    rule_type = ConditionType.CELL_IS

    def condition(self, operator: ConditionOperator, *formulas: str) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.operator = ConditionOperator(operator)
            rule.formulas = [str(formula) for formula in formulas]

        return self._option(mutate)

    def greater_than(self, formula: str) -> Option:
        return self.condition(ConditionOperator.GREATER_THAN, formula)

    def greater_than_or_equal(self, formula: str) -> Option:
        return self.condition(ConditionOperator.GREATER_THAN_OR_EQUAL, formula)

    def less_than(self, formula: str) -> Option:
        return self.condition(ConditionOperator.LESS_THAN, formula)

    def less_than_or_equal(self, formula: str) -> Option:
        return self.condition(ConditionOperator.LESS_THAN_OR_EQUAL, formula)

    def equal(self, formula: str) -> Option:
        return self.condition(ConditionOperator.EQUAL, formula)

    def not_equal(self, formula: str) -> Option:
        return self.condition(ConditionOperator.NOT_EQUAL, formula)

    def between(self, low: str, high: str) -> Option:
        return self.condition(ConditionOperator.BETWEEN, low, high)

    def not_between(self, low: str, high: str) -> Option:
        return self.condition(ConditionOperator.NOT_BETWEEN, low, high)

    def validate(self, rule: ConditionalRule) -> None:
        self._require(rule.operator != ConditionOperator.UNSET, "operator")
        self._require(len(rule.formulas) >= 1, "formula")
        if rule.operator in {ConditionOperator.BETWEEN, ConditionOperator.NOT_BETWEEN}:
            self._require(len(rule.formulas) >= 2, "formula2")

    def write_attributes(self, rule: ConditionalRule, elem: ET.Element) -> None:
        CONDITION_OPERATOR.set_attr(elem, "operator", rule.operator)


class ExpressionRule(RuleVariant):
    name = "expression"
    rule_type = ConditionType.EXPRESSION

    def formula(self, formula: str) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.formulas = [formula.lstrip("=")]

        return self._option(mutate)

    def validate(self, rule: ConditionalRule) -> None:
        self._require(any(formula.strip() for formula in rule.formulas), "formula")


class TextRule(RuleVariant):
    def __init__(self, name: str, rule_type: ConditionType, operator: ConditionOperator, template: str) -> None:
        self.name = name
        self.rule_type = rule_type
        self.operator = operator
        self.template = template

    def apply_defaults(self, rule: ConditionalRule) -> None:
        rule.operator = self.operator

    def text(self, value: str) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.text = value

        return self._option(mutate)

    def validate(self, rule: ConditionalRule) -> None:
        self._require(bool(rule.text), "text")

    def formulas(self, rule: ConditionalRule, anchor: str | None) -> list[str]:
        if rule.formulas or anchor is None:
            return list(rule.formulas)
        return [self.template.format(text=_quote_text(rule.text), length=len(rule.text), cell=anchor)]

    def write_attributes(self, rule: ConditionalRule, elem: ET.Element) -> None:
        CONDITION_OPERATOR.set_attr(elem, "operator", rule.operator)
        elem.set("text", rule.text)


class CellStateRule(RuleVariant):
    """Blank/error checks; the formula is derived from the top-left cell."""

    def __init__(self, name: str, rule_type: ConditionType, template: str) -> None:
        self.name = name
        self.rule_type = rule_type
        self.template = template

    def formulas(self, rule: ConditionalRule, anchor: str | None) -> list[str]:
        if rule.formulas or anchor is None:
            return list(rule.formulas)
        return [self.template.format(cell=anchor)]


class _ScaleRule(RuleVariant):
    def _validate_points(self, points: list[ValuePoint]) -> None:
        for point in points:
            self._require(point.type != ConditionValueType.UNSET, "value_type")
            if point.type in _VALUED_TYPES:
                self._require(point.value is not None and point.value != "", "value")

    def _point_element(self, parent: ET.Element, point: ValuePoint) -> None:
        cfvo = ET.SubElement(parent, qn("cfvo"))
        CONDITION_VALUE_TYPE.set_attr(cfvo, "type", point.type)
        if point.value is not None:
            cfvo.set("val", point.value)
        if not point.gte:
            cfvo.set("gte", "0")


class ColorScaleRule(_ScaleRule):
    name = "color_scale"
    rule_type = ConditionType.COLOR_SCALE

    def point(self, value_type: ConditionValueType, color: str, value: str | None = None) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.points.append(ValuePoint(ConditionValueType(value_type), value))
            rule.colors.append(color)

        return self._option(mutate)

    def two_color(self, min_color: str, max_color: str) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.points = [ValuePoint(ConditionValueType.LOWEST), ValuePoint(ConditionValueType.HIGHEST)]
            rule.colors = [min_color, max_color]

        return self._option(mutate)

    def three_color(self, min_color: str, mid_color: str, max_color: str) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.points = [
                ValuePoint(ConditionValueType.LOWEST),
                ValuePoint(ConditionValueType.PERCENTILE, "50"),
                ValuePoint(ConditionValueType.HIGHEST),
            ]
            rule.colors = [min_color, mid_color, max_color]

        return self._option(mutate)

    def validate(self, rule: ConditionalRule) -> None:
        self._require(2 <= len(rule.points) <= 3, "points")
        self._validate_points(rule.points)
        self._require(len(rule.colors) == len(rule.points), "colors")

    def write_children(self, rule: ConditionalRule, elem: ET.Element) -> None:
        scale = ET.SubElement(elem, qn("colorScale"))
        for point in rule.points:
            self._point_element(scale, point)
        for color in rule.colors:
            ET.SubElement(scale, qn("color"), rgb=_color_attr(color))


class DataBarRule(_ScaleRule):
    name = "data_bar"
    rule_type = ConditionType.DATA_BAR

    def apply_defaults(self, rule: ConditionalRule) -> None:
        rule.points = [ValuePoint(ConditionValueType.UNSET), ValuePoint(ConditionValueType.UNSET)]

    def min(self, value_type: ConditionValueType, value: str | None = None) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.points[0] = ValuePoint(ConditionValueType(value_type), value)

        return self._option(mutate)

    def max(self, value_type: ConditionValueType, value: str | None = None) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.points[1] = ValuePoint(ConditionValueType(value_type), value)

        return self._option(mutate)

    def color(self, color: str) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.colors = [color]

        return self._option(mutate)

    def show_value(self, value: bool = True) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.show_value = value

        return self._option(mutate)

    def validate(self, rule: ConditionalRule) -> None:
        self._validate_points(rule.points)
        self._require(len(rule.colors) == 1, "color")

    def write_children(self, rule: ConditionalRule, elem: ET.Element) -> None:
        bar = ET.SubElement(elem, qn("dataBar"))
        if not rule.show_value:
            bar.set("showValue", "0")
        for point in rule.points:
            self._point_element(bar, point)
        ET.SubElement(bar, qn("color"), rgb=_color_attr(rule.colors[0]))


class IconSetRule(_ScaleRule):
    name = "icon_set"
    rule_type = ConditionType.ICON_SET

    def apply_defaults(self, rule: ConditionalRule) -> None:
        rule.icon_set = "3TrafficLights1"

    def icons(self, name: str) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.icon_set = name

        return self._option(mutate)

    def point(self, value_type: ConditionValueType, value: str | None = None, gte: bool = True) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.points.append(ValuePoint(ConditionValueType(value_type), value, gte))

        return self._option(mutate)

    def reverse(self, value: bool = True) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.reverse = value

        return self._option(mutate)

    def show_value(self, value: bool = True) -> Option:
        def mutate(r: RuleInfo, rule: ConditionalRule) -> None:
            rule.show_value = value

        return self._option(mutate)

    def validate(self, rule: ConditionalRule) -> None:
        self._require(bool(rule.icon_set), "icon_set")
        self._require(len(rule.points) >= 2, "points")
        self._validate_points(rule.points)

    def write_children(self, rule: ConditionalRule, elem: ET.Element) -> None:
        icons = ET.SubElement(elem, qn("iconSet"), iconSet=rule.icon_set)
        if rule.reverse:
            icons.set("reverse", "1")
        if not rule.show_value:
            icons.set("showValue", "0")
        for point in rule.points:
            self._point_element(icons, point)


Duplicate = DuplicateRule()
Unique = UniqueRule()
Rank = RankRule()
Average = AverageRule()
Value = ValueRule()
Expression = ExpressionRule()
ContainsText = TextRule(
    "contains_text",
    ConditionType.CONTAINS_TEXT,
    ConditionOperator.CONTAINS_TEXT,
    "NOT(ISERROR(SEARCH({text},{cell})))",
)
NotContainsText = TextRule(
    "not_contains_text",
    ConditionType.NOT_CONTAINS_TEXT,
    ConditionOperator.NOT_CONTAINS,
    "ISERROR(SEARCH({text},{cell}))",
)
BeginsWith = TextRule(
    "begins_with",
    ConditionType.BEGINS_WITH,
    ConditionOperator.BEGINS_WITH,
    "LEFT({cell},{length})={text}",
)
EndsWith = TextRule(
    "ends_with",
    ConditionType.ENDS_WITH,
    ConditionOperator.ENDS_WITH,
    "RIGHT({cell},{length})={text}",
)
Blanks = CellStateRule("blanks", ConditionType.CONTAINS_BLANKS, "LEN(TRIM({cell}))=0")
NoBlanks = CellStateRule("no_blanks", ConditionType.NOT_CONTAINS_BLANKS, "LEN(TRIM({cell}))>0")
Errors = CellStateRule("errors", ConditionType.CONTAINS_ERRORS, "ISERROR({cell})")
NoErrors = CellStateRule("no_errors", ConditionType.NOT_CONTAINS_ERRORS, "NOT(ISERROR({cell}))")
ColorScale = ColorScaleRule()
DataBar = DataBarRule()
IconSet = IconSetRule()

VARIANTS: tuple[RuleVariant, ...] = (
    Duplicate,
    Unique,
    Rank,
    Average,
    Value,
    Expression,
    ContainsText,
    NotContainsText,
    BeginsWith,
    EndsWith,
    Blanks,
    NoBlanks,
    Errors,
    NoErrors,
    ColorScale,
    DataBar,
    IconSet,
)
