"""Closed attribute enumerations and their token codec.

Every enumeration here reserves discriminant ``0`` for "unset". An unset value
is never written: the attribute is omitted, and an absent attribute decodes
back to the unset member. Any other token must be registered, otherwise
decoding fails instead of falling back to a default.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Generic, Mapping, TypeVar
from xml.etree import ElementTree as ET

from .errors import UnrecognizedTokenError

E = TypeVar("E", bound=IntEnum)

_CODECS: dict[type, EnumCodec] = {}


class EnumCodec(Generic[E]):
    def __init__(self, enum_type: type[E], tokens: Mapping[E, str]) -> None:
        zero = enum_type(0)
        if zero in tokens:
            raise ValueError(f"{enum_type.__name__}: unset member must not have a token")
        missing = [member.name for member in enum_type if member != zero and member not in tokens]
        if missing:
            raise ValueError(f"{enum_type.__name__}: no token for {', '.join(missing)}")
        if len(set(tokens.values())) != len(tokens):
            raise ValueError(f"{enum_type.__name__}: tokens must be unique")

        self.enum_type = enum_type
        self.zero = zero
        self._to_token: dict[E, str] = dict(tokens)
        self._from_token: dict[str, E] = {token: member for member, token in tokens.items()}
        _CODECS[enum_type] = self

    def encode(self, value: E) -> str | None:
        member = self.enum_type(value)
        if member == self.zero:
            return None
        return self._to_token[member]

    def decode(self, text: str | None) -> E:
        if text is None:
            return self.zero
        try:
            return self._from_token[text]
        except KeyError:
            raise UnrecognizedTokenError(self.enum_type.__name__, text) from None

    def set_attr(self, element: ET.Element, name: str, value: E) -> None:
        token = self.encode(value)
        if token is None:
            element.attrib.pop(name, None)
        else:
            element.set(name, token)

    def get_attr(self, element: ET.Element, name: str) -> E:
        return self.decode(element.attrib.get(name))

    @property
    def tokens(self) -> list[str]:
        return list(self._from_token)


def codec_for(enum_type: type[E]) -> EnumCodec[E]:
    return _CODECS[enum_type]


class TokenEnum(IntEnum):
    @property
    def token(self) -> str:
        return codec_for(type(self)).encode(self) or ""

    @classmethod
    def from_token(cls, text: str | None):
        return codec_for(cls).decode(text)

    def __str__(self) -> str:
        return self.token


class ConditionValueType(TokenEnum):
    UNSET = 0
    NUMBER = 1
    PERCENT = 2
    HIGHEST = 3
    LOWEST = 4
    FORMULA = 5
    PERCENTILE = 6


CONDITION_VALUE_TYPE = EnumCodec(
    ConditionValueType,
    {
        ConditionValueType.NUMBER: "num",
        ConditionValueType.PERCENT: "percent",
        ConditionValueType.HIGHEST: "max",
        ConditionValueType.LOWEST: "min",
        ConditionValueType.FORMULA: "formula",
        ConditionValueType.PERCENTILE: "percentile",
    },
)


class ConditionType(TokenEnum):
    UNSET = 0
    EXPRESSION = 1
    CELL_IS = 2
    COLOR_SCALE = 3
    DATA_BAR = 4
    ICON_SET = 5
    TOP10 = 6
    UNIQUE_VALUES = 7
    DUPLICATE_VALUES = 8
    CONTAINS_TEXT = 9
    NOT_CONTAINS_TEXT = 10
    BEGINS_WITH = 11
    ENDS_WITH = 12
    CONTAINS_BLANKS = 13
    NOT_CONTAINS_BLANKS = 14
    CONTAINS_ERRORS = 15
    NOT_CONTAINS_ERRORS = 16
    ABOVE_AVERAGE = 17


CONDITION_TYPE = EnumCodec(
    ConditionType,
    {
        ConditionType.EXPRESSION: "expression",
        ConditionType.CELL_IS: "cellIs",
        ConditionType.COLOR_SCALE: "colorScale",
        ConditionType.DATA_BAR: "dataBar",
        ConditionType.ICON_SET: "iconSet",
        ConditionType.TOP10: "top10",
        ConditionType.UNIQUE_VALUES: "uniqueValues",
        ConditionType.DUPLICATE_VALUES: "duplicateValues",
        ConditionType.CONTAINS_TEXT: "containsText",
        ConditionType.NOT_CONTAINS_TEXT: "notContainsText",
        ConditionType.BEGINS_WITH: "beginsWith",
        ConditionType.ENDS_WITH: "endsWith",
        ConditionType.CONTAINS_BLANKS: "containsBlanks",
        ConditionType.NOT_CONTAINS_BLANKS: "notContainsBlanks",
        ConditionType.CONTAINS_ERRORS: "containsErrors",
        ConditionType.NOT_CONTAINS_ERRORS: "notContainsErrors",
        ConditionType.ABOVE_AVERAGE: "aboveAverage",
    },
)


class ConditionOperator(TokenEnum):
    UNSET = 0
    LESS_THAN = 1
    LESS_THAN_OR_EQUAL = 2
    EQUAL = 3
    NOT_EQUAL = 4
    GREATER_THAN_OR_EQUAL = 5
    GREATER_THAN = 6
    BETWEEN = 7
    NOT_BETWEEN = 8
    CONTAINS_TEXT = 9
    NOT_CONTAINS = 10
    BEGINS_WITH = 11
    ENDS_WITH = 12


CONDITION_OPERATOR = EnumCodec(
    ConditionOperator,
    {
        ConditionOperator.LESS_THAN: "lessThan",
        ConditionOperator.LESS_THAN_OR_EQUAL: "lessThanOrEqual",
        ConditionOperator.EQUAL: "equal",
        ConditionOperator.NOT_EQUAL: "notEqual",
        ConditionOperator.GREATER_THAN_OR_EQUAL: "greaterThanOrEqual",
        ConditionOperator.GREATER_THAN: "greaterThan",
        ConditionOperator.BETWEEN: "between",
        ConditionOperator.NOT_BETWEEN: "notBetween",
        ConditionOperator.CONTAINS_TEXT: "containsText",
        ConditionOperator.NOT_CONTAINS: "notContains",
        ConditionOperator.BEGINS_WITH: "beginsWith",
        ConditionOperator.ENDS_WITH: "endsWith",
    },
)


class UnderlineType(TokenEnum):
    UNSET = 0
    SINGLE = 1
    DOUBLE = 2
    SINGLE_ACCOUNTING = 3
    DOUBLE_ACCOUNTING = 4
    NONE = 5


UNDERLINE_TYPE = EnumCodec(
    UnderlineType,
    {
        UnderlineType.SINGLE: "single",
        UnderlineType.DOUBLE: "double",
        UnderlineType.SINGLE_ACCOUNTING: "singleAccounting",
        UnderlineType.DOUBLE_ACCOUNTING: "doubleAccounting",
        UnderlineType.NONE: "none",
    },
)


class TargetMode(TokenEnum):
    INTERNAL = 0
    EXTERNAL = 1


TARGET_MODE = EnumCodec(TargetMode, {TargetMode.EXTERNAL: "External"})
