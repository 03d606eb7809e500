from ..model import ValuePoint
from .formatting import ConditionalFormatting
from .rule import Option, RuleInfo, new_rule
from .variants import (
    VARIANTS,
    Average,
    BeginsWith,
    Blanks,
    ColorScale,
    ContainsText,
    DataBar,
    Duplicate,
    EndsWith,
    Errors,
    Expression,
    IconSet,
    NoBlanks,
    NoErrors,
    NotContainsText,
    Rank,
    RuleVariant,
    Unique,
    Value,
)

__all__ = [
    "Average",
    "BeginsWith",
    "Blanks",
    "ColorScale",
    "ConditionalFormatting",
    "ContainsText",
    "DataBar",
    "Duplicate",
    "EndsWith",
    "Errors",
    "Expression",
    "IconSet",
    "NoBlanks",
    "NoErrors",
    "NotContainsText",
    "Option",
    "Rank",
    "RuleInfo",
    "RuleVariant",
    "Unique",
    "VARIANTS",
    "Value",
    "ValuePoint",
    "new_rule",
]
