from .document import Document, Sheet
from .hyperlinks import HyperlinkInfo, Hyperlinks
from .model import Bounds, DocumentOptions
from .primitives import ConditionOperator, ConditionType, ConditionValueType, EnumCodec, UnderlineType
from .relationships import Relationship, RelationshipTable
from .styles import DEFAULT_DIRECT_STYLE, Alignment, Fill, Font, StyleInfo, StyleRegistry

__all__ = [
    "Alignment",
    "Bounds",
    "ConditionOperator",
    "ConditionType",
    "ConditionValueType",
    "DEFAULT_DIRECT_STYLE",
    "Document",
    "DocumentOptions",
    "EnumCodec",
    "Fill",
    "Font",
    "HyperlinkInfo",
    "Hyperlinks",
    "Relationship",
    "RelationshipTable",
    "Sheet",
    "StyleInfo",
    "StyleRegistry",
    "UnderlineType",
]
