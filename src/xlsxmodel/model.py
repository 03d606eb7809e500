from __future__ import annotations

from dataclasses import dataclass, field

from .primitives import ConditionOperator, ConditionType, ConditionValueType

EXCEL_HYPERLINK_LIMIT = 65530
EXCEL_HYPERLINK_TARGET_LIMIT = 2079


@dataclass(slots=True)
class DocumentOptions:
    hyperlink_limit: int = EXCEL_HYPERLINK_LIMIT
    max_target_length: int = EXCEL_HYPERLINK_TARGET_LIMIT


@dataclass(frozen=True, slots=True)
class Bounds:
    """Zero-based, inclusive rectangle of cells on one sheet.

    Corners are normalized on construction, so ``Bounds(2, 2, 0, 0)`` and
    ``Bounds(0, 0, 2, 2)`` describe the same rectangle.
    """

    first_row: int
    first_col: int
    last_row: int
    last_col: int

    def __post_init__(self) -> None:
        if min(self.first_row, self.first_col, self.last_row, self.last_col) < 0:
            raise ValueError("Bounds indexes must be >= 0")
        if self.first_row > self.last_row:
            first, last = self.last_row, self.first_row
            object.__setattr__(self, "first_row", first)
            object.__setattr__(self, "last_row", last)
        if self.first_col > self.last_col:
            first, last = self.last_col, self.first_col
            object.__setattr__(self, "first_col", first)
            object.__setattr__(self, "last_col", last)

    @classmethod
    def from_ref(cls, ref: str) -> Bounds:
        from .parser.utils import parse_bounds

        return parse_bounds(ref)

    @property
    def ref(self) -> str:
        from .parser.utils import indexes_to_ref

        first = indexes_to_ref(self.first_col, self.first_row)
        if self.first_row == self.last_row and self.first_col == self.last_col:
            return first
        return f"{first}:{indexes_to_ref(self.last_col, self.last_row)}"

    def equals(self, other: Bounds) -> bool:
        return (
            self.first_row == other.first_row
            and self.first_col == other.first_col
            and self.last_row == other.last_row
            and self.last_col == other.last_col
        )

    def overlaps(self, other: Bounds) -> bool:
        return (
            self.first_row <= other.last_row
            and other.first_row <= self.last_row
            and self.first_col <= other.last_col
            and other.first_col <= self.last_col
        )

    def contains(self, col: int, row: int) -> bool:
        return self.first_col <= col <= self.last_col and self.first_row <= row <= self.last_row

    def __str__(self) -> str:
        return self.ref


@dataclass(slots=True)
class Cell:
    col: int
    row: int
    style_id: int
    value: str | None = None


@dataclass(slots=True)
class HyperlinkRecord:
    """Stored hyperlink entry: ``rid`` points into the sheet's relationships."""

    bounds: Bounds
    rid: str | None = None
    location: str | None = None
    tooltip: str | None = None
    display: str | None = None


@dataclass(frozen=True, slots=True)
class ValuePoint:
    """Threshold used by color scales, data bars and icon sets (``cfvo``)."""

    type: ConditionValueType
    value: str | None = None
    gte: bool = True


@dataclass(slots=True)
class ConditionalRule:
    type: ConditionType
    priority: int = 0
    stop_if_true: bool = False
    operator: ConditionOperator = ConditionOperator.UNSET
    formulas: list[str] = field(default_factory=list)
    value_type: ConditionValueType = ConditionValueType.UNSET
    text: str | None = None
    rank: int | None = None
    bottom: bool = False
    above_average: bool = True
    equal_average: bool = False
    std_dev: int | None = None
    points: list[ValuePoint] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    icon_set: str | None = None
    reverse: bool = False
    show_value: bool = True
