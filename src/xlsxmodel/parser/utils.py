from __future__ import annotations

import re
from typing import Iterable

from ..errors import ReferenceParseError
from ..model import Bounds

CELL_RE = re.compile(r"^\$?([A-Z]{1,3})\$?([1-9]\d*)$")
RANGE_RE = re.compile(r"^\$?([A-Z]{1,3})\$?([1-9]\d*):\$?([A-Z]{1,3})\$?([1-9]\d*)$")
SHEET_REF_RE = re.compile(r"^(?:'([^']+)'|([^!]+))!(.+)$")

MAX_COLUMNS = 16384
MAX_ROWS = 1048576


def col_to_index(col: str) -> int:
    """Column letters to a zero-based column index ("A" -> 0)."""
    value = 0
    for char in col.upper():
        value = value * 26 + (ord(char) - 64)
    return value - 1


def index_to_col(index: int) -> str:
    if index < 0:
        raise ValueError("Column index must be >= 0")
    result: list[str] = []
    value = index + 1
    while value > 0:
        value, rem = divmod(value - 1, 26)
        result.append(chr(65 + rem))
    return "".join(reversed(result))


def to_indexes(ref: str) -> tuple[int, int]:
    """Single-cell reference to zero-based ``(col, row)``."""
    match = CELL_RE.match(ref.strip().upper()) if isinstance(ref, str) else None
    if not match:
        raise ReferenceParseError(ref)
    col = col_to_index(match.group(1))
    row = int(match.group(2)) - 1
    if col >= MAX_COLUMNS or row >= MAX_ROWS:
        raise ReferenceParseError(ref)
    return col, row


def indexes_to_ref(col: int, row: int) -> str:
    if row < 0 or col < 0:
        raise ValueError("row/col must be >= 0")
    return f"{index_to_col(col)}{row + 1}"


def parse_bounds(ref: str) -> Bounds:
    normalized = ref.strip().upper().replace("$", "")
    range_match = RANGE_RE.match(normalized)
    if range_match:
        first_col, first_row = to_indexes(range_match.group(1) + range_match.group(2))
        last_col, last_row = to_indexes(range_match.group(3) + range_match.group(4))
        return Bounds(first_row, first_col, last_row, last_col)

    col, row = to_indexes(normalized)
    return Bounds(row, col, row, col)


def split_sheet_ref(value: str) -> tuple[str | None, str]:
    match = SHEET_REF_RE.match(value.strip())
    if not match:
        return None, value.strip()
    return match.group(1) or match.group(2), match.group(3)


def parse_sqref(sqref: str) -> list[Bounds]:
    return [parse_bounds(token) for token in sqref.split() if token.strip()]


def format_sqref(bounds: Iterable[Bounds]) -> str:
    return " ".join(item.ref for item in bounds)


def iter_cells_in_bounds(bounds: Bounds) -> Iterable[tuple[int, int]]:
    for row in range(bounds.first_row, bounds.last_row + 1):
        for col in range(bounds.first_col, bounds.last_col + 1):
            yield col, row
