"""Map raw worksheet values onto typed dataclass records.

Columns are matched by header name. A dataclass field binds to the column named
after the field unless it declares an override with :func:`column`. The binding
table for a record type is built once and reused for every row.

Parsing is permissive: a cell that cannot be parsed leaves the field at its zero
value and mapping carries on.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple, Type, TypeVar, get_type_hints

__all__ = ["ColumnBinding", "build_index", "cell_text", "column", "map_rows", "map_row"]

log = logging.getLogger("vvgo.sheets.rows")

R = TypeVar("R")

_COLUMN_KEY = "column"
_INT_RE = re.compile(r"[+-]?\d+")
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}

_UNPARSED = object()


def column(name: str, *, default: Any = "") -> Any:
    """Declare a dataclass field read from the column ``name``."""

    return dataclasses.field(default=default, metadata={_COLUMN_KEY: name})


def cell_text(cell: Any) -> str:
    """Render a loosely typed cell the way the spreadsheet displays it."""

    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)


def _parse_str(cell: Any) -> Any:
    return cell_text(cell)


def _parse_bool(cell: Any) -> Any:
    text = cell_text(cell)
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return _UNPARSED


def _parse_int(cell: Any) -> Any:
    text = cell_text(cell)
    if not _INT_RE.fullmatch(text):
        return _UNPARSED
    return int(text)


_PARSERS: Dict[Any, Callable[[Any], Any]] = {
    str: _parse_str,
    bool: _parse_bool,
    int: _parse_int,
}


@dataclasses.dataclass(frozen=True, slots=True)
class ColumnBinding:
    column: str
    field: str
    parse: Callable[[Any], Any]


@functools.lru_cache(maxsize=None)
def bindings_for(record_type: type) -> Tuple[ColumnBinding, ...]:
    """Return the column -> field table for ``record_type``."""

    if not dataclasses.is_dataclass(record_type):
        raise TypeError(f"{record_type!r} is not a dataclass")
    hints = get_type_hints(record_type)
    table: List[ColumnBinding] = []
    for item in dataclasses.fields(record_type):
        parse = _PARSERS.get(hints.get(item.name))
        if parse is None:
            continue
        name = item.metadata.get(_COLUMN_KEY) or item.name
        table.append(ColumnBinding(column=name, field=item.name, parse=parse))
    return tuple(table)


def build_index(header: Sequence[Any]) -> Dict[str, int]:
    """Map each header cell's text to its column position."""

    return {cell_text(cell): idx for idx, cell in enumerate(header)}


def map_row(row: Sequence[Any], record_type: Type[R], index: Mapping[str, int]) -> R:
    values: Dict[str, Any] = {}
    for binding in bindings_for(record_type):
        col_idx = index.get(binding.column)
        if col_idx is None or col_idx >= len(row):
            continue
        parsed = binding.parse(row[col_idx])
        if parsed is _UNPARSED:
            log.debug(
                "cell left at default",
                extra={"column": binding.column, "cell": cell_text(row[col_idx])},
            )
            continue
        values[binding.field] = parsed
    return record_type(**values)


def map_rows(values: Sequence[Sequence[Any]], record_type: Type[R]) -> List[R]:
    """Build one ``record_type`` per data row; the first row is the header."""

    if not values:
        return []
    index = build_index(values[0])
    return [map_row(row or (), record_type, index) for row in values[1:]]
