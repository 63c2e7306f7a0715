from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Sequence

import pandas as pd

from table_browser.core.models import CellValue, HeaderDefinition, RowRecord, SortDirection
from table_browser.core.table_state import SortRequested

logger = logging.getLogger(__name__)

# Caller-supplied callback: (column_index, direction) -> None
OnSort = Callable[[int, SortDirection], None]

# Pluggable comparison policy: cell -> sortable key
SortKey = Callable[[CellValue], Any]


def next_direction(current: SortDirection) -> SortDirection:
    """none/desc -> asc, asc -> desc."""
    if SortDirection(current) is SortDirection.ASC:
        return SortDirection.DESC
    return SortDirection.ASC


class SortCoordinator:
    """
    Tracks sort direction per header and turns header clicks into sort requests.

    The coordinator never reorders rows. It hands (column_index, direction)
    to the registered callback; the caller re-sorts its rows and feeds them
    back, together with headers carrying the new direction.
    """

    def __init__(self, headers: Sequence[HeaderDefinition], on_sort: Optional[OnSort] = None) -> None:
        self.headers = list(headers)
        self.on_sort = on_sort

    def direction_of(self, column_index: int) -> SortDirection:
        if 0 <= column_index < len(self.headers):
            return self.headers[column_index].sort_direction
        return SortDirection.NONE

    def click(self, column_index: int) -> Optional[SortRequested]:
        """
        Header click. Inert (None) for out-of-range or non-sortable columns,
        and when nobody is listening for sort requests.
        """
        if not 0 <= column_index < len(self.headers):
            return None

        header = self.headers[column_index]
        if not header.sortable or self.on_sort is None:
            return None

        direction = next_direction(header.sort_direction)
        command = SortRequested(column_index=column_index, direction=direction)

        logger.info(
            "Sort requested",
            extra={"column_index": column_index, "direction": direction.value},
        )
        self.on_sort(column_index, direction)
        return command


# -------------------------------------------------------------------------
# Caller-side helpers: the engine does not use these itself
# -------------------------------------------------------------------------
def text_key(cell: CellValue) -> Any:
    return cell.text.casefold()


def numeric_key(cell: CellValue) -> Any:
    """Numbers first in numeric order, non-numeric text after them."""
    try:
        number = float(cell.text.replace(",", ""))
    except ValueError:
        number = None
    # "nan" and "inf" parse as floats but have no place in numeric order
    if number is None or not math.isfinite(number):
        return (1, 0.0, cell.text.casefold())
    return (0, number, "")


def date_key(cell: CellValue) -> Any:
    """Parsed dates in order; unparseable values after them."""
    ts = pd.to_datetime(cell.text, errors="coerce")
    if pd.isna(ts):
        return (1, 0, cell.text.casefold())
    return (0, ts.value, "")


SORT_KEYS: Dict[str, SortKey] = {
    "text": text_key,
    "numeric": numeric_key,
    "date": date_key,
}


def sort_rows(
    rows: Sequence[RowRecord],
    column_index: int,
    direction: SortDirection,
    key: SortKey = text_key,
) -> List[RowRecord]:
    """
    Return `rows` sorted by one column. Stable; `none` keeps the given order.
    Rows that have no cell at `column_index` go last in both directions.
    """
    direction = SortDirection(direction)
    if direction is SortDirection.NONE:
        return list(rows)

    present = [row for row in rows if 0 <= column_index < len(row) and row[column_index] is not None]
    missing = [row for row in rows if not (0 <= column_index < len(row) and row[column_index] is not None)]

    ordered = sorted(
        present,
        key=lambda row: key(row[column_index]),
        reverse=direction is SortDirection.DESC,
    )
    return ordered + missing


def apply_sort_to_headers(
    headers: Sequence[HeaderDefinition],
    column_index: int,
    direction: SortDirection,
    exclusive: bool = True,
) -> List[HeaderDefinition]:
    """
    Headers with `direction` set on `column_index`. With `exclusive`, every
    other column goes back to `none` (one active sort column at a time).
    """
    out: List[HeaderDefinition] = []
    for idx, header in enumerate(headers):
        if idx == column_index:
            out.append(header.with_sort_direction(direction))
        elif exclusive and header.sort_direction is not SortDirection.NONE:
            out.append(header.with_sort_direction(SortDirection.NONE))
        else:
            out.append(header)
    return out
