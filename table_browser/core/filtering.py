from __future__ import annotations

import logging
from typing import List, Sequence

from table_browser.core.models import FilterValues, RowRecord
from table_browser.validation.table_validation import handle_fault

logger = logging.getLogger(__name__)


def _cell_matches(row: RowRecord, column_index: int, needle: str, case_sensitive: bool) -> bool:
    if column_index < 0 or column_index >= len(row):
        return False

    cell = row[column_index]
    if cell is None:
        return False

    haystack = cell.text
    if case_sensitive:
        return needle in haystack
    return needle.lower() in haystack.lower()


def _row_matches(row: RowRecord, entries: Sequence[tuple[int, str]], case_sensitive: bool) -> bool:
    for column_index, needle in entries:
        # Blank entries are "no filter on this column"
        if not needle.strip():
            continue
        if not _cell_matches(row, column_index, needle, case_sensitive):
            return False
    return True


def filter_rows(
    rows: Sequence[RowRecord],
    filter_values: FilterValues,
    case_sensitive: bool = False,
) -> Sequence[RowRecord]:
    """
    Keep the rows whose cells contain every active filter string.

    - Empty filter map: returns `rows` itself.
    - Substring match on CellValue.text, case-insensitive unless
      `case_sensitive` is set.
    - A column index outside the row, or a missing cell, fails the match.
    - Any unexpected fault is logged and the unfiltered rows are returned.
    """
    if not filter_values:
        return rows

    try:
        entries = [(int(col), str(value)) for col, value in filter_values.items()]
        filtered: List[RowRecord] = [
            row for row in rows if _row_matches(row, entries, case_sensitive)
        ]
    except Exception as e:
        return handle_fault(
            e,
            rows,
            {"operation": "filter_rows", "n_rows": len(rows), "n_filters": len(filter_values)},
        )

    logger.debug(
        "Filtered rows",
        extra={"n_rows": len(rows), "n_kept": len(filtered), "n_filters": len(entries)},
    )
    return filtered
