from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from table_browser.core.models import RowRecord, SelectionType
from table_browser.validation.table_validation import handle_fault

logger = logging.getLogger(__name__)


def row_index_for(
    visible_position: int,
    pagination_enabled: bool,
    current_page: int,
    items_per_page: int,
) -> int:
    """Map a position on the visible page to an absolute (post-filter) row index."""
    if pagination_enabled:
        return (current_page - 1) * items_per_page + visible_position
    return visible_position


def visible_row_indices(
    visible_rows: Sequence[RowRecord],
    pagination_enabled: bool,
    current_page: int,
    items_per_page: int,
) -> List[int]:
    return [
        row_index_for(pos, pagination_enabled, current_page, items_per_page)
        for pos in range(len(visible_rows))
    ]


def toggle_selection(
    row_index: int,
    selection_type: SelectionType,
    current_selection: Iterable[int],
) -> Tuple[int, ...]:
    """
    single:   selecting the sole selected row clears it, anything else replaces it
    multiple: add when absent, remove when present
    """
    current = tuple(current_selection)

    if SelectionType(selection_type) is SelectionType.SINGLE:
        if current == (row_index,):
            return ()
        return (row_index,)

    if row_index in current:
        return tuple(i for i in current if i != row_index)
    return current + (row_index,)


def all_visible_selected(
    visible_rows: Sequence[RowRecord],
    selection: Iterable[int],
    pagination_enabled: bool,
    current_page: int,
    items_per_page: int,
) -> bool:
    """True iff every visible row is selected. An empty page is never "all selected"."""
    try:
        if not visible_rows:
            return False
        selected = set(selection)
        return all(
            idx in selected
            for idx in visible_row_indices(visible_rows, pagination_enabled, current_page, items_per_page)
        )
    except Exception as e:
        return handle_fault(e, False, {"operation": "all_visible_selected"})


def select_all_visible(
    visible_rows: Sequence[RowRecord],
    selection: Iterable[int],
    selection_type: SelectionType,
    pagination_enabled: bool,
    current_page: int,
    items_per_page: int,
) -> Tuple[int, ...]:
    """
    Select-all checkbox behaviour for the visible page.

    When every visible row is already selected they are removed from the
    selection, otherwise the missing ones are added. Rows selected on other
    pages are kept either way. Single-selection tables ignore this.
    """
    current = tuple(selection)

    if SelectionType(selection_type) is SelectionType.SINGLE:
        logger.debug("Select-all ignored for single-selection table")
        return current

    visible = visible_row_indices(visible_rows, pagination_enabled, current_page, items_per_page)

    if all_visible_selected(visible_rows, current, pagination_enabled, current_page, items_per_page):
        visible_set = set(visible)
        return tuple(i for i in current if i not in visible_set)

    present = set(current)
    return current + tuple(i for i in visible if i not in present)
