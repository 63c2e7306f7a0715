from __future__ import annotations

__all__ = ["IDs", "pattern_id"]


class IDs:
    class Store:
        TABLE_STATE = "table-state"

    class Control:
        TABLE_SELECT = "table-select"
        TABLE_CONTAINER = "table-container"
        TABLE_SUMMARY = "table-summary"

    class Pattern:
        # pattern-matching "type" strings
        ROW = "table-row"
        SELECT_ALL = "table-select-all"
        SORT = "table-sort-header"
        FILTER_ICON = "table-filter-icon"
        FILTER_ACTION = "table-filter-action"
        FILTER_INPUT = "table-filter-input"
        PAGE = "table-page"
        PAGE_STEP = "table-page-step"


def pattern_id(kind: str, index) -> dict:
    return {"type": kind, "index": index}
