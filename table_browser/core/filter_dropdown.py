from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from table_browser.core.models import FilterValues
from table_browser.core.table_state import FilterChanged


@dataclass(frozen=True)
class FilterDropdownState:
    """
    Header filter dropdown.

    Idle when active_column is None, otherwise open for that column with an
    uncommitted temp_value.
    """
    active_column: Optional[int] = None
    temp_value: str = ""

    @property
    def is_open(self) -> bool:
        return self.active_column is not None

    def to_dict(self) -> Dict[str, Any]:
        return {"active_column": self.active_column, "temp_value": self.temp_value}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> FilterDropdownState:
        data = data or {}
        column = data.get("active_column")
        return cls(
            active_column=int(column) if column is not None else None,
            temp_value=str(data.get("temp_value") or ""),
        )


IDLE = FilterDropdownState()

Transition = Tuple[FilterDropdownState, Optional[FilterChanged]]


def click_icon(state: FilterDropdownState, column: int, filter_values: FilterValues) -> Transition:
    """
    Filter icon clicked. The open column's icon closes the dropdown; any other
    icon opens that column, preloaded with its current filter text. Either
    way uncommitted edits are dropped.
    """
    if state.active_column == column:
        return IDLE, None
    return FilterDropdownState(active_column=column, temp_value=filter_values.get(column, "")), None


def edit(state: FilterDropdownState, text: Optional[str]) -> Transition:
    if not state.is_open:
        return state, None
    return FilterDropdownState(active_column=state.active_column, temp_value=text or ""), None


def close(state: FilterDropdownState) -> Transition:
    return IDLE, None


def apply(state: FilterDropdownState, filter_values: FilterValues) -> Transition:
    """Commit temp_value for the open column; a blank value removes that column's filter."""
    if not state.is_open:
        return state, None

    new_values = dict(filter_values)
    if state.temp_value.strip():
        new_values[state.active_column] = state.temp_value
    else:
        new_values.pop(state.active_column, None)
    return IDLE, FilterChanged(filter_values=new_values)


def clear(state: FilterDropdownState, filter_values: FilterValues) -> Transition:
    """Drop the open column's filter regardless of what was typed."""
    if not state.is_open:
        return state, None

    new_values = dict(filter_values)
    new_values.pop(state.active_column, None)
    return IDLE, FilterChanged(filter_values=new_values)
