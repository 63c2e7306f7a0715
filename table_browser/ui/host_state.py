from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from table_browser.core.filter_dropdown import IDLE, FilterDropdownState
from table_browser.core.models import SortDirection
from table_browser.core.table_state import ControlledValues, TableState


@dataclass(frozen=True)
class HostState:
    """
    Everything the Dash host keeps in its dcc.Store for the active table.

    The host owns filter, page and selection (controlled mode); the engine
    only proposes changes. `sort` is the host's record of the last accepted
    sort request, used to re-sort rows before each render.
    """
    table: Optional[str] = None
    table_state: TableState = field(default_factory=TableState)
    dropdown: FilterDropdownState = IDLE
    sort: Optional[Tuple[int, SortDirection]] = None

    def controlled(self) -> ControlledValues:
        return ControlledValues(
            filter_values=dict(self.table_state.filter_values),
            current_page=self.table_state.current_page,
            selected_rows=tuple(self.table_state.selected_rows),
        )

    def for_table(self, table: Optional[str]) -> HostState:
        """Fresh state for another table."""
        return HostState(table=table)

    def with_table_state(self, table_state: TableState) -> HostState:
        return replace(self, table_state=table_state)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "table_state": self.table_state.to_dict(),
            "dropdown": self.dropdown.to_dict(),
            "sort": [self.sort[0], self.sort[1].value] if self.sort is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> HostState:
        data = data or {}
        raw_sort = data.get("sort")
        sort = (int(raw_sort[0]), SortDirection(raw_sort[1])) if raw_sort else None
        return cls(
            table=data.get("table"),
            table_state=TableState.from_dict(data.get("table_state")),
            dropdown=FilterDropdownState.from_dict(data.get("dropdown")),
            sort=sort,
        )
