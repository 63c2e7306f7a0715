from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple, Union

from table_browser.core.models import (
    SelectionType,
    SortDirection,
    normalise_filter_values,
)


# -------------------------------------------------------------------------
# State value objects
# -------------------------------------------------------------------------
@dataclass(frozen=True)
class PaginationState:
    current_page: int = 1
    items_per_page: int = 10
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        from table_browser.core.pagination import total_pages

        return total_pages(self.total_items, self.items_per_page)


@dataclass(frozen=True)
class SelectionState:
    """
    Selected rows as absolute indices into the current post-filter ordering.

    Indices are positional: re-sorting or re-filtering the rows makes an
    index refer to whatever row now sits at that position.
    """
    selection_type: SelectionType = SelectionType.MULTIPLE
    selected: Tuple[int, ...] = ()

    def is_selected(self, row_index: int) -> bool:
        return row_index in self.selected


@dataclass(frozen=True)
class TableState:
    """
    Engine-owned (uncontrolled) table state.

    Fields:

    - filter_values: column index -> non-blank filter text
    - current_page: 1-based page number
    - selected_rows: absolute indices of selected rows, insertion order
    """
    filter_values: Dict[int, str] = field(default_factory=dict)
    current_page: int = 1
    selected_rows: Tuple[int, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filter_values": {str(k): v for k, v in self.filter_values.items()},
            "current_page": self.current_page,
            "selected_rows": list(self.selected_rows),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> TableState:
        data = data or {}
        return cls(
            filter_values=normalise_filter_values(data.get("filter_values")),
            current_page=int(data.get("current_page", 1) or 1),
            selected_rows=tuple(int(i) for i in data.get("selected_rows", []) or []),
        )


@dataclass(frozen=True)
class ControlledValues:
    """
    Values supplied by the host. A field that is not None makes the host the
    sole writer of that state variable; the engine only reads it.
    """
    filter_values: Optional[Dict[int, str]] = None
    current_page: Optional[int] = None
    selected_rows: Optional[Tuple[int, ...]] = None

    def resolve(self, internal: TableState) -> TableState:
        """One resolved value per state variable, decided once per operation."""
        return TableState(
            filter_values=(
                normalise_filter_values(self.filter_values)
                if self.filter_values is not None
                else dict(internal.filter_values)
            ),
            current_page=(
                self.current_page if self.current_page is not None else internal.current_page
            ),
            selected_rows=(
                tuple(self.selected_rows)
                if self.selected_rows is not None
                else internal.selected_rows
            ),
        )

    @property
    def controls_filter(self) -> bool:
        return self.filter_values is not None

    @property
    def controls_page(self) -> bool:
        return self.current_page is not None

    @property
    def controls_selection(self) -> bool:
        return self.selected_rows is not None


UNCONTROLLED = ControlledValues()


# -------------------------------------------------------------------------
# Commands: proposed next state, applied by whoever owns the variable
# -------------------------------------------------------------------------
@dataclass(frozen=True)
class FilterChanged:
    filter_values: Dict[int, str]


@dataclass(frozen=True)
class PageChanged:
    page: int


@dataclass(frozen=True)
class SelectionChanged:
    selected_rows: Tuple[int, ...]


@dataclass(frozen=True)
class SortRequested:
    column_index: int
    direction: SortDirection


TableCommand = Union[FilterChanged, PageChanged, SelectionChanged, SortRequested]


def apply_command(state: TableState, command: Optional[TableCommand]) -> TableState:
    """
    Host-side state transition.

    FilterChanged does not touch the page: resetting to page 1 after a
    filter change is up to the host. SortRequested leaves the state alone,
    the host re-sorts its rows instead.
    """
    if command is None:
        return state
    if isinstance(command, FilterChanged):
        return replace(state, filter_values=dict(command.filter_values))
    if isinstance(command, PageChanged):
        return replace(state, current_page=command.page)
    if isinstance(command, SelectionChanged):
        return replace(state, selected_rows=tuple(command.selected_rows))
    if isinstance(command, SortRequested):
        return state
    raise TypeError(f"Unknown table command: {command!r}")
