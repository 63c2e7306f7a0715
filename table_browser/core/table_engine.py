from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, FrozenSet, Optional, Sequence, Tuple, Union

from table_browser.core import filter_dropdown
from table_browser.core.columns import effective_column_count, is_filterable_header
from table_browser.core.exceptions import ConfigError
from table_browser.core.filter_dropdown import FilterDropdownState
from table_browser.core.filtering import filter_rows
from table_browser.core.models import HeaderDefinition, RowRecord, SelectionType, SortDirection
from table_browser.core.pagination import (
    DEFAULT_ITEMS_PER_PAGE,
    page_window,
    paginate_rows,
    request_page,
)
from table_browser.core.selection import (
    all_visible_selected,
    select_all_visible,
    toggle_selection,
    visible_row_indices,
)
from table_browser.core.sorting import SortCoordinator
from table_browser.core.table_state import (
    UNCONTROLLED,
    ControlledValues,
    FilterChanged,
    PageChanged,
    PaginationState,
    SelectionChanged,
    SelectionState,
    SortRequested,
    TableCommand,
    TableState,
    apply_command,
)
from table_browser.validation.table_validation import validate_table

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# Configuration surface
# -------------------------------------------------------------------------
_CAMEL_CASE_OPTIONS = {
    "selectionType": "selection_type",
    "hasPagination": "has_pagination",
    "itemsPerPage": "items_per_page",
    "totalItems": "total_items",
    "isFilterable": "is_filterable",
    "hasHeaderFilters": "has_header_filters",
    "filterCaseSensitive": "filter_case_sensitive",
    "filterableHeaders": "filterable_headers",
}


@dataclass(frozen=True)
class TableOptions:
    """
    Recognised table options. There is no open-ended configuration beyond
    this fixed set; unknown keys are a ConfigError.

    - selectable: show row checkboxes
    - selection_type: single or multiple
    - has_pagination / items_per_page: client-side page window
    - total_items: overrides the row count used for the page count
    - is_filterable / has_header_filters: enable column filtering
    - filter_case_sensitive: exact-case substring matching
    - filterable_headers: restrict header filters to these column indices
    """
    selectable: bool = False
    selection_type: SelectionType = SelectionType.MULTIPLE
    has_pagination: bool = False
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE
    total_items: Optional[int] = None
    is_filterable: bool = False
    has_header_filters: bool = False
    filter_case_sensitive: bool = False
    filterable_headers: Optional[FrozenSet[int]] = None

    @property
    def filtering_enabled(self) -> bool:
        return self.is_filterable or self.has_header_filters

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> TableOptions:
        data = {_CAMEL_CASE_OPTIONS.get(k, k): v for k, v in (data or {}).items()}

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown table option(s): {', '.join(unknown)}")

        try:
            selection_type = SelectionType(data.get("selection_type", SelectionType.MULTIPLE))
        except ValueError as e:
            raise ConfigError(
                f"selection_type must be 'single' or 'multiple', got {data.get('selection_type')!r}"
            ) from e

        filterable_headers = data.get("filterable_headers")
        total_items = data.get("total_items")

        try:
            return cls(
                selectable=bool(data.get("selectable", False)),
                selection_type=selection_type,
                has_pagination=bool(data.get("has_pagination", False)),
                items_per_page=int(data.get("items_per_page", DEFAULT_ITEMS_PER_PAGE)),
                total_items=int(total_items) if total_items is not None else None,
                is_filterable=bool(data.get("is_filterable", False)),
                has_header_filters=bool(data.get("has_header_filters", False)),
                filter_case_sensitive=bool(data.get("filter_case_sensitive", False)),
                filterable_headers=(
                    frozenset(int(i) for i in filterable_headers)
                    if filterable_headers is not None
                    else None
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid table options: {e}") from e


# -------------------------------------------------------------------------
# Derived view
# -------------------------------------------------------------------------
@dataclass(frozen=True)
class TableView:
    """Everything the presentation layer needs for one render."""
    headers: Tuple[HeaderDefinition, ...]
    state: TableState
    filtered_rows: Sequence[RowRecord]
    visible_rows: Sequence[RowRecord]
    visible_indices: Tuple[int, ...]
    pagination: PaginationState
    selection: SelectionState
    all_visible_selected: bool
    effective_column_count: int
    page_window: Tuple[Union[int, str], ...]
    filterable_columns: Tuple[int, ...]

    @property
    def is_empty(self) -> bool:
        return not self.visible_rows

    @property
    def total_pages(self) -> int:
        return self.pagination.total_pages

    def is_selected(self, visible_position: int) -> bool:
        return self.selection.is_selected(self.visible_indices[visible_position])


OnFilter = Callable[[Dict[int, str]], None]
OnPageChange = Callable[[int], None]
OnRowSelect = Callable[[Tuple[int, ...]], None]
OnSort = Callable[[int, SortDirection], None]


class TableEngine:
    """
    Filter -> paginate -> map-to-absolute-index pipeline for one table.

    Every event handler resolves controlled/uncontrolled state once, returns
    the proposed command (or None when the event is inert), applies the
    command to the engine's own state for variables the host does not
    control, then notifies the matching callback.
    """

    def __init__(
        self,
        headers: Sequence[HeaderDefinition],
        rows: Sequence[RowRecord],
        options: Optional[TableOptions] = None,
        *,
        state: Optional[TableState] = None,
        dropdown: FilterDropdownState = filter_dropdown.IDLE,
        on_filter: Optional[OnFilter] = None,
        on_page_change: Optional[OnPageChange] = None,
        on_row_select: Optional[OnRowSelect] = None,
        on_sort: Optional[OnSort] = None,
        name: Optional[str] = None,
    ) -> None:
        self.name = name
        self.headers: Tuple[HeaderDefinition, ...] = tuple(headers)
        self.rows = rows
        self.options = options or TableOptions()
        self.state = state or TableState()
        self.dropdown = dropdown

        self.on_filter = on_filter
        self.on_page_change = on_page_change
        self.on_row_select = on_row_select
        self.sort = SortCoordinator(self.headers, on_sort=on_sort)

        # (key, rows, filtered, visible) for the last computed view
        self._view_cache: Optional[Tuple[Tuple[Any, ...], Sequence[RowRecord], Sequence[RowRecord], Sequence[RowRecord]]] = None

        validate_table(self.headers, self.rows, table=self.name)

    # -------------------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------------------
    def set_rows(self, rows: Sequence[RowRecord], headers: Optional[Sequence[HeaderDefinition]] = None) -> None:
        """Feed a new (e.g. re-sorted) row set, optionally with updated headers."""
        if headers is not None:
            self.headers = tuple(headers)
            self.sort.headers = list(self.headers)
        self.rows = rows
        self._view_cache = None
        validate_table(self.headers, self.rows, table=self.name)

    # -------------------------------------------------------------------------
    # Derived rows (cached as one unit)
    # -------------------------------------------------------------------------
    def _cache_key(self, state: TableState) -> Tuple[Any, ...]:
        opts = self.options
        return (
            tuple(sorted(state.filter_values.items())),
            opts.filter_case_sensitive,
            opts.filtering_enabled,
            opts.has_pagination,
            state.current_page,
            opts.items_per_page,
        )

    def _derive(self, state: TableState) -> Tuple[Sequence[RowRecord], Sequence[RowRecord]]:
        key = self._cache_key(state)
        cached = self._view_cache
        if cached is not None and cached[0] == key and cached[1] is self.rows:
            return cached[2], cached[3]

        opts = self.options
        if opts.filtering_enabled:
            filtered = filter_rows(self.rows, state.filter_values, opts.filter_case_sensitive)
        else:
            filtered = self.rows

        visible = paginate_rows(filtered, opts.has_pagination, state.current_page, opts.items_per_page)

        self._view_cache = (key, self.rows, filtered, visible)
        return filtered, visible

    def _effective_page(self, state: TableState, filtered: Sequence[RowRecord]) -> int:
        """
        The page actually on screen after paginate_rows' range corrections,
        so that absolute indices line up with what was just displayed.
        """
        opts = self.options
        if not opts.has_pagination or not filtered:
            return max(1, state.current_page)

        per_page = opts.items_per_page if opts.items_per_page >= 1 else DEFAULT_ITEMS_PER_PAGE
        last_page = -(-len(filtered) // per_page)
        return min(max(1, state.current_page), last_page)

    def _per_page(self) -> int:
        per_page = self.options.items_per_page
        return per_page if per_page >= 1 else DEFAULT_ITEMS_PER_PAGE

    def filtered_rows(self, controlled: ControlledValues = UNCONTROLLED) -> Sequence[RowRecord]:
        return self._derive(controlled.resolve(self.state))[0]

    def visible_rows(self, controlled: ControlledValues = UNCONTROLLED) -> Sequence[RowRecord]:
        return self._derive(controlled.resolve(self.state))[1]

    def view(self, controlled: ControlledValues = UNCONTROLLED) -> TableView:
        state = controlled.resolve(self.state)
        opts = self.options

        filtered, visible = self._derive(state)
        page = self._effective_page(state, filtered)
        per_page = self._per_page()

        total_items = opts.total_items if opts.total_items is not None else len(filtered)
        pagination = PaginationState(
            current_page=page,
            items_per_page=per_page,
            total_items=total_items,
        )

        indices = visible_row_indices(visible, opts.has_pagination, page, per_page)
        all_selected = all_visible_selected(visible, state.selected_rows, opts.has_pagination, page, per_page)

        filterable_columns = tuple(
            idx
            for idx, header in enumerate(self.headers)
            if is_filterable_header(
                idx,
                header,
                has_header_filters=opts.has_header_filters,
                filterable_headers=opts.filterable_headers,
            )
        )

        return TableView(
            headers=self.headers,
            state=state,
            filtered_rows=filtered,
            visible_rows=visible,
            visible_indices=tuple(indices),
            pagination=pagination,
            selection=SelectionState(selection_type=opts.selection_type, selected=tuple(state.selected_rows)),
            all_visible_selected=all_selected,
            effective_column_count=effective_column_count(len(self.headers), opts.selectable),
            page_window=tuple(page_window(page, pagination.total_pages)) if opts.has_pagination else (),
            filterable_columns=filterable_columns,
        )

    # -------------------------------------------------------------------------
    # Command plumbing
    # -------------------------------------------------------------------------
    def _commit(self, command: Optional[TableCommand], controlled: ControlledValues) -> Optional[TableCommand]:
        if command is None:
            return None

        if isinstance(command, FilterChanged):
            if not controlled.controls_filter:
                self.state = apply_command(self.state, command)
            if self.on_filter is not None:
                self.on_filter(dict(command.filter_values))
        elif isinstance(command, PageChanged):
            if not controlled.controls_page:
                self.state = apply_command(self.state, command)
            if self.on_page_change is not None:
                self.on_page_change(command.page)
        elif isinstance(command, SelectionChanged):
            if not controlled.controls_selection:
                self.state = apply_command(self.state, command)
            if self.on_row_select is not None:
                self.on_row_select(tuple(command.selected_rows))

        logger.debug(
            "Table command",
            extra={"table": self.name, "command": type(command).__name__},
        )
        return command

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------
    def toggle_row(
        self,
        visible_position: int,
        controlled: ControlledValues = UNCONTROLLED,
    ) -> Optional[SelectionChanged]:
        if not self.options.selectable:
            return None

        view = self.view(controlled)
        if not 0 <= visible_position < len(view.visible_indices):
            logger.debug(
                "Ignoring row toggle outside the visible page",
                extra={"table": self.name, "visible_position": visible_position},
            )
            return None

        row_index = view.visible_indices[visible_position]
        selected = toggle_selection(row_index, self.options.selection_type, view.state.selected_rows)
        return self._commit(SelectionChanged(selected_rows=selected), controlled)

    def toggle_all_visible(self, controlled: ControlledValues = UNCONTROLLED) -> Optional[SelectionChanged]:
        opts = self.options
        if not opts.selectable or opts.selection_type is SelectionType.SINGLE:
            return None

        view = self.view(controlled)
        selected = select_all_visible(
            view.visible_rows,
            view.state.selected_rows,
            opts.selection_type,
            opts.has_pagination,
            view.pagination.current_page,
            view.pagination.items_per_page,
        )
        return self._commit(SelectionChanged(selected_rows=selected), controlled)

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------
    def change_page(self, page: int, controlled: ControlledValues = UNCONTROLLED) -> Optional[PageChanged]:
        if not self.options.has_pagination:
            return None
        view = self.view(controlled)
        return self._commit(request_page(page, view.total_pages), controlled)

    # -------------------------------------------------------------------------
    # Sorting
    # -------------------------------------------------------------------------
    def click_header(self, column_index: int) -> Optional[SortRequested]:
        return self.sort.click(column_index)

    # -------------------------------------------------------------------------
    # Header filter dropdown
    # -------------------------------------------------------------------------
    def click_filter_icon(self, column: int, controlled: ControlledValues = UNCONTROLLED) -> None:
        """Open, switch or close the header filter dropdown. Ignored for columns without a filter icon."""
        opts = self.options
        header = self.headers[column] if 0 <= column < len(self.headers) else None
        if header is None or not is_filterable_header(
            column,
            header,
            has_header_filters=opts.has_header_filters,
            filterable_headers=opts.filterable_headers,
        ):
            return

        state = controlled.resolve(self.state)
        self.dropdown, _ = filter_dropdown.click_icon(self.dropdown, column, state.filter_values)

    def edit_filter(self, text: Optional[str]) -> None:
        self.dropdown, _ = filter_dropdown.edit(self.dropdown, text)

    def close_filter(self) -> None:
        self.dropdown, _ = filter_dropdown.close(self.dropdown)

    def apply_filter(self, controlled: ControlledValues = UNCONTROLLED) -> Optional[FilterChanged]:
        state = controlled.resolve(self.state)
        self.dropdown, command = filter_dropdown.apply(self.dropdown, state.filter_values)
        return self._commit(command, controlled)

    def clear_filter(self, controlled: ControlledValues = UNCONTROLLED) -> Optional[FilterChanged]:
        state = controlled.resolve(self.state)
        self.dropdown, command = filter_dropdown.clear(self.dropdown, state.filter_values)
        return self._commit(command, controlled)
