from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from table_browser.core.exceptions import TableBrowserError
from table_browser.core.models import SortDirection
from table_browser.core.sorting import apply_sort_to_headers, sort_rows
from table_browser.core.table_engine import TableEngine, TableView
from table_browser.core.table_loader import TableSource
from table_browser.core.table_state import FilterChanged, SortRequested, apply_command
from table_browser.ui.host_state import HostState
from table_browser.ui.ids import IDs

logger = logging.getLogger(__name__)


def try_parse_host_state(data: object) -> Optional[HostState]:
    if not isinstance(data, dict) or not data:
        return None
    try:
        return HostState.from_dict(data)
    except (TypeError, ValueError, KeyError, IndexError):
        logger.exception("Invalid table-state store: %r", data)
        return None


def lookup_source(tables: Mapping[str, TableSource], name: Optional[str]) -> Optional[TableSource]:
    """The named table, or None when it is unknown or fails to load (the failure is logged)."""
    if not name:
        return None
    try:
        return tables.get(name)
    except TableBrowserError:
        logger.exception("Table failed to load", extra={"table": name})
        return None


def _log_sort_request(column_index: int, direction: SortDirection) -> None:
    logger.info(
        "Host received sort request",
        extra={"column_index": column_index, "direction": direction.value},
    )


def build_engine(source: TableSource, host: HostState) -> TableEngine:
    """
    Build an engine for one request. Rows are re-sorted here, on the host
    side, according to the last accepted sort request, and the headers carry
    the matching direction.
    """
    rows = source.rows
    headers = source.headers

    if host.sort is not None:
        column_index, direction = host.sort
        rows = sort_rows(rows, column_index, direction, key=source.sort_key_for(column_index))
        headers = apply_sort_to_headers(headers, column_index, direction)

    return TableEngine(
        headers,
        rows,
        source.options,
        dropdown=host.dropdown,
        on_sort=_log_sort_request,
        name=source.name,
    )


def build_table_view(source: TableSource, host: HostState) -> TableView:
    return build_engine(source, host).view(host.controlled())


def handle_table_event(
    source: TableSource,
    host: HostState,
    event: str,
    index: Any = None,
    filter_text: Optional[str] = None,
) -> HostState:
    """
    Dispatch one UI event to the engine and fold the proposed command back
    into the host state.

    The host is the writer for filter, page and selection. A filter change
    also sends the table back to page 1.
    """
    engine = build_engine(source, host)
    controlled = host.controlled()
    command = None

    if event == IDs.Pattern.ROW:
        command = engine.toggle_row(int(index), controlled)
    elif event == IDs.Pattern.SELECT_ALL:
        command = engine.toggle_all_visible(controlled)
    elif event == IDs.Pattern.SORT:
        command = engine.click_header(int(index))
    elif event == IDs.Pattern.FILTER_ICON:
        engine.click_filter_icon(int(index), controlled)
    elif event == IDs.Pattern.FILTER_ACTION:
        if index == "apply":
            engine.edit_filter(filter_text)
            command = engine.apply_filter(controlled)
        elif index == "clear":
            command = engine.clear_filter(controlled)
        else:
            engine.close_filter()
    elif event == IDs.Pattern.PAGE:
        command = engine.change_page(int(index), controlled)
    elif event == IDs.Pattern.PAGE_STEP:
        step = -1 if index == "prev" else 1
        current = engine.view(controlled).pagination.current_page
        command = engine.change_page(current + step, controlled)
    else:
        logger.warning("Unknown table event", extra={"event": event, "table": source.name})
        return host

    new_host = replace(host, dropdown=engine.dropdown)

    if isinstance(command, SortRequested):
        return replace(new_host, sort=(command.column_index, command.direction))

    table_state = apply_command(new_host.table_state, command)
    if isinstance(command, FilterChanged):
        table_state = replace(table_state, current_page=1)

    return new_host.with_table_state(table_state)
