from __future__ import annotations

import logging

from dash import html

from table_browser.core.exceptions import TableLoadError
from table_browser.core.filter_dropdown import FilterDropdownState
from table_browser.core.models import CellValue, HeaderDefinition, SortDirection
from table_browser.core.sorting import numeric_key
from table_browser.core.table_engine import TableOptions
from table_browser.core.table_loader import TableSource
from table_browser.core.table_state import TableState
from table_browser.ui.callbacks.callbacks_utils import (
    build_table_view,
    handle_table_event,
    lookup_source,
    try_parse_host_state,
)
from table_browser.ui.helpers import render_table, table_summary
from table_browser.ui.host_state import HostState
from table_browser.ui.ids import IDs


def _make_source(n_rows=25) -> TableSource:
    headers = [
        HeaderDefinition(text="Name", sortable=True),
        HeaderDefinition(text="Department"),
        HeaderDefinition(text="Salary", sortable=True),
    ]
    departments = ["Engineering", "Design"]
    rows = [
        (
            CellValue(text=f"p{i:02d}"),
            CellValue(text=departments[i % 2]),
            CellValue(text=str(1000 + (i * 37) % 500)),
        )
        for i in range(n_rows)
    ]
    options = TableOptions(
        selectable=True,
        has_pagination=True,
        items_per_page=10,
        has_header_filters=True,
    )
    return TableSource(
        name="People",
        headers=headers,
        rows=rows,
        options=options,
        sort_keys={2: numeric_key},
    )


def test_host_state_roundtrip():
    host = HostState(
        table="People",
        table_state=TableState(filter_values={1: "eng"}, current_page=2, selected_rows=(3,)),
        dropdown=FilterDropdownState(active_column=1, temp_value="en"),
        sort=(2, SortDirection.DESC),
    )

    assert HostState.from_dict(host.to_dict()) == host
    assert try_parse_host_state(host.to_dict()) == host
    assert try_parse_host_state(None) is None
    assert try_parse_host_state({"sort": ["x", "sideways"]}) is None


def test_row_click_selects_absolute_index():
    source = _make_source()
    host = HostState(table="People", table_state=TableState(current_page=2))

    host = handle_table_event(source, host, IDs.Pattern.ROW, 4)

    assert host.table_state.selected_rows == (14,)


def test_select_all_then_page_step():
    source = _make_source()
    host = HostState(table="People")

    host = handle_table_event(source, host, IDs.Pattern.SELECT_ALL, 0)
    assert set(host.table_state.selected_rows) == set(range(10))

    host = handle_table_event(source, host, IDs.Pattern.PAGE_STEP, "next")
    assert host.table_state.current_page == 2

    host = handle_table_event(source, host, IDs.Pattern.PAGE, 3)
    assert host.table_state.current_page == 3

    # already on the last page
    assert handle_table_event(source, host, IDs.Pattern.PAGE_STEP, "next") == host


def test_filter_apply_resets_page_and_closes_dropdown():
    source = _make_source()
    host = HostState(table="People", table_state=TableState(current_page=3))

    host = handle_table_event(source, host, IDs.Pattern.FILTER_ICON, 1)
    assert host.dropdown.active_column == 1

    host = handle_table_event(source, host, IDs.Pattern.FILTER_ACTION, "apply", filter_text="eng")

    assert host.table_state.filter_values == {1: "eng"}
    assert host.table_state.current_page == 1
    assert host.dropdown.is_open is False

    view = build_table_view(source, host)
    assert len(view.filtered_rows) == 13


def test_filter_clear_and_close():
    source = _make_source()
    host = HostState(table="People", table_state=TableState(filter_values={1: "eng"}))

    host = handle_table_event(source, host, IDs.Pattern.FILTER_ICON, 1)
    assert host.dropdown.temp_value == "eng"

    closed = handle_table_event(source, host, IDs.Pattern.FILTER_ACTION, "close")
    assert closed.dropdown.is_open is False
    assert closed.table_state.filter_values == {1: "eng"}

    cleared = handle_table_event(source, host, IDs.Pattern.FILTER_ACTION, "clear")
    assert cleared.table_state.filter_values == {}


def test_sort_click_resorts_rows_on_host_side():
    source = _make_source()
    host = HostState(table="People")

    host = handle_table_event(source, host, IDs.Pattern.SORT, 2)
    assert host.sort == (2, SortDirection.ASC)

    view = build_table_view(source, host)
    salaries = [int(r[2].text) for r in view.filtered_rows]
    assert salaries == sorted(salaries)
    assert view.headers[2].sort_direction is SortDirection.ASC

    host = handle_table_event(source, host, IDs.Pattern.SORT, 2)
    assert host.sort == (2, SortDirection.DESC)

    # the source rows themselves are untouched
    assert source.rows[0][0].text == "p00"


def test_non_sortable_header_click_changes_nothing():
    source = _make_source()
    host = HostState(table="People")

    assert handle_table_event(source, host, IDs.Pattern.SORT, 1) == host


def test_render_table_structure():
    source = _make_source(n_rows=12)
    host = HostState(table="People", table_state=TableState(selected_rows=(0,)))

    view = build_table_view(source, host)
    out = render_table(view, source.options, host.dropdown)

    assert isinstance(out, html.Div)
    table, pagination = out.children
    thead, tbody = table.children
    # select-all column + 3 headers
    assert len(thead.children.children) == 4
    assert len(tbody.children) == 10
    assert "table-active" in tbody.children[0].className
    assert isinstance(pagination, html.Nav)

    assert table_summary(source, view) == "12 of 12 rows · 1 selected"


def test_render_empty_state_spans_all_columns():
    source = _make_source(n_rows=0)
    view = build_table_view(source, HostState(table="People"))

    out = render_table(view, source.options, HostState().dropdown)

    tbody = out.children[0].children[1]
    assert tbody.children[0].children.colSpan == 4


class _BrokenTables(dict):
    def get(self, key, default=None):
        raise TableLoadError(f"{key}.csv is missing")


def test_lookup_source_swallows_load_failures(caplog):
    source = _make_source()

    assert lookup_source({"People": source}, "People") is source
    assert lookup_source({"People": source}, None) is None
    assert lookup_source({"People": source}, "Other") is None

    with caplog.at_level(logging.ERROR):
        assert lookup_source(_BrokenTables(), "People") is None
    assert any("failed to load" in rec.getMessage() for rec in caplog.records)
