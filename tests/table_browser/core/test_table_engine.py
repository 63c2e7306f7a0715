from __future__ import annotations

import logging

import pytest

from table_browser.core.exceptions import ConfigError
from table_browser.core.filter_dropdown import FilterDropdownState
from table_browser.core.models import CellValue, HeaderDefinition, SelectionType, SortDirection
from table_browser.core.table_engine import TableEngine, TableOptions
from table_browser.core.table_state import (
    ControlledValues,
    FilterChanged,
    PageChanged,
    SelectionChanged,
    SortRequested,
    TableState,
)

DEPARTMENTS = ["Engineering", "Design", "Finance", "Policy", "Engineering"]


def _make_engine(n_rows=25, **option_overrides):
    headers = [
        HeaderDefinition(text="Name", sortable=True),
        HeaderDefinition(text="Department", sortable=True),
    ]
    rows = [
        (CellValue(text=f"person-{i}"), CellValue(text=DEPARTMENTS[i % len(DEPARTMENTS)]))
        for i in range(n_rows)
    ]
    defaults = dict(
        selectable=True,
        has_pagination=True,
        items_per_page=10,
        has_header_filters=True,
    )
    defaults.update(option_overrides)
    return TableEngine(headers, rows, TableOptions(**defaults), name="people")


def test_view_runs_filter_then_paginate():
    engine = _make_engine()
    engine.state = TableState(filter_values={1: "eng"})

    view = engine.view()

    # 25 rows, departments cycle through 5 values, 2 of which are Engineering
    assert len(view.filtered_rows) == 10
    assert len(view.visible_rows) == 10
    assert view.total_pages == 1
    assert view.effective_column_count == 3
    assert view.visible_indices == tuple(range(10))


def test_view_falls_back_to_last_page_and_maps_indices_from_it():
    engine = _make_engine()
    engine.state = TableState(current_page=9)

    view = engine.view()

    assert view.pagination.current_page == 3
    assert len(view.visible_rows) == 5
    assert view.visible_indices == (20, 21, 22, 23, 24)


def test_filtering_disabled_ignores_filter_values():
    engine = _make_engine(has_header_filters=False)
    engine.state = TableState(filter_values={1: "eng"})

    assert len(engine.view().filtered_rows) == 25


def test_total_items_override_drives_page_count():
    engine = _make_engine(total_items=100)
    assert engine.view().total_pages == 10


def test_empty_table_view():
    engine = _make_engine(n_rows=0)
    view = engine.view()

    assert view.is_empty
    assert view.all_visible_selected is False
    assert view.page_window == ()


def test_uncontrolled_row_toggle_updates_internal_state_and_notifies():
    calls = []
    engine = _make_engine()
    engine.on_row_select = calls.append
    engine.state = TableState(current_page=2)

    cmd = engine.toggle_row(3)

    assert cmd == SelectionChanged(selected_rows=(13,))
    assert engine.state.selected_rows == (13,)
    assert calls == [(13,)]


def test_controlled_selection_is_read_only_for_engine():
    calls = []
    engine = _make_engine()
    engine.on_row_select = calls.append

    controlled = ControlledValues(selected_rows=(1, 2))
    cmd = engine.toggle_row(2, controlled)

    assert cmd == SelectionChanged(selected_rows=(1,))
    assert engine.state.selected_rows == ()
    assert calls == [(1,)]


def test_toggle_row_ignored_when_not_selectable():
    engine = _make_engine(selectable=False)
    assert engine.toggle_row(0) is None


def test_single_selection_replaces():
    engine = _make_engine(selection_type=SelectionType.SINGLE)

    engine.toggle_row(2)
    engine.toggle_row(5)

    assert engine.state.selected_rows == (5,)
    assert engine.toggle_all_visible() is None


def test_toggle_all_visible_selects_then_deselects_page():
    engine = _make_engine(n_rows=5)

    engine.toggle_all_visible()
    assert set(engine.state.selected_rows) == {0, 1, 2, 3, 4}
    assert engine.view().all_visible_selected is True

    engine.toggle_all_visible()
    assert engine.state.selected_rows == ()


def test_change_page_rejects_out_of_range():
    pages = []
    engine = _make_engine()
    engine.on_page_change = pages.append

    assert engine.change_page(4) is None
    assert engine.change_page(0) is None
    assert engine.change_page(3) == PageChanged(page=3)
    assert engine.state.current_page == 3
    assert pages == [3]


def test_click_header_requires_callback():
    engine = _make_engine()
    assert engine.click_header(0) is None

    sorts = []
    engine = _make_engine()
    engine.sort.on_sort = lambda col, d: sorts.append((col, d))

    assert engine.click_header(1) == SortRequested(1, SortDirection.ASC)
    assert sorts == [(1, SortDirection.ASC)]
    # rows are not reordered by the engine
    assert engine.rows[0][0].text == "person-0"


def test_filter_dropdown_flow_through_engine():
    filters = []
    engine = _make_engine()
    engine.on_filter = filters.append

    engine.click_filter_icon(1)
    assert engine.dropdown == FilterDropdownState(active_column=1, temp_value="")

    engine.edit_filter("Design")
    cmd = engine.apply_filter()

    assert cmd == FilterChanged(filter_values={1: "Design"})
    assert engine.state.filter_values == {1: "Design"}
    assert engine.dropdown.is_open is False
    assert filters == [{1: "Design"}]

    # page is not reset by the engine
    engine.state = TableState(filter_values={1: "Design"}, current_page=3)
    engine.click_filter_icon(1)
    engine.clear_filter()
    assert engine.state.current_page == 3
    assert engine.state.filter_values == {}


def test_filter_icon_ignored_for_unlisted_column():
    engine = _make_engine(filterable_headers=frozenset({0}))

    engine.click_filter_icon(1)

    assert engine.dropdown.is_open is False
    assert engine.view().filterable_columns == (0,)


def test_view_cache_reused_until_inputs_change():
    engine = _make_engine()
    engine.state = TableState(filter_values={1: "eng"})

    first = engine.view().filtered_rows
    assert engine.view().filtered_rows is first

    engine.state = TableState(filter_values={1: "des"})
    assert engine.view().filtered_rows is not first


def test_set_rows_invalidates_cache():
    engine = _make_engine()
    first = engine.view().visible_rows

    new_rows = list(reversed(engine.rows))
    engine.set_rows(new_rows)

    assert engine.view().visible_rows[0] is new_rows[0]
    assert engine.view().visible_rows is not first


def test_mismatched_rows_are_tolerated_and_logged(caplog):
    headers = [HeaderDefinition(text="A"), HeaderDefinition(text="B")]
    rows = [(CellValue("1"), CellValue("2")), (CellValue("only"),)]

    with caplog.at_level(logging.WARNING):
        engine = TableEngine(headers, rows, TableOptions())

    assert len(engine.view().visible_rows) == 2
    assert any("TABLE_ROW_LENGTH" in rec.getMessage() for rec in caplog.records)


def test_options_from_dict_accepts_camel_case():
    opts = TableOptions.from_dict(
        {
            "selectable": True,
            "selectionType": "single",
            "hasPagination": True,
            "itemsPerPage": 5,
            "filterableHeaders": [0, 2],
        }
    )
    assert opts.selection_type is SelectionType.SINGLE
    assert opts.items_per_page == 5
    assert opts.filterable_headers == frozenset({0, 2})


@pytest.mark.parametrize(
    "raw",
    [
        {"selection_type": "many"},
        {"unknown_flag": True},
        {"items_per_page": "ten"},
    ],
)
def test_options_from_dict_rejects_bad_values(raw):
    with pytest.raises(ConfigError):
        TableOptions.from_dict(raw)


def test_view_exposes_selection_state():
    engine = _make_engine(selection_type=SelectionType.SINGLE)
    engine.state = TableState(current_page=2, selected_rows=(12,))

    view = engine.view()

    assert view.selection.selection_type is SelectionType.SINGLE
    assert view.selection.selected == (12,)
    assert view.is_selected(2) is True
    assert view.is_selected(0) is False
