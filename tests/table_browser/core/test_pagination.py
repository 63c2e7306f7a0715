from __future__ import annotations

import logging

import pytest

from table_browser.core.models import CellValue
from table_browser.core.pagination import (
    ELLIPSIS_END,
    ELLIPSIS_START,
    page_window,
    paginate_rows,
    request_page,
    total_pages,
)
from table_browser.core.table_state import PageChanged


def _make_rows(n=25):
    return [(CellValue(text=f"row-{i}"),) for i in range(n)]


def test_pages_of_25_rows():
    rows = _make_rows()

    p1 = paginate_rows(rows, True, 1, 10)
    p2 = paginate_rows(rows, True, 2, 10)
    p3 = paginate_rows(rows, True, 3, 10)

    assert len(p1) == 10
    assert len(p3) == 5
    assert list(p1) + list(p2) + list(p3) == rows


def test_stale_page_falls_back_to_last_page(caplog):
    rows = _make_rows()

    with caplog.at_level(logging.WARNING):
        out = paginate_rows(rows, True, 999, 10)

    assert out == paginate_rows(rows, True, 3, 10)
    assert any("past the last page" in rec.getMessage() for rec in caplog.records)


def test_disabled_or_empty_is_identity():
    rows = _make_rows()
    assert paginate_rows(rows, False, 2, 10) is rows

    empty: list = []
    assert paginate_rows(empty, True, 1, 10) is empty


@pytest.mark.parametrize("page", [0, -3])
def test_page_below_one_is_corrected(page, caplog):
    rows = _make_rows()

    with caplog.at_level(logging.WARNING):
        out = paginate_rows(rows, True, page, 10)

    assert out == rows[:10]
    assert caplog.records


def test_items_per_page_below_one_uses_default():
    rows = _make_rows()
    assert paginate_rows(rows, True, 2, 0) == rows[10:20]


def test_fault_returns_unpaginated_rows():
    rows = _make_rows()
    # a non-numeric page cannot be compared to 1
    assert paginate_rows(rows, True, "two", 10) is rows


def test_total_pages_minimum_one():
    assert total_pages(0, 10) == 1
    assert total_pages(25, 10) == 3
    assert total_pages(30, 10) == 3
    assert total_pages(31, 10) == 4


def test_request_page_rejects_out_of_range():
    assert request_page(0, 3) is None
    assert request_page(4, 3) is None
    assert request_page(2, 3) == PageChanged(page=2)


def test_page_window_small_and_large():
    assert page_window(1, 1) == []
    assert page_window(2, 4) == [1, 2, 3, 4]

    assert page_window(1, 10) == [1, 2, 3, 4, ELLIPSIS_END, 10]
    assert page_window(5, 10) == [1, ELLIPSIS_START, 4, 5, 6, ELLIPSIS_END, 10]
    assert page_window(10, 10) == [1, ELLIPSIS_START, 7, 8, 9, 10]
