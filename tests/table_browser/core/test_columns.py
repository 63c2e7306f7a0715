from __future__ import annotations

import pytest

from table_browser.core.columns import effective_column_count, is_filterable_header
from table_browser.core.models import HeaderDefinition


@pytest.mark.parametrize("n_headers", [0, 1, 5, 12])
def test_effective_column_count(n_headers):
    assert effective_column_count(n_headers, False) == n_headers
    assert effective_column_count(n_headers, True) == n_headers + 1


def test_is_filterable_header_rules():
    header = HeaderDefinition(text="Name")
    opted_out = HeaderDefinition(text="Date", filterable=False)

    assert is_filterable_header(0, header, has_header_filters=False) is False
    assert is_filterable_header(0, header, has_header_filters=True) is True
    assert is_filterable_header(0, opted_out, has_header_filters=True) is False

    assert is_filterable_header(2, header, has_header_filters=True, filterable_headers=[0, 1]) is False
    assert is_filterable_header(1, header, has_header_filters=True, filterable_headers=[0, 1]) is True
