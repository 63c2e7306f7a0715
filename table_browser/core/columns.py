from __future__ import annotations

from typing import Iterable, Optional

from table_browser.core.models import HeaderDefinition


def effective_column_count(header_count: int, selectable: bool) -> int:
    """Displayed columns: one per header, plus the checkbox column when rows are selectable."""
    return header_count + (1 if selectable else 0)


def is_filterable_header(
    index: int,
    header: Optional[HeaderDefinition],
    *,
    has_header_filters: bool,
    filterable_headers: Optional[Iterable[int]] = None,
) -> bool:
    """
    Whether column `index` gets a header filter icon.

    All columns qualify when header filters are on and no allow-list is
    given. A header can still opt out with filterable=False.
    """
    if not has_header_filters:
        return False
    if filterable_headers is not None and index not in set(filterable_headers):
        return False
    if header is not None and header.filterable is False:
        return False
    return True
