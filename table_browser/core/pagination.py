from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Union

from table_browser.core.models import RowRecord
from table_browser.core.table_state import PageChanged
from table_browser.validation.errors import RangeWarning
from table_browser.validation.table_validation import handle_fault

logger = logging.getLogger(__name__)

DEFAULT_ITEMS_PER_PAGE = 10
MAX_PAGE_BUTTONS = 5

ELLIPSIS_START = "ellipsis-start"
ELLIPSIS_END = "ellipsis-end"


def total_pages(total_items: int, items_per_page: int) -> int:
    """Number of pages for `total_items`, never less than 1."""
    if items_per_page < 1:
        items_per_page = DEFAULT_ITEMS_PER_PAGE
    return max(1, math.ceil(max(0, total_items) / items_per_page))


def paginate_rows(
    rows: Sequence[RowRecord],
    enabled: bool,
    current_page: int,
    items_per_page: int,
) -> Sequence[RowRecord]:
    """
    Slice `rows` down to the page window.

    Out-of-range inputs are corrected rather than rejected:
    - current_page < 1 becomes 1
    - items_per_page < 1 becomes DEFAULT_ITEMS_PER_PAGE
    - a page past the end (typically after a filter shrank the rows) falls
      back to the last valid page instead of returning an empty slice

    Faults are logged and the unpaginated rows are returned.
    """
    if not enabled or not rows:
        return rows

    try:
        if current_page < 1:
            logger.warning(
                "current_page %r out of range; using 1",
                current_page,
                extra={"warning": RangeWarning.__name__, "current_page": current_page},
            )
            current_page = 1

        if items_per_page < 1:
            logger.warning(
                "items_per_page %r out of range; using %d",
                items_per_page,
                DEFAULT_ITEMS_PER_PAGE,
                extra={"warning": RangeWarning.__name__, "items_per_page": items_per_page},
            )
            items_per_page = DEFAULT_ITEMS_PER_PAGE

        n_rows = len(rows)
        start = (current_page - 1) * items_per_page

        if start >= n_rows:
            last_page = math.ceil(n_rows / items_per_page)
            logger.warning(
                "Page %d is past the last page (%d); showing the last page",
                current_page,
                last_page,
                extra={
                    "warning": RangeWarning.__name__,
                    "current_page": current_page,
                    "last_page": last_page,
                    "n_rows": n_rows,
                },
            )
            start = (last_page - 1) * items_per_page

        end = min(start + items_per_page, n_rows)
        return rows[start:end]
    except Exception as e:
        return handle_fault(
            e,
            rows,
            {
                "operation": "paginate_rows",
                "current_page": repr(current_page),
                "items_per_page": repr(items_per_page),
            },
        )


def request_page(page: int, n_pages: int) -> Optional[PageChanged]:
    """
    Propose a page change. Pages outside [1, n_pages] are ignored (None),
    so prev/next controls at either end are inert.
    """
    if page < 1 or page > n_pages:
        logger.debug(
            "Ignoring page change outside range",
            extra={"page": page, "n_pages": n_pages},
        )
        return None
    return PageChanged(page=page)


def page_window(
    current_page: int,
    n_pages: int,
    max_buttons: int = MAX_PAGE_BUTTONS,
) -> List[Union[int, str]]:
    """
    Page buttons to show for a pagination control.

    Always shows the first and last page with a small window around the
    current one; gaps are marked with ELLIPSIS_START / ELLIPSIS_END.
    Returns an empty list when there is only one page.
    """
    if n_pages <= 1:
        return []

    if n_pages <= max_buttons:
        return list(range(1, n_pages + 1))

    buttons: List[Union[int, str]] = [1]

    start_page = max(2, current_page - 1)
    end_page = min(n_pages - 1, current_page + 1)

    # Near the beginning: widen to the right
    if current_page <= 3:
        end_page = min(n_pages - 1, max_buttons - 1)

    # Near the end: widen to the left
    if current_page >= n_pages - 2:
        start_page = max(2, n_pages - (max_buttons - 2))

    if start_page > 2:
        buttons.append(ELLIPSIS_START)

    buttons.extend(range(start_page, end_page + 1))

    if end_page < n_pages - 1:
        buttons.append(ELLIPSIS_END)

    buttons.append(n_pages)
    return buttons
