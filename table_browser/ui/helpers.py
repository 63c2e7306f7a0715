from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from table_browser.core.filter_dropdown import FilterDropdownState
from table_browser.core.models import CellValue, HeaderDefinition, SelectionType, SortDirection
from table_browser.core.pagination import ELLIPSIS_END, ELLIPSIS_START
from table_browser.core.table_engine import TableOptions, TableView
from table_browser.core.table_loader import TableSource
from table_browser.ui.ids import IDs, pattern_id
from table_browser.validation.errors import ValidationError
from table_browser.validation.table_validation import ensure_valid_table

SORT_ICONS = {
    SortDirection.ASC: "▲",
    SortDirection.DESC: "▼",
    SortDirection.NONE: "",
}

EMPTY_STATE_MESSAGE = "No data available"


def _cell_content(item: CellValue | HeaderDefinition):
    # html is caller-trusted markup
    if item.html:
        return dcc.Markdown(item.html, dangerously_allow_html=True, className="tb-cell-html")
    return item.text


def _filter_dropdown(header: HeaderDefinition, dropdown: FilterDropdownState) -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.Span(f"Filter by {header.text}", className="tb-filter-title"),
                    html.Button(
                        "✕",
                        id=pattern_id(IDs.Pattern.FILTER_ACTION, "close"),
                        className="btn btn-sm btn-link tb-filter-close",
                        title="Close filter",
                    ),
                ],
                className="d-flex justify-content-between align-items-center",
            ),
            dcc.Input(
                id=pattern_id(IDs.Pattern.FILTER_INPUT, 0),
                type="text",
                value=dropdown.temp_value,
                placeholder="Filter...",
                debounce=False,
                className="form-control form-control-sm my-2",
            ),
            html.Div(
                [
                    html.Button(
                        "Clear",
                        id=pattern_id(IDs.Pattern.FILTER_ACTION, "clear"),
                        className="btn btn-sm btn-outline-secondary me-2",
                    ),
                    html.Button(
                        "Apply",
                        id=pattern_id(IDs.Pattern.FILTER_ACTION, "apply"),
                        className="btn btn-sm btn-primary",
                    ),
                ],
                className="d-flex justify-content-end",
            ),
        ],
        className="tb-filter-dropdown shadow-sm",
    )


def _header_cell(
    index: int,
    header: HeaderDefinition,
    view: TableView,
    dropdown: FilterDropdownState,
) -> html.Th:
    children: list = []

    if header.sortable:
        children.append(
            html.Span(
                [_cell_content(header), html.Span(SORT_ICONS[header.sort_direction], className="tb-sort-icon ms-1")],
                id=pattern_id(IDs.Pattern.SORT, index),
                className="tb-sortable",
                role="button",
            )
        )
    else:
        children.append(_cell_content(header))

    if index in view.filterable_columns:
        active = index in view.state.filter_values
        children.append(
            html.Span(
                "⋮⋮",
                id=pattern_id(IDs.Pattern.FILTER_ICON, index),
                className="tb-filter-icon ms-2" + (" tb-filter-icon--active" if active else ""),
                title=f"Filter by {header.text}",
                role="button",
            )
        )
        if dropdown.active_column == index:
            children.append(_filter_dropdown(header, dropdown))

    aria_sort = {
        SortDirection.ASC: "ascending",
        SortDirection.DESC: "descending",
    }.get(header.sort_direction)

    return html.Th(children, scope="col", className="tb-header", **({"aria-sort": aria_sort} if aria_sort else {}))


def _pagination(view: TableView) -> Optional[html.Nav]:
    if not view.page_window:
        return None

    current = view.pagination.current_page
    items: List = [
        html.Li(
            html.Button(
                "Previous",
                id=pattern_id(IDs.Pattern.PAGE_STEP, "prev"),
                className="page-link",
                disabled=current == 1,
            ),
            className="page-item" + (" disabled" if current == 1 else ""),
        )
    ]

    for page in view.page_window:
        if page in (ELLIPSIS_START, ELLIPSIS_END):
            items.append(html.Li(html.Span("...", className="page-link"), className="page-item disabled"))
            continue
        items.append(
            html.Li(
                html.Button(str(page), id=pattern_id(IDs.Pattern.PAGE, page), className="page-link"),
                className="page-item" + (" active" if page == current else ""),
            )
        )

    last = view.total_pages
    items.append(
        html.Li(
            html.Button(
                "Next",
                id=pattern_id(IDs.Pattern.PAGE_STEP, "next"),
                className="page-link",
                disabled=current == last,
            ),
            className="page-item" + (" disabled" if current == last else ""),
        )
    )

    return html.Nav(html.Ul(items, className="pagination pagination-sm mb-0"), className="mt-2")


def render_table(view: TableView, options: TableOptions, dropdown: FilterDropdownState) -> html.Div:
    """
    Build the table markup for one engine view: header row (select-all,
    sort and filter controls), visible rows and pagination controls.
    """
    header_cells: List = []
    if options.selectable:
        if options.selection_type is SelectionType.MULTIPLE:
            header_cells.append(
                html.Th(
                    html.Span(
                        "☑" if view.all_visible_selected else "☐",
                        id=pattern_id(IDs.Pattern.SELECT_ALL, 0),
                        role="button",
                        title="Select all rows",
                    ),
                    className="tb-checkbox-cell",
                )
            )
        else:
            header_cells.append(html.Th("", className="tb-checkbox-cell"))

    header_cells.extend(_header_cell(i, h, view, dropdown) for i, h in enumerate(view.headers))

    body_rows: List = []
    if view.is_empty:
        body_rows.append(
            html.Tr(
                html.Td(EMPTY_STATE_MESSAGE, colSpan=view.effective_column_count, className="tb-empty-state")
            )
        )
    else:
        for pos, row in enumerate(view.visible_rows):
            selected = view.is_selected(pos)
            cells: List = []
            if options.selectable:
                cells.append(html.Td("☑" if selected else "☐", className="tb-checkbox-cell"))
            cells.extend(html.Td(_cell_content(cell)) for cell in row)
            body_rows.append(
                html.Tr(
                    cells,
                    id=pattern_id(IDs.Pattern.ROW, pos),
                    className="tb-row" + (" table-active" if selected else ""),
                    n_clicks=0,
                )
            )

    children: List = [
        dbc.Table(
            [html.Thead(html.Tr(header_cells)), html.Tbody(body_rows)],
            bordered=False,
            hover=options.selectable,
            responsive=True,
            size="sm",
            className="tb-table mb-0",
        )
    ]

    pagination = _pagination(view)
    if pagination is not None:
        children.append(pagination)

    return html.Div(children)


def table_summary(source: TableSource, view: TableView) -> str:
    parts = [f"{len(view.filtered_rows)} of {len(source.rows)} rows"]
    if view.state.selected_rows:
        parts.append(f"{len(view.state.selected_rows)} selected")
    if view.state.filter_values:
        active = ", ".join(
            f"{view.headers[i].text if i < len(view.headers) else i} ~ {text!r}"
            for i, text in sorted(view.state.filter_values.items())
        )
        parts.append(f"filters: {active}")
    return " · ".join(parts)


def warn_on_invalid_tables(sources: Iterable[TableSource], logger: logging.Logger) -> None:
    """
    Validate table sources and log warnings for any with ragged rows.

    Warn-only: mismatched rows are still shown, but you get actionable
    signals in logs right after load.
    """
    for source in sources:
        try:
            ensure_valid_table(source.headers, source.rows)
        except ValidationError as e:
            logger.warning(
                "Table %r validation failed: %s",
                source.name,
                "; ".join(f"{issue.code}: {issue.message}" for issue in e.issues),
            )
