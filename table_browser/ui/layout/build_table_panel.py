from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from table_browser.ui.ids import IDs


def build_table_panel() -> dbc.Card:
    """
    Table card:

    - summary line (row counts, selection, active filters)
    - the rendered table, refreshed from the table-state store
    """
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Span(id=IDs.Control.TABLE_SUMMARY, className="text-muted small"),
            ),
            dbc.CardBody(html.Div(id=IDs.Control.TABLE_CONTAINER), className="p-2"),
        ],
        className="mt-3 tb-table-card",
    )
