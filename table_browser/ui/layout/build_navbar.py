from __future__ import annotations

from typing import List, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from table_browser.config.model import GlobalConfig
from table_browser.ui.ids import IDs


def build_navbar(
    table_names: List[str],
    global_config: GlobalConfig,
    default_table: Optional[str],
) -> dbc.Navbar:
    title = getattr(global_config, "ui_title", "Table Browser")

    table_options = [{"label": name, "value": name} for name in table_names]

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(title, className="mb-0"),
                        html.Small("Filter, page and select tabular data", className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),

                html.Div(
                    [
                        html.Div("Active Table", className="navbar-table-title"),
                        dcc.Dropdown(
                            id=IDs.Control.TABLE_SELECT,
                            options=table_options,
                            value=default_table,
                            clearable=False,
                            placeholder="Select table",
                            className="tb-table-dropdown mt-1",
                        ),
                    ],
                    className="ms-auto navbar-table-block",
                    style={
                        "minWidth": "280px",
                        "maxWidth": "380px",
                        "marginRight": "24px",
                    },
                ),
            ],
        ),
        dark=False,
        className="shadow-sm tb-navbar",
    )
