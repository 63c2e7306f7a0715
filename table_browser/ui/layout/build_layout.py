from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc

from table_browser.ui.config import AppConfig
from table_browser.ui.host_state import HostState
from table_browser.ui.ids import IDs
from table_browser.ui.layout.build_navbar import build_navbar
from table_browser.ui.layout.build_table_panel import build_table_panel


def build_layout(ctx: AppConfig) -> dbc.Container:
    navbar = build_navbar(ctx.table_names, ctx.global_config, ctx.default_table)

    return dbc.Container(
        fluid=True,
        className="tb-root",
        children=[
            navbar,

            # Host-owned table state (filters, page, selection, sort, dropdown)
            dcc.Store(
                id=IDs.Store.TABLE_STATE,
                storage_type="memory",
                data=HostState(table=ctx.default_table).to_dict(),
            ),

            dbc.Row(
                dbc.Col(build_table_panel(), md=12),
                className="gx-3",
            ),
        ],
    )
