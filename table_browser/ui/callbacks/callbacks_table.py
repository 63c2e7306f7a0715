from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State

from table_browser.core.exceptions import TableBrowserError
from table_browser.ui.callbacks.callbacks_utils import (
    build_table_view,
    handle_table_event,
    lookup_source,
    try_parse_host_state,
)
from table_browser.ui.helpers import render_table, table_summary
from table_browser.ui.host_state import HostState
from table_browser.ui.ids import IDs

if TYPE_CHECKING:
    from table_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _all(kind: str, prop: str = "n_clicks"):
    return Input({"type": kind, "index": ALL}, prop)


def register_table_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Render: host state -> table markup
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.TABLE_CONTAINER, "children"),
        Output(IDs.Control.TABLE_SUMMARY, "children"),
        Input(IDs.Store.TABLE_STATE, "data"),
    )
    def render(store_data):
        host = try_parse_host_state(store_data) or HostState(table=ctx.default_table)
        if not host.table:
            return "No table selected. Choose a table from the navbar dropdown.", ""

        try:
            source = ctx.table_by_name.get(host.table)
        except TableBrowserError as e:
            return f"Table '{host.table}' failed to load: {e}", ""

        if source is None:
            return (
                f"Table '{host.table}' not found. "
                "It may have been removed from the config. Choose another table.",
                "",
            )

        view = build_table_view(source, host)
        return render_table(view, source.options, host.dropdown), table_summary(source, view)

    # ---------------------------------------------------------
    # Events: clicks -> engine command -> host state
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.TABLE_STATE, "data"),
        Input(IDs.Control.TABLE_SELECT, "value"),
        _all(IDs.Pattern.ROW),
        _all(IDs.Pattern.SELECT_ALL),
        _all(IDs.Pattern.SORT),
        _all(IDs.Pattern.FILTER_ICON),
        _all(IDs.Pattern.FILTER_ACTION),
        _all(IDs.Pattern.PAGE),
        _all(IDs.Pattern.PAGE_STEP),
        State({"type": IDs.Pattern.FILTER_INPUT, "index": ALL}, "value"),
        State(IDs.Store.TABLE_STATE, "data"),
        prevent_initial_call=True,
    )
    def on_table_event(
        table_name,
        _rows,
        _select_all,
        _sort,
        _filter_icon,
        _filter_action,
        _page,
        _page_step,
        filter_inputs,
        store_data,
    ):
        trigger = dash.ctx.triggered_id
        if trigger is None:
            raise dash.exceptions.PreventUpdate

        host = try_parse_host_state(store_data) or HostState(table=ctx.default_table)

        if trigger == IDs.Control.TABLE_SELECT:
            if table_name == host.table:
                raise dash.exceptions.PreventUpdate
            return host.for_table(table_name).to_dict()

        # Pattern components are re-created on every render; ignore the
        # trigger unless it carries an actual click.
        if not dash.ctx.triggered or not dash.ctx.triggered[0].get("value"):
            raise dash.exceptions.PreventUpdate

        source = lookup_source(ctx.table_by_name, host.table)
        if source is None:
            raise dash.exceptions.PreventUpdate

        filter_text = filter_inputs[0] if filter_inputs else None
        new_host = handle_table_event(
            source,
            host,
            event=trigger["type"],
            index=trigger["index"],
            filter_text=filter_text,
        )
        if new_host == host:
            raise dash.exceptions.PreventUpdate
        return new_host.to_dict()
