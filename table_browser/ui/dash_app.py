from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from table_browser.config.loader import load_table_registry
from table_browser.core.exceptions import TableBrowserError
from table_browser.services.table_service import TableManager
from table_browser.ui.callbacks.callbacks_table import register_table_callbacks
from table_browser.ui.helpers import warn_on_invalid_tables
from table_browser.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def _choose_default_table(table_names: list[str], configured: Optional[str]) -> Optional[str]:
    if not table_names:
        return None
    if configured and configured in table_names:
        return configured
    if configured:
        logger.warning(
            "Configured default table not found; using first table",
            extra={"default_table": configured, "table_names": table_names},
        )
    return table_names[0]


def create_dash_app(config_root: Path | str | None = None) -> Dash:
    if config_root is None:
        config_root = os.getenv("TABLE_BROWSER_CONFIG_ROOT", "config")
    config_root = Path(config_root)

    # 1) Load Config
    global_config, cfg_by_name = load_table_registry(config_root)
    if not cfg_by_name:
        raise RuntimeError("No table configs were loaded from config")

    # 2) Initialize Service Layer
    table_manager = TableManager(cfg_by_name)
    table_names = sorted(cfg_by_name.keys())

    # 3) Choose Default Table and load it eagerly so config errors surface at startup
    default_table = _choose_default_table(table_names, global_config.default_table)
    try:
        warn_on_invalid_tables([table_manager[default_table]], logger)
    except TableBrowserError:
        logger.exception("Default table failed to load", extra={"table": default_table})

    # 4) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        table_names=table_names,
        table_by_name=table_manager,
        default_table=default_table,
    )
    ctx.validate()

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )

    app.title = global_config.ui_title

    app.layout = build_layout(ctx)

    register_table_callbacks(app, ctx)

    return app
