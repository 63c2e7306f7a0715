from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from table_browser.config.model import GlobalConfig, TableConfig
from table_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout.

    Expected structure:

        root/
            global.json
            tables/
                employees.json
                ...

    :param root: Directory containing 'global.json' and optionally 'tables/'.
    :return: A GlobalConfig instance.
    :raises FileNotFoundError: if global.json does not exist.
    """
    root = Path(root)
    logger.info(
        "Loading global config",
        extra={"config_root": str(root)},
    )

    global_path = root / "global.json"
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    with global_path.open() as f:
        raw_global = json.load(f)

    tables_dir = root / "tables"
    tables: List[TableConfig] = []

    if tables_dir.is_dir():
        logger.info(f"Scanning for table configurations in: {tables_dir}")

        files = sorted(tables_dir.glob("*.json"))
        if not files:
            logger.warning(f"No .json files found in {tables_dir}")

        for idx, config_file in enumerate(files):
            logger.info(f"Loading table config: {config_file.name}")
            try:
                with config_file.open() as f:
                    raw = json.load(f)
                tables.append(TableConfig.from_raw(raw, source_path=config_file, index=idx))
            except (OSError, json.JSONDecodeError, ConfigError) as e:
                logger.error(f"Failed to load {config_file.name}: {e}")
    else:
        logger.warning(f"Tables directory not found at: {tables_dir}")

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Table Browser"),
        default_table=raw_global.get("default_table"),
        tables=tables,
    )


def load_table_registry(path: Path) -> Tuple[GlobalConfig, Dict[str, TableConfig]]:
    """
    Load global config + table config objects only (no CSV loading).
    Returns mapping of table name -> TableConfig.
    """
    global_config = load_global_config(path)

    cfg_by_name: Dict[str, TableConfig] = {}
    for cfg in global_config.tables:
        if cfg.name in cfg_by_name:
            raise ConfigError(f"Duplicate table name '{cfg.name}' in config")
        cfg_by_name[cfg.name] = cfg

    logger.info(
        "Table registry loaded",
        extra={
            "config_root": str(path),
            "n_tables": len(cfg_by_name),
            "table_names": list(cfg_by_name),
        },
    )
    return global_config, cfg_by_name
