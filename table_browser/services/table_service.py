from __future__ import annotations

import logging
from typing import Dict, Iterator, Mapping

from table_browser.config.model import TableConfig
from table_browser.core.exceptions import TableBrowserError
from table_browser.core.table_loader import TableSource, from_config

logger = logging.getLogger(__name__)


class TableManager(Mapping[str, TableSource]):
    """
    Central service for managing table sources.
    Implements the Mapping interface (dict-like) to support lazy loading
    transparency for the UI layer.
    """

    def __init__(self, cfg_by_name: Dict[str, TableConfig]):
        self._cfg_by_name = cfg_by_name
        self._loaded: Dict[str, TableSource] = {}

    def __getitem__(self, name: str) -> TableSource:
        # 1. Fast path: already materialised
        if name in self._loaded:
            return self._loaded[name]

        # 2. Check config existence
        cfg = self._cfg_by_name.get(name)
        if cfg is None:
            raise KeyError(f"Unknown table '{name}'")

        # 3. Lazy load
        try:
            logger.info("Lazy-loading table", extra={"table": cfg.name})
            source = from_config(cfg)
        except TableBrowserError as e:
            logger.error(
                "Table config error on load",
                extra={"table": cfg.name, "error": str(e)},
            )
            raise
        except Exception:
            logger.exception(
                "Unexpected error while loading table",
                extra={"table": cfg.name},
            )
            raise

        self._loaded[name] = source
        return source

    def __iter__(self) -> Iterator[str]:
        return iter(self._cfg_by_name)

    def __len__(self) -> int:
        return len(self._cfg_by_name)

    def get(self, name: str, default=None) -> TableSource | None:
        try:
            return self[name]
        except KeyError:
            return default

    def is_loaded(self, name: str) -> bool:
        return name in self._loaded

    def refresh_config(self, new_cfg_by_name: Dict[str, TableConfig]) -> None:
        """
        Update the configuration map and drop every loaded table.
        """
        self._cfg_by_name = new_cfg_by_name
        self._loaded.clear()
