from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from table_browser.config.model import TableConfig
from table_browser.core.exceptions import ConfigError, TableLoadError
from table_browser.core.models import CellValue, HeaderDefinition, RowRecord
from table_browser.core.sorting import SORT_KEYS, SortKey, text_key
from table_browser.core.table_engine import TableOptions

logger = logging.getLogger(__name__)


@dataclass
class TableSource:
    """
    A materialised table: headers and rows in their original order, plus the
    options and per-column sort keys from its config.
    """
    name: str
    headers: List[HeaderDefinition]
    rows: List[RowRecord]
    options: TableOptions = field(default_factory=TableOptions)
    sort_keys: Dict[int, SortKey] = field(default_factory=dict)
    file_path: Optional[Path] = None

    def sort_key_for(self, column_index: int) -> SortKey:
        return self.sort_keys.get(column_index, text_key)


def rows_from_dataframe(df: pd.DataFrame, columns: Optional[Sequence[str]] = None) -> List[RowRecord]:
    """
    Convert a DataFrame into rows of CellValue, one cell per column.
    Missing values become empty text.
    """
    if columns is not None:
        df = df.loc[:, list(columns)]

    rows: List[RowRecord] = []
    for record in df.itertuples(index=False, name=None):
        rows.append(
            tuple(
                CellValue(text="" if pd.isna(value) else str(value))
                for value in record
            )
        )
    return rows


def headers_from_dataframe(df: pd.DataFrame, sortable: bool = True) -> List[HeaderDefinition]:
    return [HeaderDefinition(text=str(col), sortable=sortable) for col in df.columns]


def _headers_from_config(raw_headers: List[Dict[str, Any]], df: pd.DataFrame, cfg: TableConfig) -> tuple[List[HeaderDefinition], List[str]]:
    headers: List[HeaderDefinition] = []
    columns: List[str] = []

    for idx, raw in enumerate(raw_headers):
        if not isinstance(raw, dict):
            raise ConfigError(f"Table '{cfg.name}': header {idx} must be an object")

        column = raw.get("column", raw.get("text"))
        if column is None or column not in df.columns:
            raise TableLoadError(
                f"Table '{cfg.name}': header {idx} refers to column {column!r}, "
                f"not found in {cfg.path.name}"
            )

        header_raw = {k: v for k, v in raw.items() if k != "column"}
        header_raw.setdefault("text", column)
        headers.append(HeaderDefinition.from_dict(header_raw))
        columns.append(column)

    return headers, columns


def _resolve_sort_keys(cfg: TableConfig) -> Dict[int, SortKey]:
    resolved: Dict[int, SortKey] = {}
    for column_index, key_name in cfg.sort_keys.items():
        key = SORT_KEYS.get(key_name)
        if key is None:
            raise ConfigError(
                f"Table '{cfg.name}': unknown sort key {key_name!r} for column {column_index} "
                f"(expected one of {sorted(SORT_KEYS)})"
            )
        resolved[column_index] = key
    return resolved


def from_config(cfg: TableConfig) -> TableSource:
    """
    Materialise a TableConfig: read the CSV with pandas (all values kept as
    text) and build headers, rows and options.
    """
    path = cfg.path
    if not path.is_file():
        raise TableLoadError(f"Table '{cfg.name}': file not found at {path}")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (OSError, ValueError) as e:
        raise TableLoadError(f"Table '{cfg.name}': could not read {path}: {e}") from e

    options = TableOptions.from_dict(cfg.options)

    raw_headers = cfg.headers
    if raw_headers:
        headers, columns = _headers_from_config(raw_headers, df, cfg)
    else:
        headers = headers_from_dataframe(df)
        columns = [str(c) for c in df.columns]

    rows = rows_from_dataframe(df, columns)

    logger.info(
        "Loaded table",
        extra={"table": cfg.name, "path": str(path), "n_rows": len(rows), "n_columns": len(headers)},
    )

    return TableSource(
        name=cfg.name,
        headers=headers,
        rows=rows,
        options=options,
        sort_keys=_resolve_sort_keys(cfg),
        file_path=path,
    )
