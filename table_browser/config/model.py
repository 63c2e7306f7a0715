from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from table_browser.core.exceptions import ConfigError


@dataclass
class TableConfig:
    """
    Parsed config entry for a single table.

    Expected keys in the raw JSON:

    - name: display name (defaults to "Table <index>")
    - file: CSV file, relative to the config file's directory
    - headers: list of header dicts; "column" picks the CSV column,
               the rest maps onto HeaderDefinition
    - options: table options (see TableOptions)
    - sort_keys: column index -> "text" | "numeric" | "date"
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int

    @property
    def name(self) -> str:
        return self.raw.get("name", f"Table {self.index}")

    @property
    def path(self) -> Path:
        if "file" not in self.raw:
            raise ConfigError(f"Table '{self.name}' ({self.source_path}) has no 'file' entry")
        path = Path(self.raw["file"])
        if path.is_absolute():
            return path
        return (self.source_path.parent / path).resolve()

    @property
    def headers(self) -> Optional[List[Dict[str, Any]]]:
        headers = self.raw.get("headers")
        if headers is not None and not isinstance(headers, list):
            raise ConfigError(f"Table '{self.name}': 'headers' must be a list")
        return headers

    @property
    def options(self) -> Dict[str, Any]:
        options = self.raw.get("options", {})
        if not isinstance(options, dict):
            raise ConfigError(f"Table '{self.name}': 'options' must be an object")
        return options

    @property
    def sort_keys(self) -> Dict[int, str]:
        raw = self.raw.get("sort_keys", {}) or {}
        try:
            return {int(k): str(v) for k, v in raw.items()}
        except (AttributeError, ValueError) as e:
            raise ConfigError(f"Table '{self.name}': invalid 'sort_keys': {e}") from e

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> TableConfig:
        if not isinstance(raw, dict):
            raise ConfigError(f"{source_path}: table config must be a JSON object")
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str
    default_table: Optional[str]
    tables: List[TableConfig]
