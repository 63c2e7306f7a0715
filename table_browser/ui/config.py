from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from table_browser.config.model import GlobalConfig
from table_browser.core.table_loader import TableSource


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    table_names: List[str] = field(default_factory=list)
    table_by_name: Mapping[str, TableSource] = field(default_factory=dict)
    default_table: Optional[str] = None

    def validate(self) -> None:
        """Ensure the app has something to show before it starts."""
        if not self.table_names:
            raise RuntimeError("AppConfig.table_names must not be empty.")
        if self.default_table is not None and self.default_table not in self.table_names:
            raise RuntimeError(f"Default table '{self.default_table}' is not configured.")
