"""
Config package for table_browser.

Responsible for:
- config models (GlobalConfig, TableConfig)
- config I/O helpers (load_global_config / load_table_registry)
"""

from .model import GlobalConfig, TableConfig
from .loader import load_global_config, load_table_registry
