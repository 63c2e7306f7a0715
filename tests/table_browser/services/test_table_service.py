from __future__ import annotations

import json
from pathlib import Path

import pytest

from table_browser.config.model import TableConfig
from table_browser.core.exceptions import TableLoadError
from table_browser.services.table_service import TableManager


def _cfg(tmp_path: Path, name: str, file: str) -> TableConfig:
    raw = {"name": name, "file": file}
    source = tmp_path / f"{name}.json"
    source.write_text(json.dumps(raw))
    return TableConfig.from_raw(raw, source_path=source, index=0)


def test_lazy_loads_once_and_caches(tmp_path):
    (tmp_path / "a.csv").write_text("x,y\n1,2\n")
    manager = TableManager({"A": _cfg(tmp_path, "A", "a.csv")})

    assert list(manager) == ["A"]
    assert len(manager) == 1
    assert manager.is_loaded("A") is False

    first = manager["A"]
    assert manager.is_loaded("A") is True
    assert manager["A"] is first


def test_unknown_table_is_key_error(tmp_path):
    manager = TableManager({})
    with pytest.raises(KeyError):
        manager["missing"]
    assert manager.get("missing") is None


def test_load_error_propagates(tmp_path):
    manager = TableManager({"B": _cfg(tmp_path, "B", "missing.csv")})

    with pytest.raises(TableLoadError):
        manager["B"]
    assert manager.is_loaded("B") is False


def test_refresh_config_drops_loaded_tables(tmp_path):
    (tmp_path / "a.csv").write_text("x\n1\n")
    cfg = {"A": _cfg(tmp_path, "A", "a.csv")}
    manager = TableManager(cfg)
    manager["A"]

    manager.refresh_config(cfg)

    assert manager.is_loaded("A") is False
