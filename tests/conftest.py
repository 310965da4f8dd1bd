from __future__ import annotations

import sys
from pathlib import Path

import pytest

# make the vault package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vault.core import config as core_config
from vault.db import session as db_session
from vault.repositories import kv_store


@pytest.fixture(autouse=True)
def data_file(tmp_path, monkeypatch):
    """Every test gets its own empty JSON store."""
    path = tmp_path / "data.json"
    monkeypatch.setenv("DATA_FILE", str(path))
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    core_config.get_settings.cache_clear()
    kv_store.get_store.cache_clear()
    yield path
    core_config.get_settings.cache_clear()
    kv_store.get_store.cache_clear()
    db_session.reset_engine()
