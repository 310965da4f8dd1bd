"""
Both store backends: the JSON file and the SQL table (on a temporary SQLite file).
"""
from __future__ import annotations

import json
import threading

import pytest

from vault.core import config as core_config
from vault.db import session as db_session
from vault.repositories import kv_store
from vault.repositories.kv_store import JsonFileStore, SQLKeyValueStore, StoreError


def test_json_store_set_get_delete(tmp_path):
    store = JsonFileStore(tmp_path / "store.json")
    assert store.get("users") is None

    store.set("users", "[]")
    store.set("currentUser:abc", "ana@example.com")
    assert store.get("users") == "[]"
    assert json.loads((tmp_path / "store.json").read_text(encoding="utf-8"))["currentUser:abc"] == "ana@example.com"

    store.delete("currentUser:abc")
    store.delete("missing")
    assert store.items() == {"users": "[]"}


def test_json_store_reads_garbage_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonFileStore(path).items() == {}

    path.write_text("[1, 2]", encoding="utf-8")
    assert JsonFileStore(path).get("users") is None


def test_get_store_defaults_to_json(data_file):
    store = kv_store.get_store()
    assert isinstance(store, JsonFileStore)
    assert store.path == data_file


@pytest.fixture()
def sql_store(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    core_config.get_settings.cache_clear()
    db_session.reset_engine()
    yield SQLKeyValueStore()
    db_session.reset_engine()


def test_sql_store_set_get_delete(sql_store):
    assert sql_store.get("users") is None

    sql_store.set("users", "[]")
    sql_store.set("users", '[{"email": "ana@example.com"}]')
    sql_store.set("currentUser:abc", "ana@example.com")
    assert sql_store.get("users") == '[{"email": "ana@example.com"}]'

    sql_store.delete("currentUser:abc")
    assert sql_store.items() == {"users": '[{"email": "ana@example.com"}]'}


def test_sql_backend_selected_by_env(sql_store, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    core_config.get_settings.cache_clear()
    kv_store.get_store.cache_clear()
    assert isinstance(kv_store.get_store(), SQLKeyValueStore)


def test_sql_store_requires_database_url():
    with pytest.raises(RuntimeError):
        SQLKeyValueStore()


def test_migrate_copies_every_key(tmp_path, sql_store):
    from scripts import migrate_store

    source = tmp_path / "legacy.json"
    source.write_text(json.dumps({"users": "[]", "currentUser:t1": "ana@example.com"}), encoding="utf-8")

    assert migrate_store.migrate(source, sql_store) == 2
    assert sql_store.get("currentUser:t1") == "ana@example.com"


def test_json_store_concurrent_writes_keep_every_key(tmp_path):
    path = tmp_path / "store.json"
    JsonFileStore(path).set("users", '[{"email": "ana@example.com"}]')

    def worker(n):
        store = JsonFileStore(path)
        for i in range(40):
            store.set(f"currentUser:t{n}-{i}", "ana@example.com")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    data = JsonFileStore(path).items()
    assert data["users"] == '[{"email": "ana@example.com"}]'
    assert len(data) == 1 + 4 * 40
    assert [p.name for p in tmp_path.iterdir()] == ["store.json"]


def test_json_store_never_overwrites_an_unreadable_file(tmp_path):
    path = tmp_path / "store.json"
    store = JsonFileStore(path)
    store.set("users", "[]")
    torn = path.read_text(encoding="utf-8")[:-5]
    path.write_text(torn, encoding="utf-8")

    assert store.get("users") is None
    with pytest.raises(StoreError):
        store.set("currentUser:abc", "ana@example.com")
    with pytest.raises(StoreError):
        store.delete("users")
    assert path.read_text(encoding="utf-8") == torn
