"""One-off migration script: JSON store (data.json) -> SQL key-value table."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# make the vault package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vault.core.config import get_settings
from vault.repositories.kv_store import JsonFileStore, SQLKeyValueStore


def migrate(data_file: Path | None = None, target: SQLKeyValueStore | None = None) -> int:
    """Copy every key of the JSON store into the SQL store. Returns the number of keys copied."""
    path = data_file or get_settings().data_file
    if not path.exists():
        raise SystemExit(f"Data file not found: {path}")
    source = JsonFileStore(path)
    target = target or SQLKeyValueStore()
    copied = 0
    for key, value in source.items():
        target.set(key, value)
        copied += 1
    return copied


def main() -> None:
    ap = argparse.ArgumentParser(description="Copy the JSON store into DATABASE_URL")
    ap.add_argument("--data-file", type=Path, help="JSON store to read (default: DATA_FILE)")
    args = ap.parse_args()
    copied = migrate(args.data_file)
    print(f"Migrated {copied} key(s) to the SQL store.")


if __name__ == "__main__":
    main()
