#!/usr/bin/env python3
"""
Import script: flat-file JSON catalog → document store

Copies users.json, albums.json and photos.json from a data directory into
the SQLite document store. Documents with the same ids are replaced, so the
import can be re-run after editing the JSON files.

Usage:
    python scripts/import_catalog.py data/ catalog.db
    python scripts/import_catalog.py data/ catalog.db --hash-passwords
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from photo_catalog.config import configure_logging
from photo_catalog.infrastructure.storage import (
    DocumentStore, JsonFileStore, StoreConfig, StorageError, copy_catalog
)


async def run_import(data_dir: Path, db_path: Path, hash_passwords: bool) -> dict:
    source = JsonFileStore(StoreConfig(backend="json", data_dir=data_dir))
    dest = DocumentStore(StoreConfig(backend="document", database_path=db_path))
    async with source, dest:
        return await copy_catalog(source, dest, hash_passwords=hash_passwords)


def main():
    parser = argparse.ArgumentParser(
        description="Import a flat-file JSON catalog into the document store"
    )
    parser.add_argument("data_dir", type=Path, help="Directory with photos/albums/users JSON")
    parser.add_argument("db_path", type=Path, help="SQLite document store file")
    parser.add_argument(
        "--hash-passwords",
        action="store_true",
        help="Store bcrypt hashes instead of plaintext credentials"
    )
    args = parser.parse_args()

    configure_logging()

    try:
        counts = asyncio.run(run_import(args.data_dir, args.db_path, args.hash_passwords))
    except StorageError as e:
        print(f"Import failed: {e}")
        return 1

    print(f"Imported {counts['users']} users, {counts['albums']} albums, "
          f"{counts['photos']} photos into {args.db_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
