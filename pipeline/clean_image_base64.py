#!/usr/bin/env python3
"""
clean_image_base64.py
---------------------
Strip ``data:<mime>;base64,`` prefixes from every record's imageBase64 in the
art database and record the MIME type in imageMimeType.

The store is only rewritten when at least one record changed, so running the
script on a clean database is a no-op.

CLI
---
$ python -m pipeline.clean_image_base64
$ python -m pipeline.clean_image_base64 --db /mnt/data/art_database.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from backend.runner.config import ART_DB_PATH
from backend.runner.images import normalize_records
from backend.runner.store import RecordStore, StoreError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Strip data-URI prefixes from record images.")
    ap.add_argument("--db", type=Path, default=ART_DB_PATH, help="art_database.json to clean")
    ap.add_argument("--dry-run", action="store_true", help="report only, do not write")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")

    store = RecordStore(args.db)
    try:
        document = store.load()
    except StoreError as e:
        print(f"❌ Error during cleanup: {e}", file=sys.stderr)
        return 1

    result = normalize_records(document["records"])

    if not result.modified:
        print(f"✅ No changes needed. All {result.total} records already clean.")
        return 0

    if args.dry_run:
        print(f"⚠️  Dry run: {result.modified} of {result.total} records would be cleaned.")
        return 0

    store.save(document)
    breakdown = ", ".join(f"{mime}: {n}" for mime, n in sorted(result.mime_types.items()))
    print(f"✅ Cleaned {result.modified} imageBase64 field(s) in {result.total} records ({breakdown}).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
