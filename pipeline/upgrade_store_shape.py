#!/usr/bin/env python3
"""
upgrade_store_shape.py
----------------------
Rewrite a bare-array art_database.json as ``{"metadata": {}, "records": [...]}``.
Stores already in object form are left alone.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from backend.runner.config import ART_DB_PATH
from backend.runner.store import RecordStore, StoreError, coerce_document, is_legacy_shape


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Upgrade a bare-array record store.")
    ap.add_argument("--db", type=Path, default=ART_DB_PATH)
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")

    store = RecordStore(args.db)
    try:
        raw = store.read_raw()
        document = coerce_document(raw)
    except StoreError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if not is_legacy_shape(raw):
        print(f"✅ {args.db} already uses the records object shape.")
        return 0

    store.save(document)
    print(f"✅ Wrapped {len(document['records'])} records in {args.db}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
