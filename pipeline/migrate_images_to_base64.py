#!/usr/bin/env python3
"""
migrate_images_to_base64.py
---------------------------
Embed per-record image files (``<images-dir>/<5-digit id>.jpg``) into the art
database as ``data:image/jpeg;base64,...`` strings and drop the legacy
imagePath field.

Records without a matching file are left untouched and counted as missing.
Nothing is written when no record was updated.

CLI
---
$ python -m pipeline.migrate_images_to_base64
$ python -m pipeline.migrate_images_to_base64 --db data.json --images-dir imgs/
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from backend.runner.config import ART_DB_PATH, ARTWORK_IMAGES_DIR
from backend.runner.images import import_images
from backend.runner.store import RecordStore, StoreError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Embed per-record JPEG files into the art database.")
    ap.add_argument("--db", type=Path, default=ART_DB_PATH)
    ap.add_argument("--images-dir", type=Path, default=ARTWORK_IMAGES_DIR)
    ap.add_argument("--no-progress", action="store_true", help="hide the progress bar")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")

    store = RecordStore(args.db)
    try:
        document = store.load()
    except StoreError as e:
        print(f"❌ Migration failed: {e}", file=sys.stderr)
        return 1

    if not args.images_dir.is_dir():
        print(f"⚠️  Images directory {args.images_dir} does not exist", file=sys.stderr)

    result = import_images(document["records"], args.images_dir, progress=not args.no_progress)

    if result.updated:
        store.save(document)
    summary = f"✅ Migration complete. Updated: {result.updated}, Missing: {result.missing}"
    if result.skipped:
        summary += f", Skipped (no id): {result.skipped}"
    print(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
