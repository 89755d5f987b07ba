#!/usr/bin/env python3
"""
migrate_art_database.py
-----------------------
First-boot step: copy the seed art_database.json from the repo onto the
persistent disk, unless a disk copy already exists.

Exits 1 when the seed copy is missing.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from backend.runner.bootstrap import SeedMissingError, seed_store
from backend.runner.config import ART_DB_PATH, ART_DB_SEED_PATH


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Seed the persistent art database copy.")
    ap.add_argument("--seed", type=Path, default=ART_DB_SEED_PATH, help="read-only seed copy")
    ap.add_argument("--target", type=Path, default=ART_DB_PATH, help="writable disk copy")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")

    try:
        copied = seed_store(args.seed, args.target)
    except SeedMissingError as e:
        print(f"❌ ERROR: {e}", file=sys.stderr)
        print(
            f"❌ Please create {args.seed} with the last known good art_database.json.",
            file=sys.stderr,
        )
        return 1

    if copied:
        print(f"✅ Migration complete. Disk copy now exists at: {args.target}")
    else:
        print("✅ Disk copy already exists. No migration needed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
