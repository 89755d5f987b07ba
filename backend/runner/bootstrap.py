"""
First-boot seeding of the writable art database.

The repo ships a read-only seed copy; the running service works on a copy that
lives on the persistent disk. An existing disk copy is authoritative and is
never overwritten, even when the seed is newer.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Union

log = logging.getLogger(__name__)


class SeedMissingError(FileNotFoundError):
    pass


def seed_store(seed_path: Union[str, Path], target_path: Union[str, Path]) -> bool:
    """
    Copy *seed_path* to *target_path* unless the target already exists.

    Returns True when a copy was made. Raises :class:`SeedMissingError` before
    touching anything if the seed file is absent.
    """
    seed_path = Path(seed_path)
    target_path = Path(target_path)

    if not seed_path.is_file():
        raise SeedMissingError(f"No seed copy found at {seed_path}")

    if target_path.exists():
        log.info("Disk copy already exists at %s; no migration needed", target_path)
        return False

    log.info("No disk copy found; copying %s -> %s", seed_path, target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(seed_path, target_path)
    return True
