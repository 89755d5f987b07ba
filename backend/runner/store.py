"""
Record store I/O for art_database.json.

The canonical on-disk shape is an object::

    {"metadata": {...}, "records": [ {...}, ... ]}

Older copies of the file hold a bare array of records. Those are accepted on
read and written back in the canonical shape.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

log = logging.getLogger(__name__)

Record = Dict[str, Any]
Document = Dict[str, Any]


class StoreError(Exception):
    """Base class for record store failures."""


class StoreNotFoundError(StoreError):
    pass


class StoreFormatError(StoreError):
    """The file exists but is not valid JSON or has an unknown shape."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def empty_document() -> Document:
    return {"metadata": {}, "records": []}


def is_legacy_shape(raw: Any) -> bool:
    return isinstance(raw, list)


def coerce_document(raw: Any) -> Document:
    """
    Return *raw* in the canonical object shape.

    A bare list is wrapped; an object must carry a ``records`` list of
    objects. Anything else raises :class:`StoreFormatError`.
    """
    if isinstance(raw, list):
        raw = {"metadata": {}, "records": raw}
    if isinstance(raw, dict) and isinstance(raw.get("records"), list):
        if not all(isinstance(r, dict) for r in raw["records"]):
            raise StoreFormatError("Every record must be a JSON object")
        raw.setdefault("metadata", {})
        if not isinstance(raw["metadata"], dict):
            raise StoreFormatError("'metadata' must be an object")
        return raw
    raise StoreFormatError(
        "Expected a list of records or an object with a 'records' list"
    )


def record_id(record: Record) -> Any:
    """Identifier of *record*; older records are keyed by ``id``."""
    if record.get("recordId") is not None:
        return record["recordId"]
    return record.get("id")


def find_record(document: Document, rid: Union[int, str]) -> Optional[Record]:
    wanted = str(rid)
    for record in document["records"]:
        if str(record_id(record)) == wanted:
            return record
    return None


class RecordStore:
    """Read / atomically write a single JSON record store file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"RecordStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def read_raw(self) -> Any:
        """Parsed JSON exactly as stored, without shape coercion."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise StoreNotFoundError(f"Record store not found: {self.path}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreFormatError(f"Invalid JSON in {self.path}: {exc}") from exc

    def load(self) -> Document:
        raw = self.read_raw()
        try:
            document = coerce_document(raw)
        except StoreFormatError as exc:
            raise StoreFormatError(f"{self.path}: {exc}") from exc
        log.debug("Loaded %d records from %s", len(document["records"]), self.path)
        return document

    def save(self, document: Document) -> None:
        """
        Write *document* in canonical shape via temp file + rename. Readers see
        either the previous file or the complete new one.
        """
        document = coerce_document(document)
        document["metadata"]["lastUpdated"] = _now()
        payload = json.dumps(document, indent=2, ensure_ascii=False)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        log.info("Wrote %d records to %s", len(document["records"]), self.path)


def load_art_database(path: Union[str, Path]) -> Document:
    """
    On-demand loader for route handlers. Re-reads the file on every call.

    A missing file reads as an empty store. Records that carry image data but
    no MIME type are reported as JPEG in the returned copy; the file itself is
    not modified.
    """
    store = RecordStore(path)
    if not store.exists():
        log.warning("Record store %s does not exist yet; serving empty store", path)
        return empty_document()

    document = store.load()
    for record in document["records"]:
        if record.get("imageBase64") and not record.get("imageMimeType"):
            record["imageMimeType"] = "image/jpeg"
    return document