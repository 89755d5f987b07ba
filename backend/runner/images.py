"""
Image payload helpers for art database records.

normalize_records    strip ``data:<mime>;base64,`` prefixes into imageMimeType
import_images        embed <5-digit id>.jpg files as data-URI strings
scan_legacy_images   report path / URL style image fields
clean_legacy_images  drop legacy image fields
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tqdm import tqdm

from .config import IMAGE_EXTENSION, IMAGE_ID_WIDTH, IMAGE_MIME_TYPE
from .store import Record, record_id

log = logging.getLogger(__name__)

# data:image/jpeg;base64,<payload>  (full prefix required)
DATA_URI_RE = re.compile(r"^data:([\w.+-]+/[\w.+-]+);base64,(.+)$", re.DOTALL)

LEGACY_IMAGE_FIELDS = ("imagePath", "imageFile")


@dataclass
class NormalizeResult:
    modified: int = 0
    total: int = 0
    mime_types: Dict[str, int] = field(default_factory=dict)


@dataclass
class ImportResult:
    updated: int = 0
    missing: int = 0
    skipped: int = 0
    total: int = 0
    missing_ids: List[Any] = field(default_factory=list)


def split_data_uri(value: Any) -> Optional[Tuple[str, str]]:
    """Return ``(mime, payload)`` if *value* is a base64 data-URI, else None."""
    if not isinstance(value, str):
        return None
    match = DATA_URI_RE.match(value)
    if match is None:
        return None
    return match.group(1), match.group(2)


def to_data_uri(data: bytes, mime: str = IMAGE_MIME_TYPE) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_record_image(record: Record) -> Tuple[bytes, str]:
    """
    Bytes and MIME type of a record's image, whichever form it is stored in.

    Raises ``KeyError`` if the record has no image and ``ValueError`` if the
    payload is not valid base64.
    """
    value = record.get("imageBase64")
    if not value or not isinstance(value, str):
        raise KeyError("imageBase64")

    parts = split_data_uri(value)
    if parts:
        mime, payload = parts
    else:
        mime, payload = record.get("imageMimeType") or IMAGE_MIME_TYPE, value
    try:
        return base64.b64decode(payload, validate=True), mime
    except binascii.Error as exc:
        raise ValueError(f"Malformed imageBase64: {exc}") from exc


def normalize_record(record: Record) -> Optional[str]:
    """Strip a data-URI prefix from *record* in place; return the MIME or None."""
    parts = split_data_uri(record.get("imageBase64"))
    if parts is None:
        return None
    mime, payload = parts
    record["imageBase64"] = payload
    record["imageMimeType"] = mime
    return mime


def normalize_records(records: List[Record]) -> NormalizeResult:
    """
    Strip ``data:<mime>;base64,`` from every record's image field.

    Only a full prefix match is transformed; plain base64 or a stray comma is
    left as it is, so a second pass over the same records changes nothing.
    """
    result = NormalizeResult(total=len(records))
    for index, record in enumerate(records):
        mime = normalize_record(record)
        if mime is None:
            continue
        result.modified += 1
        result.mime_types[mime] = result.mime_types.get(mime, 0) + 1
        rid = record_id(record)
        log.info("Cleaned record ID %s: extracted %s", rid if rid is not None else index, mime)
    return result


def image_filename(rid: Any) -> str:
    """``7`` -> ``00007.jpg``"""
    return f"{str(rid).zfill(IMAGE_ID_WIDTH)}{IMAGE_EXTENSION}"


def import_images(
    records: List[Record],
    images_dir: Path,
    progress: bool = False,
) -> ImportResult:
    """
    Embed ``<images_dir>/<5-digit id>.jpg`` into each record as a JPEG data-URI
    and drop the legacy ``imagePath``. Records without a file are left as is.
    """
    images_dir = Path(images_dir)
    result = ImportResult(total=len(records))

    for record in tqdm(records, desc="Embedding images", unit="record", disable=not progress):
        rid = record_id(record)
        if rid is None:
            log.warning("Skipping record without recordId/id")
            result.skipped += 1
            continue
        image_path = images_dir / image_filename(rid)

        if not image_path.is_file():
            log.warning("Image not found for record ID %s (%s)", rid, image_path)
            result.missing += 1
            result.missing_ids.append(rid)
            continue

        record["imageBase64"] = to_data_uri(image_path.read_bytes())
        record.pop("imagePath", None)
        result.updated += 1

    return result


def scan_legacy_images(records: Iterable[Record]) -> List[Dict[str, Any]]:
    """Records still pointing at files or URLs instead of carrying a payload."""
    flagged = []
    for record in records:
        findings = {name: record[name] for name in LEGACY_IMAGE_FIELDS if name in record}
        value = record.get("imageBase64")
        if isinstance(value, str) and "http" in value:
            findings["imageBase64"] = value
        if findings:
            flagged.append({"recordId": record_id(record), "findings": findings})
    return flagged


def clean_legacy_images(records: Iterable[Record]) -> Dict[str, int]:
    """
    Remove ``imagePath`` / ``imageFile`` and give raw payloads without a MIME
    type the JPEG default.
    """
    cleaned = 0
    defaulted = 0
    for record in records:
        for name in LEGACY_IMAGE_FIELDS:
            if name in record:
                del record[name]
                cleaned += 1

        value = record.get("imageBase64")
        if (
            isinstance(value, str)
            and value
            and split_data_uri(value) is None
            and not record.get("imageMimeType")
        ):
            record["imageMimeType"] = IMAGE_MIME_TYPE
            defaulted += 1

    return {"cleanedLegacyFields": cleaned, "defaultedMimeTypes": defaulted}
