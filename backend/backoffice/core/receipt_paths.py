# backoffice/core/receipt_paths.py
from __future__ import annotations

import hashlib
import re
import unicodedata
import uuid
from datetime import date

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")
_REPEATED_UNDERSCORES = re.compile(r"_+")


def sanitize_key(value: str) -> str:
    """
    Make a string safe for use as a storage key segment:
    strip accents, replace anything outside [A-Za-z0-9-_] with "_",
    collapse runs of "_" and trim them from both ends.
    Values with nothing left (e.g. names in a non-Latin script) map to a
    short digest of the original so each still gets its own folder.
    """
    decomposed = unicodedata.normalize("NFD", value or "")
    plain = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    key = _UNSAFE_KEY_CHARS.sub("_", plain)
    key = _REPEATED_UNDERSCORES.sub("_", key)
    key = key.strip("_")
    if not key:
        key = hashlib.sha1((value or "").encode("utf-8")).hexdigest()[:12]
    return key


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].strip().lower()


def unique_suffix() -> str:
    return uuid.uuid4().hex[:12]


def _with_extension(stem: str, filename: str) -> str:
    ext = file_extension(filename)
    return f"{stem}.{ext}" if ext else stem


def payer_receipt_path(
    *,
    project: str,
    payer_name: str,
    payment_date: date,
    block_lot: str,
    filename: str,
    suffix: str | None = None,
) -> str:
    # {project}/{payer}/{paymentDate}_{blockLot}_{suffix}.{ext}
    stem = f"{payment_date.isoformat()}_{sanitize_key(block_lot)}_{suffix or unique_suffix()}"
    return f"{sanitize_key(project)}/{sanitize_key(payer_name)}/{_with_extension(stem, filename)}"


def ack_receipt_path(
    *,
    project: str,
    payer_name: str,
    filename: str,
    suffix: str | None = None,
) -> str:
    payer_key = sanitize_key(payer_name)
    stem = f"{payer_key}_AR_{suffix or unique_suffix()}"
    return f"{sanitize_key(project)}/{payer_key}/{_with_extension(stem, filename)}"
