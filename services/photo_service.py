# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

import re
import uuid
from pathlib import Path
from typing import Iterable

PHOTO_SEPARATOR = ","

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def split_photo_tokens(photos: str) -> list[str]:
    """Split a comma-delimited photos field into its non-empty tokens."""
    if not photos:
        return []
    return [token.strip() for token in photos.split(PHOTO_SEPARATOR) if token.strip()]


def is_valid_photo_token(token: str) -> bool:
    return bool(token) and bool(token.strip()) and PHOTO_SEPARATOR not in token


def append_photo_tokens(photos: str, tokens: Iterable[str]) -> str:
    """
    Append tokens to an existing photos field.
    Existing content is kept verbatim; the new tokens are joined after it.
    """
    joined = PHOTO_SEPARATOR.join(tokens)
    if not joined:
        return photos
    return f"{photos}{PHOTO_SEPARATOR}{joined}" if photos else joined


def safe_photo_name(filename: str, default_stem: str = "incident") -> str:
    """Unique on-disk name for an upload. Never contains a comma."""
    original = Path(filename or "").name
    cleaned = _UNSAFE_NAME_CHARS.sub("_", original).strip("._")
    if not cleaned:
        cleaned = f"{default_stem}.jpg"
    return f"{uuid.uuid4()}_{cleaned}"


def build_photo_url(file_path: str, upload_root: str = "uploads") -> str:
    normalized = file_path.replace('\\', '/').strip()
    root = upload_root.replace('\\', '/').strip().rstrip('/')
    if root and normalized.startswith(f"{root}/"):
        return f"/uploads/{normalized[len(root) + 1:]}"
    if '/uploads/' in normalized:
        suffix = normalized.split('/uploads/', 1)[1]
        return f"/uploads/{suffix}"
    if normalized.startswith('uploads/'):
        return f"/{normalized}"
    return f"/uploads/{Path(normalized).name}"
