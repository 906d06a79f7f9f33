"""Blob key naming and slug sanitization.

Blob keys never reuse the logical path: two files may share a name across
time, and a key must be safe for filesystems and object stores alike.

Format: {YYYY}/{MM}/{slug}_{uuid8}.{ext}

Examples:
    >>> from cloudfolders.storage.naming import sanitize_slug, split_extension
    >>> sanitize_slug("Holiday Photo (1)")
    'holiday-photo-1'
    >>> split_extension("Scan.JPG")
    ('Scan', 'jpg')
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone


def sanitize_slug(stem: str, max_length: int = 60) -> str:
    """Sanitize a file stem into a storage-safe slug.

    Rules:
        - Lowercase
        - Strip non-alphanumeric except hyphens
        - Collapse multiple hyphens
        - Truncate to max_length
        - Fallback to 'blob' if empty

    Args:
        stem: File name without extension.
        max_length: Maximum slug length (default 60).

    Returns:
        Sanitized slug string.
    """
    slug = stem.lower().strip()
    # Replace spaces and underscores with hyphens
    slug = re.sub(r"[\s_]+", "-", slug)
    # Strip everything except [a-z0-9-]
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    slug = slug.strip("-")
    slug = slug[:max_length].rstrip("-")
    return slug or "blob"


def split_extension(filename: str) -> tuple[str, str]:
    """Split a file name into stem and lowercase extension (without dot)."""
    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem:
        return filename, ""
    return stem, re.sub(r"[^a-z0-9]", "", ext.lower())


def generate_blob_key(
    filename: str,
    date: datetime | None = None,
    uuid_str: str | None = None,
) -> str:
    """Generate a unique storage key for an uploaded file.

    Args:
        filename: Original upload name.
        date: Override date (defaults to now UTC).
        uuid_str: Override UUID (defaults to random).

    Returns:
        Key string, relative to the store root.
    """
    if date is None:
        date = datetime.now(timezone.utc)
    if uuid_str is None:
        uuid_str = uuid.uuid4().hex
    stem, ext = split_extension(filename)
    name = f"{sanitize_slug(stem)}_{uuid_str[:8]}"
    if ext:
        name = f"{name}.{ext}"
    return f"{date.strftime('%Y')}/{date.strftime('%m')}/{name}"
