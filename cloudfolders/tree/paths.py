"""Logical path handling.

A folder's path is its name for a root folder, otherwise
``parent.path + "/" + name``; a file's path is ``folder.path + "/" + name``.
compose_path is the only place that rule is written down. Paths are
stored, so resolution is an exact-match lookup on an indexed column
regardless of depth.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.errors import InvalidParametersError, NotFoundError
from cloudfolders.models import Folder

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"

# Stored paths must decode to themselves, so names may not carry escapes.
PERCENT_ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}")


def normalize_path(raw: str) -> str:
    """Percent-decode a URL remainder and drop surrounding separators.

    Examples:
        >>> normalize_path("/Reports/Q1%202024/")
        'Reports/Q1 2024'
    """
    return unquote(raw).strip(PATH_SEPARATOR)


def compose_path(parent_path: str | None, name: str) -> str:
    """Build the logical path of a child named ``name``."""
    if not parent_path:
        return name
    return f"{parent_path}{PATH_SEPARATOR}{name}"


def validate_name(name: str | None, max_length: int) -> str:
    """Strip and check a folder or file name.

    Raises:
        InvalidParametersError: Empty, too long, or contains the separator
            or a percent escape.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidParametersError("Invalid parameters: name is required")
    if len(cleaned) > max_length:
        raise InvalidParametersError(
            f"Name must be between 1 and {max_length} characters",
            name=cleaned,
        )
    if PATH_SEPARATOR in cleaned:
        raise InvalidParametersError(
            f"Name must not contain '{PATH_SEPARATOR}'",
            name=cleaned,
        )
    if PERCENT_ESCAPE.search(cleaned):
        raise InvalidParametersError(
            "Name must not contain percent-encoded sequences",
            name=cleaned,
        )
    return cleaned


async def resolve_folder_path(session: AsyncSession, path: str) -> Folder:
    """Map a slash-delimited logical path to its folder.

    Args:
        session: DB session.
        path: Raw path, percent-encoded or not.

    Returns:
        The folder whose stored path matches exactly.

    Raises:
        InvalidParametersError: Empty path (the root listing is list_roots).
        NotFoundError: No folder has this path.
    """
    normalized = normalize_path(path)
    if not normalized:
        raise InvalidParametersError("Empty path denotes the root listing, not a folder")

    result = await session.execute(select(Folder).where(Folder.path == normalized))
    folder = result.scalar_one_or_none()
    if folder is None:
        raise NotFoundError("Folder not found", path=normalized)
    return folder
