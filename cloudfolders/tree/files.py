"""Logical file records.

A file record binds a name and logical path inside a folder to the opaque
``physical_ref`` handed back by the blob store. Nothing here touches bytes.
Ownership is not checked at this level; callers compare the owning
folder's ``user_id`` with the acting user.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.config import get_settings
from cloudfolders.errors import InvalidParametersError, NotFoundError
from cloudfolders.models import File, Folder
from cloudfolders.tree.paths import compose_path, normalize_path, validate_name
from cloudfolders.tree.slugs import EntityKind, ensure_unique, insert_unique, make_slug

logger = logging.getLogger(__name__)

FILE_NAME_MAX_LENGTH = 255


async def get_file(session: AsyncSession, file_id: int) -> File:
    """Fetch a file record by id.

    Raises:
        NotFoundError: If it does not exist.
    """
    file = await session.get(File, file_id)
    if file is None:
        raise NotFoundError("File does not exist", file_id=file_id)
    return file


async def create_file(
    session: AsyncSession,
    folder_id: int,
    name: str,
    physical_ref: str,
    *,
    allow_root_files: bool | None = None,
) -> File:
    """Create a file record inside an existing folder.

    Args:
        session: DB session (caller must commit).
        folder_id: Target folder.
        name: File name, used for slug and logical path.
        physical_ref: Blob store locator, stored as-is.
        allow_root_files: Override of the ALLOW_ROOT_FILES setting.

    Returns:
        The flushed File.

    Raises:
        NotFoundError: Folder missing.
        InvalidParametersError: Bad name, empty reference, or root folder
            while root files are disallowed.
        DuplicateNameError: Slug or path already taken.
    """
    if allow_root_files is None:
        allow_root_files = get_settings().ALLOW_ROOT_FILES

    folder = await session.get(Folder, folder_id)
    if folder is None:
        raise NotFoundError("Folder does not exist", folder_id=folder_id)

    name = validate_name(name, FILE_NAME_MAX_LENGTH)
    if not physical_ref:
        raise InvalidParametersError("Invalid parameters: physical reference is required")

    if not allow_root_files and folder.is_root:
        raise InvalidParametersError(
            "Files can only be created inside subfolders", folder_id=folder_id
        )

    slug = await ensure_unique(session, make_slug(name), EntityKind.FILE)
    file = File(
        folder_id=folder.id,
        name=name,
        slug=slug,
        path=compose_path(folder.path, name),
        physical_ref=physical_ref,
    )
    await insert_unique(session, file, EntityKind.FILE)

    logger.info(f"File created: id={file.id} path={file.path!r}")
    return file


async def delete_file(session: AsyncSession, file_id: int) -> None:
    """Delete a file record.

    Raises:
        NotFoundError: If it does not exist.
    """
    file = await get_file(session, file_id)
    await session.delete(file)
    await session.flush()
    logger.info(f"File deleted: id={file_id} path={file.path!r}")


async def resolve_file_by_logical_path(
    session: AsyncSession,
    folder_path: str,
    file_name: str,
) -> File:
    """Look up a file by its folder path and name.

    Raises:
        NotFoundError: No file has the composed path.
    """
    path = compose_path(normalize_path(folder_path), file_name)
    result = await session.execute(select(File).where(File.path == path))
    file = result.scalar_one_or_none()
    if file is None:
        raise NotFoundError("File not found", path=path)
    return file
