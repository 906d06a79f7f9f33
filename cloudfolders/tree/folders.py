"""Folder tree operations: create, delete, list.

All functions take the request's AsyncSession and leave committing to the
caller. ``path`` is computed here and nowhere else; folders are never
renamed or moved, so a stored path stays valid for the folder's lifetime.

Deleting a folder removes its whole subtree (descendant folders and every
file inside them). Descendants are found by materialized-path prefix, which
is exact because names cannot contain the separator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.config import MissingParentPolicy, get_settings
from cloudfolders.errors import NotFoundError, UnauthorizedError
from cloudfolders.models import File, Folder
from cloudfolders.tree.paths import PATH_SEPARATOR, compose_path, validate_name
from cloudfolders.tree.slugs import EntityKind, ensure_unique, insert_unique, make_slug

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Kind of a listing entry."""

    FOLDER = "folder"
    FILE = "file"


@dataclass(frozen=True)
class TreeEntry:
    """One row of a folder listing."""

    kind: EntryKind
    id: int
    name: str
    path: str


async def get_folder(session: AsyncSession, folder_id: int) -> Folder:
    """Fetch a folder by id.

    Raises:
        NotFoundError: If it does not exist.
    """
    folder = await session.get(Folder, folder_id)
    if folder is None:
        raise NotFoundError("Folder does not exist", folder_id=folder_id)
    return folder


async def create_folder(
    session: AsyncSession,
    user_id: str,
    name: str,
    parent_id: int | None = None,
    *,
    missing_parent: MissingParentPolicy | None = None,
) -> Folder:
    """Create a folder, as a root or under ``parent_id``.

    Args:
        session: DB session (caller must commit).
        user_id: Owner of the new folder.
        name: Display name, 1..NAME_MAX_LENGTH characters, no separator.
        parent_id: Parent folder id, None for a root folder.
        missing_parent: Override of the configured MISSING_PARENT_POLICY.

    Returns:
        The flushed Folder (id assigned).

    Raises:
        InvalidParametersError: Bad name.
        NotFoundError: Parent missing under the FAIL policy.
        UnauthorizedError: Parent owned by another user.
        DuplicateNameError: Slug or path already taken.
    """
    settings = get_settings()
    policy = missing_parent or settings.MISSING_PARENT_POLICY
    name = validate_name(name, settings.NAME_MAX_LENGTH)

    parent: Folder | None = None
    if parent_id is not None:
        parent = await session.get(Folder, parent_id)
        if parent is None:
            if policy == MissingParentPolicy.FAIL:
                raise NotFoundError("Parent folder does not exist", parent_id=parent_id)
            logger.warning(
                f"Parent folder {parent_id} missing; creating {name!r} as a root folder"
            )
        elif parent.user_id != user_id:
            logger.warning(
                f"User {user_id} tried to create {name!r} inside folder {parent_id}"
            )
            raise UnauthorizedError(
                "Unauthorized to create folders here", parent_id=parent_id
            )

    slug = await ensure_unique(session, make_slug(name), EntityKind.FOLDER)
    folder = Folder(
        user_id=user_id,
        name=name,
        slug=slug,
        path=compose_path(parent.path if parent else None, name),
        parent_id=parent.id if parent else None,
    )
    await insert_unique(session, folder, EntityKind.FOLDER)

    logger.info(f"Folder created: id={folder.id} path={folder.path!r} user={user_id}")
    return folder


async def delete_folder(
    session: AsyncSession,
    folder_id: int,
    requesting_user_id: str,
) -> None:
    """Delete a folder together with its subtree.

    Args:
        session: DB session (caller must commit).
        folder_id: Folder to delete.
        requesting_user_id: Must own the folder.

    Raises:
        NotFoundError: Folder missing.
        UnauthorizedError: Folder owned by someone else; nothing is deleted.
    """
    folder = await get_folder(session, folder_id)

    if folder.user_id != requesting_user_id:
        logger.warning(
            f"User {requesting_user_id} tried to delete folder {folder_id} of {folder.user_id}"
        )
        raise UnauthorizedError("Unauthorized to delete this folder", folder_id=folder_id)

    prefix = f"{folder.path}{PATH_SEPARATOR}"
    result = await session.execute(
        select(Folder.id).where(Folder.path.startswith(prefix, autoescape=True))
    )
    subtree_ids = [folder.id, *result.scalars().all()]

    files_result = await session.execute(
        delete(File)
        .where(File.folder_id.in_(subtree_ids))
        .execution_options(synchronize_session="fetch")
    )
    await session.execute(
        delete(Folder)
        .where(Folder.id.in_(subtree_ids))
        .execution_options(synchronize_session="fetch")
    )

    logger.info(
        f"Folder deleted: id={folder_id} path={folder.path!r} "
        f"({len(subtree_ids) - 1} subfolders, {files_result.rowcount} files)"
    )


async def list_children(session: AsyncSession, folder_id: int) -> list[TreeEntry]:
    """List a folder's direct children: sub-folders first, then files.

    Both groups are in creation order (ascending id).

    Raises:
        NotFoundError: Folder missing.
    """
    await get_folder(session, folder_id)

    folders = await session.execute(
        select(Folder).where(Folder.parent_id == folder_id).order_by(Folder.id)
    )
    files = await session.execute(
        select(File).where(File.folder_id == folder_id).order_by(File.id)
    )

    entries = [
        TreeEntry(kind=EntryKind.FOLDER, id=f.id, name=f.name, path=f.path)
        for f in folders.scalars()
    ]
    entries.extend(
        TreeEntry(kind=EntryKind.FILE, id=f.id, name=f.name, path=f.path)
        for f in files.scalars()
    )
    return entries


async def list_roots(session: AsyncSession, user_id: str) -> list[Folder]:
    """Root folders owned by ``user_id`` in creation order."""
    result = await session.execute(
        select(Folder)
        .where(Folder.user_id == user_id, Folder.parent_id.is_(None))
        .order_by(Folder.id)
    )
    return list(result.scalars().all())
