"""Slug generation and uniqueness enforcement.

Slugs are unique per entity kind across the whole system (not per parent).
The lookup in ensure_unique only gives a fast, friendly error; the unique
indexes on ``slug`` and ``path`` decide. insert_unique performs the
optimistic insert and translates the store's constraint violation.

Examples:
    >>> make_slug("  Tax   Returns 2024 ")
    'tax-returns-2024'
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.errors import DuplicateNameError, NotFoundError
from cloudfolders.models import File, Folder

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class EntityKind(str, Enum):
    """Entity types that own a slug namespace."""

    FOLDER = "folder"
    FILE = "file"

    @property
    def model(self) -> type[Union[Folder, File]]:
        return Folder if self is EntityKind.FOLDER else File


def make_slug(name: str) -> str:
    """Lowercase, trim and collapse whitespace runs to single hyphens.

    Args:
        name: Human-entered name.

    Returns:
        The slug. Pure: same input, same output.
    """
    return _WHITESPACE_RE.sub("-", name.strip().lower())


async def ensure_unique(session: AsyncSession, slug: str, kind: EntityKind) -> str:
    """Fail fast if an entity of this kind already uses the slug.

    Args:
        session: DB session.
        slug: Candidate slug.
        kind: Folder or file namespace.

    Returns:
        The slug, unchanged.

    Raises:
        DuplicateNameError: If the slug is taken.
    """
    model = kind.model
    result = await session.execute(select(model.id).where(model.slug == slug).limit(1))
    if result.scalar_one_or_none() is not None:
        logger.warning(f"Duplicate {kind.value} slug rejected: {slug!r}")
        raise DuplicateNameError(
            f"A {kind.value} named like this already exists. Please choose another name.",
            slug=slug,
            kind=kind.value,
        )
    return slug


def _constraint_message(exc: IntegrityError) -> str:
    return str(exc.orig if exc.orig is not None else exc).lower()


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for UNIQUE violations (SQLite and PostgreSQL wording)."""
    message = _constraint_message(exc)
    return "unique" in message or "duplicate key" in message


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """True when a referenced row vanished before commit."""
    return "foreign key" in _constraint_message(exc)


async def insert_unique(
    session: AsyncSession,
    entity: Union[Folder, File],
    kind: EntityKind,
) -> None:
    """Add and flush an entity, mapping constraint failures to domain errors.

    The session is rolled back when the insert is rejected.

    Raises:
        DuplicateNameError: Slug or path taken by a concurrent writer.
        NotFoundError: The referenced parent/folder was deleted concurrently.
    """
    session.add(entity)
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        if is_unique_violation(e):
            logger.warning(
                f"Store rejected duplicate {kind.value}: slug={entity.slug!r} path={entity.path!r}"
            )
            raise DuplicateNameError(
                f"A {kind.value} named like this already exists. Please choose another name.",
                slug=entity.slug,
                path=entity.path,
                kind=kind.value,
            ) from e
        if is_foreign_key_violation(e):
            raise NotFoundError(
                f"The target of this {kind.value} no longer exists",
                path=entity.path,
            ) from e
        raise
