"""SQLAlchemy models for the folder tree.

This module defines the Folder and File tables. Both carry a materialized
``path`` next to their parent pointer so that resolving an arbitrary-depth
path is a single indexed lookup.

Examples:
    >>> from cloudfolders.models import Folder
    >>> folder = Folder(user_id="u-1", name="Reports", slug="reports", path="Reports")

Tests:
    - tests/unit/test_folders.py
    - tests/unit/test_files.py
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Paths are unbounded in depth; keep the column wide enough for indexing.
PATH_MAX_LENGTH = 1024
SLUG_MAX_LENGTH = 255


def utcnow() -> datetime:
    """Timezone-aware current time for column defaults."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class Folder(Base):
    """A node of a user's folder forest.

    Attributes:
        id: Autoincrement identifier
        user_id: Owner
        name: Display name as entered
        slug: Normalized name, unique across all folders
        path: Materialized slash path, unique across all folders
        parent_id: Parent folder, None for a root folder
        created_at: Creation timestamp
    """

    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(SLUG_MAX_LENGTH), unique=True, index=True, nullable=False
    )
    path: Mapped[str] = mapped_column(
        String(PATH_MAX_LENGTH), unique=True, index=True, nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("folders.id", ondelete="CASCADE"),
        index=True,
        default=None,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    files: Mapped[list["File"]] = relationship(
        back_populates="folder",
        passive_deletes=True,
        lazy="raise",
    )

    @property
    def is_root(self) -> bool:
        """True for a folder without a parent."""
        return self.parent_id is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "path": self.path,
            "parent_id": self.parent_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, path='{self.path}')>"


class File(Base):
    """Logical file record bound to a folder.

    The bytes live in the blob store; ``physical_ref`` is the URL it
    returned and is never interpreted here.
    """

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    folder_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("folders.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(SLUG_MAX_LENGTH), unique=True, index=True, nullable=False
    )
    path: Mapped[str] = mapped_column(
        String(PATH_MAX_LENGTH), unique=True, index=True, nullable=False
    )
    physical_ref: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    folder: Mapped["Folder"] = relationship(back_populates="files", lazy="raise")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "folder_id": self.folder_id,
            "name": self.name,
            "slug": self.slug,
            "path": self.path,
            "physical_ref": self.physical_ref,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<File(id={self.id}, path='{self.path}')>"
