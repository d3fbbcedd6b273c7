"""
Tree database models.

Snapshots are append-only: each save adds a row and the newest row is the
current tree. Two saves racing each other both land, and whichever commits
last wins.
"""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Schema version (increment on breaking changes)
TREE_SCHEMA_VERSION = "1.0.0"


class TreeBase(DeclarativeBase):
    pass


class TreeSnapshotRecord(TreeBase):
    __tablename__ = "tree_snapshot"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[str] = mapped_column(String)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON)


class Meta(TreeBase):
    """Key/value metadata (schema version, one-time migration flags)."""

    __tablename__ = "meta"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(String)
