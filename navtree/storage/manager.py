"""Host-side store for tree snapshots.

This module is the reference implementation of the host store the reorder
engine hands its snapshots to. It keeps snapshots and flags in a single
SQLite database (tree.db).
"""

from contextlib import contextmanager
from datetime import datetime
from logging import getLogger
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from navtree.data_models.integrity import assert_valid_tree
from navtree.data_models.tree import Tree
from navtree.ordering.order_model import DEFAULT_ORDER_GAP
from navtree.storage.models import (
    TREE_SCHEMA_VERSION,
    Meta,
    TreeBase,
    TreeSnapshotRecord,
)
from navtree.tree_ops.editing import apply_group_order, apply_item_order

logger = getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Set SQLite PRAGMAs for every new connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class TreeStore:
    """Durable snapshot and flag storage.

    Usage:
        store = TreeStore(path)
        tree = store.get_tree()
        store.set_tree(new_tree)

    Snapshots are validated before they are written. Schema versions are
    checked on initialization and a mismatch raises RuntimeError.
    """

    def __init__(self, database_path: Path | None, gap: int = DEFAULT_ORDER_GAP):
        if database_path is None:
            database_path = DATA_DIR
        self.db_path = database_path / "tree.db"
        self.gap = gap

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(f"sqlite:///{self.db_path}")
        TreeBase.metadata.create_all(self.engine)
        self._session_factory = sessionmaker(bind=self.engine)
        self._verify_schema_version()

    def _verify_schema_version(self) -> None:
        with self.get_session() as session:
            meta = session.get(Meta, "schema_version")
            if meta is None:
                session.add(Meta(key="schema_version", value=TREE_SCHEMA_VERSION))
                session.commit()
            elif meta.value != TREE_SCHEMA_VERSION:
                raise RuntimeError(
                    f"tree.db schema version mismatch: "
                    f"database is v{meta.value}, code expects v{TREE_SCHEMA_VERSION}. "
                    f"Delete {self.db_path} to recreate."
                )

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def get_tree(self) -> Tree:
        """Return the newest snapshot, or an empty tree when none was saved."""
        with self.get_session() as session:
            record = session.execute(
                select(TreeSnapshotRecord)
                .order_by(TreeSnapshotRecord.id.desc())
                .limit(1)
            ).scalar_one_or_none()

            if record is None:
                return Tree()
            return Tree.model_validate(record.payload)

    def set_tree(self, tree: Tree, validate: bool = True) -> None:
        if validate:
            assert_valid_tree(tree)

        with self.get_session() as session:
            session.add(
                TreeSnapshotRecord(
                    created_at=datetime.now().isoformat(),
                    payload=tree.model_dump(mode="json"),
                )
            )
            session.commit()
        logger.debug(f"Saved tree with {len(tree.categories)} categories")

    def update_group_order(self, category_id: str, group_ids: list[str]) -> Tree:
        """Targeted write for a category's group order."""
        tree = apply_group_order(self.get_tree(), category_id, group_ids, self.gap)
        self.set_tree(tree)
        return tree

    def update_item_order(self, group_id: str, item_ids: list[str]) -> Tree:
        """Targeted write for a group's item order."""
        tree = apply_item_order(self.get_tree(), group_id, item_ids, self.gap)
        self.set_tree(tree)
        return tree

    def has_flag(self, key: str) -> bool:
        with self.get_session() as session:
            meta = session.get(Meta, key)
            return meta is not None and meta.value == "true"

    def set_flag(self, key: str) -> None:
        with self.get_session() as session:
            session.merge(Meta(key=key, value="true"))
            session.commit()

    def snapshot_count(self) -> int:
        with self.get_session() as session:
            return session.execute(
                select(func.count(TreeSnapshotRecord.id))
            ).scalar_one()
