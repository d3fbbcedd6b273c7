"""Storage module for tree snapshots.

Snapshots and one-time migration flags live in a single SQLite database
(tree.db) managed by TreeStore.
"""

from navtree.storage.manager import TreeStore

__all__ = ["TreeStore"]
