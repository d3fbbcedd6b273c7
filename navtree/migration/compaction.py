"""
One-time order key migration and order key compaction.

Trees saved before drag-and-drop existed have groups and items without an
`order` key. Migration stamps `index * gap` onto exactly those nodes, keeping
every existing key, which can leave a container stored out of key order.
Compaction sorts and restamps any container whose keys are crowded or out
of sequence.
"""

from logging import getLogger
from typing import Callable, Protocol, Sequence, TypeVar

from navtree.data_models.tree import Category, Group, Item, Tree
from navtree.ordering.order_model import (
    DEFAULT_MIN_GAP,
    DEFAULT_ORDER_GAP,
    Ordered,
    is_stored_in_order,
    needs_rebalancing,
    restamp,
    sort_by_order,
)

logger = getLogger(__name__)

MIGRATION_KEY = "drag-drop-migration-v1"

N = TypeVar("N", bound=Ordered)


class FlagStore(Protocol):
    def has_flag(self, key: str) -> bool: ...

    def set_flag(self, key: str) -> None: ...


def needs_migration(tree: Tree) -> bool:
    for category in tree.categories:
        if any(item.order is None for item in category.items):
            return True
        for group in category.groups:
            if group.order is None:
                return True
            if any(item.order is None for item in group.items):
                return True
    return False


def _fill_missing(nodes: Sequence[N], gap: int) -> list[N]:
    filled = []
    for index, node in enumerate(nodes):
        if node.order is None:
            node = node.model_copy(update={"order": index * gap})
        filled.append(node)
    return filled


def _migrate_group(group: Group, gap: int) -> Group:
    items = _fill_missing(group.items, gap)
    if all(a is b for a, b in zip(items, group.items)):
        return group
    return group.model_copy(update={"items": items})


def _migrate_category(category: Category, gap: int) -> Category:
    items: list[Item] = _fill_missing(category.items, gap)
    groups = _fill_missing(
        [_migrate_group(group, gap) for group in category.groups], gap
    )
    if all(a is b for a, b in zip(items, category.items)) and all(
        a is b for a, b in zip(groups, category.groups)
    ):
        return category
    return category.model_copy(update={"items": items, "groups": groups})


def migrate(tree: Tree, gap: int = DEFAULT_ORDER_GAP) -> Tree:
    """Stamp `index * gap` on every group and item lacking an order key.

    Idempotent: a migrated tree is returned as the same object.
    """
    if not needs_migration(tree):
        return tree

    categories = [_migrate_category(category, gap) for category in tree.categories]
    logger.info(f"Migrated order keys for {len(categories)} categories")
    return tree.model_copy(update={"categories": categories})


def needs_compaction(nodes: Sequence[Ordered], min_gap: int = DEFAULT_MIN_GAP) -> bool:
    """True when keys crowd together or the list is not stored in key order."""
    return needs_rebalancing(nodes, min_gap) or not is_stored_in_order(nodes)


def compact(
    nodes: Sequence[N], min_gap: int = DEFAULT_MIN_GAP, gap: int = DEFAULT_ORDER_GAP
) -> list[N]:
    """Restamp a container in key order when it needs compaction."""
    if not needs_compaction(nodes, min_gap):
        return list(nodes)
    return restamp(sort_by_order(nodes), gap=gap)


def compact_tree(
    tree: Tree, min_gap: int = DEFAULT_MIN_GAP, gap: int = DEFAULT_ORDER_GAP
) -> Tree:
    """Compact every container that needs it; other containers keep identity."""
    changed = False
    categories = []
    for category in tree.categories:
        groups = []
        for group in category.groups:
            if needs_compaction(group.items, min_gap):
                group = group.model_copy(
                    update={"items": compact(group.items, min_gap, gap)}
                )
            groups.append(group)

        updates: dict = {}
        if any(a is not b for a, b in zip(groups, category.groups)):
            updates["groups"] = groups
        if needs_compaction(groups, min_gap):
            updates["groups"] = compact(groups, min_gap, gap)
        if needs_compaction(category.items, min_gap):
            updates["items"] = compact(category.items, min_gap, gap)

        if updates:
            changed = True
            category = category.model_copy(update=updates)
        categories.append(category)

    if not changed:
        return tree
    logger.info("Compacted order keys")
    return tree.model_copy(update={"categories": categories})


def perform_migration(
    tree: Tree,
    flags: FlagStore,
    save: Callable[[Tree], None],
    gap: int = DEFAULT_ORDER_GAP,
    min_gap: int = DEFAULT_MIN_GAP,
) -> Tree:
    """
    Run the one-time migration if it has not run before.

    Args:
        tree: Snapshot loaded from the host store
        flags: Durable key/value store holding the migration flag
        save: Callback persisting the migrated tree
        gap: Order gap for newly stamped keys
        min_gap: Smallest gap tolerated before compaction restamps a container

    Returns:
        The migrated tree, or the input tree when nothing had to change
    """
    if flags.has_flag(MIGRATION_KEY):
        return tree

    if not needs_migration(tree):
        flags.set_flag(MIGRATION_KEY)
        return tree

    migrated = compact_tree(migrate(tree, gap), min_gap, gap)
    save(migrated)
    flags.set_flag(MIGRATION_KEY)
    return migrated
