"""
Location resolution for drags inside a single category.

A location is either the category's own item list (`Primary`) or the item
list of one of its groups (`Secondary`). Moves never cross categories, so
every lookup is scoped to the category being edited.
"""

from dataclasses import dataclass
from logging import getLogger

from navtree.data_models.dnd import DropTarget, EmptyZone, NodeTarget
from navtree.data_models.tree import Category, Group, Item
from navtree.ordering.order_model import sort_by_order

logger = getLogger(__name__)


@dataclass(frozen=True)
class Primary:
    category: Category

    @property
    def container_id(self) -> str:
        return self.category.id

    @property
    def items(self) -> list[Item]:
        return sort_by_order(self.category.items)


@dataclass(frozen=True)
class Secondary:
    group: Group

    @property
    def container_id(self) -> str:
        return self.group.id

    @property
    def items(self) -> list[Item]:
        return sort_by_order(self.group.items)


Location = Primary | Secondary


@dataclass(frozen=True)
class ResolvedMove:
    source: Location
    source_index: int
    target: Location
    target_index: int

    @property
    def same_container(self) -> bool:
        return self.source.container_id == self.target.container_id


def _index_of(items: list[Item], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return -1


def _locations(category: Category) -> list[Location]:
    return [Primary(category), *(Secondary(group) for group in category.groups)]


def resolve_source(category: Category, item_id: str) -> tuple[Location, int] | None:
    """Find the container holding `item_id` and its display index there."""
    for location in _locations(category):
        index = _index_of(location.items, item_id)
        if index != -1:
            return location, index
    return None


def resolve_target(
    category: Category, target: DropTarget
) -> tuple[Location, int] | None:
    """
    Resolve a drop target to a container and a raw insertion index.

    Indexes count positions in display order (sorted by `order`), not
    positions in the stored list.

    Resolution order:
        1. an item in the category's own list -> that item's index
        2. the category's empty zone -> index 0
        3. an item inside a group -> that item's index in the group
        4. a group header -> end of the group's list
    """
    match target:
        case EmptyZone(category_id=category_id):
            if category_id != category.id:
                return None
            return Primary(category), 0
        case NodeTarget(node_id=node_id):
            for location in _locations(category):
                index = _index_of(location.items, node_id)
                if index != -1:
                    return location, index

            for group in category.groups:
                if group.id == node_id:
                    return Secondary(group), len(group.items)

    return None


def resolve_move(
    category: Category, item_id: str, target: DropTarget | None
) -> ResolvedMove | None:
    """Resolve both ends of an item drag, or None when the drag is a no-op."""
    if target is None:
        logger.debug(f"Drag of {item_id} ended without a drop target")
        return None

    if isinstance(target, NodeTarget) and target.node_id == item_id:
        logger.debug(f"Item {item_id} dropped on itself")
        return None

    source = resolve_source(category, item_id)
    if source is None:
        logger.debug(f"Item {item_id} not found in category {category.id}")
        return None

    resolved_target = resolve_target(category, target)
    if resolved_target is None:
        logger.debug(f"Drop target {target} not found in category {category.id}")
        return None

    source_location, source_index = source
    target_location, target_index = resolved_target
    return ResolvedMove(
        source=source_location,
        source_index=source_index,
        target=target_location,
        target_index=target_index,
    )


def resolve_group_move(
    category: Category, group_id: str, target: DropTarget | None
) -> tuple[int, int] | None:
    """Resolve a group drag to (source index, target index) in display order."""
    if not isinstance(target, NodeTarget) or target.node_id == group_id:
        return None

    group_ids = [group.id for group in sort_by_order(category.groups)]
    if group_id not in group_ids or target.node_id not in group_ids:
        logger.debug(
            f"Group drag {group_id} -> {target.node_id} not resolvable in {category.id}"
        )
        return None

    return group_ids.index(group_id), group_ids.index(target.node_id)
