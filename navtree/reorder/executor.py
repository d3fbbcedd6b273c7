"""
Move classification and execution.

A completed drag is classified into one of five item topologies (or a group
reorder) and applied to a copy of the affected category. Every touched
container is restamped; containers and categories that are not touched keep
their identity in the returned tree.
"""

from dataclasses import dataclass, field
from enum import Enum
from logging import getLogger

from navtree.data_models.dnd import (
    CategoryGroupsReordered,
    DragEndDescriptor,
    DragKind,
    DropTarget,
    GroupItemsReordered,
    ReorderNotification,
)
from navtree.data_models.tree import (
    Category,
    Group,
    Item,
    Tree,
    find_category,
    find_category_for_node,
    replace_category,
)
from navtree.ordering.order_model import (
    DEFAULT_ORDER_GAP,
    insert_and_restamp,
    move_and_restamp,
    restamp,
    sort_by_order,
)
from navtree.reorder.locations import (
    Primary,
    ResolvedMove,
    Secondary,
    resolve_group_move,
    resolve_move,
)

logger = getLogger(__name__)


class MoveTopology(str, Enum):
    within_category = "within_category"
    promote_out = "promote_out"
    promote_in = "promote_in"
    within_group = "within_group"
    cross_group = "cross_group"
    group_reorder = "group_reorder"


@dataclass(frozen=True)
class MoveResult:
    tree: Tree
    changed: bool = False
    topology: MoveTopology | None = None
    notifications: tuple[ReorderNotification, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CategoryMove:
    category: Category
    topology: MoveTopology
    notifications: tuple[ReorderNotification, ...]


def classify_move(move: ResolvedMove) -> MoveTopology:
    match (move.source, move.target):
        case (Primary(), Primary()):
            return MoveTopology.within_category
        case (Primary(), Secondary()):
            return MoveTopology.promote_out
        case (Secondary(), Primary()):
            return MoveTopology.promote_in
        case (Secondary(group=source), Secondary(group=target)) if (
            source.id == target.id
        ):
            return MoveTopology.within_group
        case (Secondary(), Secondary()):
            return MoveTopology.cross_group
    raise TypeError(f"Unknown location pair: {move.source!r}, {move.target!r}")


def _group_notification(group: Group) -> GroupItemsReordered:
    return GroupItemsReordered(
        groupId=group.id, itemIds=[item.id for item in group.items]
    )


def _warn_missing_orders(items: list[Item], container_id: str) -> None:
    if any(item.order is None for item in items):
        logger.warning(
            f"Container {container_id} has items without an order key; "
            "run migration before reordering"
        )


def execute_item_move(
    category: Category, move: ResolvedMove, gap: int = DEFAULT_ORDER_GAP
) -> CategoryMove:
    """Apply a resolved item move to a category and return the new category.

    Within one container the moved item takes the slot the hovered item had,
    so a downward drag lands after the hovered item. Across containers it is
    inserted before the hovered item (or at the end for a group header).
    """
    topology = classify_move(move)
    _warn_missing_orders(move.source.items, move.source.container_id)

    remaining = list(move.source.items)
    moved = remaining.pop(move.source_index)
    source_items = restamp(remaining, gap=gap)

    if move.same_container:
        target_items = insert_and_restamp(source_items, moved, move.target_index, gap)
    else:
        _warn_missing_orders(move.target.items, move.target.container_id)
        target_items = insert_and_restamp(
            move.target.items, moved, move.target_index, gap
        )

    notifications: tuple[ReorderNotification, ...] = ()
    match (move.source, move.target):
        case (Primary(), Primary()):
            new_category = category.model_copy(update={"items": target_items})

        case (Primary(), Secondary(group=target_group)):
            new_group = target_group.model_copy(update={"items": target_items})
            new_category = category.model_copy(
                update={"items": source_items}
            ).replace_group(new_group)
            notifications = (_group_notification(new_group),)

        case (Secondary(group=source_group), Primary()):
            new_group = source_group.model_copy(update={"items": source_items})
            new_category = category.model_copy(
                update={"items": target_items}
            ).replace_group(new_group)
            notifications = (_group_notification(new_group),)

        case (Secondary(group=source_group), Secondary()) if move.same_container:
            new_group = source_group.model_copy(update={"items": target_items})
            new_category = category.replace_group(new_group)
            notifications = (_group_notification(new_group),)

        case (Secondary(group=source_group), Secondary(group=target_group)):
            new_source = source_group.model_copy(update={"items": source_items})
            new_target = target_group.model_copy(update={"items": target_items})
            new_category = category.replace_group(new_source).replace_group(new_target)
            notifications = (
                _group_notification(new_source),
                _group_notification(new_target),
            )

    return CategoryMove(
        category=new_category, topology=topology, notifications=notifications
    )


def move_item(
    category: Category,
    item_id: str,
    target: DropTarget | None,
    gap: int = DEFAULT_ORDER_GAP,
) -> CategoryMove | None:
    move = resolve_move(category, item_id, target)
    if move is None:
        return None
    return execute_item_move(category, move, gap)


def move_group(
    category: Category,
    group_id: str,
    target: DropTarget | None,
    gap: int = DEFAULT_ORDER_GAP,
) -> CategoryMove | None:
    """Reorder a group inside its category's group list."""
    indexes = resolve_group_move(category, group_id, target)
    if indexes is None:
        return None

    _, target_index = indexes
    groups = move_and_restamp(
        sort_by_order(category.groups), group_id, target_index, gap
    )
    new_category = category.model_copy(update={"groups": groups})
    notification = CategoryGroupsReordered(
        categoryId=category.id, groupIds=[group.id for group in groups]
    )
    return CategoryMove(
        category=new_category,
        topology=MoveTopology.group_reorder,
        notifications=(notification,),
    )


def apply_drag_end(
    tree: Tree,
    descriptor: DragEndDescriptor,
    category_id: str | None = None,
    gap: int = DEFAULT_ORDER_GAP,
) -> MoveResult:
    """
    Apply a completed drag to a tree snapshot.

    Args:
        tree: Current snapshot; never mutated
        descriptor: Drag-end descriptor emitted by the drag session
        category_id: Category being edited. When omitted, the category owning
            the dragged node is used.
        gap: Order gap used when restamping touched containers

    Returns:
        MoveResult holding the new tree, or the input tree with
        changed=False when the drag resolves to nothing.
    """
    if category_id is None:
        category = find_category_for_node(tree, descriptor.activeId)
    else:
        category = find_category(tree, category_id)

    if category is None:
        logger.debug(f"No category found for drag of {descriptor.activeId}")
        return MoveResult(tree=tree)

    target = descriptor.drop_target(category.id)
    if descriptor.dragKind == DragKind.group:
        outcome = move_group(category, descriptor.activeId, target, gap)
    else:
        outcome = move_item(category, descriptor.activeId, target, gap)

    if outcome is None:
        return MoveResult(tree=tree)

    logger.info(
        f"Moved {descriptor.dragKind.value} {descriptor.activeId} onto "
        f"{descriptor.overId} ({outcome.topology.value}) in category {category.id}"
    )
    return MoveResult(
        tree=replace_category(tree, outcome.category),
        changed=True,
        topology=outcome.topology,
        notifications=outcome.notifications,
    )
