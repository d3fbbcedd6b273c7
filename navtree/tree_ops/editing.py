"""
Snapshot-pure add, edit and delete operations on the tree.

New nodes are placed after the current maximum order key of their
container. Edits and deletes never renumber siblings.
"""

import time
import uuid
from typing import Callable

from navtree.data_models.tree import Category, Group, Item, Tree, replace_category
from navtree.ordering.order_model import DEFAULT_ORDER_GAP, next_order, restamp


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


def _map_items(
    tree: Tree, container_id: str, update: Callable[[list[Item]], list[Item]]
) -> Tree:
    """Apply `update` to the item list of one category or group."""
    for category in tree.categories:
        if category.id == container_id:
            new_category = category.model_copy(
                update={"items": update(category.items)}
            )
            return replace_category(tree, new_category)
        for group in category.groups:
            if group.id == container_id:
                new_group = group.model_copy(update={"items": update(group.items)})
                return replace_category(tree, category.replace_group(new_group))
    raise KeyError(f"Container {container_id} not found")


def _owning_container(tree: Tree, item_id: str) -> str:
    for category in tree.categories:
        if any(item.id == item_id for item in category.items):
            return category.id
        for group in category.groups:
            if any(item.id == item_id for item in group.items):
                return group.id
    raise KeyError(f"Item {item_id} not found")


def _category(tree: Tree, category_id: str) -> Category:
    for category in tree.categories:
        if category.id == category_id:
            return category
    raise KeyError(f"Category {category_id} not found")


def add_category(
    tree: Tree, name: str, category_id: str | None = None, gap: int = DEFAULT_ORDER_GAP
) -> Tree:
    category = Category(
        id=category_id or new_id(),
        name=name,
        order=next_order(tree.categories, gap),
    )
    return tree.model_copy(update={"categories": [*tree.categories, category]})


def add_group(
    tree: Tree,
    category_id: str,
    name: str,
    group_id: str | None = None,
    gap: int = DEFAULT_ORDER_GAP,
) -> Tree:
    category = _category(tree, category_id)
    group = Group(
        id=group_id or new_id(),
        name=name,
        categoryId=category_id,
        order=next_order(category.groups, gap),
    )
    new_category = category.model_copy(update={"groups": [*category.groups, group]})
    return replace_category(tree, new_category)


def add_item(
    tree: Tree,
    container_id: str,
    name: str,
    url: str,
    item_id: str | None = None,
    gap: int = DEFAULT_ORDER_GAP,
) -> Tree:
    """Append a new item to a category's own list or to a group."""
    timestamp = now_ms()

    def append(items: list[Item]) -> list[Item]:
        item = Item(
            id=item_id or new_id(),
            name=name,
            url=url,
            order=next_order(items, gap),
            createdAt=timestamp,
            updatedAt=timestamp,
        )
        return [*items, item]

    return _map_items(tree, container_id, append)


def update_item(
    tree: Tree, item_id: str, name: str | None = None, url: str | None = None
) -> Tree:
    """Change an item's name or url, keeping its order key."""
    changes: dict = {"updatedAt": now_ms()}
    if name is not None:
        changes["name"] = name
    if url is not None:
        changes["url"] = url

    def edit(items: list[Item]) -> list[Item]:
        return [
            item.model_copy(update=changes) if item.id == item_id else item
            for item in items
        ]

    return _map_items(tree, _owning_container(tree, item_id), edit)


def delete_item(tree: Tree, item_id: str) -> Tree:
    container_id = _owning_container(tree, item_id)
    return _map_items(
        tree, container_id, lambda items: [i for i in items if i.id != item_id]
    )


def delete_group(tree: Tree, group_id: str) -> Tree:
    """Remove a group and everything in it."""
    for category in tree.categories:
        if group_id in category.group_map:
            groups = [g for g in category.groups if g.id != group_id]
            return replace_category(
                tree, category.model_copy(update={"groups": groups})
            )
    raise KeyError(f"Group {group_id} not found")


def toggle_group(tree: Tree, group_id: str) -> Tree:
    for category in tree.categories:
        group = category.group_map.get(group_id)
        if group is not None:
            toggled = group.model_copy(update={"expanded": not group.expanded})
            return replace_category(tree, category.replace_group(toggled))
    raise KeyError(f"Group {group_id} not found")


def _permute(nodes, ids: list[str], container: str, gap: int):
    by_id = {node.id: node for node in nodes}
    if len(ids) != len(by_id) or set(ids) != set(by_id):
        raise ValueError(
            f"Order for {container} must list each of its {len(by_id)} children once"
        )
    return restamp([by_id[node_id] for node_id in ids], gap=gap)


def apply_group_order(
    tree: Tree, category_id: str, group_ids: list[str], gap: int = DEFAULT_ORDER_GAP
) -> Tree:
    """Apply a group reorder notification to a snapshot."""
    category = _category(tree, category_id)
    groups = _permute(category.groups, group_ids, category_id, gap)
    return replace_category(tree, category.model_copy(update={"groups": groups}))


def apply_item_order(
    tree: Tree, group_id: str, item_ids: list[str], gap: int = DEFAULT_ORDER_GAP
) -> Tree:
    """Apply a group item reorder notification to a snapshot."""
    for category in tree.categories:
        group = category.group_map.get(group_id)
        if group is not None:
            items = _permute(group.items, item_ids, group_id, gap)
            new_group = group.model_copy(update={"items": items})
            return replace_category(tree, category.replace_group(new_group))
    raise KeyError(f"Group {group_id} not found")
