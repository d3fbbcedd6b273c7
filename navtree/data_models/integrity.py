"""Structural checks for tree snapshots."""

from collections import Counter

from navtree.data_models.tree import Tree, iter_containers


class TreeIntegrityError(ValueError):
    def __init__(self, violations: list[str]):
        self.violations = violations
        super().__init__("; ".join(violations))


def validate_tree(tree: Tree) -> list[str]:
    """
    Return every structural violation in a snapshot.

    Checks that item and group ids are unique across the tree, that each
    group points back at its owning category, and that every container's
    order keys are distinct and already sorted.
    """
    violations = []

    item_counts = Counter(
        item.id for _, items in iter_containers(tree) for item in items
    )
    for item_id, count in item_counts.items():
        if count > 1:
            violations.append(f"item {item_id} appears in {count} containers")

    group_counts = Counter(
        group.id for category in tree.categories for group in category.groups
    )
    for group_id, count in group_counts.items():
        if count > 1:
            violations.append(f"group {group_id} appears {count} times")

    for category in tree.categories:
        for group in category.groups:
            if group.categoryId != category.id:
                violations.append(
                    f"group {group.id} claims category {group.categoryId} "
                    f"but is owned by {category.id}"
                )
        violations.extend(_order_violations(category.id, category.groups))

    for container_id, items in iter_containers(tree):
        violations.extend(_order_violations(container_id, items))

    return violations


def _order_violations(container_id: str, nodes) -> list[str]:
    orders = [node.order for node in nodes]
    if any(order is None for order in orders):
        return [f"container {container_id} has nodes without an order key"]
    if len(set(orders)) != len(orders):
        return [f"container {container_id} has duplicate order keys"]
    if orders != sorted(orders):
        return [f"container {container_id} is not stored in order"]
    return []


def assert_valid_tree(tree: Tree) -> None:
    violations = validate_tree(tree)
    if violations:
        raise TreeIntegrityError(violations)
