"""
Ordering keys for container children.

`order` is a relative ranking key inside one container, not an identity.
Containers are restamped to evenly spaced keys after every structural change
so later non-restamping inserts always have room between neighbours.
"""

import math
from typing import Protocol, Sequence, TypeVar

DEFAULT_ORDER_GAP = 100
DEFAULT_MIN_GAP = 10


class Ordered(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def order(self) -> int | None: ...

    def model_copy(self, *, update=None, deep=False): ...


T = TypeVar("T", bound=Ordered)


def order_key(item: Ordered) -> int:
    return item.order if item.order is not None else 0


def sort_by_order(items: Sequence[T]) -> list[T]:
    """Stable ascending sort on `order`, missing keys sort as 0."""
    return sorted(items, key=order_key)


def restamp(
    items: Sequence[T], start: int = 0, gap: int = DEFAULT_ORDER_GAP
) -> list[T]:
    """Assign `start + index * gap` keys, keeping the current sequence.

    Children whose key is already correct are returned as the same object.
    """
    stamped = []
    for index, item in enumerate(items):
        order = start + index * gap
        if item.order == order:
            stamped.append(item)
        else:
            stamped.append(item.model_copy(update={"order": order}))
    return stamped


def needs_rebalancing(items: Sequence[Ordered], min_gap: int = DEFAULT_MIN_GAP) -> bool:
    if len(items) <= 1:
        return False

    orders = [order_key(item) for item in items]
    if len(set(orders)) != len(orders):
        return True

    orders.sort()
    return any(b - a < min_gap for a, b in zip(orders, orders[1:]))


def is_stored_in_order(items: Sequence[Ordered]) -> bool:
    """True when the list sequence already matches the key sequence."""
    orders = [order_key(item) for item in items]
    return orders == sorted(orders)


def insertion_order(
    prev_item: Ordered | None,
    next_item: Ordered | None,
    fallback: int = 0,
    gap: int = DEFAULT_ORDER_GAP,
) -> int:
    """Key for an insert between two neighbours without restamping."""
    if prev_item is None and next_item is None:
        return fallback
    if prev_item is None:
        return order_key(next_item) - gap
    if next_item is None:
        return order_key(prev_item) + gap
    return math.floor((order_key(prev_item) + order_key(next_item)) / 2)


def insertion_order_at(
    items: Sequence[Ordered], index: int, gap: int = DEFAULT_ORDER_GAP
) -> int:
    prev_item = items[index - 1] if 0 < index <= len(items) else None
    next_item = items[index] if 0 <= index < len(items) else None
    return insertion_order(prev_item, next_item, 0, gap)


def next_order(items: Sequence[Ordered], gap: int = DEFAULT_ORDER_GAP) -> int:
    """Key for a new child appended after the current maximum."""
    if not items:
        return 0
    return max(order_key(item) for item in items) + gap


def insert_and_restamp(
    items: Sequence[T], item: T, target_index: int, gap: int = DEFAULT_ORDER_GAP
) -> list[T]:
    inserted = list(items)
    inserted.insert(max(target_index, 0), item)
    return restamp(inserted, gap=gap)


def move_and_restamp(
    items: Sequence[T], item_id: str, target_index: int, gap: int = DEFAULT_ORDER_GAP
) -> list[T]:
    """Move one child to `target_index` of the final list and restamp.

    Returns the input list unchanged when the id is not present.
    """
    index = next((i for i, item in enumerate(items) if item.id == item_id), -1)
    if index == -1:
        return list(items)

    remaining = list(items)
    moved = remaining.pop(index)
    return insert_and_restamp(remaining, moved, target_index, gap)
