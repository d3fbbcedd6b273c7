"""Drag-and-drop boundary models: drag-end descriptors, drop zones, notifications."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

EMPTY_ZONE_SUFFIX = "-empty"


class DragKind(str, Enum):
    group = "group"
    item = "item"


class InsertionSide(str, Enum):
    above = "above"
    below = "below"


@dataclass(frozen=True)
class NodeTarget:
    """Drop onto an existing group or item."""

    node_id: str


@dataclass(frozen=True)
class EmptyZone:
    """Drop into the placeholder shown for a category's empty item list."""

    category_id: str


DropTarget = NodeTarget | EmptyZone


def empty_zone_id(category_id: str) -> str:
    return f"{category_id}{EMPTY_ZONE_SUFFIX}"


def parse_drop_target(over_id: str | None, category_id: str) -> DropTarget | None:
    """Translate a raw hover id into a drop target for one category.

    Only the sentinel of the category being edited counts as an empty zone;
    any other id is treated as a node id and left to the resolver.
    """
    if over_id is None:
        return None
    if over_id == empty_zone_id(category_id):
        return EmptyZone(category_id=category_id)
    return NodeTarget(node_id=over_id)


class DragEndDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    activeId: str
    overId: str | None = None
    dragKind: DragKind = DragKind.item
    insertionSide: InsertionSide = InsertionSide.below

    def drop_target(self, category_id: str) -> DropTarget | None:
        return parse_drop_target(self.overId, category_id)


class GroupItemsReordered(BaseModel):
    model_config = ConfigDict(frozen=True)

    groupId: str
    itemIds: list[str]


class CategoryGroupsReordered(BaseModel):
    model_config = ConfigDict(frozen=True)

    categoryId: str
    groupIds: list[str]


ReorderNotification = GroupItemsReordered | CategoryGroupsReordered
