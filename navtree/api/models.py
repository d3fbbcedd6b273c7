from pydantic import BaseModel

from navtree.data_models.dnd import (
    CategoryGroupsReordered,
    DragEndDescriptor,
    GroupItemsReordered,
)
from navtree.data_models.tree import Tree
from navtree.reorder.executor import MoveTopology


class MoveRequest(BaseModel):
    descriptor: DragEndDescriptor
    categoryId: str | None = None


class MoveResponse(BaseModel):
    tree: Tree
    changed: bool
    topology: MoveTopology | None = None
    notifications: list[GroupItemsReordered | CategoryGroupsReordered] = []


class MaintenanceResponse(BaseModel):
    tree: Tree
    changed: bool
    message: str
