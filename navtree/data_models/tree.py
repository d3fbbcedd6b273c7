"""
Tree snapshot models.

A tree is an ordered forest of categories. Each category owns loose items
plus groups, and each group owns items. Models are frozen: every change
produces new container lists and new parent objects, while untouched nodes
keep their identity so callers can diff old and new snapshots cheaply.
"""

from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    url: str = ""
    order: int | None = None
    createdAt: int = 0
    updatedAt: int = 0


class Group(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    categoryId: str
    order: int | None = None
    expanded: bool = True
    items: list[Item] = Field(default_factory=list)

    @property
    def item_map(self) -> dict[str, Item]:
        return {item.id: item for item in self.items}


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    order: int | None = None
    items: list[Item] = Field(default_factory=list)
    groups: list[Group] = Field(default_factory=list)

    @property
    def group_map(self) -> dict[str, Group]:
        return {group.id: group for group in self.groups}

    def replace_group(self, group: Group) -> "Category":
        groups = [group if g.id == group.id else g for g in self.groups]
        return self.model_copy(update={"groups": groups})


class Tree(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: list[Category] = Field(default_factory=list)


def iter_containers(tree: Tree) -> Iterator[tuple[str, list[Item]]]:
    """Yield (container id, items) for every item container in the tree.

    Category direct lists are keyed by the category id, group lists by the
    group id.
    """
    for category in tree.categories:
        yield category.id, category.items
        for group in category.groups:
            yield group.id, group.items


def item_ids(tree: Tree) -> list[str]:
    return [item.id for _, items in iter_containers(tree) for item in items]


def count_items(tree: Tree) -> int:
    return sum(len(items) for _, items in iter_containers(tree))


def find_category(tree: Tree, category_id: str) -> Category | None:
    for category in tree.categories:
        if category.id == category_id:
            return category
    return None


def find_category_for_node(tree: Tree, node_id: str) -> Category | None:
    """Return the category that owns a group or item with the given id."""
    for category in tree.categories:
        if any(item.id == node_id for item in category.items):
            return category
        for group in category.groups:
            if group.id == node_id or any(item.id == node_id for item in group.items):
                return category
    return None


def replace_category(tree: Tree, category: Category) -> Tree:
    """Return a new tree with one category swapped; siblings keep identity."""
    categories = [
        category if existing.id == category.id else existing
        for existing in tree.categories
    ]
    return tree.model_copy(update={"categories": categories})
