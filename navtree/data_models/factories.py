"""factory_boy factories for tree models, used by the test suite."""

import factory

from navtree.data_models.tree import Category, Group, Item


class ItemFactory(factory.Factory):
    class Meta:
        model = Item

    id = factory.Sequence(lambda n: f"item-{n}")
    name = factory.Faker("word")
    url = factory.Faker("url")
    order = 0
    createdAt = factory.Faker(
        "pyint", min_value=1_600_000_000_000, max_value=1_700_000_000_000
    )
    updatedAt = factory.SelfAttribute("createdAt")


class GroupFactory(factory.Factory):
    class Meta:
        model = Group

    id = factory.Sequence(lambda n: f"group-{n}")
    name = factory.Faker("word")
    categoryId = "category-0"
    order = 0
    expanded = True
    items = factory.LazyFunction(list)


class CategoryFactory(factory.Factory):
    class Meta:
        model = Category

    id = factory.Sequence(lambda n: f"category-{n}")
    name = factory.Faker("word")
    order = 0
    items = factory.LazyFunction(list)
    groups = factory.LazyFunction(list)


def make_items(*names: str, gap: int = 100) -> list[Item]:
    """Items whose ids equal their names, stamped in the given order."""
    return [
        ItemFactory(id=name, name=name, order=index * gap)
        for index, name in enumerate(names)
    ]


def ids(nodes) -> list[str]:
    return [node.id for node in nodes]


def orders(nodes) -> list[int | None]:
    return [node.order for node in nodes]
