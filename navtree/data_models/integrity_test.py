import pytest

from navtree.data_models.factories import CategoryFactory, GroupFactory, ItemFactory
from navtree.data_models.integrity import (
    TreeIntegrityError,
    assert_valid_tree,
    validate_tree,
)
from navtree.data_models.tree import Tree


def test_sample_tree_is_valid(sample_tree):
    assert validate_tree(sample_tree) == []
    assert_valid_tree(sample_tree)


def test_duplicate_item_across_containers():
    group = GroupFactory(id="g", categoryId="c", items=[ItemFactory(id="dup")])
    category = CategoryFactory(id="c", items=[ItemFactory(id="dup")], groups=[group])

    violations = validate_tree(Tree(categories=[category]))

    assert violations == ["item dup appears in 2 containers"]


def test_duplicate_group_ids():
    first = CategoryFactory(id="c1", groups=[GroupFactory(id="g", categoryId="c1")])
    second = CategoryFactory(
        id="c2", order=100, groups=[GroupFactory(id="g", categoryId="c2")]
    )
    assert "group g appears 2 times" in validate_tree(
        Tree(categories=[first, second])
    )


def test_group_pointing_at_wrong_category():
    category = CategoryFactory(id="c", groups=[GroupFactory(id="g", categoryId="x")])
    violations = validate_tree(Tree(categories=[category]))
    assert violations == ["group g claims category x but is owned by c"]


@pytest.mark.parametrize(
    "keys,message",
    [
        ([None, 100], "has nodes without an order key"),
        ([100, 100], "has duplicate order keys"),
        ([100, 0], "is not stored in order"),
    ],
)
def test_order_violations(keys, message):
    items = [ItemFactory(order=key) for key in keys]
    category = CategoryFactory(id="c", items=items)
    assert validate_tree(Tree(categories=[category])) == [f"container c {message}"]


def test_group_order_violations():
    groups = [
        GroupFactory(id="g1", categoryId="c", order=100),
        GroupFactory(id="g2", categoryId="c", order=0),
    ]
    category = CategoryFactory(id="c", groups=groups)
    assert validate_tree(Tree(categories=[category])) == [
        "container c is not stored in order"
    ]


def test_assert_raises_with_violations():
    items = [ItemFactory(order=5), ItemFactory(order=5)]
    tree = Tree(categories=[CategoryFactory(id="c", items=items)])

    with pytest.raises(TreeIntegrityError) as excinfo:
        assert_valid_tree(tree)

    assert excinfo.value.violations == ["container c has duplicate order keys"]
    assert isinstance(excinfo.value, ValueError)
