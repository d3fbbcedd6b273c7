import pytest

from navtree.data_models.factories import ItemFactory, ids, make_items, orders
from navtree.ordering.order_model import (
    DEFAULT_ORDER_GAP,
    insert_and_restamp,
    insertion_order,
    insertion_order_at,
    is_stored_in_order,
    move_and_restamp,
    needs_rebalancing,
    next_order,
    restamp,
    sort_by_order,
)


class TestSortByOrder:
    def test_sorts_ascending(self):
        items = [
            ItemFactory(id="c", order=300),
            ItemFactory(id="a", order=0),
            ItemFactory(id="b", order=150),
        ]
        assert ids(sort_by_order(items)) == ["a", "b", "c"]

    def test_missing_order_sorts_as_zero(self):
        items = [ItemFactory(id="a", order=10), ItemFactory(id="b", order=None)]
        assert ids(sort_by_order(items)) == ["b", "a"]

    def test_stable_for_equal_keys(self):
        items = [
            ItemFactory(id="first", order=50),
            ItemFactory(id="second", order=50),
            ItemFactory(id="zero", order=0),
        ]
        assert ids(sort_by_order(items)) == ["zero", "first", "second"]

    def test_does_not_mutate_input(self):
        items = [ItemFactory(id="b", order=100), ItemFactory(id="a", order=0)]
        sort_by_order(items)
        assert ids(items) == ["b", "a"]


class TestRestamp:
    def test_dense_keys_in_current_sequence(self):
        items = [
            ItemFactory(id="a", order=7),
            ItemFactory(id="b", order=3),
            ItemFactory(id="c", order=None),
        ]
        stamped = restamp(items)
        assert ids(stamped) == ["a", "b", "c"]
        assert orders(stamped) == [0, 100, 200]

    def test_start_and_gap(self):
        stamped = restamp(make_items("a", "b"), start=1000, gap=10)
        assert orders(stamped) == [1000, 1010]

    def test_idempotent(self):
        items = [ItemFactory(id="a", order=5), ItemFactory(id="b", order=5)]
        once = restamp(items)
        twice = restamp(once)
        assert twice == once

    def test_keeps_identity_of_correctly_stamped_items(self):
        items = make_items("a", "b")
        stamped = restamp(items)
        assert all(new is old for new, old in zip(stamped, items))

    def test_input_is_not_mutated(self):
        items = [ItemFactory(id="a", order=42)]
        restamp(items)
        assert items[0].order == 42


class TestNeedsRebalancing:
    @pytest.mark.parametrize(
        "keys,expected",
        [
            ([], False),
            ([0], False),
            ([0, 100, 200], False),
            ([50, 50], True),
            ([0, 5, 100], True),
            ([200, 0, 100], False),
            ([0, 10], False),
            ([0, 9], True),
        ],
    )
    def test_detection(self, keys, expected):
        items = [ItemFactory(order=key) for key in keys]
        assert needs_rebalancing(items, min_gap=10) is expected

    def test_colliding_siblings_keep_their_sequence(self):
        items = [ItemFactory(id="first", order=50), ItemFactory(id="second", order=50)]
        assert needs_rebalancing(items)

        stamped = restamp(items)
        assert ids(stamped) == ["first", "second"]
        assert orders(stamped) == [0, 100]
        assert not needs_rebalancing(stamped)


class TestInsertionOrder:
    def test_no_neighbours_uses_fallback(self):
        assert insertion_order(None, None, fallback=7) == 7

    def test_before_first(self):
        nxt = ItemFactory(order=0)
        assert insertion_order(None, nxt) == -DEFAULT_ORDER_GAP

    def test_after_last(self):
        prev = ItemFactory(order=300)
        assert insertion_order(prev, None) == 400

    def test_midpoint_is_floored(self):
        prev = ItemFactory(order=0)
        nxt = ItemFactory(order=101)
        assert insertion_order(prev, nxt) == 50

    def test_negative_midpoint_is_floored(self):
        prev = ItemFactory(order=-101)
        nxt = ItemFactory(order=0)
        assert insertion_order(prev, nxt) == -51

    def test_at_index(self):
        items = make_items("a", "b", "c")
        assert insertion_order_at(items, 0) == -100
        assert insertion_order_at(items, 1) == 50
        assert insertion_order_at(items, 3) == 300
        assert insertion_order_at([], 0) == 0


class TestNextOrder:
    def test_empty_container(self):
        assert next_order([]) == 0

    def test_after_maximum(self):
        items = [ItemFactory(order=500), ItemFactory(order=100)]
        assert next_order(items) == 600


class TestMoveAndInsert:
    @pytest.mark.parametrize(
        "item_id,target_index,expected",
        [
            ("a", 2, ["b", "c", "a"]),
            ("c", 0, ["c", "a", "b"]),
            ("b", 1, ["a", "b", "c"]),
            ("a", 99, ["b", "c", "a"]),
            ("c", -5, ["c", "a", "b"]),
        ],
    )
    def test_move(self, item_id, target_index, expected):
        moved = move_and_restamp(make_items("a", "b", "c"), item_id, target_index)
        assert ids(moved) == expected
        assert orders(moved) == [0, 100, 200]

    def test_move_unknown_id_is_unchanged(self):
        items = make_items("a", "b")
        assert move_and_restamp(items, "zzz", 0) == items

    def test_insert(self):
        new = ItemFactory(id="n", order=None)
        inserted = insert_and_restamp(make_items("a", "b"), new, 1)
        assert ids(inserted) == ["a", "n", "b"]
        assert orders(inserted) == [0, 100, 200]


class TestIsStoredInOrder:
    @pytest.mark.parametrize(
        "keys,expected",
        [
            ([], True),
            ([0, 100, 200], True),
            ([50, 50], True),
            ([500, 100], False),
            ([None, 100], True),
            ([100, None], False),
        ],
    )
    def test_detection(self, keys, expected):
        items = [ItemFactory(order=key) for key in keys]
        assert is_stored_in_order(items) is expected


@pytest.mark.parametrize("target_index,expected", [(-1, 0), (0, 0), (1, 1), (9, 2)])
def test_insert_index_is_clamped(target_index, expected):
    new = ItemFactory(id="n", order=None)
    inserted = insert_and_restamp(make_items("a", "b"), new, target_index)
    assert ids(inserted).index("n") == expected
