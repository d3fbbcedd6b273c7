"""Shared test fixtures for the reorder engine."""

import os
import random

import pytest
from faker import Faker

from navtree.data_models.factories import (
    CategoryFactory,
    GroupFactory,
    ItemFactory,
    make_items,
)
from navtree.data_models.tree import Tree
from navtree.storage.manager import TreeStore


@pytest.fixture(scope="session", autouse=True)
def setup_factory_seed():
    """Configure factory_boy/Faker to use a deterministic seed for reproducibility.

    The seed can be set via FACTORY_SEED environment variable, or will be
    randomly generated. The seed is printed to stdout for reproducibility.
    """
    seed = os.environ.get("FACTORY_SEED")
    if seed:
        seed = int(seed)
    else:
        seed = random.randint(0, 2**32 - 1)

    print(f"\n{'=' * 70}")
    print(f"Factory seed: {seed}")
    print(f"To reproduce this test run, set: FACTORY_SEED={seed}")
    print(f"{'=' * 70}\n")

    Faker.seed(seed)
    random.seed(seed)

    return seed


@pytest.fixture
def sample_tree() -> Tree:
    """
    Two categories:

    work: loose items a, b, c; groups tools [x, y], docs [p, q], spare []
    home: loose item h1; group media [m1]
    """
    work = CategoryFactory(
        id="work",
        name="Work",
        order=0,
        items=make_items("a", "b", "c"),
        groups=[
            GroupFactory(
                id="tools", categoryId="work", order=0, items=make_items("x", "y")
            ),
            GroupFactory(
                id="docs", categoryId="work", order=100, items=make_items("p", "q")
            ),
            GroupFactory(id="spare", categoryId="work", order=200, items=[]),
        ],
    )
    home = CategoryFactory(
        id="home",
        name="Home",
        order=100,
        items=make_items("h1"),
        groups=[
            GroupFactory(
                id="media", categoryId="home", order=0, items=make_items("m1")
            ),
        ],
    )
    return Tree(categories=[work, home])


@pytest.fixture
def legacy_tree_payload() -> dict:
    """A snapshot saved before order keys existed."""
    return {
        "categories": [
            {
                "id": "work",
                "name": "Work",
                "items": [
                    {"id": "a", "name": "a", "url": "https://a.example"},
                    {"id": "b", "name": "b", "url": "https://b.example"},
                ],
                "groups": [
                    {
                        "id": "tools",
                        "name": "Tools",
                        "categoryId": "work",
                        "items": [
                            {"id": "x", "name": "x", "url": "https://x.example"},
                            {
                                "id": "y",
                                "name": "y",
                                "url": "https://y.example",
                                "order": 100,
                            },
                        ],
                    },
                    {
                        "id": "docs",
                        "name": "Docs",
                        "categoryId": "work",
                        "order": 100,
                        "items": [],
                    },
                ],
            }
        ]
    }


@pytest.fixture
def mixed_key_tree() -> Tree:
    """Group g holds a kept key of 500 ahead of an item missing its key."""
    group = GroupFactory(
        id="g",
        categoryId="c",
        order=0,
        items=[ItemFactory(id="a", order=500), ItemFactory(id="b", order=None)],
    )
    return Tree(categories=[CategoryFactory(id="c", groups=[group])])


@pytest.fixture
def store(tmp_path) -> TreeStore:
    """Create a TreeStore with a temporary database."""
    return TreeStore(database_path=tmp_path)
