"""Shared test fixtures for Tree Heatmap tests."""

import random

import pytest

from tree_heatmap.clicks import ManualScheduler
from tree_heatmap.models import TreeNode


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def node(label, *values, children=None, short=""):
    """Shorthand TreeNode constructor; parent links are wired by TreeNode."""
    return TreeNode(label_long=label, label_short=short, values=list(values), children=children)


def random_tree(rng: random.Random, max_depth: int = 5, max_children: int = 4) -> TreeNode:
    """Irregular tree: branches end at random depths, some very early."""
    counter = iter(range(1_000_000))

    def build(depth):
        label = f"n{next(counter)}"
        value = rng.randint(-50, 500)
        if depth >= max_depth or (depth > 0 and rng.random() < 0.25):
            return node(label, value, value * 2)
        kids = [build(depth + 1) for _ in range(rng.randint(1, max_children))]
        return node(label, value, value * 2, children=kids)

    return build(0)


class RecordingSurface:
    """Surface double: fixed size, proportional text width, keeps every frame."""

    def __init__(self, width: float = 800, height: float = 600):
        self.width = width
        self.height = height
        self.frames = []

    def size(self):
        return self.width, self.height

    def measure_text(self, text, font_size):
        return len(text) * font_size * 0.6

    def draw(self, frame):
        self.frames.append(frame)


@pytest.fixture
def company():
    """Two sectors with two departments each; values [index0, index1].

    company
        sector1
            dept1 (1)
            dept2 (2)
        sector2
            dept3 (3)
            dept4 (4)
    """
    return node(
        "Company",
        10,
        100,
        short="Co",
        children=[
            node(
                "Sector 1",
                3,
                30,
                short="S1",
                children=[node("Department 1", 1, 40), node("Department 2", 2, 30)],
            ),
            node(
                "Sector 2",
                7,
                70,
                short="S2",
                children=[node("Department 3", 3, 20), node("Department 4", 4, 10)],
            ),
        ],
    )


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def surface():
    return RecordingSurface()
