"""Tests for tree flattening: colspans, leaf stacking, gap filling, indexes."""

import random

import pytest

from conftest import node, random_tree
from tree_heatmap.grid import compute_colspans, effective_depth, flatten
from tree_heatmap.tree import structural_depth


def labels(row):
    return [cell.label_long if not cell.empty else None for cell in row]


def structure(grid):
    return [[(c.level, c.leaf, c.colspan, c.col_index, c.label_long) for c in row] for row in grid.rows]


def check_invariants(grid):
    for row_index in range(len(grid.rows)):
        assert grid.row_span(row_index) == grid.num_max_colspan

    for cell in grid.cells():
        assert cell.colspan >= 1
        assert cell.leaf == (cell.level == grid.effective_depth)

    # Children of a header cell (above the last header row) span exactly its columns
    for level in range(grid.effective_depth - 1):
        for cell in grid.rows[level]:
            if cell.node is None or not cell.node.has_children:
                continue
            kids = [c for c in grid.rows[level + 1] if c.node is not None and c.node.parent is cell.node]
            assert sum(c.colspan for c in kids) == cell.colspan


class TestEffectiveDepth:
    def test_capped_by_structure(self, company):
        assert effective_depth(company, 5) == 2

    def test_capped_by_request(self, company):
        assert effective_depth(company, 1) == 1

    def test_never_below_one(self, company):
        assert effective_depth(company, 0) == 1
        assert effective_depth(company, -3) == 1

    def test_lone_root(self):
        assert effective_depth(node("solo", 5), 3) == 1


class TestColspans:
    def test_last_header_row_spans_one(self, company):
        spans = compute_colspans(company, 2)
        assert spans[(id(company), 0)] == 2
        for sector in company.children:
            assert spans[(id(sector), 1)] == 1

    def test_colspan_sums_children(self):
        a = node("A", children=[node("A1", children=[node("a"), node("b")]), node("A2", children=[node("c")])])
        b = node("B", children=[node("B1", children=[node("d")])])
        root = node("root", children=[a, b])
        spans = compute_colspans(root, 3)
        assert spans[(id(a), 1)] == 2
        assert spans[(id(b), 1)] == 1
        assert spans[(id(root), 0)] == 3


class TestFlatten:
    def test_none_root_is_nothing_to_render(self):
        assert flatten(None, 3) is None

    def test_depth_two_stacks_departments(self, company):
        """Sectors sit on the last header row; departments stack below them."""
        grid = flatten(company, 2)

        assert grid.effective_depth == 2
        assert grid.num_max_colspan == 2
        assert len(grid.rows) == 4

        assert labels(grid.rows[0]) == ["Company"]
        assert grid.rows[0][0].colspan == 2
        assert labels(grid.rows[1]) == ["Sector 1", "Sector 2"]
        assert [c.colspan for c in grid.rows[1]] == [1, 1]

        assert [c.value for c in grid.rows[2]] == [1, 3]
        assert [c.value for c in grid.rows[3]] == [2, 4]
        assert all(c.leaf and c.level == 2 for row in grid.leaf_rows for c in row)

    def test_depth_one_stacks_sectors(self, company):
        grid = flatten(company, 1)

        assert grid.num_max_colspan == 1
        assert labels(grid.rows[0]) == ["Company"]
        assert labels(grid.rows[1]) == ["Sector 1"]
        assert labels(grid.rows[2]) == ["Sector 2"]
        assert len(grid.rows) == 3

    def test_requested_depth_beyond_structure(self, company):
        assert structure(flatten(company, 9)) == structure(flatten(company, 2))

    def test_three_levels_with_unequal_colspans(self):
        a = node("A", children=[node("A1", children=[node("a", 1), node("b", 2)]), node("A2", children=[node("c", 3)])])
        b = node("B", children=[node("B1", children=[node("d", 4)])])
        grid = flatten(node("root", children=[a, b]), 3)

        assert [c.colspan for c in grid.rows[0]] == [3]
        assert [c.colspan for c in grid.rows[1]] == [2, 1]
        assert [c.col_index for c in grid.rows[1]] == [0, 2]
        assert labels(grid.rows[2]) == ["A1", "A2", "B1"]
        assert labels(grid.rows[3]) == ["a", "c", "d"]
        # b is stacked under A1; the other columns get placeholders
        assert labels(grid.rows[4]) == ["b", None, None]
        for placeholder in grid.rows[4][1:]:
            assert placeholder.empty and placeholder.leaf and placeholder.colspan == 1
            assert placeholder.value == 0

    def test_cutoff_node_with_three_children_stacks_three_rows(self):
        cutoff = node("cut", children=[node("x", 1), node("y", 2), node("z", 3)])
        grid = flatten(node("root", children=[cutoff]), 2)

        assert [labels(row) for row in grid.leaf_rows] == [["x"], ["y"], ["z"]]

    def test_single_child_chain_stacks_immediate_child_only(self):
        chain = node("c1", children=[node("c2", children=[node("c3", children=[node("c4")])])])
        grid = flatten(node("root", children=[chain]), 1)

        assert labels(grid.rows[0]) == ["root"]
        assert labels(grid.rows[1]) == ["c1"]
        assert len(grid.rows) == 2

    def test_cell_without_children_gets_synthesized_empty_leaf(self):
        solo = node("solo", 5)
        grid = flatten(solo, 3)

        assert grid.effective_depth == 1
        assert labels(grid.rows[0]) == ["solo"]
        assert len(grid.rows) == 2
        filler = grid.rows[1][0]
        assert filler.empty and filler.leaf and filler.value == 0

    def test_empty_children_list_treated_as_leaf(self):
        odd = node("odd", 4, children=[])
        grid = flatten(node("root", children=[odd, node("ok", children=[node("k", 9)])]), 2)

        assert grid.rows[1][0].node is odd
        assert labels(grid.rows[2]) == [None, "k"]
        check_invariants(grid)

    def test_shallow_branch_gap_is_filled_with_empty_cells(self):
        """A branch ending above the last header row keeps its column."""
        root = node("root", children=[node("X", 5), node("Y", children=[node("Y1", children=[node("y", 7)])])])
        grid = flatten(root, 3)

        assert grid.num_max_colspan == 2
        assert labels(grid.rows[1]) == ["X", "Y"]
        assert labels(grid.rows[2]) == [None, "Y1"]
        gap = grid.rows[2][0]
        assert gap.empty and not gap.leaf and gap.level == 2 and gap.colspan == 1
        assert labels(grid.rows[3]) == [None, "y"]
        assert grid.rows[3][0].leaf
        check_invariants(grid)

    def test_values_follow_value_index(self, company):
        grid = flatten(company, 2, value_index=1)
        assert [c.value for c in grid.rows[2]] == [40, 20]
        assert grid.rows[0][0].value == 100

    def test_missing_value_index_reads_zero(self, company):
        grid = flatten(company, 2, value_index=7)
        assert all(c.value == 0 for c in grid.cells())

    def test_ids_unique_and_tagged_with_generation(self, company):
        grid = flatten(company, 2, generation=4)
        ids = [c.id for c in grid.cells()]
        assert len(ids) == len(set(ids))
        assert all(c.generation == 4 for c in grid.cells())
        assert grid.generation == 4

    def test_row_and_col_indexes(self, company):
        grid = flatten(company, 2)
        for row_index, row in enumerate(grid.rows):
            x = 0
            for cell in row:
                assert cell.row_index == row_index
                assert cell.col_index == x
                x += cell.colspan

    def test_leaf_values_skip_placeholders(self):
        root = node("root", children=[node("a", children=[node("a1", 5), node("a2", 6)]), node("b", children=[node("b1", 7)])])
        grid = flatten(root, 2)
        assert sorted(grid.leaf_values()) == [5, 6, 7]

    def test_row_views_and_lookup(self, company):
        grid = flatten(company, 2)
        assert len(grid.header_rows) == 2
        assert len(grid.leaf_rows) == 2
        assert all(c.leaf for c in grid.leaf_cells())
        assert grid.find(grid.rows[1][1].id) is grid.rows[1][1]
        assert grid.find(999) is None

    def test_flatten_is_repeatable(self, company):
        assert structure(flatten(company, 2)) == structure(flatten(company, 2))

    def test_deep_tree_does_not_hit_recursion_limit(self):
        root = node("n0", 1)
        current = root
        for i in range(1, 3000):
            current = current.add_child(node(f"n{i}", 1))
        grid = flatten(root, 5000)
        assert grid.effective_depth == 2999
        assert structural_depth(root) == 2999


class TestInvariants:
    @pytest.mark.parametrize("seed", range(12))
    def test_random_trees(self, seed):
        rng = random.Random(seed)
        root = random_tree(rng, max_depth=4)
        for depth in range(1, 6):
            grid = flatten(root, depth)
            assert 1 <= grid.effective_depth <= depth
            assert grid.effective_depth <= max(1, structural_depth(root))
            check_invariants(grid)

    @pytest.mark.slow
    def test_many_large_random_trees(self):
        rng = random.Random(1234)
        for _ in range(200):
            root = random_tree(rng, max_depth=7, max_children=5)
            for depth in range(1, 9):
                check_invariants(flatten(root, depth))
