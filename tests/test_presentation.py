"""Tests for value formatting, legend labels, colors and label choice."""

import pytest

from conftest import node
from tree_heatmap.config import DEFAULT_CONFIG
from tree_heatmap.models import Cell, Unit
from tree_heatmap.presentation import (
    LABEL_PADDING,
    cell_fill,
    cell_text_fill,
    cell_text_visible,
    cell_value_text,
    choose_label,
    format_currency,
    format_percent,
    legend_labels,
)


def measure(text, font_size):
    return len(text) * 10


def leaf(value, label="leaf", short=""):
    return Cell(id=0, node=node(label, value, short=short), level=2, leaf=True, value=value, row_index=3)


def empty_leaf():
    return Cell(id=0, node=None, level=2, leaf=True, row_index=3)


class TestFormatting:
    @pytest.mark.parametrize(
        "value,expected",
        [(0, "0"), (7, "7"), (1234567.4, "1,234,567"), (2.5, "3"), (-1500, "-1,500")],
    )
    def test_currency(self, value, expected):
        assert format_currency(value) == expected

    @pytest.mark.parametrize(
        "value,total,expected",
        [(1, 10, "10%"), (1, 8, "12.5%"), (1, 3, "33.3%"), (0, 5, "0%"), (5, 0, "-")],
    )
    def test_percent(self, value, total, expected):
        assert format_percent(value, total) == expected

    def test_cell_value_text(self):
        assert cell_value_text(leaf(3), Unit.PERCENT, 12) == "25%"
        assert cell_value_text(leaf(3000), Unit.CURRENCY, 12) == "3,000"
        assert cell_value_text(empty_leaf(), Unit.CURRENCY, 12) == ""


class TestLegend:
    def test_currency_labels(self):
        assert legend_labels((10, 20, 30), Unit.CURRENCY, 100) == [
            "< 10",
            "10―20",
            "20―30",
            "> 30",
        ]

    def test_percent_labels(self):
        assert legend_labels((10, 20, 30), Unit.PERCENT, 40) == [
            "< 25%",
            "25%―50%",
            "50%―75%",
            "> 75%",
        ]


class TestColors:
    def test_leaf_fill_follows_bucket(self):
        thresholds = (1, 2, 3)
        fills = [cell_fill(leaf(v), thresholds, DEFAULT_CONFIG) for v in (0, 1, 2, 3)]
        assert fills == list(DEFAULT_CONFIG.leaf_cell_bg)
        texts = [cell_text_fill(leaf(v), thresholds, DEFAULT_CONFIG) for v in (0, 1, 2, 3)]
        assert texts == list(DEFAULT_CONFIG.leaf_cell_txt)

    def test_header_fill_by_row(self):
        header = Cell(id=0, node=node("h"), level=1, leaf=False, row_index=1)
        assert cell_fill(header, (1, 2, 3), DEFAULT_CONFIG) == "#10527e"
        deep = Cell(id=1, node=node("d"), level=9, leaf=False, row_index=9)
        assert cell_fill(deep, (1, 2, 3), DEFAULT_CONFIG) == DEFAULT_CONFIG.header_cell_bg[-1]

    def test_empty_cells(self):
        assert cell_fill(empty_leaf(), (1, 2, 3), DEFAULT_CONFIG) == "#ffffff"
        assert cell_text_fill(empty_leaf(), (1, 2, 3), DEFAULT_CONFIG) == ""


class TestTextVisibility:
    def test_headers_always_visible(self):
        header = Cell(id=0, node=node("h"), level=0, leaf=False, row_index=0)
        assert cell_text_visible(header, Unit.NONE, False)

    def test_leaf_hidden_without_unit(self):
        assert not cell_text_visible(leaf(1), Unit.NONE, True)

    def test_leaf_hidden_when_rows_too_short(self):
        assert not cell_text_visible(leaf(1), Unit.CURRENCY, False)
        assert cell_text_visible(leaf(1), Unit.CURRENCY, True)


class TestChooseLabel:
    def test_long_label_when_it_fits(self):
        cell = leaf(1, "Marketing", short="Mkt")
        assert choose_label(cell, 90 + LABEL_PADDING, measure, 13) == "Marketing"

    def test_short_label_fallback(self):
        cell = leaf(1, "Marketing", short="Mkt")
        assert choose_label(cell, 60, measure, 13) == "Mkt"

    def test_hidden_when_nothing_fits(self):
        cell = leaf(1, "Marketing", short="Mkt")
        assert choose_label(cell, 20, measure, 13) is None

    def test_empty_cell_has_no_label(self):
        assert choose_label(empty_leaf(), 500, measure, 13) is None
