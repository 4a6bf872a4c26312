"""Tests for edge cut and ratio-cut cost of arbitrary partitions."""

import numpy as np
import pytest

from spectral_partition.graph import graph_from_edges
from spectral_partition.partition import (
    PartitionInputError,
    Status,
    analyze_partition,
    check_labels,
)


@pytest.fixture
def cycle4():
    return graph_from_edges(4, [0, 1, 2, 3], [1, 2, 3, 0])


@pytest.fixture
def weighted_path():
    # 0 -1.0- 1 -2.0- 2 -3.0- 3
    return graph_from_edges(4, [0, 1, 2], [1, 2, 3], [1.0, 2.0, 3.0])


class TestAnalyzePartition:
    def test_cycle_contiguous_halves(self, cycle4):
        result = analyze_partition(cycle4, 2, np.array([0, 0, 1, 1]))
        assert result.status is Status.SUCCESS
        assert result.edge_cut == 2.0
        assert result.cost == 2.0
        np.testing.assert_array_equal(result.sizes, [2, 2])
        np.testing.assert_array_equal(result.cut_per_part, [2.0, 2.0])

    def test_cycle_alternating(self, cycle4):
        result = analyze_partition(cycle4, 2, np.array([0, 1, 0, 1]))
        assert result.edge_cut == 4.0
        assert result.cost == 4.0

    def test_single_partition_has_no_cut(self, cycle4):
        result = analyze_partition(cycle4, 1, np.zeros(4, dtype=int))
        assert result.edge_cut == 0.0
        assert result.cost == 0.0

    def test_weighted_cut(self, weighted_path):
        result = analyze_partition(weighted_path, 2, [0, 0, 1, 1])
        assert result.edge_cut == 2.0
        assert result.cost == pytest.approx(2.0 / 2 + 2.0 / 2)

    def test_unbalanced_sizes(self, weighted_path):
        result = analyze_partition(weighted_path, 2, [0, 1, 1, 1])
        assert result.edge_cut == 1.0
        assert result.cost == pytest.approx(1.0 / 1 + 1.0 / 3)

    def test_singleton_partitions_cost_is_total_degree(self, weighted_path):
        result = analyze_partition(weighted_path, 4, np.arange(4))
        assert result.edge_cut == 6.0
        assert result.cost == pytest.approx(weighted_path.total_weight)

    def test_empty_partition_contributes_zero(self, cycle4):
        two = analyze_partition(cycle4, 2, [0, 0, 1, 1])
        three = analyze_partition(cycle4, 3, [0, 0, 1, 1])
        assert three.status is Status.SUCCESS
        assert three.cost == two.cost
        assert three.sizes[2] == 0

    def test_self_loops_never_cut(self):
        g = graph_from_edges(2, [0, 0], [0, 1], [5.0, 1.0])
        result = analyze_partition(g, 2, [0, 1])
        assert result.edge_cut == 1.0

    def test_repeat_calls_identical(self, weighted_path):
        parts = np.array([1, 0, 1, 0])
        a = analyze_partition(weighted_path, 2, parts)
        b = analyze_partition(weighted_path, 2, parts)
        assert (a.edge_cut, a.cost) == (b.edge_cut, b.cost)
        np.testing.assert_array_equal(parts, [1, 0, 1, 0])

    def test_integral_float_labels_accepted(self, cycle4):
        result = analyze_partition(cycle4, 2, np.array([0.0, 0.0, 1.0, 1.0]))
        assert result.status is Status.SUCCESS


class TestAnalyzePartitionRejects:
    @pytest.mark.parametrize(
        "n_parts, parts",
        [
            (2, [0, 0, 2, 1]),
            (2, [0, -1, 1, 1]),
            (2, [0, 0, 1]),
            (2, [0.5, 0, 1, 1]),
            (0, [0, 0, 0, 0]),
        ],
    )
    def test_invalid_labels(self, cycle4, n_parts, parts):
        result = analyze_partition(cycle4, n_parts, parts)
        assert result.status is Status.INVALID_INPUT
        assert result.edge_cut is None
        assert result.cost is None
        assert result.message
        assert not result.ok

    def test_negative_weight_graph(self):
        g = graph_from_edges(3, [0, 1], [1, 2], [1.0, -2.0])
        result = analyze_partition(g, 2, [0, 0, 1])
        assert result.status is Status.INVALID_INPUT
        assert "negative" in result.message

    def test_raise_for_status(self, cycle4):
        result = analyze_partition(cycle4, 2, [0, 0, 5, 1])
        with pytest.raises(PartitionInputError, match="outside"):
            result.raise_for_status()

    def test_check_labels_reports_first_offender(self):
        with pytest.raises(PartitionInputError, match=r"parts\[2\] = 7"):
            check_labels([0, 1, 7, 9], 4, 2)
