"""Tests for the end-to-end spectral partition entry point."""

import numpy as np
import pytest

from spectral_partition.config import GraphConfig, LanczosConfig, PartitionConfig
from spectral_partition.graph import generate_planted_partition, graph_from_edges
from spectral_partition.partition import (
    ConvergenceWarning,
    Status,
    analyze_partition,
    partition,
    partition_with_config,
)

SOLVER_ARGS = dict(
    max_iter_lanczos=5000,
    restart_iter_lanczos=32,
    tol_lanczos=1e-8,
    max_iter_kmeans=200,
    tol_kmeans=1e-10,
)


def clique_edges(vertices):
    src, dst = [], []
    for i, u in enumerate(vertices):
        for v in vertices[i + 1 :]:
            src.append(u)
            dst.append(v)
    return src, dst


def two_cliques(sizes=(5, 5), bridge_weight=None):
    """Two cliques, optionally joined by one edge of the given weight."""
    a = list(range(sizes[0]))
    b = list(range(sizes[0], sizes[0] + sizes[1]))
    sa, da = clique_edges(a)
    sb, db = clique_edges(b)
    src, dst = sa + sb, da + db
    weights = [1.0] * len(src)
    if bridge_weight is not None:
        src.append(a[-1])
        dst.append(b[0])
        weights.append(bridge_weight)
    return graph_from_edges(sum(sizes), src, dst, weights)


@pytest.fixture(scope="module")
def planted():
    return generate_planted_partition(
        GraphConfig(n=90, K=3, p_in=0.4, p_out=0.02), seed=1
    )


class TestPartitionStructure:
    def test_bridged_cliques_split_at_bridge(self):
        g = two_cliques(bridge_weight=0.1)
        result = partition(g, 2, 2, seed=0, **SOLVER_ARGS)
        assert result.status is Status.SUCCESS
        assert len(set(result.parts[:5].tolist())) == 1
        assert len(set(result.parts[5:].tolist())) == 1
        assert result.parts[0] != result.parts[5]
        analysis = analyze_partition(g, 2, result.parts)
        assert analysis.edge_cut == pytest.approx(0.1)

    def test_disconnected_components_zero_cut(self):
        g = two_cliques(sizes=(4, 6))
        result = partition(g, 2, 2, seed=0, **SOLVER_ARGS)
        assert result.ok
        analysis = analyze_partition(g, 2, result.parts)
        assert analysis.edge_cut == 0.0
        assert result.parts[0] != result.parts[4]

    def test_disconnected_single_eigenvector(self):
        g = two_cliques(sizes=(4, 6))
        result = partition(g, 2, 1, seed=0, **SOLVER_ARGS)
        analysis = analyze_partition(g, 2, result.parts)
        assert analysis.edge_cut == 0.0
        np.testing.assert_allclose(result.eig_vals, [0.0], atol=1e-8)

    def test_single_eigenvector_on_connected_graph(self):
        g = two_cliques(bridge_weight=0.1)
        result = partition(g, 2, 1, seed=0, **SOLVER_ARGS)
        assert result.status is Status.SUCCESS
        assert result.parts[0] != result.parts[9]
        analysis = analyze_partition(g, 2, result.parts)
        assert analysis.edge_cut == pytest.approx(0.1)
        np.testing.assert_array_equal(analysis.sizes, [5, 5])
        assert result.eig_vals.shape == (1,)
        np.testing.assert_allclose(result.eig_vals, [0.0], atol=1e-8)

    def test_single_eigenvector_planted(self, planted):
        graph, _ = planted
        result = partition(graph, 3, 1, seed=0, **SOLVER_ARGS)
        assert np.all(np.bincount(result.parts, minlength=3) > 0)

    def test_cycle4_two_parts(self):
        g = graph_from_edges(4, [0, 1, 2, 3], [1, 2, 3, 0])
        result = partition(g, 2, 2, seed=0, **SOLVER_ARGS)
        analysis = analyze_partition(g, 2, result.parts)
        assert analysis.edge_cut == 2.0
        assert analysis.cost == 2.0

    def test_recovers_planted_blocks(self, planted):
        graph, blocks = planted
        result = partition(graph, 3, 3, seed=0, **SOLVER_ARGS)
        assert result.ok
        pairs = set(zip(result.parts.tolist(), blocks.tolist()))
        assert len(pairs) == 3

    def test_beats_random_assignment(self, planted):
        graph, _ = planted
        result = partition(graph, 3, 3, seed=0, **SOLVER_ARGS)
        spectral_cost = analyze_partition(graph, 3, result.parts).cost
        rng = np.random.default_rng(0)
        for _ in range(5):
            shuffled = rng.permutation(result.parts)
            assert spectral_cost <= analyze_partition(graph, 3, shuffled).cost


class TestPartitionOutputs:
    def test_output_invariants(self, planted):
        graph, _ = planted
        result = partition(graph, 4, 3, seed=2, **SOLVER_ARGS)
        assert result.parts.shape == (graph.n,)
        assert result.parts.min() >= 0 and result.parts.max() < 4
        assert np.bincount(result.parts, minlength=4).sum() == graph.n
        assert result.eig_vals.shape == (3,)
        assert np.all(np.diff(result.eig_vals) >= 0)
        assert result.eig_vecs.shape == (3, graph.n)
        assert result.iters_lanczos > 0
        assert result.iters_kmeans > 0

    def test_eigenvalues_match_dense(self, planted):
        graph, _ = planted
        A = graph.adjacency.toarray()
        L = np.diag(A.sum(axis=1)) - A
        result = partition(graph, 3, 3, seed=0, **SOLVER_ARGS)
        np.testing.assert_allclose(
            result.eig_vals, np.linalg.eigvalsh(L)[:3], atol=1e-6
        )

    def test_caller_buffers_written_in_place(self):
        g = two_cliques(bridge_weight=0.1)
        parts = np.full(10, -1, dtype=np.int64)
        eig_vals = np.zeros(2)
        eig_vecs = np.zeros((2, 10))
        result = partition(
            g, 2, 2, parts=parts, eig_vals=eig_vals, eig_vecs=eig_vecs,
            seed=0, **SOLVER_ARGS,
        )
        assert result.parts is parts
        assert result.eig_vals is eig_vals
        assert result.eig_vecs is eig_vecs
        assert parts.min() >= 0
        assert eig_vals[1] > 0

    def test_deterministic_with_seed(self, planted):
        graph, _ = planted
        r1 = partition(graph, 3, 3, seed=4, **SOLVER_ARGS)
        r2 = partition(graph, 3, 3, seed=4, **SOLVER_ARGS)
        np.testing.assert_array_equal(r1.parts, r2.parts)
        np.testing.assert_array_equal(r1.eig_vals, r2.eig_vals)

    def test_normalized_laplacian(self):
        g = two_cliques(bridge_weight=0.1)
        result = partition(g, 2, 2, normalized=True, seed=0, **SOLVER_ARGS)
        assert result.ok
        assert result.parts[0] != result.parts[9]
        assert np.all(result.eig_vals >= -1e-10)
        assert np.all(result.eig_vals <= 2.0 + 1e-10)

    def test_max_dimensions_give_singletons(self):
        g = two_cliques(bridge_weight=0.1)
        result = partition(g, 10, 9, seed=0, **SOLVER_ARGS)
        assert result.ok
        assert result.eig_vals.shape == (9,)
        assert sorted(result.parts.tolist()) == list(range(10))
        analysis = analyze_partition(g, 10, result.parts)
        assert analysis.cost == pytest.approx(g.adjacency.sum())

    @pytest.mark.parametrize("n", [2, 3, 4, 5])
    def test_complete_graph_singletons(self, n):
        src, dst = clique_edges(list(range(n)))
        g = graph_from_edges(n, src, dst)
        result = partition(g, n, n - 1, seed=0, **SOLVER_ARGS)
        assert result.status is Status.SUCCESS
        analysis = analyze_partition(g, n, result.parts)
        np.testing.assert_array_equal(analysis.sizes, 1)
        assert analysis.cost == pytest.approx(n * (n - 1))

    def test_every_part_nonempty(self, planted):
        graph, _ = planted
        result = partition(graph, 7, 2, seed=0, **SOLVER_ARGS)
        assert np.all(np.bincount(result.parts, minlength=7) > 0)

    def test_with_config(self):
        g = two_cliques(bridge_weight=0.1)
        config = PartitionConfig(
            n_parts=2, n_eig_vecs=2, lanczos=LanczosConfig(restart_iter=8), seed=3
        )
        via_config = partition_with_config(g, config)
        direct = partition(
            g, 2, 2,
            max_iter_lanczos=config.lanczos.max_iter,
            restart_iter_lanczos=8,
            tol_lanczos=config.lanczos.tol,
            max_iter_kmeans=config.kmeans.max_iter,
            tol_kmeans=config.kmeans.tol,
            seed=3,
        )
        np.testing.assert_array_equal(via_config.parts, direct.parts)


class TestPartitionStatus:
    def test_iteration_limit_is_best_effort(self, planted):
        graph, _ = planted
        args = dict(SOLVER_ARGS, max_iter_lanczos=4, restart_iter_lanczos=8, tol_lanczos=1e-12)
        result = partition(graph, 3, 3, seed=0, **args)
        assert result.status is Status.ITERATION_LIMIT
        assert result.ok
        assert not result.lanczos_converged
        assert "Lanczos" in result.message
        assert result.parts.shape == (graph.n,)
        assert result.parts.max() < 3
        with pytest.warns(ConvergenceWarning):
            result.raise_for_status()

    @pytest.mark.parametrize(
        "n_parts, n_eig_vecs",
        [(0, 2), (2, 0), (2, 10), (2, 11), (11, 2)],
    )
    def test_invalid_dimensions(self, n_parts, n_eig_vecs):
        g = two_cliques(bridge_weight=0.1)
        result = partition(g, n_parts, n_eig_vecs, **SOLVER_ARGS)
        assert result.status is Status.INVALID_INPUT
        assert result.parts is None
        assert result.eig_vals is None

    def test_negative_weights_rejected(self):
        g = graph_from_edges(3, [0, 1], [1, 2], [1.0, -1.0])
        result = partition(g, 2, 1, **SOLVER_ARGS)
        assert result.status is Status.INVALID_INPUT
        assert "negative" in result.message

    def test_bad_buffer_shape_rejected(self):
        g = two_cliques(bridge_weight=0.1)
        result = partition(g, 2, 2, parts=np.zeros(9, dtype=np.int64), **SOLVER_ARGS)
        assert result.status is Status.INVALID_INPUT
        assert "parts" in result.message

    def test_bad_tolerance_rejected(self):
        g = two_cliques(bridge_weight=0.1)
        args = dict(SOLVER_ARGS, tol_lanczos=0.0)
        result = partition(g, 2, 2, **args)
        assert result.status is Status.INVALID_INPUT

    def test_invalid_input_does_not_touch_buffers(self):
        g = two_cliques(bridge_weight=0.1)
        parts = np.full(10, -1, dtype=np.int64)
        partition(g, 0, 2, parts=parts, **SOLVER_ARGS)
        np.testing.assert_array_equal(parts, -1)
