"""Building and validating CSR graphs from edge lists and matrices."""

import logging

import numpy as np
import scipy.sparse
from scipy.sparse.csgraph import connected_components

from spectral_partition.graph.types import CSRGraph, GraphView

log = logging.getLogger(__name__)

SYMMETRY_TOL = 1e-12


def _count_undirected_edges(adj: scipy.sparse.csr_matrix) -> int:
    n_loops = int(np.count_nonzero(adj.diagonal()))
    return (adj.nnz - n_loops) // 2 + n_loops


def graph_from_adjacency(matrix) -> CSRGraph:
    """Wrap a symmetric adjacency (scipy sparse or dense array) as a CSRGraph.

    The matrix is converted to float64 CSR with explicit zeros removed. No
    validation happens here; see validate_graph.

    Args:
        matrix: Square symmetric adjacency, scipy sparse or array-like.

    Returns:
        CSRGraph sharing no memory with the input.
    """
    adj = scipy.sparse.csr_matrix(matrix, dtype=np.float64, copy=True)
    adj.eliminate_zeros()
    adj.sort_indices()
    return CSRGraph(adjacency=adj, n=adj.shape[0], m=_count_undirected_edges(adj))


def graph_from_edges(
    n: int,
    sources: np.ndarray,
    targets: np.ndarray,
    weights: np.ndarray | None = None,
) -> CSRGraph:
    """Build an undirected CSRGraph from an edge list.

    Each (u, v, w) entry adds weight w in both directions. Duplicate edges
    are summed. Self-loops are stored once on the diagonal.

    Args:
        n: Number of vertices.
        sources: Edge source vertex indices.
        targets: Edge target vertex indices.
        weights: Edge weights (defaults to 1.0 per edge).

    Returns:
        CSRGraph with symmetric adjacency.

    Raises:
        ValueError: If array lengths differ or indices fall outside [0, n).
    """
    sources = np.asarray(sources, dtype=np.int64)
    targets = np.asarray(targets, dtype=np.int64)
    if weights is None:
        weights = np.ones(len(sources), dtype=np.float64)
    weights = np.asarray(weights, dtype=np.float64)

    if not (len(sources) == len(targets) == len(weights)):
        raise ValueError(
            f"Edge arrays differ in length: sources={len(sources)}, "
            f"targets={len(targets)}, weights={len(weights)}"
        )
    if len(sources) and (
        min(sources.min(), targets.min()) < 0
        or max(sources.max(), targets.max()) >= n
    ):
        raise ValueError(f"Edge endpoints must lie in [0, {n})")

    off = sources != targets
    rows = np.concatenate([sources, targets[off]])
    cols = np.concatenate([targets, sources[off]])
    vals = np.concatenate([weights, weights[off]])
    adj = scipy.sparse.coo_matrix((vals, (rows, cols)), shape=(n, n)).tocsr()
    adj.sum_duplicates()
    return graph_from_adjacency(adj)


def validate_graph(adjacency: scipy.sparse.spmatrix) -> list[str]:
    """Validate an adjacency matrix for spectral partitioning.

    Checks (cheapest first):
    1. Square shape with at least one vertex
    2. Finite weights
    3. Non-negative weights
    4. Symmetry (undirected graph)

    Args:
        adjacency: Sparse adjacency matrix.

    Returns:
        List of error strings (empty = valid graph).
    """
    errors: list[str] = []

    rows, cols = adjacency.shape
    if rows != cols:
        errors.append(f"Adjacency must be square, got shape {adjacency.shape}")
        return errors
    if rows == 0:
        errors.append("Graph has no vertices")
        return errors

    data = adjacency.tocsr().data
    if not np.all(np.isfinite(data)):
        errors.append(f"{int(np.sum(~np.isfinite(data)))} non-finite edge weights")
        return errors
    if np.any(data < 0):
        errors.append(
            f"{int(np.sum(data < 0))} negative edge weights "
            f"(min {data.min():.6g})"
        )

    asym = abs(adjacency - adjacency.T)
    if asym.nnz and asym.max() > SYMMETRY_TOL * max(1.0, float(np.abs(data).max())):
        errors.append(
            f"Adjacency is not symmetric (max |A - A^T| = {asym.max():.3g})"
        )

    return errors


def count_components(graph: GraphView) -> int:
    """Number of connected components of the undirected graph."""
    n_components, _ = connected_components(graph.adjacency, directed=False)
    return int(n_components)
