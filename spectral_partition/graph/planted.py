"""Planted-partition (stochastic block model) generator for undirected graphs.

Produces graphs with known community structure: vertices are split into K
equal blocks, edges appear independently with probability p_in inside a
block and p_out across blocks.
"""

import logging

import numpy as np
import scipy.sparse

from spectral_partition.config.experiment import GraphConfig
from spectral_partition.graph.construction import graph_from_adjacency
from spectral_partition.graph.types import CSRGraph

log = logging.getLogger(__name__)


def build_probability_matrix(
    n: int, K: int, p_in: float, p_out: float
) -> np.ndarray:
    """Build the planted-partition edge probability matrix.

    P[i,j] = p_in if block[i] == block[j] else p_out, with zero diagonal.

    Args:
        n: Number of vertices.
        K: Number of blocks.
        p_in: In-block edge probability.
        p_out: Cross-block edge probability.

    Returns:
        Probability matrix of shape (n, n) with values in [0, 1].
    """
    blocks = block_assignments(n, K)

    omega = np.full((K, K), p_out, dtype=np.float64)
    np.fill_diagonal(omega, p_in)

    P = omega[blocks][:, blocks]
    np.clip(P, 0.0, 1.0, out=P)
    np.fill_diagonal(P, 0.0)
    return P


def block_assignments(n: int, K: int) -> np.ndarray:
    """Contiguous block labels; the first n % K blocks get one extra vertex."""
    sizes = np.full(K, n // K, dtype=np.int64)
    sizes[: n % K] += 1
    return np.repeat(np.arange(K, dtype=np.int64), sizes)


def sample_adjacency(
    P: np.ndarray, rng: np.random.Generator
) -> scipy.sparse.csr_matrix:
    """Sample a symmetric 0/1 adjacency matrix from probability matrix P.

    Only the strict upper triangle is drawn; the lower triangle mirrors it.

    Args:
        P: Symmetric edge probability matrix of shape (n, n).
        rng: numpy random Generator for reproducibility.

    Returns:
        Sparse CSR adjacency matrix.
    """
    n = P.shape[0]
    uniform = rng.random((n, n))
    upper = np.triu(uniform < P, k=1).astype(np.float64)
    return scipy.sparse.csr_matrix(upper + upper.T)


def generate_planted_partition(
    config: GraphConfig, seed: int
) -> tuple[CSRGraph, np.ndarray]:
    """Generate a planted-partition graph.

    Args:
        config: Generator parameters (n, K, p_in, p_out).
        seed: Seed for numpy's default_rng.

    Returns:
        (graph, block_assignments) where block_assignments is the planted
        ground-truth label of every vertex.
    """
    rng = np.random.default_rng(seed)
    P = build_probability_matrix(config.n, config.K, config.p_in, config.p_out)
    graph = graph_from_adjacency(sample_adjacency(P, rng))
    log.info(
        "Planted partition generated (n=%d, K=%d, edges=%d)",
        graph.n,
        config.K,
        graph.m,
    )
    return graph, block_assignments(config.n, config.K)
