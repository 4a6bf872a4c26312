"""Matrix-free Laplacian operators over a weighted undirected graph.

The eigensolver only needs ``shape`` and ``matvec``, so the seam is a
``scipy.sparse.linalg.LinearOperator``; the dense Laplacian is never formed.
"""

import numpy as np
from scipy.sparse.linalg import LinearOperator

from spectral_partition.graph.types import GraphView


def inverse_sqrt_degrees(graph: GraphView, isolated: float = 0.0) -> np.ndarray:
    """Return D^{-1/2} as a vector, with ``isolated`` for zero-degree vertices."""
    degrees = np.asarray(graph.adjacency.sum(axis=1)).ravel()
    out = np.full(graph.n, isolated, dtype=np.float64)
    positive = degrees > 0
    out[positive] = 1.0 / np.sqrt(degrees[positive])
    return out


def laplacian_operator(graph: GraphView, normalized: bool = False) -> LinearOperator:
    """Build the graph Laplacian as a LinearOperator.

    combinatorial: y = D x - A x
    normalized:    y = x - D^{-1/2} A D^{-1/2} x

    Isolated vertices (zero degree) get D^{-1/2} = 0 in the normalized form,
    so their row of the operator reduces to the identity.

    Args:
        graph: Graph exposing a symmetric CSR adjacency.
        normalized: Use the symmetric normalized Laplacian.

    Returns:
        Symmetric positive semi-definite LinearOperator of shape (n, n).
    """
    adj = graph.adjacency
    n = graph.n
    degrees = np.asarray(adj.sum(axis=1)).ravel()

    if not normalized:

        def matvec(x: np.ndarray) -> np.ndarray:
            x = np.ravel(x)
            return degrees * x - adj @ x

    else:
        inv_sqrt = inverse_sqrt_degrees(graph)

        def matvec(x: np.ndarray) -> np.ndarray:
            x = np.ravel(x)
            return x - inv_sqrt * (adj @ (inv_sqrt * x))

    return LinearOperator(
        shape=(n, n), matvec=matvec, rmatvec=matvec, dtype=np.float64
    )
