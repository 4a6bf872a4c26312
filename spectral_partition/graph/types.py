"""Graph data structures consumed by the partitioning pipeline."""

from dataclasses import dataclass
from typing import Protocol

import numpy as np
import scipy.sparse


class GraphView(Protocol):
    """Read-only view over a weighted undirected graph in CSR form.

    Any representation exposing these attributes can be partitioned; the
    numerical core only touches the adjacency through matrix-vector products
    and a single traversal of its nonzeros.
    """

    @property
    def n(self) -> int: ...

    @property
    def m(self) -> int: ...

    @property
    def adjacency(self) -> scipy.sparse.csr_matrix: ...


@dataclass(frozen=True)
class CSRGraph:
    """Immutable weighted undirected graph.

    Every undirected edge {u, v} with u != v is stored twice in the
    symmetric adjacency (once per direction). Uses frozen=True but omits
    slots=True since scipy objects don't interact well with __slots__.
    """

    adjacency: scipy.sparse.csr_matrix  # symmetric weighted adjacency (n x n)
    n: int  # number of vertices
    m: int  # number of undirected edges

    @property
    def degrees(self) -> np.ndarray:
        """Weighted vertex degrees (row sums of the adjacency)."""
        return np.asarray(self.adjacency.sum(axis=1)).ravel()

    @property
    def total_weight(self) -> float:
        """Sum of weighted degrees, i.e. twice the total edge weight."""
        return float(self.adjacency.sum())
