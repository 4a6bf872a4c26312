"""Graph persistence: compressed sparse .npz files and plain edge lists."""

import logging
from pathlib import Path

import numpy as np
import scipy.sparse

from spectral_partition.graph.construction import (
    graph_from_adjacency,
    graph_from_edges,
)
from spectral_partition.graph.types import CSRGraph

log = logging.getLogger(__name__)


def save_graph(graph: CSRGraph, path: str | Path) -> Path:
    """Save a graph's adjacency as a scipy sparse .npz file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    scipy.sparse.save_npz(str(path), graph.adjacency)
    log.info("Graph saved to %s (n=%d, edges=%d)", path, graph.n, graph.m)
    return path


def load_edge_list(path: str | Path, n: int | None = None) -> CSRGraph:
    """Load an undirected graph from a whitespace-separated edge list.

    Each non-comment line holds ``u v`` or ``u v w``. Lines starting with
    ``#`` are skipped. Vertex count defaults to max index + 1.
    """
    sources: list[int] = []
    targets: list[int] = []
    weights: list[float] = []
    with open(path) as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            fields = line.split()
            if len(fields) not in (2, 3):
                raise ValueError(
                    f"{path}:{lineno}: expected 'u v [w]', got {line!r}"
                )
            sources.append(int(fields[0]))
            targets.append(int(fields[1]))
            weights.append(float(fields[2]) if len(fields) == 3 else 1.0)

    if n is None:
        n = max(max(sources, default=-1), max(targets, default=-1)) + 1
    return graph_from_edges(
        n, np.array(sources), np.array(targets), np.array(weights)
    )


def load_graph(path: str | Path) -> CSRGraph:
    """Load a graph from ``.npz`` (scipy sparse) or a text edge list."""
    path = Path(path)
    if path.suffix == ".npz":
        graph = graph_from_adjacency(scipy.sparse.load_npz(str(path)))
    else:
        graph = load_edge_list(path)
    log.info("Graph loaded from %s (n=%d, edges=%d)", path, graph.n, graph.m)
    return graph
