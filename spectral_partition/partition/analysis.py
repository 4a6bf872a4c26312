"""Edge cut and ratio-cut cost of an arbitrary vertex partition.

    cost = sum_p cut(p) / |p|

where cut(p) is the weight of edges with exactly one endpoint in partition p.
Every cut edge is counted once in edge_cut and twice in sum_p cut(p).
"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np

from spectral_partition.graph.construction import validate_graph
from spectral_partition.graph.types import GraphView
from spectral_partition.partition.status import (
    ConvergenceWarning,
    PartitionInputError,
    Status,
)

log = logging.getLogger(__name__)


@dataclass
class PartitionAnalysis:
    """Quality metrics of a partition; metric fields are None on INVALID_INPUT."""

    status: Status
    edge_cut: float | None = None
    cost: float | None = None
    cut_per_part: np.ndarray | None = None  # (n_parts,) weight leaving each part
    sizes: np.ndarray | None = None  # (n_parts,) vertex count per part
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status.ok

    def raise_for_status(self) -> None:
        """Raise PartitionInputError for INVALID_INPUT, warn for ITERATION_LIMIT."""
        if self.status is Status.INVALID_INPUT:
            raise PartitionInputError(self.message)
        if self.status is Status.ITERATION_LIMIT:
            warnings.warn(self.message, ConvergenceWarning, stacklevel=2)


def check_labels(parts, n: int, n_parts: int) -> np.ndarray:
    """Validate a label array and return it as int64.

    Raises:
        PartitionInputError: On wrong length, non-integer values or labels
            outside [0, n_parts).
    """
    if n_parts < 1:
        raise PartitionInputError(f"n_parts must be >= 1, got {n_parts}")
    arr = np.asarray(parts)
    if arr.ndim != 1 or arr.shape[0] != n:
        raise PartitionInputError(
            f"parts must have shape ({n},), got {arr.shape}"
        )
    if n and not np.issubdtype(arr.dtype, np.integer):
        if not np.issubdtype(arr.dtype, np.floating) or not np.all(
            arr == np.round(arr)
        ):
            raise PartitionInputError(
                f"parts must hold integer labels, got dtype {arr.dtype}"
            )
    labels = arr.astype(np.int64)
    bad = (labels < 0) | (labels >= n_parts)
    if np.any(bad):
        first = int(np.flatnonzero(bad)[0])
        raise PartitionInputError(
            f"{int(bad.sum())} label(s) outside [0, {n_parts}), "
            f"e.g. parts[{first}] = {labels[first]}"
        )
    return labels


def compute_cut(
    graph: GraphView, n_parts: int, labels: np.ndarray
) -> tuple[float, float, np.ndarray, np.ndarray]:
    """Single pass over the stored edges; labels must already be valid.

    Returns:
        (edge_cut, cost, cut_per_part, sizes).
    """
    adj = graph.adjacency.tocoo()
    crossing = labels[adj.row] != labels[adj.col]
    # Each undirected edge appears once per direction; attribute the row side
    cut_per_part = np.bincount(
        labels[adj.row[crossing]],
        weights=adj.data[crossing],
        minlength=n_parts,
    ).astype(np.float64)
    edge_cut = float(adj.data[crossing].sum()) / 2.0
    sizes = np.bincount(labels, minlength=n_parts)

    nonempty = sizes > 0
    if not np.all(nonempty):
        log.debug(
            "%d empty partition(s) contribute 0 to the cost",
            int((~nonempty).sum()),
        )
    cost = float(np.sum(cut_per_part[nonempty] / sizes[nonempty]))
    return edge_cut, cost, cut_per_part, sizes


def analyze_partition(graph: GraphView, n_parts: int, parts) -> PartitionAnalysis:
    """Compute edge cut and cost of a caller-supplied partition.

    Independent of how ``parts`` was produced. Invalid arguments produce an
    INVALID_INPUT result instead of an exception.

    Args:
        graph: Weighted undirected graph.
        n_parts: Number of partitions.
        parts: Length-n integer labels in [0, n_parts).

    Returns:
        PartitionAnalysis with status SUCCESS or INVALID_INPUT.
    """
    try:
        errors = validate_graph(graph.adjacency)
        if errors:
            raise PartitionInputError("Malformed graph: " + "; ".join(errors))
        labels = check_labels(parts, graph.n, n_parts)
    except PartitionInputError as e:
        log.error("analyze_partition rejected input: %s", e)
        return PartitionAnalysis(status=Status.INVALID_INPUT, message=str(e))

    edge_cut, cost, cut_per_part, sizes = compute_cut(graph, n_parts, labels)
    return PartitionAnalysis(
        status=Status.SUCCESS,
        edge_cut=edge_cut,
        cost=cost,
        cut_per_part=cut_per_part,
        sizes=sizes,
    )
