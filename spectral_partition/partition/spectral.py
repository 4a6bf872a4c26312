"""Spectral graph partitioning pipeline.

Chains the numerical stages:
Laplacian operator -> restarted Lanczos -> whitened embedding -> k-means.

The result minimises (locally) the ratio-cut cost

    Cost = sum_i (edges cut by partition i) / (vertices in partition i)

and its status tells converged runs apart from runs that exhausted an
iteration budget. Either way the best available labels are returned.
"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np

from spectral_partition.clustering.embedding import build_embedding
from spectral_partition.clustering.kmeans import kmeans
from spectral_partition.config.experiment import PartitionConfig
from spectral_partition.graph.construction import count_components, validate_graph
from spectral_partition.graph.types import GraphView
from spectral_partition.linalg.lanczos import solve_smallest
from spectral_partition.linalg.operator import inverse_sqrt_degrees, laplacian_operator
from spectral_partition.partition.status import (
    ConvergenceWarning,
    PartitionInputError,
    Status,
)

log = logging.getLogger(__name__)


@dataclass
class PartitionResult:
    """Outputs of partition(); arrays are None on INVALID_INPUT."""

    status: Status
    parts: np.ndarray | None = None  # (n,) labels in [0, n_parts)
    eig_vals: np.ndarray | None = None  # (n_eig_vecs,) ascending
    eig_vecs: np.ndarray | None = None  # (n_eig_vecs, n)
    iters_lanczos: int = 0
    iters_kmeans: int = 0
    lanczos_converged: bool = False
    kmeans_converged: bool = False
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


def _check_buffer(
    buf: np.ndarray | None, shape: tuple[int, ...], name: str
) -> None:
    if buf is None:
        return
    if not isinstance(buf, np.ndarray):
        raise PartitionInputError(f"{name} must be a numpy array")
    if buf.shape != shape:
        raise PartitionInputError(
            f"{name} must have shape {shape}, got {buf.shape}"
        )
    if not buf.flags.writeable:
        raise PartitionInputError(f"{name} is read-only")


def _validate_arguments(
    graph: GraphView,
    n_parts: int,
    n_eig_vecs: int,
    max_iter_lanczos: int,
    restart_iter_lanczos: int,
    tol_lanczos: float,
    max_iter_kmeans: int,
    tol_kmeans: float,
) -> None:
    """Reject invalid arguments before any iteration.

    Raises:
        PartitionInputError: Describing the first problem found.
    """
    n = graph.n
    if n_parts < 1:
        raise PartitionInputError(f"n_parts must be >= 1, got {n_parts}")
    if n_parts > n:
        raise PartitionInputError(
            f"n_parts ({n_parts}) exceeds the vertex count ({n})"
        )
    if n_eig_vecs < 1:
        raise PartitionInputError(f"n_eig_vecs must be >= 1, got {n_eig_vecs}")
    if n_eig_vecs >= n:
        raise PartitionInputError(
            f"n_eig_vecs ({n_eig_vecs}) must be < n ({n})"
        )
    if max_iter_lanczos < 1 or max_iter_kmeans < 1:
        raise PartitionInputError(
            f"iteration budgets must be >= 1, got max_iter_lanczos="
            f"{max_iter_lanczos}, max_iter_kmeans={max_iter_kmeans}"
        )
    if restart_iter_lanczos < 2:
        raise PartitionInputError(
            f"restart_iter_lanczos must be >= 2, got {restart_iter_lanczos}"
        )
    if not tol_lanczos > 0 or not tol_kmeans >= 0:
        raise PartitionInputError(
            f"tolerances must be tol_lanczos > 0 and tol_kmeans >= 0, got "
            f"{tol_lanczos}, {tol_kmeans}"
        )
    errors = validate_graph(graph.adjacency)
    if errors:
        raise PartitionInputError("Malformed graph: " + "; ".join(errors))


def partition(
    graph: GraphView,
    n_parts: int,
    n_eig_vecs: int,
    max_iter_lanczos: int,
    restart_iter_lanczos: int,
    tol_lanczos: float,
    max_iter_kmeans: int,
    tol_kmeans: float,
    *,
    parts: np.ndarray | None = None,
    eig_vals: np.ndarray | None = None,
    eig_vecs: np.ndarray | None = None,
    normalized: bool = False,
    seed: int | None = None,
) -> PartitionResult:
    """Compute a spectral partition of a weighted undirected graph.

    Output buffers follow numpy's ``out=`` convention: when given, they are
    owned by the caller, must already have the right shape, and are written
    once at the end of the run. Otherwise fresh arrays are allocated. The
    returned result references whichever arrays were written.

    The returned eigenpairs are the n_eig_vecs smallest of the Laplacian,
    including the eigenvalue-0 mode; the constant direction is removed when
    the embedding is built. On a connected graph with n_eig_vecs == 1 that
    would leave nothing to cluster, so the Fiedler pair is also computed
    and embedded in place of the trivial one. k-means always fills every
    one of the n_parts labels.

    Args:
        graph: Weighted undirected graph.
        n_parts: Number of partitions, 1 <= n_parts <= n.
        n_eig_vecs: Embedding dimension, 1 <= n_eig_vecs < n.
        max_iter_lanczos: Operator application budget of the eigensolver.
        restart_iter_lanczos: Krylov basis size before implicit restart.
        tol_lanczos: Eigensolver residual threshold (relative to ||L||).
        max_iter_kmeans: k-means iteration budget.
        tol_kmeans: Minimum decrease of the k-means cost per iteration.
        parts: Optional int output buffer of shape (n,).
        eig_vals: Optional float output buffer of shape (n_eig_vecs,).
        eig_vecs: Optional float output buffer of shape (n_eig_vecs, n).
        normalized: Use the symmetric normalized Laplacian. The embedding then
            uses D^{-1/2} times the eigenvectors, which are returned unscaled.
        seed: Seed for the start vector and k-means++ seeding.

    Returns:
        PartitionResult with status SUCCESS, ITERATION_LIMIT or INVALID_INPUT.
    """
    try:
        _validate_arguments(
            graph,
            n_parts,
            n_eig_vecs,
            max_iter_lanczos,
            restart_iter_lanczos,
            tol_lanczos,
            max_iter_kmeans,
            tol_kmeans,
        )
        n = graph.n
        _check_buffer(parts, (n,), "parts")
        _check_buffer(eig_vals, (n_eig_vecs,), "eig_vals")
        _check_buffer(eig_vecs, (n_eig_vecs, n), "eig_vecs")
    except PartitionInputError as e:
        log.error("partition rejected input: %s", e)
        return PartitionResult(status=Status.INVALID_INPUT, message=str(e))

    components = count_components(graph)
    n_solve = n_eig_vecs
    if components == 1 and n_eig_vecs == 1 and n > 2:
        n_solve = 2
    log.info(
        "Partitioning graph (n=%d, edges=%d, components=%d) into %d parts "
        "with %d eigenvectors (%d computed)",
        graph.n,
        graph.m,
        components,
        n_parts,
        n_eig_vecs,
        n_solve,
    )
    rng = np.random.default_rng(seed)

    operator = laplacian_operator(graph, normalized=normalized)
    eig = solve_smallest(
        operator,
        n_solve,
        max_iter=max_iter_lanczos,
        restart_iter=restart_iter_lanczos,
        tol=tol_lanczos,
        rng=rng,
    )

    coords = eig.eigenvectors[n_solve - n_eig_vecs :]
    if normalized:
        # Random-walk coordinates D^{-1/2} u; the trivial mode becomes constant
        coords = coords * inverse_sqrt_degrees(graph, isolated=1.0)
    embedding = build_embedding(coords)
    km = kmeans(
        embedding, n_parts, max_iter=max_iter_kmeans, tol=tol_kmeans, rng=rng
    )

    if parts is None:
        parts = np.empty(n, dtype=np.int64)
    if eig_vals is None:
        eig_vals = np.empty(n_eig_vecs, dtype=np.float64)
    if eig_vecs is None:
        eig_vecs = np.empty((n_eig_vecs, n), dtype=np.float64)
    parts[...] = km.labels
    eig_vals[...] = eig.eigenvalues[:n_eig_vecs]
    eig_vecs[...] = eig.eigenvectors[:n_eig_vecs]

    limits = []
    if not eig.converged:
        limits.append(f"Lanczos reached max_iter={max_iter_lanczos}")
    if not km.converged:
        limits.append(f"k-means reached max_iter={max_iter_kmeans}")
    status = Status.ITERATION_LIMIT if limits else Status.SUCCESS

    log.info(
        "Partition finished: status=%s, lanczos_iters=%d, kmeans_iters=%d, "
        "sizes=%s",
        status.name,
        eig.iterations,
        km.iterations,
        np.bincount(km.labels, minlength=n_parts).tolist(),
    )

    return PartitionResult(
        status=status,
        parts=parts,
        eig_vals=eig_vals,
        eig_vecs=eig_vecs,
        iters_lanczos=eig.iterations,
        iters_kmeans=km.iterations,
        lanczos_converged=eig.converged,
        kmeans_converged=km.converged,
        message="; ".join(limits),
    )


def partition_with_config(
    graph: GraphView,
    config: PartitionConfig,
    *,
    parts: np.ndarray | None = None,
    eig_vals: np.ndarray | None = None,
    eig_vecs: np.ndarray | None = None,
) -> PartitionResult:
    """Run partition() with every parameter taken from a PartitionConfig."""
    return partition(
        graph,
        config.n_parts,
        config.n_eig_vecs,
        max_iter_lanczos=config.lanczos.max_iter,
        restart_iter_lanczos=config.lanczos.restart_iter,
        tol_lanczos=config.lanczos.tol,
        max_iter_kmeans=config.kmeans.max_iter,
        tol_kmeans=config.kmeans.tol,
        parts=parts,
        eig_vals=eig_vals,
        eig_vecs=eig_vecs,
        normalized=config.laplacian == "normalized",
        seed=config.seed,
    )
