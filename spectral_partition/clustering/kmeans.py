"""Lloyd's k-means with k-means++ seeding, specialised to spectral embeddings.

Labels are reproducible: seeding draws from a numpy Generator and the
assignment step breaks distance ties towards the lowest centroid index.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

log = logging.getLogger(__name__)


@dataclass
class KMeansResult:
    """Outcome of a k-means run."""

    labels: np.ndarray  # (n,) cluster index per point
    centroids: np.ndarray  # (k, d)
    iterations: int
    converged: bool
    cost: float  # total within-cluster squared distance
    cost_history: list[float] = field(default_factory=list)


def squared_distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Squared Euclidean distances, shape (n_points, n_centroids)."""
    d2 = (
        np.sum(points**2, axis=1)[:, None]
        - 2.0 * points @ centroids.T
        + np.sum(centroids**2, axis=1)[None, :]
    )
    np.maximum(d2, 0.0, out=d2)
    return d2


def within_cluster_cost(
    points: np.ndarray, centroids: np.ndarray, labels: np.ndarray
) -> float:
    """Total squared distance from every point to its assigned centroid."""
    diff = points - centroids[labels]
    return float(np.sum(diff * diff))


def kmeans_plus_plus(
    points: np.ndarray, n_clusters: int, rng: np.random.Generator
) -> np.ndarray:
    """Choose initial centroids with k-means++ seeding.

    The first centroid is a uniformly random row; each further centroid is a
    row drawn with probability proportional to its squared distance to the
    nearest centroid chosen so far. When every remaining distance is zero
    (fewer distinct rows than clusters), the lowest-index unchosen row is
    taken instead.

    Args:
        points: Array of shape (n, d).
        n_clusters: Number of centroids, at most n.
        rng: numpy random Generator.

    Returns:
        Centroid array of shape (n_clusters, d).
    """
    n = points.shape[0]
    chosen = [int(rng.integers(n))]
    closest = squared_distances(points, points[chosen]).ravel()

    for _ in range(1, n_clusters):
        total = closest.sum()
        if total > 0:
            idx = int(rng.choice(n, p=closest / total))
        else:
            unchosen = np.setdiff1d(np.arange(n), chosen)
            idx = int(unchosen[0])
        chosen.append(idx)
        closest = np.minimum(
            closest, squared_distances(points, points[idx : idx + 1]).ravel()
        )

    return points[chosen].copy()


def _fill_empty_clusters(
    points: np.ndarray,
    centroids: np.ndarray,
    labels: np.ndarray,
    n_clusters: int,
) -> int:
    """Give every empty cluster one point, taken from a cluster of size > 1.

    Empty clusters take the points farthest from their own centroid, lowest
    index first on ties. Points at zero distance qualify, so duplicate rows
    still end up in separate clusters. The moved point becomes the cluster's
    centroid, which never raises the within-cluster cost. With n_clusters <= n
    a donor always exists. ``labels`` and ``centroids`` are updated in place.

    Returns:
        The number of points moved.
    """
    counts = np.bincount(labels, minlength=n_clusters)
    empty = np.flatnonzero(counts == 0)
    if len(empty) == 0:
        return 0
    dist = np.sum((points - centroids[labels]) ** 2, axis=1)
    order = np.argsort(-dist, kind="stable")
    pos = 0
    for c in empty:
        # donors only shrink, so points skipped once stay ineligible
        while counts[labels[order[pos]]] < 2:
            pos += 1
        idx = order[pos]
        counts[labels[idx]] -= 1
        counts[c] = 1
        labels[idx] = c
        centroids[c] = points[idx]
        pos += 1
    return len(empty)


def kmeans(
    points: np.ndarray,
    n_clusters: int,
    max_iter: int,
    tol: float,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> KMeansResult:
    """Cluster rows of ``points`` into n_clusters groups.

    Each iteration assigns every point to its nearest centroid (ties to the
    lowest index), then moves each centroid to the mean of its points.
    After every assignment, empty clusters take a point from a larger
    cluster (see _fill_empty_clusters), so all n_clusters labels are used.
    Iteration stops when the within-cluster cost drops by less than tol,
    when labels stop changing, or after max_iter iterations.

    Args:
        points: Embedding of shape (n, d).
        n_clusters: Number of clusters, 1 <= n_clusters <= n.
        max_iter: Iteration budget.
        tol: Minimum absolute decrease of total within-cluster cost.
        seed: Seed used when rng is not given.
        rng: numpy random Generator for seeding.

    Returns:
        KMeansResult; converged is False when max_iter ran out first.

    Raises:
        ValueError: If n_clusters is outside [1, n].
    """
    points = np.asarray(points, dtype=np.float64)
    n = points.shape[0]
    if not 1 <= n_clusters <= n:
        raise ValueError(f"n_clusters must be in [1, {n}], got {n_clusters}")
    if rng is None:
        rng = np.random.default_rng(seed)

    centroids = kmeans_plus_plus(points, n_clusters, rng)
    labels = np.argmin(squared_distances(points, centroids), axis=1)
    _fill_empty_clusters(points, centroids, labels, n_clusters)
    cost = within_cluster_cost(points, centroids, labels)
    history: list[float] = []
    converged = False
    iterations = 0

    for iterations in range(1, max_iter + 1):
        # Update step
        counts = np.bincount(labels, minlength=n_clusters)
        sums = np.zeros_like(centroids)
        np.add.at(sums, labels, points)
        centroids = sums / counts[:, None]

        # Assignment step
        new_labels = np.argmin(squared_distances(points, centroids), axis=1)
        moved = _fill_empty_clusters(points, centroids, new_labels, n_clusters)
        new_cost = within_cluster_cost(points, centroids, new_labels)
        history.append(new_cost)
        log.debug(
            "k-means iteration %d: cost=%.6e (filled %d empty)",
            iterations,
            new_cost,
            moved,
        )

        unchanged = np.array_equal(new_labels, labels)
        decrease = cost - new_cost
        labels, cost = new_labels, new_cost
        if unchanged or decrease < tol:
            converged = True
            break

    if not converged:
        log.warning(
            "k-means hit max_iter=%d without meeting tol=%.3e (cost %.6e)",
            max_iter,
            tol,
            cost,
        )

    return KMeansResult(
        labels=labels.astype(np.int64),
        centroids=centroids,
        iterations=iterations,
        converged=converged,
        cost=cost,
        cost_history=history,
    )
