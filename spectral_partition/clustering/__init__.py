"""Spectral embedding construction and k-means clustering."""

from spectral_partition.clustering.embedding import (
    build_embedding,
    normalize_rows,
    whiten_columns,
)
from spectral_partition.clustering.kmeans import (
    KMeansResult,
    kmeans,
    kmeans_plus_plus,
    squared_distances,
    within_cluster_cost,
)

__all__ = [
    "KMeansResult",
    "build_embedding",
    "kmeans",
    "kmeans_plus_plus",
    "normalize_rows",
    "squared_distances",
    "whiten_columns",
    "within_cluster_cost",
]
