"""Spectral partitioning of weighted undirected graphs.

Lanczos eigenvectors of the graph Laplacian are embedded, clustered with
k-means, and scored with the ratio-cut cost.
"""

from spectral_partition.graph import CSRGraph, graph_from_adjacency, graph_from_edges
from spectral_partition.partition import (
    PartitionAnalysis,
    PartitionInputError,
    PartitionResult,
    Status,
    analyze_partition,
    partition,
    partition_with_config,
)

__version__ = "0.1.0"

__all__ = [
    "CSRGraph",
    "PartitionAnalysis",
    "PartitionInputError",
    "PartitionResult",
    "Status",
    "analyze_partition",
    "graph_from_adjacency",
    "graph_from_edges",
    "partition",
    "partition_with_config",
]
