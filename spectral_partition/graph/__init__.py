"""Weighted undirected graphs: CSR storage, validation, generation and I/O."""

from spectral_partition.graph.construction import (
    count_components,
    graph_from_adjacency,
    graph_from_edges,
    validate_graph,
)
from spectral_partition.graph.io import load_edge_list, load_graph, save_graph
from spectral_partition.graph.planted import (
    block_assignments,
    build_probability_matrix,
    generate_planted_partition,
    sample_adjacency,
)
from spectral_partition.graph.types import CSRGraph, GraphView

__all__ = [
    "CSRGraph",
    "GraphView",
    "block_assignments",
    "build_probability_matrix",
    "count_components",
    "generate_planted_partition",
    "graph_from_adjacency",
    "graph_from_edges",
    "load_edge_list",
    "load_graph",
    "sample_adjacency",
    "save_graph",
    "validate_graph",
]
