"""Partition configuration: frozen, hashable, serializable dataclasses."""

from spectral_partition.config.experiment import (
    LAPLACIAN_KINDS,
    GraphConfig,
    KMeansConfig,
    LanczosConfig,
    PartitionConfig,
)
from spectral_partition.config.defaults import DEFAULT_CONFIG
from spectral_partition.config.hashing import (
    config_hash,
    full_config_hash,
    graph_config_hash,
)
from spectral_partition.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "LAPLACIAN_KINDS",
    "GraphConfig",
    "KMeansConfig",
    "LanczosConfig",
    "PartitionConfig",
    "DEFAULT_CONFIG",
    "config_hash",
    "full_config_hash",
    "graph_config_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
]
