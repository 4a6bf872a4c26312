"""Spectral partitioning entry points and partition quality analysis."""

from spectral_partition.partition.analysis import (
    PartitionAnalysis,
    analyze_partition,
    check_labels,
    compute_cut,
)
from spectral_partition.partition.spectral import (
    PartitionResult,
    partition,
    partition_with_config,
)
from spectral_partition.partition.status import (
    ConvergenceWarning,
    PartitionInputError,
    Status,
)

__all__ = [
    "ConvergenceWarning",
    "PartitionAnalysis",
    "PartitionInputError",
    "PartitionResult",
    "Status",
    "analyze_partition",
    "check_labels",
    "compute_cut",
    "partition",
    "partition_with_config",
]
