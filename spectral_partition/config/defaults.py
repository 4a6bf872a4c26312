"""Default configuration — single source of truth for partition parameters."""

from spectral_partition.config.experiment import PartitionConfig

# All-default values: n_parts=2, n_eig_vecs=2, Lanczos max_iter=4000,
# restart_iter=64, tol=1e-6, k-means max_iter=200, tol=1e-8, seed=42.
DEFAULT_CONFIG = PartitionConfig()
