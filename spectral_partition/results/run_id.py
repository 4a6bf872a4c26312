"""Run ID generation with scannable parameter slug format."""

from datetime import datetime, timezone

from spectral_partition.config.experiment import PartitionConfig


def generate_run_id(config: PartitionConfig, n: int) -> str:
    """Generate a scannable run ID from the graph size and config.

    Format: n{n}_k{n_parts}_e{n_eig_vecs}_s{seed}_{YYYYMMDD}_{HHMMSS}
    Example: n200_k4_e4_s42_20261019_143012
    """
    ts = datetime.now(timezone.utc)
    return (
        f"n{n}"
        f"_k{config.n_parts}"
        f"_e{config.n_eig_vecs}"
        f"_s{config.seed}"
        f"_{ts.strftime('%Y%m%d_%H%M%S')}"
    )
