"""Run record schema validation, writing, and run ID generation."""

from spectral_partition.results.run_id import generate_run_id
from spectral_partition.results.schema import load_result, validate_result, write_result

__all__ = [
    "generate_run_id",
    "load_result",
    "validate_result",
    "write_result",
]
