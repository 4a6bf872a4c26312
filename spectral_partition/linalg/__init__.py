"""Matrix-free Laplacian operators and the restarted Lanczos eigensolver."""

from spectral_partition.linalg.lanczos import LanczosResult, solve_smallest
from spectral_partition.linalg.operator import inverse_sqrt_degrees, laplacian_operator

__all__ = [
    "LanczosResult",
    "inverse_sqrt_degrees",
    "laplacian_operator",
    "solve_smallest",
]
