"""Shared vector kernels: random starts, Gram-Schmidt, safe normalization."""

import numpy as np


def random_unit_vector(n: int, rng: np.random.Generator) -> np.ndarray:
    """Standard-normal random vector scaled to unit Euclidean norm."""
    v = rng.standard_normal(n)
    return v / np.linalg.norm(v)


def orthogonalize(w: np.ndarray, basis: np.ndarray) -> np.ndarray:
    """Remove the components of w along the columns of an orthonormal basis.

    Classical Gram-Schmidt applied twice (DGKS); a single pass loses
    orthogonality once the Krylov basis has converged directions in it.

    Args:
        w: Vector of length n.
        basis: Orthonormal columns, shape (n, j). j may be 0.

    Returns:
        New vector orthogonal to every basis column.
    """
    if basis.shape[1] == 0:
        return w.copy()
    for _ in range(2):
        w = w - basis @ (basis.T @ w)
    return w


def safe_normalize(x: np.ndarray, eps: float = 1e-12) -> tuple[np.ndarray, float]:
    """Scale x to unit norm unless its norm is below eps.

    Returns:
        (vector, norm). Near-zero vectors come back unchanged.
    """
    norm = float(np.linalg.norm(x))
    if norm < eps:
        return x, norm
    return x / norm, norm


def random_orthogonal_vector(
    basis: np.ndarray, rng: np.random.Generator, max_tries: int = 8
) -> np.ndarray | None:
    """Random unit vector orthogonal to an orthonormal basis.

    Returns None when the basis already spans the whole space.
    """
    n, j = basis.shape
    if j >= n:
        return None
    for _ in range(max_tries):
        v = orthogonalize(random_unit_vector(n, rng), basis)
        v, norm = safe_normalize(v, eps=1e-8)
        if norm >= 1e-8:
            return v
    return None


def fix_signs(vectors: np.ndarray) -> np.ndarray:
    """Flip each row so its largest-magnitude entry is positive."""
    if vectors.size == 0:
        return vectors
    idx = np.argmax(np.abs(vectors), axis=1)
    signs = np.sign(vectors[np.arange(vectors.shape[0]), idx])
    signs[signs == 0] = 1.0
    return vectors * signs[:, None]
