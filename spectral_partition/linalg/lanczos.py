"""Restarted Lanczos eigensolver for the smallest eigenpairs of a symmetric operator.

Builds an orthonormal Krylov basis from repeated operator applications,
projects the operator onto it, and extracts Ritz pairs from the small
projected matrix with scipy.linalg.eigh. Memory is bounded by the restart
size: once the basis holds ``restart_iter`` vectors the solver compresses it
to the Ritz vectors of the smallest Ritz values, carries the current residual
direction over as the next basis vector, and resumes. Every new Krylov vector
is fully re-orthogonalized against the basis.

Convergence uses the Lanczos residual identity
    ||A x_i - theta_i x_i|| = |beta_last * y_i[-1]|
so no extra operator applications are needed to test it.
"""

import logging
from dataclasses import dataclass

import numpy as np
import scipy.linalg
from scipy.sparse.linalg import aslinearoperator

from spectral_partition.linalg.utils import (
    fix_signs,
    orthogonalize,
    random_orthogonal_vector,
    random_unit_vector,
)

log = logging.getLogger(__name__)

BREAKDOWN_TOL = 1e-10  # relative to the ||A|| estimate


@dataclass
class LanczosResult:
    """Smallest eigenpairs found by the solver.

    Eigenvectors are stored as rows so ``eigenvectors[i]`` pairs with
    ``eigenvalues[i]``.
    """

    eigenvalues: np.ndarray  # (k,) ascending
    eigenvectors: np.ndarray  # (k, n), unit-norm rows
    iterations: int  # operator applications performed
    converged: bool
    residuals: np.ndarray  # (k,) estimated residual norms
    restarts: int


def solve_smallest(
    operator,
    n_eig_vecs: int,
    max_iter: int,
    restart_iter: int,
    tol: float,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> LanczosResult:
    """Compute the n_eig_vecs smallest eigenpairs of a symmetric operator.

    Args:
        operator: Symmetric linear map; anything scipy's aslinearoperator
            accepts (LinearOperator, sparse matrix, dense array).
        n_eig_vecs: Number of eigenpairs wanted, 1 <= n_eig_vecs < n.
        max_iter: Budget of operator applications. The first basis always
            grows to n_eig_vecs vectors, even if that exceeds the budget.
        restart_iter: Maximum Krylov basis size before a restart. Raised to
            n_eig_vecs + 1 if smaller, capped at n.
        tol: Residual threshold relative to max(1, ||A|| estimate).
        seed: Seed for the start vector when rng is not given.
        rng: numpy random Generator (start vector and breakdown vectors).

    Returns:
        LanczosResult. When the budget runs out before every wanted pair
        converges, converged is False and the current Ritz pairs are
        returned as best estimates.

    Raises:
        ValueError: If n_eig_vecs is outside [1, n).
    """
    op = aslinearoperator(operator)
    n = op.shape[0]
    k = n_eig_vecs
    if not 1 <= k < n:
        raise ValueError(f"n_eig_vecs must be in [1, {n}), got {k}")
    if rng is None:
        rng = np.random.default_rng(seed)

    m = min(n, max(restart_iter, k + 1))
    if restart_iter < k + 1:
        log.warning(
            "restart_iter=%d too small for %d eigenpairs, using %d",
            restart_iter,
            k,
            m,
        )

    V = np.zeros((n, m), dtype=np.float64)  # Krylov basis, columns
    H = np.zeros((m, m), dtype=np.float64)  # projected operator V^T A V
    v = random_unit_vector(n, rng)  # next basis vector
    beta = 0.0  # coupling between the last basis vector and v
    size = 0
    anorm = 0.0
    n_matvec = 0
    restarts = 0

    while True:
        # Grow the basis up to m vectors
        while size < m:
            if n_matvec >= max_iter and size >= k:
                break
            V[:, size] = v
            w = np.asarray(op.matvec(v), dtype=np.float64).ravel()
            n_matvec += 1
            anorm = max(anorm, float(np.linalg.norm(w)))
            H[size, size] = v @ w
            w = orthogonalize(w, V[:, : size + 1])
            beta = float(np.linalg.norm(w))
            size += 1

            if beta > BREAKDOWN_TOL * anorm:
                v = w / beta
            else:
                # Invariant subspace: continue from a fresh direction, coupling 0
                beta = 0.0
                fresh = random_orthogonal_vector(V[:, :size], rng)
                if fresh is None:
                    break
                v = fresh
                log.debug("Lanczos breakdown at basis size %d", size)

            if size < m:
                H[size, size - 1] = H[size - 1, size] = beta

        theta, Y = scipy.linalg.eigh(H[:size, :size])
        residuals = np.abs(beta * Y[size - 1, :])
        threshold = tol * max(1.0, anorm)
        converged = size == n or bool(np.all(residuals[:k] <= threshold))

        if converged or n_matvec >= max_iter:
            break

        # Restart: keep the smallest Ritz directions plus a buffer
        keep = min(size - 1, k + (size - k) // 2)
        V[:, :keep] = V[:, :size] @ Y[:, :keep]
        coupling = beta * Y[size - 1, :keep]
        H[:] = 0.0
        H[np.arange(keep), np.arange(keep)] = theta[:keep]
        H[keep, :keep] = coupling
        H[:keep, keep] = coupling
        size = keep
        restarts += 1
        log.debug(
            "Lanczos restart %d after %d matvecs: %d/%d converged, "
            "max residual %.3e",
            restarts,
            n_matvec,
            int(np.sum(residuals[:k] <= threshold)),
            k,
            float(residuals[:k].max()),
        )

    eigenvectors = (V[:, :size] @ Y[:, :k]).T
    eigenvectors /= np.linalg.norm(eigenvectors, axis=1, keepdims=True)

    if converged:
        log.info(
            "Lanczos converged: %d eigenpairs in %d matvecs (%d restarts)",
            k,
            n_matvec,
            restarts,
        )
    else:
        log.warning(
            "Lanczos hit max_iter=%d with %d/%d eigenpairs converged "
            "(max residual %.3e, threshold %.3e)",
            max_iter,
            int(np.sum(residuals[:k] <= threshold)),
            k,
            float(residuals[:k].max()),
            threshold,
        )

    return LanczosResult(
        eigenvalues=theta[:k].copy(),
        eigenvectors=fix_signs(eigenvectors),
        iterations=n_matvec,
        converged=converged,
        residuals=residuals[:k].copy(),
        restarts=restarts,
    )
