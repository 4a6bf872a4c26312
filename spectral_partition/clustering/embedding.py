"""Spectral embedding: eigenvectors -> whitened, row-normalized vertex coordinates."""

import logging

import numpy as np

log = logging.getLogger(__name__)

ZERO_EPS = 1e-12
FLAT_TOL = 1e-3  # spread relative to column RMS below which a column is constant


def whiten_columns(
    X: np.ndarray, eps: float = ZERO_EPS, flat_tol: float = FLAT_TOL
) -> np.ndarray:
    """Shift every column to zero mean and scale it to unit standard deviation.

    A column with (near-)zero spread, such as the constant eigenvector of a
    connected graph, carries no cluster information and is set to zeros.
    Eigenvectors from an iterative solver are only constant up to the solver
    tolerance, so the spread is measured relative to the column's RMS.

    Args:
        X: Matrix of shape (n, d).
        eps: Absolute standard deviation below which a column is flat.
        flat_tol: Relative standard deviation (std / RMS) below which a
            column is flat.

    Returns:
        New whitened matrix of shape (n, d).
    """
    rms = np.sqrt(np.mean(X * X, axis=0))
    X = X - X.mean(axis=0, keepdims=True)
    std = X.std(axis=0)
    flat = (std < eps) | (std < flat_tol * rms)
    if np.any(flat):
        log.debug("Dropping %d constant embedding column(s)", int(flat.sum()))
    scale = np.where(flat, 0.0, 1.0 / np.where(flat, 1.0, std))
    return X * scale


def normalize_rows(X: np.ndarray, eps: float = ZERO_EPS) -> np.ndarray:
    """Scale each row to unit Euclidean norm; rows with norm < eps stay as-is."""
    norms = np.linalg.norm(X, axis=1)
    small = norms < eps
    if np.any(small):
        log.debug("%d embedding row(s) have near-zero norm", int(small.sum()))
    return X / np.where(small, 1.0, norms)[:, None]


def build_embedding(eigenvectors: np.ndarray, eps: float = ZERO_EPS) -> np.ndarray:
    """Assemble the per-vertex embedding from solver eigenvectors.

    Args:
        eigenvectors: Array of shape (n_eig_vecs, n), one eigenvector per row.
        eps: Threshold for treating spreads and norms as zero.

    Returns:
        Embedding of shape (n, n_eig_vecs).
    """
    X = np.asarray(eigenvectors, dtype=np.float64).T
    return normalize_rows(whiten_columns(X, eps), eps)
