# quickframe/kernel/solve.py
"""Linear solve of the reduced free-DOF system, and support reactions."""

import logging
from typing import Dict, Optional, Tuple, Union

import numpy as np
from scipy import sparse
from scipy.sparse import linalg as spla

from ..config import CONFIG
from ..errors import SingularSystemError
from .assemble import stiffness_map_to_sparse

logger = logging.getLogger(__name__)

StiffnessLike = Union[sparse.spmatrix, np.ndarray, Dict[Tuple[int, int], float]]


def _as_csc(stiffness: StiffnessLike, n: int) -> sparse.csc_matrix:
    if isinstance(stiffness, dict):
        return stiffness_map_to_sparse(stiffness, n)
    if sparse.issparse(stiffness):
        return sparse.csc_matrix(stiffness, dtype=float)
    return sparse.csc_matrix(np.asarray(stiffness, dtype=float))


def solve_for_displacements(
    stiffness: StiffnessLike,
    forces: np.ndarray,
    pivot_tol: Optional[float] = None,
) -> np.ndarray:
    """
    Solve K·Δ = F over the free DOFs only.

    The stiffness must already be reduced to the free DOFs (see
    kernel.dof.reduce_to_free); fixed DOFs are not part of this system.

    Args:
        stiffness: Free-DOF stiffness (sparse matrix, dense array or
            stiffness map keyed by free-DOF index pairs)
        forces: Forces acting at the free DOFs (n_free,)
        pivot_tol: Smallest allowed |pivot| relative to the largest one;
            defaults to CONFIG.pivot_tol

    Returns:
        Δ: Displacements at the free DOFs (n_free,)

    Raises:
        ValueError: No free DOFs, non-finite forces, or stiffness/forces
            size mismatch
        SingularSystemError: The factorization failed or hit a zero pivot
            (under-constrained structure). The solver's own message is
            included verbatim.
    """
    F = np.asarray(forces, dtype=float).ravel()
    n = F.shape[0]
    if n == 0:
        raise ValueError("no free degrees of freedom to solve")
    if not np.all(np.isfinite(F)):
        raise ValueError("force vector contains non-finite values")

    K = _as_csc(stiffness, n)
    if K.shape != (n, n):
        raise ValueError(f"stiffness shape {K.shape} doesn't match force vector length {n}")

    tol = CONFIG.pivot_tol if pivot_tol is None else pivot_tol

    logger.info("solving %d free DOFs (%d stored entries)", n, K.nnz)
    try:
        lu = spla.splu(K)
    except RuntimeError as e:
        # SuperLU reports e.g. "Factor is exactly singular"
        raise SingularSystemError(f"singular system: {e}") from e

    pivots = np.abs(lu.U.diagonal())
    if pivots.max() == 0.0 or pivots.min() <= tol * pivots.max():
        raise SingularSystemError(
            f"singular system: smallest pivot {pivots.min():.3e} vs largest "
            f"{pivots.max():.3e}. Check supports."
        )

    d = lu.solve(F)
    if not np.all(np.isfinite(d)):
        raise SingularSystemError("singular system: solution contains non-finite values")

    return d


def compute_reactions(K: StiffnessLike, d: np.ndarray, F: np.ndarray) -> np.ndarray:
    """R = K·d - F over all world DOFs (nonzero only at supports)."""
    d = np.asarray(d, dtype=float)
    if isinstance(K, dict):
        K = stiffness_map_to_sparse(K, d.shape[0])
    return np.asarray(K @ d).ravel() - np.asarray(F, dtype=float)
