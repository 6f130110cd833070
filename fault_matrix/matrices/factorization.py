"""
Symmetric LDU factorization of complex admittance matrices.

Y = L @ D @ U with L unit lower triangular, D diagonal and U unit upper
triangular. Since Y is symmetric (not Hermitian), U is the plain transpose
of L and only one triangle is computed.
"""

import logging
from dataclasses import dataclass

import numpy as np

from ..config import PIVOT_TOL, SYMMETRY_TOL
from ..core.errors import ConfigurationError, SingularNetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LDUFactors:
    """
    Factors of a symmetric Y-matrix.

    Attributes:
        L: Unit lower triangular matrix (N x N)
        D: Diagonal matrix (N x N)
        U: Unit upper triangular matrix (N x N), equal to L.T
    """
    L: np.ndarray
    D: np.ndarray
    U: np.ndarray

    @property
    def n_buses(self) -> int:
        return self.L.shape[0]

    @property
    def pivots(self) -> np.ndarray:
        """Diagonal of D as a vector."""
        return np.diag(self.D).copy()

    def reconstruct(self) -> np.ndarray:
        """Return L @ D @ U."""
        return self.L @ self.D @ self.U


def check_symmetry(Y: np.ndarray, tol: float = SYMMETRY_TOL) -> float:
    """
    Verify Y[i, j] == Y[j, i] within a relative tolerance.

    Returns:
        Largest absolute asymmetry |Y - Y.T|

    Raises:
        ConfigurationError: if Y is not square or not symmetric
    """
    if Y.ndim != 2 or Y.shape[0] != Y.shape[1]:
        raise ConfigurationError(f"admittance matrix must be square, got shape {Y.shape}", "Y-matrix")

    asymmetry = float(np.max(np.abs(Y - Y.T))) if Y.size else 0.0
    scale = max(1.0, float(np.max(np.abs(Y)))) if Y.size else 1.0
    if asymmetry > tol * scale:
        i, j = np.unravel_index(np.argmax(np.abs(Y - Y.T)), Y.shape)
        raise ConfigurationError(
            f"admittance matrix is not symmetric: |Y[{i + 1},{j + 1}] - Y[{j + 1},{i + 1}]| = {asymmetry:.3e}",
            "Y-matrix",
        )
    return asymmetry


def ldu_decompose(
    Y: np.ndarray,
    pivot_tol: float = PIVOT_TOL,
    symmetry_tol: float = SYMMETRY_TOL,
) -> LDUFactors:
    """
    Factor a symmetric complex matrix as Y = L @ D @ U.

    Recurrence (1-based, k < i):
        D[i][i] = Y[i][i] - sum L[i][k] * U[k][i] * D[k][k]
        L[j][i] = (Y[j][i] - sum L[j][k] * U[k][i] * D[k][k]) / D[i][i]   for j > i
        U[i][j] = L[j][i]

    Args:
        Y: Symmetric N x N admittance matrix (left unmodified)
        pivot_tol: Pivots with |D[i][i]| below pivot_tol * max|Y| are treated as zero
        symmetry_tol: Relative tolerance for the symmetry precondition

    Returns:
        LDUFactors(L, D, U)

    Raises:
        ConfigurationError: if Y is not square and symmetric
        SingularNetworkError: on a zero pivot, with the 1-based bus index
    """
    check_symmetry(Y, symmetry_tol)

    n = Y.shape[0]
    L = np.eye(n, dtype=complex)
    d = np.zeros(n, dtype=complex)
    threshold = pivot_tol * max(1.0, float(np.max(np.abs(Y)))) if n else pivot_tol

    for i in range(n):
        # U[k, i] == L[i, k]
        d[i] = Y[i, i] - np.sum(L[i, :i] * L[i, :i] * d[:i])
        if abs(d[i]) <= threshold:
            raise SingularNetworkError(bus=i + 1, pivot=complex(d[i]))

        if i + 1 < n:
            L[i + 1:, i] = (Y[i + 1:, i] - L[i + 1:, :i] @ (L[i, :i] * d[:i])) / d[i]

    logger.debug("LDU factorization of %dx%d matrix, min |pivot| = %.3e", n, n, np.min(np.abs(d)) if n else 0.0)
    return LDUFactors(L=L, D=np.diag(d), U=L.T.copy())
