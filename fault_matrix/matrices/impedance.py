"""
Bus impedance matrix from LDU factors.

Each column j of Z solves L @ D @ U @ z = e_j by forward elimination,
diagonal scaling and back substitution, so Y is never inverted directly.
"""

import logging

import numpy as np

from .factorization import LDUFactors
from ..core.errors import check_bus_index

logger = logging.getLogger(__name__)


def solve_impedance_column(factors: LDUFactors, bus: int) -> np.ndarray:
    """
    Compute column `bus` of the Z-matrix.

        f[i] = 0 for i < j, f[j] = 1, f[i] = -sum_{k=j}^{i-1} L[i][k] * f[k] for i > j
        h[i] = f[i] / D[i][i] for i >= j, else 0
        Z[i][j] = h[i] - sum_{k=i+1}^{N} U[i][k] * Z[k][j]   for i = N..1

    Args:
        factors: LDU factors of the Y-matrix
        bus: 1-based column (bus) index j

    Returns:
        Complex vector Z[:, j]
    """
    L, U = factors.L, factors.U
    d = np.diag(factors.D)
    n = factors.n_buses
    j = check_bus_index(bus, n)

    # Forward elimination
    f = np.zeros(n, dtype=complex)
    f[j] = 1.0
    for i in range(j + 1, n):
        f[i] = -(L[i, j:i] @ f[j:i])

    h = np.zeros(n, dtype=complex)
    h[j:] = f[j:] / d[j:]

    # Back substitution
    z = np.zeros(n, dtype=complex)
    for i in range(n - 1, -1, -1):
        z[i] = h[i] - U[i, i + 1:] @ z[i + 1:]

    return z


def build_impedance_matrix(factors: LDUFactors) -> np.ndarray:
    """
    Assemble the full Z-matrix one column at a time.

    Args:
        factors: LDU factors of the Y-matrix

    Returns:
        Complex N x N Z-matrix with Y @ Z == I
    """
    n = factors.n_buses
    Z = np.zeros((n, n), dtype=complex)
    for bus in range(1, n + 1):
        Z[:, bus - 1] = solve_impedance_column(factors, bus)

    logger.debug("Built %dx%d impedance matrix", n, n)
    return Z
