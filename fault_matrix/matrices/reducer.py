"""
Matrix reduction utilities.

This module provides submatrix views used when presenting a network
with a faulted bus removed.
"""

import logging

import numpy as np

from ..core.errors import check_bus_index

logger = logging.getLogger(__name__)


def select_buses(matrix: np.ndarray, buses: list[int]) -> np.ndarray:
    """
    Extract the submatrix for the given 1-based buses, in the given order.

    Args:
        matrix: Square bus matrix (Y or Z)
        buses: 1-based bus numbers to retain

    Returns:
        New len(buses) x len(buses) array
    """
    n = matrix.shape[0]
    indices = [check_bus_index(bus, n) for bus in buses]
    return matrix[np.ix_(indices, indices)]


def faulted_view(matrix: np.ndarray, fault_bus: int) -> np.ndarray:
    """
    Matrix with the row and column of the faulted bus omitted.

    The faulted bus is removed from the reduced view rather than grounded,
    so the result is (N-1) x (N-1). The input is left unmodified.

    Args:
        matrix: Square bus matrix (Y or Z)
        fault_bus: 1-based index of the faulted bus

    Returns:
        New (N-1) x (N-1) array
    """
    n = matrix.shape[0]
    check_bus_index(fault_bus, n)
    indices_to_keep = [bus for bus in range(1, n + 1) if bus != fault_bus]
    logger.debug("Fault view at bus %d keeps buses %s", fault_bus, indices_to_keep)
    return select_buses(matrix, indices_to_keep)
