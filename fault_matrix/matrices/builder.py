"""
Admittance matrix construction.

This module provides functions for building the bus admittance matrix
(Y-bus) from per-unit branches. Bus k (1-based) occupies row/column k-1.
"""

import logging
from typing import Sequence

import numpy as np

from ..core.elements import Branch
from ..core.errors import ConfigurationError
from ..core.normalizer import ensure_same_base_mva, validate_bus_numbering

logger = logging.getLogger(__name__)


def get_bus_count(branches: Sequence[Branch]) -> int:
    """Number of buses N referenced by a branch list (dense numbering enforced)."""
    return validate_bus_numbering(branches)


def build_admittance_matrix(
    branches: Sequence[Branch],
    n_buses: int | None = None,
) -> np.ndarray:
    """
    Build the admittance (Y) matrix from per-unit branches.

    For each branch:
    - line charging: j*B/2 is taken off each terminal diagonal
    - ground branch: y = 1/Z is taken off the diagonal of its bus
    - bus-to-bus branch: -y is added to Y[i, j] and Y[j, i]; parallel
      branches accumulate

    Every diagonal is then replaced by the negated sum of its whole row,
    so that Y_ii = sum of series admittances + ground admittances + j*B/2
    terms at bus i.

    Args:
        branches: Per-unit branches (all on the same system base)
        n_buses: Bus count N; derived from the branches when omitted

    Returns:
        Complex N x N Y-matrix
    """
    ensure_same_base_mva(branches)
    if n_buses is None:
        n_buses = validate_bus_numbering(branches)

    Y = np.zeros((n_buses, n_buses), dtype=complex)

    for branch in branches:
        for node in branch.terminals:
            if node < 0 or node > n_buses:
                raise ConfigurationError(
                    f"bus {node} is outside the {n_buses}-bus network", branch.label
                )

        if branch.shunt_admittance != 0:
            half_charging = complex(0, branch.shunt_admittance / 2)
            for node in branch.terminals:
                if node != 0:
                    Y[node - 1, node - 1] -= half_charging

        if branch.is_ground:
            if branch.is_source and not branch.has_impedance:
                raise ConfigurationError("source branch has no impedance", branch.label)
            if branch.has_impedance:
                k = branch.bus - 1
                Y[k, k] -= branch.admittance
            continue

        if branch.node1 == branch.node2:
            raise ConfigurationError("both terminals are the same bus", branch.label)

        # Raises ConfigurationError for a zero series impedance
        Yij = -branch.admittance
        i = branch.node1 - 1
        j = branch.node2 - 1
        Y[i, j] += Yij
        Y[j, i] += Yij

    # Diagonal from the accumulated row: Yii = -(-y_i0 + Yi1 + Yi2 + ...)
    np.fill_diagonal(Y, -Y.sum(axis=1))

    logger.debug("Built %dx%d admittance matrix from %d branches", n_buses, n_buses, len(branches))
    return Y


def get_shunt_admittances(branches: Sequence[Branch], n_buses: int) -> np.ndarray:
    """
    Total admittance to ground at every bus.

    Sum of ground-branch admittances and half line-charging susceptances.
    For a Y-matrix built from the same branches, each row sums to this value.
    """
    shunts = np.zeros(n_buses, dtype=complex)
    for branch in branches:
        if branch.shunt_admittance != 0:
            for node in branch.terminals:
                if node != 0:
                    shunts[node - 1] += complex(0, branch.shunt_admittance / 2)
        if branch.is_ground and branch.has_impedance:
            shunts[branch.bus - 1] += branch.admittance
    return shunts
