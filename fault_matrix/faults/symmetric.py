"""
Balanced (three-phase) fault calculations.

This module provides:
- Bus fault voltages and current from a column of the Z-matrix
- Branch currents from post-fault voltages
- The modified admittance matrix for a fault in the middle of a line
- Source current injections and transfer impedances of source branches
"""

import logging
from typing import Sequence

import numpy as np

from .results import ThreePhaseFaultResult
from ..config import PREFAULT_VOLTAGE_PU, ZERO_TOL
from ..core.elements import Branch
from ..core.errors import BoundsError, ConfigurationError, check_bus_index

logger = logging.getLogger(__name__)


def branch_currents(
    Y: np.ndarray,
    voltages: np.ndarray,
    tol: float = ZERO_TOL,
) -> dict[tuple[int, int], complex]:
    """
    Currents through the series admittances between coupled buses.

        I_ij = (U[i] - U[j]) * Y[i][j]

    Y[i][j] is the off-diagonal entry, the negated series admittance.

    Args:
        Y: Admittance matrix
        voltages: Bus voltages (p.u.), index k-1 for bus k
        tol: Couplings with |Y[i][j]| below tol are skipped

    Returns:
        {(i, j): I_ij} for every coupled pair with i < j (1-based)
    """
    n = Y.shape[0]
    if voltages.shape != (n,):
        raise ConfigurationError(
            f"expected {n} bus voltages, got shape {voltages.shape}", "voltages"
        )

    currents = {}
    for i in range(n):
        for j in range(i + 1, n):
            if abs(Y[i, j]) < tol:
                continue
            currents[(i + 1, j + 1)] = complex((voltages[i] - voltages[j]) * Y[i, j])
    return currents


def three_phase_fault(
    Z: np.ndarray,
    bus: int,
    fault_impedance: complex = 0j,
    Y: np.ndarray | None = None,
    prefault_voltage: complex = PREFAULT_VOLTAGE_PU,
) -> ThreePhaseFaultResult:
    """
    Balanced fault at a single bus.

        I_f  = V / (Z[f][f] + Zf)
        U[i] = V - Z[i][f] * I_f

    With V = 1 p.u. this is U[i] = 1 - Z[i][f] / (Z[f][f] + Zf).

    Args:
        Z: Impedance matrix
        bus: 1-based faulted bus f
        fault_impedance: External fault impedance Zf (0 for a bolted fault)
        Y: Admittance matrix; when given, branch currents are computed too
        prefault_voltage: Uniform pre-fault voltage V (p.u.)

    Returns:
        ThreePhaseFaultResult
    """
    f = check_bus_index(bus, Z.shape[0])
    loop_impedance = Z[f, f] + fault_impedance
    if abs(loop_impedance) < ZERO_TOL:
        raise ConfigurationError(
            f"fault loop impedance Z[f][f] + Zf is zero at bus {bus}", "fault"
        )

    current = prefault_voltage / loop_impedance
    voltages = prefault_voltage - Z[:, f] * current

    currents = branch_currents(Y, voltages) if Y is not None else {}

    logger.info("Three-phase fault at bus %d: |If| = %.4f p.u.", bus, abs(current))
    return ThreePhaseFaultResult(
        bus=bus,
        fault_impedance=complex(fault_impedance),
        fault_current=complex(current),
        voltages=voltages,
        branch_currents=currents,
    )


def mid_line_fault_admittance(
    Y: np.ndarray,
    a: int,
    b: int,
    line_susceptance: float = 0.0,
    tol: float = ZERO_TOL,
) -> np.ndarray:
    """
    Admittance matrix seen from a fault in the middle of line a-b.

    Each half of the line now runs from its terminal to the grounded fault
    point, so the coupling disappears and its admittance moves to the
    diagonals, together with a quarter of the line charging:

        Y'[a][a] = Y[a][a] - Y[a][b] - j * 0.25 * B
        Y'[b][b] = Y[b][b] - Y[a][b] - j * 0.25 * B
        Y'[a][b] = Y'[b][a] = 0

    Args:
        Y: Admittance matrix (left unmodified)
        a, b: 1-based terminal buses of the line
        line_susceptance: Total charging susceptance B of the line (p.u.)
        tol: Minimum |Y[a][b]| for a and b to count as coupled

    Returns:
        Modified copy of Y
    """
    n = Y.shape[0]
    i = check_bus_index(a, n)
    j = check_bus_index(b, n)
    if i == j:
        raise BoundsError(f"a line needs two distinct buses, got {a} and {b}", bus=a)
    if abs(Y[i, j]) < tol:
        raise BoundsError(f"no line between buses {a} and {b}")

    Y_fault = Y.copy()
    quarter_charging = complex(0, 0.25 * line_susceptance)
    Y_fault[i, i] = Y[i, i] - Y[i, j] - quarter_charging
    Y_fault[j, j] = Y[j, j] - Y[i, j] - quarter_charging
    Y_fault[i, j] = 0
    Y_fault[j, i] = 0

    logger.debug("Mid-line fault on %d-%d (B = %s)", a, b, line_susceptance)
    return Y_fault


def find_line(branches: Sequence[Branch], a: int, b: int) -> Branch:
    """
    The single bus-to-bus branch between a and b, in either direction.

    Raises:
        BoundsError: if no such branch exists
        ConfigurationError: if several parallel branches connect a and b
    """
    matches = [
        branch for branch in branches
        if not branch.is_ground and set(branch.terminals) == {a, b} and a != b
    ]
    if not matches:
        raise BoundsError(f"no line between buses {a} and {b}")
    if len(matches) > 1:
        raise ConfigurationError(
            f"{len(matches)} parallel branches between buses {a} and {b}; "
            "a mid-line fault needs a single line",
            "fault",
        )
    return matches[0]


def source_current_injections(branches: Sequence[Branch], n_buses: int) -> np.ndarray:
    """
    Norton current injections of the source branches.

    Each source branch (EMF E behind impedance z, connected to ground)
    injects I = E / z at its bus. Several sources on one bus add up.

    Returns:
        Complex vector of length n_buses, index k-1 for bus k
    """
    injections = np.zeros(n_buses, dtype=complex)
    for branch in branches:
        if not branch.is_source:
            continue
        if not branch.is_ground:
            raise ConfigurationError("source branch must connect to ground", branch.label)
        k = check_bus_index(branch.bus, n_buses)
        # admittance raises ConfigurationError for a source without impedance
        injections[k] += branch.emf * branch.admittance
    return injections


def transfer_impedance(Z: np.ndarray, fault_bus: int, branch: Branch, tol: float = ZERO_TOL) -> complex:
    """
    Transfer impedance between a source branch and the fault bus.

        z_fi = Z[f][f] * z_i / Z[f][i]

    where z_i is the internal impedance of the source at bus i. The fault
    current contributed by the source is E_i / z_fi.

    Args:
        Z: Impedance matrix
        fault_bus: 1-based faulted bus f
        branch: Source (ground) branch at bus i
        tol: Minimum |Z[f][i]|

    Returns:
        Complex transfer impedance (p.u.)
    """
    n = Z.shape[0]
    f = check_bus_index(fault_bus, n)
    i = check_bus_index(branch.bus, n)
    if abs(Z[f, i]) < tol:
        raise ConfigurationError(
            f"bus {branch.bus} is not coupled to fault bus {fault_bus}", branch.label
        )
    return complex(Z[f, f] * branch.impedance / Z[f, i])
