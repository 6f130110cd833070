"""
Unbalanced faults through symmetrical components.

The positive, negative and zero sequence networks are built and solved
independently. Only their Thevenin impedances at the fault bus and their
Z-matrix columns are combined here:

    V1 = V - Z1[:, f1] * I1
    V2 =   - Z2[:, f2] * I2
    V0 =   - Z0[:, f0] * I0

Phase quantities follow from [a, b, c] = A @ [0, 1, 2] with
A = [[1, 1, 1], [1, a^2, a], [1, a, a^2]] and a = exp(j*2*pi/3).
"""

import logging

import numpy as np

from .results import FaultType, SequenceFaultResult
from ..config import PREFAULT_VOLTAGE_PU, ZERO_TOL
from ..core.errors import ConfigurationError, check_bus_index

logger = logging.getLogger(__name__)

a = np.exp(2j * np.pi / 3)
a2 = a * a

# Symmetrical component transform, phase = A @ sequence
A = np.array([
    [1, 1, 1],
    [1, a2, a],
    [1, a, a2],
])


def sequence_currents(
    z1: complex,
    z2: complex,
    z0: complex,
    fault_type: FaultType = FaultType.SINGLE_LINE_TO_GROUND,
    fault_impedance: complex = 0j,
    prefault_voltage: complex = PREFAULT_VOLTAGE_PU,
) -> np.ndarray:
    """
    Sequence fault currents from the Thevenin impedances at the fault bus.

    Args:
        z1, z2, z0: Z1[f1][f1], Z2[f2][f2], Z0[f0][f0]
        fault_type: Type of fault
        fault_impedance: External fault impedance Zf
        prefault_voltage: Pre-fault voltage at the fault bus (p.u.)

    Returns:
        Array [I0, I1, I2]
    """
    zf = fault_impedance
    v = prefault_voltage

    if fault_type == FaultType.THREE_PHASE:
        i0, i1, i2 = 0j, _divide(v, z1 + zf), 0j

    elif fault_type == FaultType.SINGLE_LINE_TO_GROUND:
        i1 = _divide(v, z0 + z1 + z2 + 3 * zf)
        i0 = i2 = i1

    elif fault_type == FaultType.LINE_TO_LINE:
        i1 = _divide(v, z1 + z2 + zf)
        i0, i2 = 0j, -i1

    elif fault_type == FaultType.DOUBLE_LINE_TO_GROUND:
        z0_total = z0 + 3 * zf
        parallel = z2 + z0_total
        i1 = _divide(v, z1 + _divide(z2 * z0_total, parallel))
        i0 = -i1 * z2 / parallel
        i2 = -i1 * z0_total / parallel

    else:
        raise ConfigurationError(f"unknown fault type {fault_type!r}", "fault")

    return np.array([i0, i1, i2], dtype=complex)


def _divide(numerator: complex, denominator: complex) -> complex:
    if abs(denominator) < ZERO_TOL:
        raise ConfigurationError("fault loop impedance is zero", "fault")
    return numerator / denominator


def sequence_fault(
    Z1: np.ndarray,
    Z2: np.ndarray,
    Z0: np.ndarray,
    f1: int,
    f2: int | None = None,
    f0: int | None = None,
    fault_type: FaultType = FaultType.SINGLE_LINE_TO_GROUND,
    fault_impedance: complex = 0j,
    prefault_voltage: complex = PREFAULT_VOLTAGE_PU,
) -> SequenceFaultResult:
    """
    Unbalanced fault combined from three sequence impedance matrices.

    For a bolted line-to-ground fault, I1 = 1 / (Z1ff + Z2ff + Z0ff) and
    the fault current is 3 * I1.

    Args:
        Z1, Z2, Z0: Positive, negative and zero sequence Z-matrices
        f1: 1-based fault bus in the positive sequence network
        f2: Fault bus in the negative sequence network (defaults to f1)
        f0: Fault bus in the zero sequence network (defaults to f1)
        fault_type: Type of fault
        fault_impedance: External fault impedance Zf
        prefault_voltage: Uniform pre-fault voltage (p.u.)

    Returns:
        SequenceFaultResult
    """
    f2 = f1 if f2 is None else f2
    f0 = f1 if f0 is None else f0

    if not (Z1.shape == Z2.shape == Z0.shape):
        raise ConfigurationError(
            f"sequence networks differ in size: {Z1.shape}, {Z2.shape}, {Z0.shape}",
            "sequence networks",
        )

    n = Z1.shape[0]
    k1 = check_bus_index(f1, n)
    k2 = check_bus_index(f2, n)
    k0 = check_bus_index(f0, n)

    currents = sequence_currents(
        Z1[k1, k1], Z2[k2, k2], Z0[k0, k0],
        fault_type=fault_type,
        fault_impedance=fault_impedance,
        prefault_voltage=prefault_voltage,
    )
    i0, i1, i2 = currents

    voltages = np.vstack([
        -Z0[:, k0] * i0,
        prefault_voltage - Z1[:, k1] * i1,
        -Z2[:, k2] * i2,
    ])

    result = SequenceFaultResult(
        fault_type=fault_type,
        fault_buses=(f1, f2, f0),
        fault_impedance=complex(fault_impedance),
        sequence_currents=currents,
        phase_currents=A @ currents,
        sequence_voltages=voltages,
        phase_voltages=A @ voltages,
    )

    logger.info(
        "%s fault at bus %d: I1 = %s, |If| = %.4f p.u.",
        fault_type.name, f1, complex(i1), abs(result.fault_current),
    )
    return result
