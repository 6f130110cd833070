"""
Fault analysis result containers.
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class FaultType(Enum):
    """Type of short circuit applied at the fault bus."""
    THREE_PHASE = "3ph"                 # Balanced fault, positive sequence only
    SINGLE_LINE_TO_GROUND = "lg"        # Phase a to ground
    LINE_TO_LINE = "ll"                 # Phases b and c
    DOUBLE_LINE_TO_GROUND = "llg"       # Phases b and c to ground


@dataclass(frozen=True)
class ThreePhaseFaultResult:
    """
    Balanced fault at a single bus.

    Attributes:
        bus: Faulted bus (1-based)
        fault_impedance: External fault impedance Zf (p.u.)
        fault_current: Current into the fault, V / (Z_ff + Zf) (p.u.)
        voltages: Post-fault voltage at every bus (p.u.), index k-1 for bus k
        branch_currents: (U[i] - U[j]) * Y[i][j] for each coupled pair i < j
    """
    bus: int
    fault_impedance: complex
    fault_current: complex
    voltages: np.ndarray
    branch_currents: dict[tuple[int, int], complex] = field(default_factory=dict)

    @property
    def fault_current_magnitude(self) -> float:
        return abs(self.fault_current)

    def voltage_at(self, bus: int) -> complex:
        return complex(self.voltages[bus - 1])


@dataclass(frozen=True)
class SequenceFaultResult:
    """
    Unbalanced fault combined from positive, negative and zero sequence networks.

    Attributes:
        fault_type: Type of fault
        fault_buses: Fault bus in each sequence network as (f1, f2, f0)
        fault_impedance: External fault impedance Zf (p.u.)
        sequence_currents: Fault currents [I0, I1, I2] (p.u.)
        phase_currents: Fault currents [Ia, Ib, Ic] (p.u.)
        sequence_voltages: 3 x N array, rows V0, V1, V2
        phase_voltages: 3 x N array, rows Va, Vb, Vc
    """
    fault_type: FaultType
    fault_buses: tuple[int, int, int]
    fault_impedance: complex
    sequence_currents: np.ndarray
    phase_currents: np.ndarray
    sequence_voltages: np.ndarray
    phase_voltages: np.ndarray

    @property
    def positive_sequence_current(self) -> complex:
        """I_fa(1)"""
        return complex(self.sequence_currents[1])

    @property
    def ground_current(self) -> complex:
        """Current returning through ground, 3 * I0."""
        return 3 * complex(self.sequence_currents[0])

    @property
    def fault_current(self) -> complex:
        """
        Current in the reference faulted phase.

        Phase a for three-phase and line-to-ground faults, phase b for
        faults involving phases b and c.
        """
        if self.fault_type in (FaultType.LINE_TO_LINE, FaultType.DOUBLE_LINE_TO_GROUND):
            return complex(self.phase_currents[1])
        return complex(self.phase_currents[0])

    def phase_voltages_at(self, bus: int) -> np.ndarray:
        """[Va, Vb, Vc] at a 1-based bus."""
        return self.phase_voltages[:, bus - 1]
