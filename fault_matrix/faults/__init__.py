"""
Short-circuit calculations on solved bus matrices.
"""

from .results import (
    FaultType,
    SequenceFaultResult,
    ThreePhaseFaultResult,
)

from .symmetric import (
    branch_currents,
    find_line,
    mid_line_fault_admittance,
    source_current_injections,
    three_phase_fault,
    transfer_impedance,
)

from .sequence import (
    sequence_currents,
    sequence_fault,
)

__all__ = [
    # Results
    'FaultType',
    'SequenceFaultResult',
    'ThreePhaseFaultResult',

    # Balanced faults
    'branch_currents',
    'find_line',
    'mid_line_fault_admittance',
    'source_current_injections',
    'three_phase_fault',
    'transfer_impedance',

    # Unbalanced faults
    'sequence_currents',
    'sequence_fault',
]
