"""
Fault Matrix Library
====================

A Python library for short-circuit analysis with bus admittance and
impedance matrices.

Features:
- Per-unit normalization of lines, transformers, generators and motor loads
- Y-matrix assembly with line charging and ground branches
- Symmetric complex LDU factorization
- Z-matrix by column-wise forward/back substitution (no matrix inverse)
- Three-phase bus faults, branch currents and mid-line faults
- Unbalanced faults from positive, negative and zero sequence networks

Quick Start
-----------

Using the high-level Network class:

    from fault_matrix import Network, description_from_mapping

    # Network description as parsed from JSON
    desc = description_from_mapping({
        "SB": 100, "Vav": 115,
        "circuits": [{"node_1": 1, "node_2": 2, "r": 0.1, "x": 0.4, "b": 2.8e-6, "l": 50}],
        "power_generators": [{"node": 1, "Sn": 150, "xd": 0.2}],
    })
    net = Network(desc)

    # Build Y, its LDU factors and Z
    net.build_matrices()

    # Solid three-phase fault at bus 2
    result = net.three_phase_fault(2)
    print(abs(result.fault_current))

Unbalanced faults:

    from fault_matrix import SequenceNetworks, FaultType

    seq = SequenceNetworks(positive, negative, zero, f1=3)
    result = seq.fault(FaultType.SINGLE_LINE_TO_GROUND)

Logging
-------
This library uses Python's standard logging module. By default, no output is shown.
To enable logging:

    import logging
    logging.getLogger("fault_matrix").setLevel(logging.INFO)

For detailed debug output:

    logging.getLogger("fault_matrix").setLevel(logging.DEBUG)
"""

import logging

__version__ = "0.1.0"

# Configure library logging (NullHandler prevents "No handler found" warnings)
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Core classes
from .core import (
    Network,
    SequenceNetworks,
    NetworkDescription,
    NetworkMatrices,
    Branch,
    LineComponent,
    TransformerComponent,
    GeneratorComponent,
    LoadComponent,
    normalize_network,
    mid_line_fault,
    solve_network,
)

# Errors
from .core.errors import (
    FaultMatrixError,
    ConfigurationError,
    SingularNetworkError,
    BoundsError,
)

# Matrix functions
from .matrices import (
    LDUFactors,
    build_admittance_matrix,
    ldu_decompose,
    build_impedance_matrix,
    solve_impedance_column,
    faulted_view,
    diagnose_network,
)

# Fault calculations
from .faults import (
    FaultType,
    ThreePhaseFaultResult,
    SequenceFaultResult,
    three_phase_fault,
    branch_currents,
    mid_line_fault_admittance,
    sequence_fault,
    source_current_injections,
    transfer_impedance,
)

# Mapping adapter
from .adapters import (
    description_from_mapping,
    branches_from_mapping,
    sequence_from_mapping,
)

# Utilities
from .utils import (
    matrix_to_dataframe,
    fault_result_to_dataframe,
    sequence_result_to_dataframe,
)

__all__ = [
    # Version
    '__version__',

    # Core classes
    'Network',
    'SequenceNetworks',
    'NetworkDescription',
    'NetworkMatrices',
    'Branch',
    'LineComponent',
    'TransformerComponent',
    'GeneratorComponent',
    'LoadComponent',
    'normalize_network',
    'mid_line_fault',
    'solve_network',

    # Errors
    'FaultMatrixError',
    'ConfigurationError',
    'SingularNetworkError',
    'BoundsError',

    # Matrix functions
    'LDUFactors',
    'build_admittance_matrix',
    'ldu_decompose',
    'build_impedance_matrix',
    'solve_impedance_column',
    'faulted_view',
    'diagnose_network',

    # Fault calculations
    'FaultType',
    'ThreePhaseFaultResult',
    'SequenceFaultResult',
    'three_phase_fault',
    'branch_currents',
    'mid_line_fault_admittance',
    'sequence_fault',
    'source_current_injections',
    'transfer_impedance',

    # Mapping adapter
    'description_from_mapping',
    'branches_from_mapping',
    'sequence_from_mapping',

    # Utilities
    'matrix_to_dataframe',
    'fault_result_to_dataframe',
    'sequence_result_to_dataframe',
]
