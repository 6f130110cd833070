"""
Core network elements and classes.
"""

from .errors import (
    FaultMatrixError,
    ConfigurationError,
    SingularNetworkError,
    BoundsError,
    check_bus_index,
)

from .elements import (
    Branch,
    ComponentElement,
    BranchComponent,
    ShuntComponent,
    LineComponent,
    TransformerComponent,
    GeneratorComponent,
    LoadComponent,
)

from .normalizer import (
    ensure_common_base,
    ensure_same_base_mva,
    normalize_components,
    normalize_network,
    validate_bus_numbering,
)

# Imported last: network depends on the matrices and faults packages
from .network import (
    NetworkDescription,
    NetworkMatrices,
    Network,
    SequenceNetworks,
    mid_line_fault,
    solve_network,
)

__all__ = [
    'FaultMatrixError',
    'ConfigurationError',
    'SingularNetworkError',
    'BoundsError',
    'check_bus_index',
    'Branch',
    'ComponentElement',
    'BranchComponent',
    'ShuntComponent',
    'LineComponent',
    'TransformerComponent',
    'GeneratorComponent',
    'LoadComponent',
    'ensure_common_base',
    'ensure_same_base_mva',
    'normalize_components',
    'normalize_network',
    'validate_bus_numbering',
    'NetworkDescription',
    'NetworkMatrices',
    'Network',
    'SequenceNetworks',
    'mid_line_fault',
    'solve_network',
]
