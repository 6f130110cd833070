"""
Bus matrix construction, factorization and reduction functions.
"""

from .builder import (
    build_admittance_matrix,
    get_bus_count,
    get_shunt_admittances,
)

from .factorization import (
    LDUFactors,
    check_symmetry,
    ldu_decompose,
)

from .impedance import (
    build_impedance_matrix,
    solve_impedance_column,
)

from .reducer import (
    faulted_view,
    select_buses,
)

from .diagnostics import (
    check_factorization,
    check_inverse,
    diagnose_network,
    print_diagnostics,
)

__all__ = [
    # Builder
    'build_admittance_matrix',
    'get_bus_count',
    'get_shunt_admittances',

    # Factorization
    'LDUFactors',
    'check_symmetry',
    'ldu_decompose',

    # Impedance
    'build_impedance_matrix',
    'solve_impedance_column',

    # Reducer
    'faulted_view',
    'select_buses',

    # Diagnostics
    'check_factorization',
    'check_inverse',
    'diagnose_network',
    'print_diagnostics',
]
