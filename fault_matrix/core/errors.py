"""
Exception types raised by the network pipeline.
"""

import numpy as np


class FaultMatrixError(Exception):
    """Base class for all errors raised by fault_matrix."""


class ConfigurationError(FaultMatrixError, ValueError):
    """
    Malformed or inconsistent network description.

    Raised before assembly for missing or zero ratings, non-dense bus
    numbering, mixed per-unit bases or an asymmetric admittance matrix.

    Attributes:
        component: Name of the offending component, if known
    """

    def __init__(self, message: str, component: str | None = None):
        if component:
            message = f"{component}: {message}"
        super().__init__(message)
        self.component = component


class SingularNetworkError(FaultMatrixError, ArithmeticError):
    """
    Zero pivot met during LDU factorization.

    Indicates an isolated bus or a part of the network that has no path
    to the reference bus.

    Attributes:
        bus: 1-based index of the bus whose pivot vanished
    """

    def __init__(self, bus: int, pivot: complex = 0j):
        super().__init__(
            f"Zero pivot at bus {bus} (D = {pivot}); "
            f"the network is singular or bus {bus} is disconnected"
        )
        self.bus = bus
        self.pivot = pivot


class BoundsError(FaultMatrixError, IndexError):
    """
    Bus or line reference outside the network.

    Attributes:
        bus: The offending bus index (or None when a line is missing)
    """

    def __init__(self, message: str, bus: int | None = None):
        super().__init__(message)
        self.bus = bus


def check_bus_index(bus, n_buses: int) -> int:
    """
    Validate a 1-based bus number and return its 0-based array index.

    Raises:
        BoundsError: if bus is not an integer in 1..n_buses
    """
    if isinstance(bus, bool) or not isinstance(bus, (int, np.integer)):
        raise BoundsError(f"bus index must be an integer, got {bus!r}")
    if not 1 <= bus <= n_buses:
        raise BoundsError(f"bus {bus} is outside 1..{n_buses}", bus=int(bus))
    return int(bus) - 1
