"""
Network wrapper classes for fault analysis.

This module provides a high-level Network class that encapsulates the
whole pipeline of the fault_matrix library (normalization, Y-matrix
assembly, LDU factorization, Z-matrix solution and fault calculations),
and a SequenceNetworks class combining three such pipelines for
unbalanced faults.
"""

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .elements import (
    Branch,
    GeneratorComponent,
    LineComponent,
    LoadComponent,
    TransformerComponent,
)
from .errors import ConfigurationError, check_bus_index
from .normalizer import normalize_network, validate_bus_numbering
from ..config import DEFAULT_BASE_MVA, PIVOT_TOL, SYMMETRY_TOL
from ..faults.results import FaultType, SequenceFaultResult, ThreePhaseFaultResult
from ..faults.sequence import sequence_fault
from ..faults.symmetric import (
    find_line,
    mid_line_fault_admittance,
    source_current_injections,
    three_phase_fault,
    transfer_impedance,
)
from ..matrices.builder import build_admittance_matrix
from ..matrices.diagnostics import diagnose_network, print_diagnostics
from ..matrices.factorization import LDUFactors, ldu_decompose
from ..matrices.impedance import build_impedance_matrix
from ..matrices.reducer import faulted_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkDescription:
    """
    Raw network model as supplied by a loader.

    Attributes:
        base_mva: System base power SB (MVA)
        average_kv: Network-wide average voltage Vav (kV); components with
            their own base_kv ignore it
        lines, transformers, generators, loads: Component records
        name: Optional network label
    """
    base_mva: float = DEFAULT_BASE_MVA
    average_kv: float | None = None
    lines: tuple[LineComponent, ...] = ()
    transformers: tuple[TransformerComponent, ...] = ()
    generators: tuple[GeneratorComponent, ...] = ()
    loads: tuple[LoadComponent, ...] = ()
    name: str = ""

    def __post_init__(self):
        for attr in ('lines', 'transformers', 'generators', 'loads'):
            object.__setattr__(self, attr, tuple(getattr(self, attr)))

    @property
    def n_components(self) -> int:
        return len(self.lines) + len(self.transformers) + len(self.generators) + len(self.loads)


@dataclass(frozen=True)
class NetworkMatrices:
    """
    Results of one Assembler -> Factorizer -> Solver run.

    The arrays are marked read-only; derived matrices (for example the
    mid-line fault admittance matrix) are always new copies.
    """
    branches: tuple[Branch, ...]
    n_buses: int
    Y: np.ndarray
    factors: LDUFactors
    Z: np.ndarray = field(repr=False)

    def __post_init__(self):
        for array in (self.Y, self.Z, self.factors.L, self.factors.D, self.factors.U):
            array.setflags(write=False)


def solve_network(
    branches: Sequence[Branch],
    pivot_tol: float = PIVOT_TOL,
    symmetry_tol: float = SYMMETRY_TOL,
) -> NetworkMatrices:
    """
    Run assembly, factorization and the impedance solution on a branch list.

    Args:
        branches: Per-unit branches with dense 1-based bus numbering
        pivot_tol: Singular pivot threshold for the factorization
        symmetry_tol: Allowed asymmetry of the Y-matrix

    Returns:
        NetworkMatrices
    """
    branches = tuple(branches)
    n_buses = validate_bus_numbering(branches)
    Y = build_admittance_matrix(branches, n_buses)
    factors = ldu_decompose(Y, pivot_tol=pivot_tol, symmetry_tol=symmetry_tol)
    Z = build_impedance_matrix(factors)
    logger.info("Solved %d-bus network (%d branches)", n_buses, len(branches))
    return NetworkMatrices(branches=branches, n_buses=n_buses, Y=Y, factors=factors, Z=Z)


class Network:
    """
    High-level wrapper for short-circuit analysis of one network.

    This class provides a convenient interface for:
    - Normalizing component records to per-unit branches
    - Building the Y-matrix, its LDU factors and the Z-matrix
    - Three-phase bus and mid-line faults
    - Source current injections and transfer impedances
    - Network diagnostics
    """

    def __init__(
        self,
        description: NetworkDescription | None = None,
        branches: Sequence[Branch] | None = None,
    ):
        """
        Initialize the Network from a description or a pre-normalized branch list.

        Args:
            description: Raw network model, normalized on construction
            branches: Per-unit branches, used as they are
        """
        if (description is None) == (branches is None):
            raise ValueError("Pass exactly one of description or branches")

        self.description = description
        if description is not None:
            self.branches = normalize_network(description)
        else:
            self.branches = list(branches)
            validate_bus_numbering(self.branches)

        # Set by build_matrices()
        self.matrices: NetworkMatrices | None = None

    @classmethod
    def from_branches(cls, branches: Sequence[Branch]) -> "Network":
        """Create a Network from per-unit branches, bypassing normalization."""
        return cls(branches=branches)

    @property
    def name(self) -> str:
        return self.description.name if self.description is not None else ""

    def build_matrices(
        self,
        pivot_tol: float = PIVOT_TOL,
        symmetry_tol: float = SYMMETRY_TOL,
    ) -> NetworkMatrices:
        """
        Build the Y-matrix, its LDU factors and the Z-matrix.

        Args:
            pivot_tol: Singular pivot threshold for the factorization
            symmetry_tol: Allowed asymmetry of the Y-matrix

        Returns:
            The stored NetworkMatrices
        """
        self.matrices = solve_network(self.branches, pivot_tol=pivot_tol, symmetry_tol=symmetry_tol)
        return self.matrices

    def _require_matrices(self) -> NetworkMatrices:
        if self.matrices is None:
            raise RuntimeError("Must call build_matrices() first")
        return self.matrices

    @property
    def n_buses(self) -> int:
        """Number of buses in the network."""
        if self.matrices is not None:
            return self.matrices.n_buses
        return validate_bus_numbering(self.branches)

    @property
    def n_branches(self) -> int:
        return len(self.branches)

    @property
    def n_sources(self) -> int:
        """Number of branches with a source EMF (generators and motor loads)."""
        return sum(1 for b in self.branches if b.is_source)

    @property
    def Y(self) -> np.ndarray:
        return self._require_matrices().Y

    @property
    def factors(self) -> LDUFactors:
        return self._require_matrices().factors

    @property
    def Z(self) -> np.ndarray:
        return self._require_matrices().Z

    def three_phase_fault(self, bus: int, fault_impedance: complex = 0j) -> ThreePhaseFaultResult:
        """
        Balanced fault at a bus, including branch currents.

        Args:
            bus: 1-based faulted bus
            fault_impedance: External fault impedance Zf

        Returns:
            ThreePhaseFaultResult
        """
        matrices = self._require_matrices()
        return three_phase_fault(matrices.Z, bus, fault_impedance=fault_impedance, Y=matrices.Y)

    def mid_line_fault(self, a: int, b: int) -> np.ndarray:
        """Modified copy of Y for a fault in the middle of line a-b."""
        return mid_line_fault(self, a, b)

    def faulted_view(self, bus: int, matrix: str = "Y") -> np.ndarray:
        """
        Y- or Z-matrix with the faulted bus omitted.

        Args:
            bus: 1-based faulted bus
            matrix: "Y" or "Z"
        """
        if matrix == "Y":
            return faulted_view(self.Y, bus)
        if matrix == "Z":
            return faulted_view(self.Z, bus)
        raise ValueError(f"matrix must be 'Y' or 'Z', got {matrix!r}")

    def source_currents(self) -> np.ndarray:
        """Norton current injections E / z of all sources, per bus."""
        return source_current_injections(self.branches, self.n_buses)

    def transfer_impedances(self, fault_bus: int) -> dict[str, complex]:
        """
        Transfer impedance from every source to the fault bus.

        Args:
            fault_bus: 1-based faulted bus

        Returns:
            {source label: z_fi}
        """
        Z = self.Z
        return {
            branch.label: transfer_impedance(Z, fault_bus, branch)
            for branch in self.branches
            if branch.is_source
        }

    def diagnose(self, print_results: bool = True) -> dict:
        """
        Run network diagnostics to identify potential issues.

        This is useful for debugging SingularNetworkError during factorization.
        Matrices are included when build_matrices() has already succeeded.

        Args:
            print_results: If True, print formatted diagnostic report

        Returns:
            Dictionary with all diagnostic results
        """
        if self.matrices is not None:
            diag = diagnose_network(
                self.branches, self.matrices.n_buses,
                Y=self.matrices.Y, factors=self.matrices.factors, Z=self.matrices.Z,
            )
        else:
            diag = diagnose_network(self.branches, self.n_buses)

        if print_results:
            print_diagnostics(diag)

        return diag


def mid_line_fault(network: Network, a: int, b: int) -> np.ndarray:
    """
    Modified admittance matrix for a fault in the middle of line a-b.

    The line charging susceptance is taken from the network's branch list.

    Args:
        network: Network with built matrices
        a, b: 1-based terminal buses of the line

    Returns:
        Modified copy of network.Y
    """
    Y = network.Y
    check_bus_index(a, Y.shape[0])
    check_bus_index(b, Y.shape[0])
    line = find_line(network.branches, a, b)
    return mid_line_fault_admittance(Y, a, b, line_susceptance=line.shunt_admittance)


class SequenceNetworks:
    """
    Positive, negative and zero sequence networks of one system.

    The three networks share bus numbering but are normalized, assembled
    and solved independently; they are combined only in fault().
    """

    def __init__(
        self,
        positive: Network,
        negative: Network,
        zero: Network,
        f1: int,
        f2: int | None = None,
        f0: int | None = None,
    ):
        """
        Args:
            positive, negative, zero: Sequence networks
            f1: 1-based fault bus in the positive sequence network
            f2: Fault bus in the negative sequence network (defaults to f1)
            f0: Fault bus in the zero sequence network (defaults to f1)
        """
        self.positive = positive
        self.negative = negative
        self.zero = zero
        self.f1 = f1
        self.f2 = f1 if f2 is None else f2
        self.f0 = f1 if f0 is None else f0

    @property
    def networks(self) -> tuple[Network, Network, Network]:
        return (self.positive, self.negative, self.zero)

    def build_matrices(self) -> None:
        """Run the three pipelines one after another."""
        for network in self.networks:
            network.build_matrices()

        sizes = {network.n_buses for network in self.networks}
        if len(sizes) > 1:
            raise ConfigurationError(
                f"sequence networks must share bus numbering, got sizes {sorted(sizes)}",
                "sequence networks",
            )

    def fault(
        self,
        fault_type: FaultType = FaultType.SINGLE_LINE_TO_GROUND,
        fault_impedance: complex = 0j,
    ) -> SequenceFaultResult:
        """
        Unbalanced fault at the configured fault buses.

        Matrices are built on first use.

        Args:
            fault_type: Type of fault
            fault_impedance: External fault impedance Zf

        Returns:
            SequenceFaultResult
        """
        if any(network.matrices is None for network in self.networks):
            self.build_matrices()

        return sequence_fault(
            self.positive.Z, self.negative.Z, self.zero.Z,
            self.f1, self.f2, self.f0,
            fault_type=fault_type,
            fault_impedance=fault_impedance,
        )
