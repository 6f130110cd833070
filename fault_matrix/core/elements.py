"""
Element definitions for power system network components.

This module contains:
- Branch, the uniform per-unit two-terminal representation every
  component is reduced to before assembly
- Component records (lines, transformers, generators, loads) carrying
  raw nameplate data and the per-unit formula that turns them into a Branch
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .errors import ConfigurationError
from ..config import GENERATOR_EMF_PU, LOAD_EMF_PU


@dataclass(frozen=True)
class Branch:
    """
    Two-terminal per-unit impedance, optionally with a source EMF.

    A terminal equal to 0 is the reference (ground) bus. A branch with
    exactly one ground terminal is a shunt element (generator or load
    reactance, grounding impedance).

    Attributes:
        node1, node2: Bus indices (1..N, or 0 for ground)
        resistance: Series resistance (p.u.)
        reactance: Series reactance (p.u.)
        shunt_admittance: Total line-charging susceptance (p.u.); half of it
            is applied at each terminal during assembly
        emf: Source EMF behind the series impedance (p.u.), 0 for passive branches
        name: Optional label of the originating component
        base_mva: System base the values are expressed on (None if unknown)
    """
    node1: int
    node2: int
    resistance: float = 0.0
    reactance: float = 0.0
    shunt_admittance: float = 0.0
    emf: float = 0.0
    name: str = ""
    base_mva: float | None = None

    @property
    def impedance(self) -> complex:
        """Series impedance Z = R + jX (p.u.)"""
        return complex(self.resistance, self.reactance)

    @property
    def has_impedance(self) -> bool:
        return self.resistance != 0 or self.reactance != 0

    @property
    def admittance(self) -> complex:
        """Series admittance y = 1/Z (p.u.)"""
        if not self.has_impedance:
            raise ConfigurationError("series impedance is zero", self.label)
        return 1 / self.impedance

    @property
    def is_ground(self) -> bool:
        """True when exactly one terminal is the reference bus."""
        return (self.node1 == 0) != (self.node2 == 0)

    @property
    def is_source(self) -> bool:
        return self.emf != 0

    @property
    def bus(self) -> int:
        """Non-ground terminal of a ground branch."""
        if not self.is_ground:
            raise ValueError(f"Branch '{self.label}' is not connected to ground")
        return self.node1 if self.node1 != 0 else self.node2

    @property
    def terminals(self) -> tuple[int, int]:
        return (self.node1, self.node2)

    @property
    def label(self) -> str:
        return self.name or f"branch {self.node1}-{self.node2}"


def _require_positive(value: float | None, quantity: str, component: str) -> float:
    """Return value, rejecting missing, zero or negative ratings."""
    if value is None:
        raise ConfigurationError(f"{quantity} is missing", component)
    if value <= 0:
        raise ConfigurationError(f"{quantity} must be positive, got {value}", component)
    return value


@dataclass
class ComponentElement(ABC):
    """Abstract base class for raw component records."""
    name: str

    @abstractmethod
    def to_branch(self, base_mva: float, average_kv: float | None = None) -> Branch:
        """
        Convert the record into a per-unit Branch on the system base.

        Args:
            base_mva: System base power SB in MVA
            average_kv: Network-wide average voltage Vav in kV, used when the
                record carries no base voltage of its own

        Returns:
            Branch in per-unit on (base_mva, base voltage)
        """
        pass

    @property
    @abstractmethod
    def nodes(self) -> tuple[int, ...]:
        """Bus indices the component connects to."""
        pass

    def resolve_base_kv(self, average_kv: float | None) -> float:
        """
        Base voltage VB for this component.

        A per-component base (newer network descriptions) takes precedence
        over the network-wide average voltage (older descriptions).
        """
        base_kv = getattr(self, "base_kv", None)
        if base_kv is None:
            base_kv = average_kv
        return _require_positive(base_kv, "base voltage", self.name)


@dataclass
class BranchComponent(ComponentElement):
    """Component connected between two buses."""
    node1: int
    node2: int
    base_kv: float | None = None

    @property
    def nodes(self) -> tuple[int, ...]:
        return (self.node1, self.node2)


@dataclass
class ShuntComponent(ComponentElement):
    """Component connected between a bus and ground."""
    node: int
    base_kv: float | None = None

    @property
    def nodes(self) -> tuple[int, ...]:
        return (self.node,)


@dataclass
class LineComponent(BranchComponent):
    """
    Transmission line (circuit) with distributed parameters.

    Attributes:
        r: Resistance per unit length (Ohm/km)
        x: Reactance per unit length (Ohm/km)
        b: Charging susceptance per unit length (S/km)
        length: Line length (km)
    """
    r: float = 0.0
    x: float = 0.0
    b: float = 0.0
    length: float = 0.0

    def to_branch(self, base_mva: float, average_kv: float | None = None) -> Branch:
        """
        Per-unit line impedance:
            R = r * l * SB / VB^2
            X = x * l * SB / VB^2
            B = b * l * VB^2 / SB   (total; split between terminals on assembly)
        """
        _require_positive(base_mva, "system base power", self.name)
        if self.length < 0:
            raise ConfigurationError(f"length must not be negative, got {self.length}", self.name)
        vb = self.resolve_base_kv(average_kv)
        z_base = (vb ** 2) / base_mva

        return Branch(
            node1=self.node1,
            node2=self.node2,
            resistance=self.r * self.length / z_base,
            reactance=self.x * self.length / z_base,
            shunt_admittance=self.b * self.length * z_base,
            name=self.name,
            base_mva=base_mva,
        )


@dataclass
class TransformerComponent(BranchComponent):
    """
    Two-winding transformer described by its short-circuit voltage.

    Attributes:
        rated_power_mva: Rated apparent power Sn
        vs_percent: Short-circuit voltage Vs in % of rated voltage
        v1n_kv: Rated voltage of winding 1 (kV); when omitted the winding is
            assumed to sit at the base voltage and no ratio correction is applied
        v2n_kv: Rated voltage of winding 2 (kV), informational
    """
    rated_power_mva: float | None = None
    vs_percent: float = 0.0
    v1n_kv: float | None = None
    v2n_kv: float | None = None

    def to_branch(self, base_mva: float, average_kv: float | None = None) -> Branch:
        """
        Per-unit leakage reactance with voltage-ratio correction:
            X = (Vs% / 100) * (V1n^2 / Sn) * (SB / VB^2)

        Without V1n this degenerates to X = (Vs% / 100) * (SB / Sn).
        """
        _require_positive(base_mva, "system base power", self.name)
        sn = _require_positive(self.rated_power_mva, "rated power Sn", self.name)
        vs = self.vs_percent / 100.0

        if self.v1n_kv is None:
            reactance = vs * base_mva / sn
        else:
            v1n = _require_positive(self.v1n_kv, "rated voltage V1n", self.name)
            vb = self.resolve_base_kv(average_kv)
            reactance = vs * (v1n ** 2 / sn) * (base_mva / vb ** 2)

        return Branch(
            node1=self.node1,
            node2=self.node2,
            reactance=reactance,
            name=self.name,
            base_mva=base_mva,
        )


@dataclass
class GeneratorComponent(ShuntComponent):
    """
    Synchronous generator behind its subtransient reactance.

    Attributes:
        xd: Reactance on the machine base (p.u.)
        rated_power_mva: Rated apparent power Sn; derived from Pn / cos(phi)
            when omitted
        rated_active_mw: Rated active power Pn (MW)
        power_factor: Rated power factor cos(phi)
        emf_kv: Internal EMF E in kV; converted to E / VB when given
    """
    xd: float = 0.0
    rated_power_mva: float | None = None
    rated_active_mw: float | None = None
    power_factor: float | None = None
    emf_kv: float | None = None

    @property
    def apparent_power_mva(self) -> float:
        """Sn, or Pn / cos(phi) when Sn is not given."""
        if self.rated_power_mva:
            return _require_positive(self.rated_power_mva, "rated power Sn", self.name)
        pn = _require_positive(self.rated_active_mw, "rated power Sn or Pn", self.name)
        cos_phi = _require_positive(self.power_factor, "power factor", self.name)
        if cos_phi > 1:
            raise ConfigurationError(f"power factor must not exceed 1, got {cos_phi}", self.name)
        return pn / cos_phi

    def to_branch(self, base_mva: float, average_kv: float | None = None) -> Branch:
        """Ground branch with X = Xd * SB / Sn and the source EMF."""
        _require_positive(base_mva, "system base power", self.name)
        _require_positive(self.xd, "reactance Xd", self.name)
        reactance = self.xd * base_mva / self.apparent_power_mva

        if self.emf_kv is not None:
            emf = self.emf_kv / self.resolve_base_kv(average_kv)
        else:
            emf = GENERATOR_EMF_PU

        return Branch(
            node1=self.node,
            node2=0,
            reactance=reactance,
            emf=emf,
            name=self.name,
            base_mva=base_mva,
        )


@dataclass
class LoadComponent(ShuntComponent):
    """
    Motor load modelled as a back-EMF behind its transient reactance.

    Attributes:
        rated_power_mva: Load rating Ld (MVA)
        xid: Transient reactance on the load base (p.u.)
        emf: Back-EMF (p.u.)
    """
    rated_power_mva: float | None = None
    xid: float = 0.0
    emf: float = LOAD_EMF_PU

    def to_branch(self, base_mva: float, average_kv: float | None = None) -> Branch:
        """Ground branch with X = Xid * SB / Ld."""
        _require_positive(base_mva, "system base power", self.name)
        ld = _require_positive(self.rated_power_mva, "rated power Ld", self.name)
        _require_positive(self.xid, "reactance Xid", self.name)

        return Branch(
            node1=self.node,
            node2=0,
            reactance=self.xid * base_mva / ld,
            emf=self.emf,
            name=self.name,
            base_mva=base_mva,
        )
