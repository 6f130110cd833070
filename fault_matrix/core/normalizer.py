"""
Per-unit normalization of component records.

Converts a network description into the uniform Branch list consumed by
the admittance builder, and validates the preconditions the builder
relies on (common per-unit base, dense 1-based bus numbering).
"""

import logging
from typing import Iterable

from .elements import (
    Branch,
    ComponentElement,
    GeneratorComponent,
    LineComponent,
    TransformerComponent,
)
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def ensure_common_base(components: Iterable[ComponentElement], average_kv: float | None) -> None:
    """
    Guard against components normalized on different voltage bases.

    Components either carry their own base voltage or fall back to the
    network average voltage. A component whose conversion needs a base
    voltage must be able to resolve one, and explicit bases must be positive.

    Raises:
        ConfigurationError: naming the first offending component
    """
    if average_kv is not None and average_kv <= 0:
        raise ConfigurationError(f"average voltage must be positive, got {average_kv}", "network")

    for component in components:
        base_kv = getattr(component, "base_kv", None)
        if base_kv is not None and base_kv <= 0:
            raise ConfigurationError(f"base voltage must be positive, got {base_kv}", component.name)
        if base_kv is None and average_kv is None and _needs_base_voltage(component):
            raise ConfigurationError(
                "no base voltage given and the network has no average voltage", component.name
            )


def _needs_base_voltage(component: ComponentElement) -> bool:
    # Lines always, transformers with ratio correction, generators with an EMF in kV
    if isinstance(component, LineComponent):
        return True
    if isinstance(component, TransformerComponent):
        return component.v1n_kv is not None
    if isinstance(component, GeneratorComponent):
        return component.emf_kv is not None
    return False


def ensure_same_base_mva(branches: Iterable[Branch]) -> float | None:
    """
    Check that every tagged branch was normalized on the same system base.

    Returns:
        The common base power, or None when no branch carries a tag
    """
    base_mva = None
    for branch in branches:
        if branch.base_mva is None:
            continue
        if base_mva is None:
            base_mva = branch.base_mva
        elif branch.base_mva != base_mva:
            raise ConfigurationError(
                f"normalized on {branch.base_mva} MVA while other branches use {base_mva} MVA",
                branch.label,
            )
    return base_mva


def validate_bus_numbering(branches: Iterable[Branch]) -> int:
    """
    Validate dense 1-based bus numbering and return the bus count N.

    Every index in 1..N must be referenced by at least one branch, index 0 is
    the ground reference and negative indices are rejected. A branch with both
    terminals at ground is rejected as well.

    Raises:
        ConfigurationError: on gaps, negative indices or an empty network
    """
    seen: set[int] = set()
    for branch in branches:
        for node in branch.terminals:
            if node < 0:
                raise ConfigurationError(f"bus index must not be negative, got {node}", branch.label)
        if branch.node1 == 0 and branch.node2 == 0:
            raise ConfigurationError("both terminals are connected to ground", branch.label)
        seen.update(node for node in branch.terminals if node != 0)

    if not seen:
        raise ConfigurationError("network has no buses", "network")

    n_buses = max(seen)
    missing = sorted(set(range(1, n_buses + 1)) - seen)
    if missing:
        raise ConfigurationError(
            f"bus numbering must be dense from 1 to {n_buses}; missing buses {missing}",
            "network",
        )
    return n_buses


def normalize_components(
    components: Iterable[ComponentElement],
    base_mva: float,
    average_kv: float | None = None,
) -> list[Branch]:
    """
    Convert component records to per-unit branches.

    Args:
        components: Records implementing to_branch()
        base_mva: System base power SB
        average_kv: Network-wide average voltage Vav (optional)

    Returns:
        Branches in the order of the input records
    """
    components = list(components)
    ensure_common_base(components, average_kv)

    branches = []
    for component in components:
        branch = component.to_branch(base_mva, average_kv)
        logger.debug(
            "Normalized %s '%s': %s-%s Z=%s B=%s E=%s",
            type(component).__name__, component.name,
            branch.node1, branch.node2, branch.impedance,
            branch.shunt_admittance, branch.emf,
        )
        branches.append(branch)
    return branches


def normalize_network(description) -> list[Branch]:
    """
    Normalize every component of a network description.

    Records are converted in the order lines, generators, transformers,
    loads. The resulting branch set is checked for dense bus numbering.

    Args:
        description: NetworkDescription (or any object with base_mva,
            average_kv and the four component tuples)

    Returns:
        List of per-unit branches ready for assembly
    """
    components = [
        *description.lines,
        *description.generators,
        *description.transformers,
        *description.loads,
    ]
    branches = normalize_components(components, description.base_mva, description.average_kv)
    n_buses = validate_bus_numbering(branches)
    logger.info(
        "Normalized %d components into %d branches over %d buses (SB = %s MVA)",
        len(components), len(branches), n_buses, description.base_mva,
    )
    return branches
