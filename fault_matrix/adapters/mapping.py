"""
Network descriptions from plain mappings.

This module converts parsed JSON-like dictionaries into component records,
pre-normalized branch lists and sequence network sets. Reading and
parsing files is left to the caller (json.load, yaml.safe_load, ...).

Recognized keys:
    Network:     SB, Vav, circuits, transformers, power_generators, lds
    Circuit:     node_1, node_2, r, x, b, l, VB
    Transformer: node_1, node_2, Sn, Vs, V1n, V2n, VB
    Generator:   node, Sn, xd, Pn, cos, E, VB
    Load:        node, Ld, Xid, VB
    Branch:      node_1, node_2, resistance, reactance, admittance, E
    Sequences:   grid1, f1, grid2, f2, grid0, f0

A value of 0 for an optional rating is treated as absent. Any record
may carry a "name".
"""

import logging
from typing import Any, Iterable, Mapping

from ..config import DEFAULT_BASE_MVA
from ..core.elements import (
    Branch,
    GeneratorComponent,
    LineComponent,
    LoadComponent,
    TransformerComponent,
)
from ..core.errors import ConfigurationError
from ..core.network import Network, NetworkDescription, SequenceNetworks

logger = logging.getLogger(__name__)


def _required(record: Mapping[str, Any], key: str, component: str) -> Any:
    if key not in record or record[key] is None:
        raise ConfigurationError(f"missing required field '{key}'", component)
    return record[key]


def _optional(record: Mapping[str, Any], key: str) -> float | None:
    # Absent, null and 0 all mean "not given"
    value = record.get(key)
    if value is None or value == 0:
        return None
    return float(value)


def _number(record: Mapping[str, Any], key: str, component: str) -> float:
    # Absent and null mean 0
    value = record.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"'{key}' must be a number, got {value!r}", component)
    return float(value)


def _node(record: Mapping[str, Any], key: str, component: str) -> int:
    value = _required(record, key, component)
    if isinstance(value, bool) or int(value) != value:
        raise ConfigurationError(f"'{key}' must be an integer bus index, got {value!r}", component)
    return int(value)


def _records(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    records = data.get(key) or []
    if not isinstance(records, list):
        raise ConfigurationError(f"'{key}' must be a list", "network")
    return records


def line_from_mapping(record: Mapping[str, Any], name: str) -> LineComponent:
    """Circuit record with per-km r, x, b and length l."""
    name = record.get("name", name)
    return LineComponent(
        name=name,
        node1=_node(record, "node_1", name),
        node2=_node(record, "node_2", name),
        base_kv=_optional(record, "VB"),
        r=_number(record, "r", name),
        x=_number(record, "x", name),
        b=_number(record, "b", name),
        length=float(_required(record, "l", name)),
    )


def transformer_from_mapping(record: Mapping[str, Any], name: str) -> TransformerComponent:
    """Transformer record with rating Sn and short-circuit voltage Vs (%)."""
    name = record.get("name", name)
    return TransformerComponent(
        name=name,
        node1=_node(record, "node_1", name),
        node2=_node(record, "node_2", name),
        base_kv=_optional(record, "VB"),
        rated_power_mva=float(_required(record, "Sn", name)),
        vs_percent=float(_required(record, "Vs", name)),
        v1n_kv=_optional(record, "V1n"),
        v2n_kv=_optional(record, "V2n"),
    )


def generator_from_mapping(record: Mapping[str, Any], name: str) -> GeneratorComponent:
    """Generator record with xd and either Sn or Pn and cos."""
    name = record.get("name", name)
    return GeneratorComponent(
        name=name,
        node=_node(record, "node", name),
        base_kv=_optional(record, "VB"),
        xd=float(_required(record, "xd", name)),
        rated_power_mva=_optional(record, "Sn"),
        rated_active_mw=_optional(record, "Pn"),
        power_factor=_optional(record, "cos"),
        emf_kv=_optional(record, "E"),
    )


def load_from_mapping(record: Mapping[str, Any], name: str) -> LoadComponent:
    """Motor load record with rating Ld and reactance Xid."""
    name = record.get("name", name)
    return LoadComponent(
        name=name,
        node=_node(record, "node", name),
        base_kv=_optional(record, "VB"),
        rated_power_mva=float(_required(record, "Ld", name)),
        xid=float(_required(record, "Xid", name)),
    )


def description_from_mapping(data: Mapping[str, Any], name: str = "") -> NetworkDescription:
    """
    Build a NetworkDescription from a network mapping.

    Args:
        data: Mapping with SB, optional Vav and the component lists
        name: Network label

    Returns:
        NetworkDescription
    """
    # --- Lines (circuits) ---
    lines = [line_from_mapping(r, f"circuit {i + 1}") for i, r in enumerate(_records(data, "circuits"))]

    # --- Transformers ---
    transformers = [
        transformer_from_mapping(r, f"transformer {i + 1}")
        for i, r in enumerate(_records(data, "transformers"))
    ]

    # --- Generators ---
    generators = [
        generator_from_mapping(r, f"generator {i + 1}")
        for i, r in enumerate(_records(data, "power_generators"))
    ]

    # --- Motor loads ---
    loads = [load_from_mapping(r, f"load {i + 1}") for i, r in enumerate(_records(data, "lds"))]

    base_mva = data.get("SB")
    description = NetworkDescription(
        base_mva=DEFAULT_BASE_MVA if base_mva is None else float(base_mva),
        average_kv=_optional(data, "Vav"),
        lines=lines,
        transformers=transformers,
        generators=generators,
        loads=loads,
        name=data.get("name", name),
    )
    logger.info(
        "Read %d lines, %d transformers, %d generators, %d loads",
        len(lines), len(transformers), len(generators), len(loads),
    )
    return description


def branch_from_mapping(record: Mapping[str, Any], name: str = "") -> Branch:
    """
    Pre-normalized branch record.

    In this format "admittance" is the susceptance applied at each terminal
    (B/2), so it is doubled into the total line charging.
    """
    name = record.get("name", name)
    return Branch(
        node1=_node(record, "node_1", name),
        node2=_node(record, "node_2", name),
        resistance=_number(record, "resistance", name),
        reactance=_number(record, "reactance", name),
        shunt_admittance=2 * _number(record, "admittance", name),
        emf=_number(record, "E", name),
        name=name,
    )


def branches_from_mapping(records: Iterable[Mapping[str, Any]]) -> list[Branch]:
    """Pre-normalized branch list (bypasses the normalizer)."""
    return [branch_from_mapping(r, f"branch {i + 1}") for i, r in enumerate(records)]


def sequence_from_mapping(data: Mapping[str, Any]) -> SequenceNetworks:
    """
    Positive, negative and zero sequence networks with their fault buses.

    Args:
        data: Mapping with branch lists grid1, grid2, grid0 and fault
            buses f1, f2, f0 (f2 and f0 default to f1)

    Returns:
        SequenceNetworks, not yet solved
    """
    networks = []
    for key in ("grid1", "grid2", "grid0"):
        records = _required(data, key, "sequence networks")
        networks.append(Network.from_branches(branches_from_mapping(records)))

    f1 = _node(data, "f1", "sequence networks")
    f2 = _node(data, "f2", "sequence networks") if data.get("f2") is not None else f1
    f0 = _node(data, "f0", "sequence networks") if data.get("f0") is not None else f1
    return SequenceNetworks(*networks, f1=f1, f2=f2, f0=f0)
