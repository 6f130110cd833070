"""Shared test fixtures for fault_matrix tests."""

from __future__ import annotations

import pytest

from fault_matrix.core.elements import Branch


# ======================================================================
# Branch lists
# ======================================================================

@pytest.fixture
def two_bus_branches() -> list[Branch]:
    """Generator (x = 0.2) at bus 1 feeding bus 2 through a line (x = 0.1)."""
    return [
        Branch(1, 2, reactance=0.1, name="L12"),
        Branch(1, 0, reactance=0.2, emf=1.0, name="G1"),
    ]


@pytest.fixture
def ring_branches() -> list[Branch]:
    """Three-bus ring, grounded through sources at buses 1 and 3."""
    return [
        Branch(1, 2, resistance=0.01, reactance=0.1, shunt_admittance=0.04, name="L12"),
        Branch(2, 3, resistance=0.02, reactance=0.2, shunt_admittance=0.02, name="L23"),
        Branch(1, 3, resistance=0.015, reactance=0.25, name="L13"),
        Branch(1, 0, reactance=0.2, emf=1.0, name="G1"),
        Branch(3, 0, reactance=0.4, emf=0.8, name="M3"),
    ]


# ======================================================================
# Mapping fixtures
# ======================================================================

@pytest.fixture
def network_mapping() -> dict:
    """Four-bus network in the JSON layout accepted by description_from_mapping()."""
    return {
        "SB": 100,
        "Vav": 115,
        "circuits": [
            {"node_1": 1, "node_2": 2, "r": 0.1, "x": 0.4, "b": 2.8e-6, "l": 50},
            {"node_1": 2, "node_2": 3, "r": 0.12, "x": 0.41, "b": 2.7e-6, "l": 40},
            {"node_1": 1, "node_2": 3, "r": 0.1, "x": 0.4, "b": 2.8e-6, "l": 60},
        ],
        "transformers": [
            {"node_1": 3, "node_2": 4, "Sn": 63, "Vs": 10.5},
        ],
        "power_generators": [
            {"node": 1, "Sn": 150, "xd": 0.2},
            {"node": 3, "Pn": 90, "cos": 0.9, "xd": 0.25},
        ],
        "lds": [
            {"node": 4, "Ld": 20, "Xid": 0.2},
        ],
    }


@pytest.fixture
def sequence_mapping() -> dict:
    """Positive, negative and zero sequence branch lists with fault bus 2."""
    return {
        "grid1": [
            {"node_1": 1, "node_2": 0, "reactance": 0.2, "E": 1.0},
            {"node_1": 1, "node_2": 2, "reactance": 0.1},
            {"node_1": 2, "node_2": 3, "reactance": 0.15, "admittance": 0.01},
            {"node_1": 3, "node_2": 0, "reactance": 0.25, "E": 1.0},
        ],
        "f1": 2,
        "grid2": [
            {"node_1": 1, "node_2": 0, "reactance": 0.2},
            {"node_1": 1, "node_2": 2, "reactance": 0.1},
            {"node_1": 2, "node_2": 3, "reactance": 0.15, "admittance": 0.01},
            {"node_1": 3, "node_2": 0, "reactance": 0.25},
        ],
        "f2": 2,
        "grid0": [
            {"node_1": 1, "node_2": 0, "reactance": 0.05},
            {"node_1": 1, "node_2": 2, "reactance": 0.3},
            {"node_1": 2, "node_2": 3, "reactance": 0.45},
            {"node_1": 3, "node_2": 0, "reactance": 0.1},
        ],
        "f0": 2,
    }
