"""Tests for fault_matrix.matrices.diagnostics and fault_matrix.utils.helpers."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from fault_matrix.core.elements import Branch
from fault_matrix.faults.results import FaultType
from fault_matrix.faults.sequence import sequence_fault
from fault_matrix.faults.symmetric import three_phase_fault
from fault_matrix.matrices.builder import build_admittance_matrix
from fault_matrix.matrices.diagnostics import (
    check_diagonal_rule,
    check_inverse,
    check_matrix_health,
    diagnose_network,
    find_connected_components,
    find_isolated_buses,
    find_ungrounded_islands,
    find_zero_rows,
)
from fault_matrix.matrices.factorization import ldu_decompose
from fault_matrix.matrices.impedance import build_impedance_matrix
from fault_matrix.matrices.reducer import faulted_view
from fault_matrix.utils.helpers import (
    branch_currents_to_dataframe,
    fault_result_to_dataframe,
    matrix_to_dataframe,
    sequence_currents_to_series,
    sequence_result_to_dataframe,
)


def _islanded_branches() -> list[Branch]:
    """Two islands, only the first one grounded."""
    return [
        Branch(1, 2, reactance=0.1),
        Branch(1, 0, reactance=0.2),
        Branch(3, 4, reactance=0.1),
    ]


# ======================================================================
# Topology
# ======================================================================


class TestTopology:
    """Tests for island and isolation checks."""

    def test_connected(self, ring_branches):
        """The ring is a single island."""
        assert find_connected_components(ring_branches, 3) == [{1, 2, 3}]

    def test_islands(self):
        """Ground branches do not join islands."""
        components = find_connected_components(_islanded_branches(), 4)
        assert sorted(map(sorted, components)) == [[1, 2], [3, 4]]

    def test_ungrounded_island(self):
        """The island without a ground path is singled out."""
        assert find_ungrounded_islands(_islanded_branches(), 4) == [{3, 4}]

    def test_isolated_and_zero_rows(self, two_bus_branches):
        """An unreferenced bus has an empty row."""
        Y = build_admittance_matrix(two_bus_branches, n_buses=3)
        assert find_isolated_buses(Y) == [3]
        assert find_zero_rows(Y) == [3]


# ======================================================================
# Numerical checks
# ======================================================================


class TestNumericalChecks:
    """Tests for matrix health and residual checks."""

    def test_health_of_good_matrix(self, ring_branches):
        """Full rank, symmetric."""
        health = check_matrix_health(build_admittance_matrix(ring_branches))
        assert health["rank"] == 3
        assert not health["is_singular"]
        assert health["max_asymmetry"] == 0.0

    def test_health_of_singular_matrix(self):
        """An ungrounded network is rank deficient."""
        Y = build_admittance_matrix([Branch(1, 2, reactance=0.1)])
        health = check_matrix_health(Y)
        assert health["is_singular"]
        assert health["rank_deficiency"] == 1

    def test_diagonal_rule(self, ring_branches):
        """Row sums match the shunt admittances."""
        Y = build_admittance_matrix(ring_branches)
        assert check_diagonal_rule(Y, ring_branches) < 1e-12

    def test_inverse_residual(self, ring_branches):
        """Y @ Z stays close to the identity."""
        Y = build_admittance_matrix(ring_branches)
        Z = build_impedance_matrix(ldu_decompose(Y))
        assert check_inverse(Y, Z) < 1e-10

    def test_diagnose_islanded(self, caplog):
        """Islands are reported and logged."""
        with caplog.at_level("WARNING", logger="fault_matrix"):
            diag = diagnose_network(_islanded_branches(), 4)
        assert diag["has_islands"]
        assert diag["ungrounded_islands"] == [[3, 4]]
        assert "islands" in caplog.text


# ======================================================================
# Tabulation
# ======================================================================


class TestTabulation:
    """Tests for the pandas helpers."""

    def test_matrix_labels(self, ring_branches):
        """Rows and columns are labelled 1..N."""
        Y = build_admittance_matrix(ring_branches)
        df = matrix_to_dataframe(Y)
        assert list(df.index) == [1, 2, 3]
        assert list(df.columns) == [1, 2, 3]
        assert df.loc[1, 2] == Y[0, 1]

    def test_faulted_view_labels(self, ring_branches):
        """Reduced views keep the original bus numbers."""
        Y = build_admittance_matrix(ring_branches)
        df = matrix_to_dataframe(faulted_view(Y, 2), buses=[1, 3])
        assert df.loc[3, 3] == Y[2, 2]

    def test_label_count_checked(self, ring_branches):
        """One label per row."""
        with pytest.raises(ValueError, match="labels"):
            matrix_to_dataframe(build_admittance_matrix(ring_branches), buses=[1, 2])

    def test_fault_result_table(self, two_bus_branches):
        """Voltages with polar form and the faulted flag."""
        Y = build_admittance_matrix(two_bus_branches)
        Z = build_impedance_matrix(ldu_decompose(Y))
        result = three_phase_fault(Z, 2, Y=Y)
        df = fault_result_to_dataframe(result)
        assert list(df.columns) == ["U", "|U|", "angle(U)", "faulted"]
        assert df.loc[1, "|U|"] == pytest.approx(1 / 3)
        assert df["faulted"].tolist() == [False, True]

        currents = branch_currents_to_dataframe(result)
        assert currents.loc[0, "from_bus"] == 1
        assert currents.loc[0, "|I|"] == pytest.approx(1 / 0.3)

    def test_sequence_tables(self):
        """Sequence and phase voltages per bus, currents as a Series."""
        Z = np.array([[0.2j]])
        result = sequence_fault(Z, Z, 0.5 * Z, 1, fault_type=FaultType.LINE_TO_LINE)
        df = sequence_result_to_dataframe(result)
        assert isinstance(df, pd.DataFrame)
        assert {"V0", "V1", "V2", "Va", "Vb", "Vc", "|Va|"} <= set(df.columns)
        assert df.index.name == "bus"

        series = sequence_currents_to_series(result)
        assert series.name == "LINE_TO_LINE"
        assert series["I2"] == pytest.approx(-series["I1"])
