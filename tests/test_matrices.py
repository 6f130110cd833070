"""Tests for fault_matrix.matrices: Y assembly, LDU factorization and the Z-matrix."""

from __future__ import annotations

import numpy as np
import pytest

from fault_matrix.core.elements import Branch
from fault_matrix.core.errors import BoundsError, ConfigurationError, SingularNetworkError
from fault_matrix.matrices.builder import build_admittance_matrix, get_shunt_admittances
from fault_matrix.matrices.factorization import check_symmetry, ldu_decompose
from fault_matrix.matrices.impedance import build_impedance_matrix, solve_impedance_column
from fault_matrix.matrices.reducer import faulted_view, select_buses


# ======================================================================
# Admittance matrix
# ======================================================================


class TestBuildAdmittanceMatrix:
    """Tests for build_admittance_matrix()."""

    def test_two_bus_values(self, two_bus_branches):
        """Generator x=0.2 at bus 1, line x=0.1 to bus 2."""
        Y = build_admittance_matrix(two_bus_branches)
        y_line = 1 / 0.1j
        y_gen = 1 / 0.2j
        np.testing.assert_allclose(Y[0, 0], y_line + y_gen)
        np.testing.assert_allclose(Y[1, 1], y_line)
        np.testing.assert_allclose(Y[0, 1], -y_line)
        np.testing.assert_allclose(Y[1, 0], -y_line)

    def test_diagonal_balances_row_with_ground_admittance(self, two_bus_branches):
        """Y[1][1] = -(Y[1][2] - y_ground)."""
        Y = build_admittance_matrix(two_bus_branches)
        np.testing.assert_allclose(Y[0, 0], -(Y[0, 1] - 1 / 0.2j))

    def test_symmetric(self, ring_branches):
        """Y is symmetric (not Hermitian)."""
        Y = build_admittance_matrix(ring_branches)
        np.testing.assert_allclose(Y, Y.T)

    def test_row_sums_equal_shunt_admittance(self, ring_branches):
        """Each row sums to the admittance to ground at that bus."""
        Y = build_admittance_matrix(ring_branches)
        np.testing.assert_allclose(Y.sum(axis=1), get_shunt_admittances(ring_branches, 3), atol=1e-12)

    def test_without_shunts_diagonal_is_negated_off_diagonal_sum(self):
        """With no ground branches or charging, Yii = -sum_{j != i} Yij."""
        branches = [Branch(1, 2, reactance=0.1), Branch(2, 3, reactance=0.2), Branch(1, 3, reactance=0.4)]
        Y = build_admittance_matrix(branches)
        off_diag = Y.sum(axis=1) - np.diag(Y)
        np.testing.assert_allclose(np.diag(Y), -off_diag)

    def test_line_charging_split_between_terminals(self):
        """Half of the total susceptance B appears on each terminal diagonal."""
        branches = [
            Branch(1, 2, reactance=0.1, shunt_admittance=0.04),
            Branch(1, 0, reactance=0.2),
        ]
        Y = build_admittance_matrix(branches)
        np.testing.assert_allclose(Y[1, 1], 1 / 0.1j + 0.02j)
        np.testing.assert_allclose(Y[0, 0], 1 / 0.1j + 1 / 0.2j + 0.02j)

    def test_parallel_branches_accumulate(self):
        """Two identical parallel lines halve the coupling impedance."""
        branches = [
            Branch(1, 2, reactance=0.2),
            Branch(2, 1, reactance=0.2),
            Branch(1, 0, reactance=0.5),
        ]
        Y = build_admittance_matrix(branches)
        np.testing.assert_allclose(Y[0, 1], -1 / 0.1j)

    def test_zero_impedance_between_buses(self):
        """A bus-to-bus branch needs a series impedance."""
        with pytest.raises(ConfigurationError, match="B12.*zero"):
            build_admittance_matrix([Branch(1, 2, name="B12"), Branch(1, 0, reactance=0.1)])

    def test_source_without_impedance(self):
        """A source ground branch with Z = 0 is rejected, not skipped."""
        branches = [Branch(1, 2, reactance=0.1), Branch(1, 0, emf=1.0, name="G1")]
        with pytest.raises(ConfigurationError, match="G1.*no impedance"):
            build_admittance_matrix(branches)

    def test_self_loop(self):
        """A branch from a bus to itself is rejected."""
        with pytest.raises(ConfigurationError, match="same bus"):
            build_admittance_matrix([Branch(1, 1, reactance=0.1)], n_buses=1)

    def test_node_outside_explicit_size(self):
        """Terminals beyond n_buses are rejected."""
        with pytest.raises(ConfigurationError, match="outside"):
            build_admittance_matrix([Branch(1, 3, reactance=0.1)], n_buses=2)

    def test_mixed_base_rejected(self):
        """Branches tagged with different system bases cannot be assembled."""
        branches = [
            Branch(1, 2, reactance=0.1, base_mva=100.0),
            Branch(1, 0, reactance=0.2, base_mva=10.0),
        ]
        with pytest.raises(ConfigurationError, match="MVA"):
            build_admittance_matrix(branches)

    def test_idempotent(self, ring_branches):
        """Building twice gives identical matrices."""
        np.testing.assert_array_equal(
            build_admittance_matrix(ring_branches), build_admittance_matrix(ring_branches)
        )


# ======================================================================
# LDU factorization
# ======================================================================


class TestLduDecompose:
    """Tests for ldu_decompose()."""

    def test_reconstruction(self, ring_branches):
        """L @ D @ U reproduces Y."""
        Y = build_admittance_matrix(ring_branches)
        factors = ldu_decompose(Y)
        np.testing.assert_allclose(factors.reconstruct(), Y, atol=1e-10)

    def test_structure(self, ring_branches):
        """L is unit lower triangular, U = L.T, D is diagonal."""
        factors = ldu_decompose(build_admittance_matrix(ring_branches))
        np.testing.assert_array_equal(np.diag(factors.L), np.ones(3))
        np.testing.assert_array_equal(np.triu(factors.L, 1), 0)
        np.testing.assert_array_equal(factors.U, factors.L.T)
        np.testing.assert_array_equal(factors.D, np.diag(factors.pivots))

    def test_first_column(self, ring_branches):
        """D[1][1] = Y[1][1] and L[i][1] = Y[i][1] / Y[1][1]."""
        Y = build_admittance_matrix(ring_branches)
        factors = ldu_decompose(Y)
        assert factors.D[0, 0] == Y[0, 0]
        np.testing.assert_allclose(factors.L[:, 0], Y[:, 0] / Y[0, 0])

    def test_two_bus_pivots(self, two_bus_branches):
        """Hand-computed pivots for the two-bus network."""
        factors = ldu_decompose(build_admittance_matrix(two_bus_branches))
        np.testing.assert_allclose(factors.pivots, [-15j, -10j / 3])
        np.testing.assert_allclose(factors.L[1, 0], -2 / 3)

    def test_input_not_modified(self, ring_branches):
        """The factorization only reads Y."""
        Y = build_admittance_matrix(ring_branches)
        Y_before = Y.copy()
        ldu_decompose(Y)
        np.testing.assert_array_equal(Y, Y_before)

    def test_isolated_bus(self):
        """A bus that no branch touches gives a zero pivot, reported by bus."""
        branches = [Branch(1, 3, reactance=0.1), Branch(1, 0, reactance=0.2)]
        Y = build_admittance_matrix(branches, n_buses=3)
        with pytest.raises(SingularNetworkError) as exc_info:
            ldu_decompose(Y)
        assert exc_info.value.bus == 2

    def test_isolated_last_bus(self, two_bus_branches):
        """An extra unreferenced bus at the end is caught as well."""
        Y = build_admittance_matrix(two_bus_branches, n_buses=3)
        with pytest.raises(SingularNetworkError, match="bus 3"):
            ldu_decompose(Y)

    def test_ungrounded_network(self):
        """Without a path to ground, Y is singular."""
        Y = build_admittance_matrix([Branch(1, 2, reactance=0.1)])
        with pytest.raises(SingularNetworkError) as exc_info:
            ldu_decompose(Y)
        assert exc_info.value.bus == 2

    def test_asymmetric_rejected(self):
        """The symmetric form needs a symmetric matrix."""
        Y = np.array([[2.0, 1.0], [0.5, 2.0]], dtype=complex)
        with pytest.raises(ConfigurationError, match="not symmetric"):
            ldu_decompose(Y)

    def test_non_square_rejected(self):
        """Only square matrices can be factored."""
        with pytest.raises(ConfigurationError, match="square"):
            check_symmetry(np.zeros((2, 3), dtype=complex))

    def test_singular_error_is_arithmetic_error(self):
        """SingularNetworkError can be caught as ArithmeticError."""
        Y = np.zeros((1, 1), dtype=complex)
        with pytest.raises(ArithmeticError):
            ldu_decompose(Y)


# ======================================================================
# Impedance matrix
# ======================================================================


class TestImpedanceMatrix:
    """Tests for build_impedance_matrix() and solve_impedance_column()."""

    def test_single_bus(self):
        """1x1 case: Z equals the ground branch impedance."""
        Y = build_admittance_matrix([Branch(1, 0, resistance=0.1, reactance=0.3)])
        Z = build_impedance_matrix(ldu_decompose(Y))
        np.testing.assert_allclose(Z[0, 0], complex(0.1, 0.3))

    def test_two_bus_values(self, two_bus_branches):
        """Z11 = j0.2, Z22 = j0.3, Z12 = j0.2."""
        Z = build_impedance_matrix(ldu_decompose(build_admittance_matrix(two_bus_branches)))
        np.testing.assert_allclose(Z, [[0.2j, 0.2j], [0.2j, 0.3j]], atol=1e-12)

    def test_inverse_of_y(self, ring_branches):
        """Y @ Z = I."""
        Y = build_admittance_matrix(ring_branches)
        Z = build_impedance_matrix(ldu_decompose(Y))
        np.testing.assert_allclose(Y @ Z, np.eye(3), atol=1e-10)

    def test_symmetric(self, ring_branches):
        """Z inherits the symmetry of Y."""
        Z = build_impedance_matrix(ldu_decompose(build_admittance_matrix(ring_branches)))
        np.testing.assert_allclose(Z, Z.T, atol=1e-12)

    def test_column_matches_linear_solve(self, ring_branches):
        """Each column solves Y z = e_j."""
        Y = build_admittance_matrix(ring_branches)
        factors = ldu_decompose(Y)
        for bus in (1, 2, 3):
            e = np.zeros(3, dtype=complex)
            e[bus - 1] = 1.0
            np.testing.assert_allclose(solve_impedance_column(factors, bus), np.linalg.solve(Y, e), atol=1e-10)

    def test_column_bounds(self, ring_branches):
        """Columns outside 1..N are rejected."""
        factors = ldu_decompose(build_admittance_matrix(ring_branches))
        with pytest.raises(BoundsError):
            solve_impedance_column(factors, 0)
        with pytest.raises(BoundsError):
            solve_impedance_column(factors, 4)


# ======================================================================
# Reduced views
# ======================================================================


class TestReducer:
    """Tests for faulted_view() and select_buses()."""

    def test_faulted_view_omits_bus(self, ring_branches):
        """Row and column of the faulted bus are dropped."""
        Y = build_admittance_matrix(ring_branches)
        view = faulted_view(Y, 2)
        assert view.shape == (2, 2)
        np.testing.assert_array_equal(view, Y[np.ix_([0, 2], [0, 2])])

    def test_faulted_view_copies(self, ring_branches):
        """Writing to the view leaves the matrix unchanged."""
        Y = build_admittance_matrix(ring_branches)
        view = faulted_view(Y, 1)
        view[0, 0] = 0
        assert Y[1, 1] != 0

    def test_select_buses_order(self, ring_branches):
        """Buses are returned in the requested order."""
        Y = build_admittance_matrix(ring_branches)
        np.testing.assert_array_equal(select_buses(Y, [3, 1]), Y[np.ix_([2, 0], [2, 0])])

    def test_faulted_view_bounds(self, ring_branches):
        """Fault bus must exist."""
        with pytest.raises(BoundsError):
            faulted_view(build_admittance_matrix(ring_branches), 5)
