"""
Network diagnostics for admittance and impedance matrices.

This module helps locate the cause of a SingularNetworkError before or
after factorization: islands, buses without any coupling, islands with
no path to ground, and numerical residuals of the LDU factors and the
Z-matrix.
"""

import logging
from typing import Sequence

import numpy as np

from .builder import get_shunt_admittances
from .factorization import LDUFactors
from ..config import ZERO_TOL
from ..core.elements import Branch

logger = logging.getLogger(__name__)


def find_connected_components(branches: Sequence[Branch], n_buses: int) -> list[set[int]]:
    """
    Group buses into islands joined by series impedances.

    Ground branches do not join islands through the reference bus, and
    branches without impedance are ignored.

    Args:
        branches: Per-unit branches
        n_buses: Bus count N

    Returns:
        Islands as sets of 1-based bus numbers, ordered by their lowest bus.
        More than one entry means the network is split.
    """
    neighbours: dict[int, set[int]] = {bus: set() for bus in range(1, n_buses + 1)}
    for branch in branches:
        a, b = branch.terminals
        if a == 0 or b == 0 or not branch.has_impedance:
            continue
        if a in neighbours and b in neighbours:
            neighbours[a].add(b)
            neighbours[b].add(a)

    unassigned = set(neighbours)
    islands = []
    for root in sorted(neighbours):
        if root not in unassigned:
            continue
        island = {root}
        stack = [root]
        unassigned.discard(root)
        while stack:
            for other in neighbours[stack.pop()] & unassigned:
                unassigned.discard(other)
                island.add(other)
                stack.append(other)
        islands.append(island)

    return islands


def find_ungrounded_islands(branches: Sequence[Branch], n_buses: int, tol: float = ZERO_TOL) -> list[set[int]]:
    """
    Islands with no admittance to the reference bus.

    Such an island makes the Y-matrix singular: its rows sum to zero.
    """
    shunts = get_shunt_admittances(branches, n_buses)
    return [
        island for island in find_connected_components(branches, n_buses)
        if abs(sum(shunts[bus - 1] for bus in island)) < tol
    ]


def find_isolated_buses(Y: np.ndarray, tol: float = ZERO_TOL) -> list[int]:
    """1-based buses whose row has no coupling to any other bus."""
    coupling = np.abs(Y).sum(axis=1) - np.abs(np.diag(Y))
    return [int(i) + 1 for i in np.flatnonzero(coupling < tol)]


def find_zero_rows(Y: np.ndarray, tol: float = ZERO_TOL) -> list[int]:
    """1-based buses whose row in Y is entirely zero (completely disconnected)."""
    return [int(i) + 1 for i in np.flatnonzero(np.abs(Y).sum(axis=1) < tol)]


def check_matrix_health(Y: np.ndarray, name: str = "Y") -> dict:
    """
    Rank, conditioning and symmetry of a bus matrix.

    Args:
        Y: Square bus matrix
        name: Label used in reports

    Returns:
        Dictionary with size, rank, rank_deficiency, condition_number,
        min_singular_value, max_asymmetry and is_singular
    """
    size = Y.shape[0]
    report = {
        'name': name,
        'size': size,
        'rank': None,
        'rank_deficiency': None,
        'condition_number': None,
        'min_singular_value': None,
        'max_asymmetry': float(np.max(np.abs(Y - Y.T))) if size else 0.0,
        'is_singular': True,
    }

    try:
        singular_values = np.linalg.svd(Y, compute_uv=False)
    except np.linalg.LinAlgError:
        logger.warning("SVD of %s did not converge", name)
        return report

    if size == 0:
        report.update(rank=0, rank_deficiency=0, is_singular=False)
        return report

    smallest = float(singular_values[-1])
    rank = int(np.count_nonzero(singular_values > 1e-10))
    report.update(
        rank=rank,
        rank_deficiency=size - rank,
        condition_number=float(singular_values[0]) / smallest if smallest > 1e-15 else float('inf'),
        min_singular_value=smallest,
        is_singular=rank < size,
    )
    return report


def check_diagonal_rule(Y: np.ndarray, branches: Sequence[Branch]) -> float:
    """
    Largest deviation from the diagonal construction rule.

    Every row of Y must sum to the total admittance to ground at that bus:
        Y[i][i] + sum_{j != i} Y[i][j] == y_shunt[i]
    """
    shunts = get_shunt_admittances(branches, Y.shape[0])
    return float(np.max(np.abs(Y.sum(axis=1) - shunts))) if Y.size else 0.0


def check_factorization(Y: np.ndarray, factors: LDUFactors) -> float:
    """Largest entry of |L @ D @ U - Y|."""
    return float(np.max(np.abs(factors.reconstruct() - Y))) if Y.size else 0.0


def check_inverse(Y: np.ndarray, Z: np.ndarray) -> float:
    """Largest entry of |Y @ Z - I|."""
    n = Y.shape[0]
    return float(np.max(np.abs(Y @ Z - np.eye(n)))) if n else 0.0


def diagnose_network(
    branches: Sequence[Branch],
    n_buses: int,
    Y: np.ndarray | None = None,
    factors: LDUFactors | None = None,
    Z: np.ndarray | None = None,
) -> dict:
    """
    Collect topology and matrix checks for a network.

    Args:
        branches: Per-unit branches
        n_buses: Bus count N
        Y: Admittance matrix (optional)
        factors: LDU factors of Y (optional)
        Z: Impedance matrix (optional)

    Returns:
        Dictionary of results; matrix entries are present only for the
        matrices that were passed in
    """
    islands = find_connected_components(branches, n_buses)
    ungrounded = find_ungrounded_islands(branches, n_buses)

    diag = {
        'n_buses': n_buses,
        'n_branches': len(branches),
        'n_ground_branches': sum(1 for b in branches if b.is_ground),
        'n_sources': sum(1 for b in branches if b.is_source),
        'n_islands': len(islands),
        'islands': [sorted(island) for island in islands],
        'has_islands': len(islands) > 1,
        'ungrounded_islands': [sorted(island) for island in ungrounded],
    }

    if diag['has_islands']:
        logger.warning("Network splits into %d islands: %s", len(islands), diag['islands'])
    if ungrounded:
        logger.warning("Islands without a path to ground: %s", diag['ungrounded_islands'])

    if Y is not None:
        diag['Y_health'] = check_matrix_health(Y, "Y")
        diag['Y_isolated_buses'] = find_isolated_buses(Y)
        diag['Y_zero_rows'] = find_zero_rows(Y)
        diag['diagonal_rule_residual'] = check_diagonal_rule(Y, branches)
        if diag['Y_isolated_buses']:
            logger.warning("Buses without coupling: %s", diag['Y_isolated_buses'])

        if factors is not None:
            diag['ldu_residual'] = check_factorization(Y, factors)
        if Z is not None:
            diag['inverse_residual'] = check_inverse(Y, Z)

    return diag


def print_diagnostics(diag: dict) -> None:
    """
    Print a diagnose_network() result as a text report.

    Args:
        diag: Dictionary from diagnose_network()
    """
    rule = "-" * 56
    print(rule)
    print("NETWORK DIAGNOSTICS")
    print(rule)

    print(f"Buses:          {diag['n_buses']}")
    print(f"Branches:       {diag['n_branches']} ({diag['n_ground_branches']} to ground)")
    print(f"Sources:        {diag['n_sources']}")
    print(f"Islands:        {diag['n_islands']}")
    if diag['has_islands']:
        for number, island in enumerate(diag['islands'], start=1):
            shown = ", ".join(str(bus) for bus in island[:8])
            more = ", ..." if len(island) > 8 else ""
            print(f"  island {number}: buses {shown}{more}")
    for island in diag['ungrounded_islands']:
        print(f"  WARNING: no path to ground from buses {island}")

    health = diag.get('Y_health')
    if health is not None:
        cond = health['condition_number']
        print("Y-matrix:")
        print(f"  rank {health['rank']} of {health['size']}, singular: {'yes' if health['is_singular'] else 'no'}")
        print(f"  condition number: {cond:.2e}" if cond is not None else "  condition number: n/a")
        print(f"  max |Y - Y.T|: {health['max_asymmetry']:.2e}")
        print(f"  row sum vs. shunt residual: {diag['diagonal_rule_residual']:.2e}")
        if diag['Y_isolated_buses']:
            print(f"  WARNING: buses without coupling: {diag['Y_isolated_buses']}")

    if 'ldu_residual' in diag:
        print(f"max |LDU - Y|:  {diag['ldu_residual']:.2e}")
    if 'inverse_residual' in diag:
        print(f"max |YZ - I|:   {diag['inverse_residual']:.2e}")
    print(rule)
