"""
Tabulation helpers for matrices and fault results.

Results are returned as pandas DataFrames indexed by 1-based bus number,
so they can be printed, filtered or exported (to_csv, to_excel) by the
caller.
"""
from typing import Optional, List
import numpy as np
import pandas as pd

from ..faults.results import SequenceFaultResult, ThreePhaseFaultResult


def bus_index(buses: Optional[List[int]] = None, n_buses: int = 0) -> pd.Index:
    """1-based bus index, either the given buses or 1..n_buses."""
    if buses is None:
        buses = list(range(1, n_buses + 1))
    return pd.Index(buses, name="bus")


def matrix_to_dataframe(matrix: np.ndarray, buses: Optional[List[int]] = None) -> pd.DataFrame:
    """
    Label a square bus matrix (Y, Z, L, D or U) with bus numbers.

    Args:
        matrix: N x N array
        buses: Bus numbers of the rows/columns; defaults to 1..N. Use this
            for reduced views such as faulted_view(), which omit a bus.

    Returns:
        DataFrame with the same values and bus labels on both axes
    """
    n = matrix.shape[0]
    if buses is not None and len(buses) != n:
        raise ValueError(f"Got {len(buses)} bus labels for a {n}x{n} matrix")
    index = bus_index(buses, n)
    return pd.DataFrame(matrix, index=index, columns=index.copy())


def _polar_columns(df: pd.DataFrame, column: str) -> None:
    # Adds magnitude and angle (degrees) next to a complex column
    values = df[column].to_numpy(dtype=complex)
    df[f"|{column}|"] = np.abs(values)
    df[f"angle({column})"] = np.degrees(np.angle(values))


def fault_result_to_dataframe(result: ThreePhaseFaultResult) -> pd.DataFrame:
    """
    Post-fault bus voltages of a three-phase fault.

    Returns:
        DataFrame indexed by bus with columns U, |U|, angle(U) and a boolean
        `faulted` column marking the fault bus
    """
    df = pd.DataFrame({"U": result.voltages}, index=bus_index(n_buses=len(result.voltages)))
    _polar_columns(df, "U")
    df["faulted"] = df.index == result.bus
    return df


def branch_currents_to_dataframe(result: ThreePhaseFaultResult) -> pd.DataFrame:
    """
    Branch currents of a three-phase fault, one row per coupled bus pair.

    Returns:
        DataFrame with columns from_bus, to_bus, I, |I|, angle(I)
    """
    rows = [
        {"from_bus": i, "to_bus": j, "I": current}
        for (i, j), current in sorted(result.branch_currents.items())
    ]
    df = pd.DataFrame(rows, columns=["from_bus", "to_bus", "I"])
    _polar_columns(df, "I")
    return df


def sequence_result_to_dataframe(result: SequenceFaultResult) -> pd.DataFrame:
    """
    Sequence and phase voltages at every bus for an unbalanced fault.

    Returns:
        DataFrame indexed by bus with complex columns V0, V1, V2, Va, Vb, Vc
        and magnitudes |Va|, |Vb|, |Vc|
    """
    n = result.sequence_voltages.shape[1]
    df = pd.DataFrame(
        {
            "V0": result.sequence_voltages[0],
            "V1": result.sequence_voltages[1],
            "V2": result.sequence_voltages[2],
            "Va": result.phase_voltages[0],
            "Vb": result.phase_voltages[1],
            "Vc": result.phase_voltages[2],
        },
        index=bus_index(n_buses=n),
    )
    for phase in ("Va", "Vb", "Vc"):
        df[f"|{phase}|"] = np.abs(df[phase].to_numpy(dtype=complex))
    return df


def sequence_currents_to_series(result: SequenceFaultResult) -> pd.Series:
    """Fault currents I0, I1, I2, Ia, Ib, Ic as a labelled Series."""
    values = np.concatenate([result.sequence_currents, result.phase_currents])
    return pd.Series(values, index=["I0", "I1", "I2", "Ia", "Ib", "Ic"], name=result.fault_type.name)
