"""
Utility functions for tabulating matrices and fault results.
"""

from .helpers import (
    bus_index,
    matrix_to_dataframe,
    fault_result_to_dataframe,
    branch_currents_to_dataframe,
    sequence_result_to_dataframe,
    sequence_currents_to_series,
)

__all__ = [
    'bus_index',
    'matrix_to_dataframe',
    'fault_result_to_dataframe',
    'branch_currents_to_dataframe',
    'sequence_result_to_dataframe',
    'sequence_currents_to_series',
]
