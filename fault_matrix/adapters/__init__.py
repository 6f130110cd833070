"""
Adapters turning external network data into fault_matrix objects.
"""

from .mapping import (
    branch_from_mapping,
    branches_from_mapping,
    description_from_mapping,
    generator_from_mapping,
    line_from_mapping,
    load_from_mapping,
    sequence_from_mapping,
    transformer_from_mapping,
)

__all__ = [
    'branch_from_mapping',
    'branches_from_mapping',
    'description_from_mapping',
    'generator_from_mapping',
    'line_from_mapping',
    'load_from_mapping',
    'sequence_from_mapping',
    'transformer_from_mapping',
]
