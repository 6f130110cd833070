"""
Default values and numerical tolerances.

Every function that relies on one of these accepts a keyword argument
to override it for a single call.
"""

# System base power in MVA when a description does not state one
DEFAULT_BASE_MVA = 100.0

# Nominal source voltages behind the subtransient reactance (p.u.)
GENERATOR_EMF_PU = 1.0
LOAD_EMF_PU = 0.8

# Flat pre-fault voltage profile (p.u.)
PREFAULT_VOLTAGE_PU = 1.0

# Largest |Y - Y.T| entry accepted as symmetric
SYMMETRY_TOL = 1e-9

# Smallest |D[i][i]| accepted as a pivot
PIVOT_TOL = 1e-12

# Magnitudes below this are treated as zero (impedances, couplings)
ZERO_TOL = 1e-12
