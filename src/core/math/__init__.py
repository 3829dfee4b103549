"""
Core math modules для valuation engine

Математические примитивы и численные алгоритмы с гарантией стабильности.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_CALC,
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_MONEY,
    # NaN/Inf checks
    all_finite,
    is_valid_float,
    # Epsilon comparisons
    is_close,
    # Validation
    validate_finite,
    validate_non_negative,
    validate_positive,
)

# Union-Find
from src.core.math.union_find import DisjointSet

# Linear System
from src.core.math.linear_system import (
    SingularSystemError,
    identity_system,
    solve_shared,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_CALC",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    "EPS_MONEY",
    # Numerical Safeguards — NaN/Inf checks
    "all_finite",
    "is_valid_float",
    # Numerical Safeguards — Epsilon comparisons
    "is_close",
    # Numerical Safeguards — Validation
    "validate_finite",
    "validate_non_negative",
    "validate_positive",
    # Union-Find
    "DisjointSet",
    # Linear System — Exceptions
    "SingularSystemError",
    # Linear System — Functions
    "identity_system",
    "solve_shared",
]
