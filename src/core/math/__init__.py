"""
Core math modules для choresplit

Численные примитивы для нормированных долей и нагрузок.
"""

from src.core.math.numerical_safeguards import (
    FRACTION_DECIMALS,
    FRACTION_MAX,
    fraction_of_total,
    is_valid_float,
    round_fraction,
    sum_non_negative,
    validate_in_range,
    validate_non_negative,
)

__all__ = [
    # Constants
    "FRACTION_DECIMALS",
    "FRACTION_MAX",
    # Functions
    "fraction_of_total",
    "is_valid_float",
    "round_fraction",
    "sum_non_negative",
    "validate_in_range",
    "validate_non_negative",
]
