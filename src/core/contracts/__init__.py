"""
Contract Validation Module

Модуль для валидации JSON контрактов на границе аллокатора.
"""

from .validators import (
    ASSIGNED_CHORE,
    CHORE_ESTIMATE,
    CONTRACTS,
    CUMULATIVE_LOAD,
    ContractValidator,
    SchemaLoader,
    get_validator,
    validate_assigned_chore,
    validate_chore_estimate,
    validate_cumulative_load,
)

__all__ = [
    # Contract names
    "CHORE_ESTIMATE",
    "ASSIGNED_CHORE",
    "CUMULATIVE_LOAD",
    "CONTRACTS",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    # Functions
    "get_validator",
    "validate_chore_estimate",
    "validate_assigned_chore",
    "validate_cumulative_load",
]
