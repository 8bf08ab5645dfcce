"""
Domain models and value objects.

Contains fundamental domain entities like ChoreEstimate, AssignedChore, CumulativeLoad.
"""

from src.core.domain.assignment import AssignedChore
from src.core.domain.chore import (
    ChoreEstimate,
    ChoreException,
    ChoreKey,
    NormalizedEntry,
    UserSlot,
)
from src.core.domain.load import CumulativeLoad, LoadDelta

__all__ = [
    # Chore module
    "UserSlot",
    "ChoreException",
    "ChoreKey",
    "ChoreEstimate",
    "NormalizedEntry",
    # Assignment model
    "AssignedChore",
    # Load models
    "CumulativeLoad",
    "LoadDelta",
]
