"""Allocation — справедливое распределение задач между двумя пользователями.

- 4 стадии с фиксированным порядком (Normalizer → Exception Resolver →
  Greedy Balancer → Load Reconciler)
- ChoresAllocator связывает стадии с load store и assignment sink
"""

from .allocator import AllocationResult, AllocatorConfig, ChoresAllocator
from .validation import (
    AllocationInputError,
    DuplicateChoreKeyError,
    ZeroTotalEstimateError,
)

__all__ = [
    "ChoresAllocator",
    "AllocatorConfig",
    "AllocationResult",
    "AllocationInputError",
    "DuplicateChoreKeyError",
    "ZeroTotalEstimateError",
]
