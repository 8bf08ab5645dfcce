"""Stages — стадии аллокации с фиксированным порядком.

- STAGE 1: Normalizer (оценки → нормированные доли)
- STAGE 2: Exception Resolver (override → sentinel-доли)
- STAGE 3: Greedy Balancer (пошаговое назначение по нагрузке)
- STAGE 4: Load Reconciler (поправка нагрузки на следующий период)
"""

from .stage_01_normalizer import NormalizerConfig, Stage01Normalizer, Stage01Result
from .stage_02_exception_resolver import (
    EXCEPTION_SENTINEL_FRACTION,
    ExceptionResolverConfig,
    Stage02ExceptionResolver,
    Stage02Result,
)
from .stage_03_greedy_balancer import (
    BalancerStep,
    Selection,
    Stage03GreedyBalancer,
    Stage03Result,
    select_chore,
    sort_entries,
)
from .stage_04_load_reconciler import Stage04LoadReconciler, Stage04Result

__all__ = [
    "Stage01Normalizer",
    "Stage01Result",
    "NormalizerConfig",
    "Stage02ExceptionResolver",
    "Stage02Result",
    "ExceptionResolverConfig",
    "EXCEPTION_SENTINEL_FRACTION",
    "Stage03GreedyBalancer",
    "Stage03Result",
    "BalancerStep",
    "Selection",
    "select_chore",
    "sort_entries",
    "Stage04LoadReconciler",
    "Stage04Result",
]
