"""ChoresAllocator — оркестратор аллокации задач между двумя пользователями.

Порядок прогона:
1. Валидация входа (до любых обращений к коллабораторам и стадиям)
2. Пустой набор задач → no-op: без назначений, без изменения нагрузки
3. Под блокировкой пары: load_store.get_loads()
4. STAGE 1 → STAGE 2 → STAGE 3 → STAGE 4 (чистые вычисления, без I/O)
5. Назначения проверяются по контракту assigned_chore, затем
   assignment_sink.add_assigned_chore(...) для каждой задачи в порядке решений
6. load_store.set_loads(delta1, delta2) ровно один раз

Коллабораторы передаются явно; блокировка защищает read-modify-write
нагрузки от чередования двух параллельных прогонов одной пары.
"""

import logging
import threading
from collections.abc import Iterable, Mapping, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any

from src.allocation.stages.stage_01_normalizer import (
    NormalizerConfig,
    Stage01Normalizer,
    Stage01Result,
)
from src.allocation.stages.stage_02_exception_resolver import (
    ExceptionResolverConfig,
    Stage02ExceptionResolver,
    Stage02Result,
)
from src.allocation.stages.stage_03_greedy_balancer import (
    Stage03GreedyBalancer,
    Stage03Result,
)
from src.allocation.stages.stage_04_load_reconciler import (
    Stage04LoadReconciler,
    Stage04Result,
)
from src.allocation.validation import parse_chores, parse_loads, validate_chores
from src.core.contracts import validate_assigned_chore
from src.core.domain.assignment import AssignedChore
from src.core.domain.chore import ChoreEstimate
from src.core.domain.load import CumulativeLoad, LoadDelta
from src.storage.protocols import AssignmentSink, LoadStore


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class AllocatorConfig:
    """Конфигурация аллокатора.

    validate_contracts: проверять dict-записи по chore_estimate до построения
        моделей и назначения по assigned_chore до передачи в sink
    """

    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)
    exception_resolver: ExceptionResolverConfig = field(default_factory=ExceptionResolverConfig)
    validate_contracts: bool = True


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class AllocationResult:
    """Результат прогона аллокации."""

    # Назначения в порядке принятия решений
    assignments: tuple[AssignedChore, ...]

    # Поправка, переданная в load store
    delta: LoadDelta

    # Нагрузки на начало и конец прогона (None для no-op)
    initial_load: CumulativeLoad | None
    final_load: CumulativeLoad | None

    # Результаты стадий (None для no-op)
    stage01_result: Stage01Result | None
    stage02_result: Stage02Result | None
    stage03_result: Stage03Result | None
    stage04_result: Stage04Result | None

    is_noop: bool
    details: str


def _noop_result() -> AllocationResult:
    return AllocationResult(
        assignments=(),
        delta=LoadDelta(),
        initial_load=None,
        final_load=None,
        stage01_result=None,
        stage02_result=None,
        stage03_result=None,
        stage04_result=None,
        is_noop=True,
        details="No chores: allocation skipped",
    )


# =============================================================================
# ALLOCATOR
# =============================================================================


class ChoresAllocator:
    """Аллокатор задач между двумя пользователями.

    Один экземпляр обслуживает одну пару пользователей. Для параллельных
    прогонов из разных экземпляров над одним хранилищем передайте общий lock.
    """

    def __init__(
        self,
        load_store: LoadStore,
        assignment_sink: AssignmentSink,
        config: AllocatorConfig | None = None,
        lock: AbstractContextManager | None = None,
    ):
        """
        Args:
            load_store: хранилище накопленной нагрузки пары
            assignment_sink: приёмник назначений
            config: конфигурация (default: AllocatorConfig())
            lock: блокировка пары (default: собственная threading.Lock)
        """
        self.load_store = load_store
        self.assignment_sink = assignment_sink
        self.config = config or AllocatorConfig()
        self._lock = lock or threading.Lock()

        self.stage01 = Stage01Normalizer(self.config.normalizer)
        self.stage02 = Stage02ExceptionResolver(self.config.exception_resolver)
        self.stage03 = Stage03GreedyBalancer()
        self.stage04 = Stage04LoadReconciler()

    def plan(
        self,
        chores: Sequence[ChoreEstimate],
        initial_load: CumulativeLoad,
    ) -> AllocationResult:
        """Чистый расчёт аллокации без обращений к коллабораторам.

        Проверяет набор задач (дубликаты ключей, суммы оценок) и считает стадии.

        Args:
            chores: задачи в порядке входа
            initial_load: накопленная нагрузка на начало прогона

        Returns:
            AllocationResult (назначения, поправка, результаты стадий)
        """
        if not chores:
            return _noop_result()

        return self._run_stages(chores, initial_load, validate_chores(chores))

    def _run_stages(
        self,
        chores: Sequence[ChoreEstimate],
        initial_load: CumulativeLoad,
        totals: tuple[float, float],
    ) -> AllocationResult:
        stage01_result = self.stage01.evaluate(chores, totals)
        stage02_result = self.stage02.evaluate(chores, stage01_result)
        stage03_result = self.stage03.evaluate(chores, stage02_result, initial_load)
        stage04_result = self.stage04.evaluate(stage03_result.final_load)

        return AllocationResult(
            assignments=stage03_result.assignments,
            delta=stage04_result.delta,
            initial_load=initial_load,
            final_load=stage03_result.final_load,
            stage01_result=stage01_result,
            stage02_result=stage02_result,
            stage03_result=stage03_result,
            stage04_result=stage04_result,
            is_noop=False,
            details=f"{stage03_result.details}; {stage04_result.details}",
        )

    def allocate_chores(
        self,
        chores: Iterable[ChoreEstimate | Mapping[str, Any]],
    ) -> AllocationResult:
        """Полный прогон: чтение нагрузки, аллокация, запись результатов.

        Args:
            chores: задачи (ChoreEstimate или dict по схеме chore_estimate)

        Returns:
            AllocationResult

        Raises:
            AllocationInputError: дубликат ключа, нулевая или бесконечная сумма
                оценок, невалидная нагрузка из load store
            jsonschema.ValidationError / pydantic.ValidationError: некорректная запись
        """
        parsed = parse_chores(chores, self.config.validate_contracts)

        if not parsed:
            logger.info("Allocation skipped: no chores supplied")
            return _noop_result()

        totals = validate_chores(parsed)

        with self._lock:
            initial_load = parse_loads(self.load_store.get_loads())
            result = self._run_stages(parsed, initial_load, totals)

            # Контракт проверяется для всех назначений до первой записи в sink
            if self.config.validate_contracts:
                for chore in result.assignments:
                    validate_assigned_chore(chore.model_dump(mode="json"))

            for chore in result.assignments:
                self.assignment_sink.add_assigned_chore(
                    chore.name,
                    chore.day,
                    chore.time_value,
                    chore.is_exception,
                    int(chore.owner_user_id),
                )

            self.load_store.set_loads(*result.delta.as_tuple())

        logger.info(
            "Allocated %d chores (initial loads %.3f/%.3f, delta %.3f/%.3f): %s",
            len(result.assignments),
            initial_load.user_1,
            initial_load.user_2,
            result.delta.user_1,
            result.delta.user_2,
            result.details,
        )
        return result
