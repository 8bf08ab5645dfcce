"""STAGE 2: Exception Resolver

- Применяет ручные override назначения к нормированным спискам STAGE 1
- FORCE_USER_1: запись задачи удаляется из списка User 1 (по ключу) и
  добавляется в конец с sentinel-долей 1.5; FORCE_USER_2 — симметрично
- Задачи без override остаются без изменений в обоих списках

Sentinel строго больше любой нормированной доли (<= 1.0), поэтому после
сортировки STAGE 3 закреплённая запись оказывается в начале списка владельца.
Это маркер, а не стоимость.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from src.allocation.stages.stage_01_normalizer import Stage01Result
from src.core.domain.chore import ChoreEstimate, ChoreKey, NormalizedEntry, UserSlot
from src.core.math.numerical_safeguards import FRACTION_MAX


# =============================================================================
# CONSTANTS
# =============================================================================

# Доля закреплённой записи (вне нормального диапазона [0, 1])
EXCEPTION_SENTINEL_FRACTION: Final[float] = 1.5


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Stage02Result:
    """Результат STAGE 2."""

    user_1_entries: tuple[NormalizedEntry, ...]
    user_2_entries: tuple[NormalizedEntry, ...]

    # Ключи, закреплённые от каждого пользователя
    pinned_user_1: frozenset[ChoreKey]
    pinned_user_2: frozenset[ChoreKey]

    details: str

    def entries_for(self, user: UserSlot) -> tuple[NormalizedEntry, ...]:
        return self.user_1_entries if user is UserSlot.USER_1 else self.user_2_entries

    def pinned_for(self, user: UserSlot) -> frozenset[ChoreKey]:
        return self.pinned_user_1 if user is UserSlot.USER_1 else self.pinned_user_2


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ExceptionResolverConfig:
    """Конфигурация STAGE 2."""

    sentinel_fraction: float = EXCEPTION_SENTINEL_FRACTION


# =============================================================================
# STAGE 2
# =============================================================================


class Stage02ExceptionResolver:
    """STAGE 2: override → sentinel-доли.

    Все задачи просматриваются в порядке входа; каждая закреплённая
    задача переставляется в конец списка пользователя, от которого
    она закреплена.
    """

    def __init__(self, config: ExceptionResolverConfig | None = None):
        self.config = config or ExceptionResolverConfig()

        if not self.config.sentinel_fraction > FRACTION_MAX:
            raise ValueError(
                f"sentinel_fraction must exceed {FRACTION_MAX}, "
                f"got {self.config.sentinel_fraction}"
            )

    def evaluate(
        self,
        chores: Sequence[ChoreEstimate],
        stage01_result: Stage01Result,
    ) -> Stage02Result:
        """Применение override.

        Args:
            chores: задачи в порядке входа (источник exception-тегов)
            stage01_result: нормированные доли STAGE 1

        Returns:
            Stage02Result с обновлёнными списками
        """
        entries = {user: list(stage01_result.entries_for(user)) for user in UserSlot}
        pinned: dict[UserSlot, list[ChoreKey]] = {user: [] for user in UserSlot}

        for chore in chores:
            user = chore.exception.pinned_user
            if user is None:
                continue

            key = chore.key
            entries[user] = [entry for entry in entries[user] if entry.key != key]
            entries[user].append(
                NormalizedEntry(key=key, fraction=self.config.sentinel_fraction, pinned=True)
            )
            pinned[user].append(key)

        return Stage02Result(
            user_1_entries=tuple(entries[UserSlot.USER_1]),
            user_2_entries=tuple(entries[UserSlot.USER_2]),
            pinned_user_1=frozenset(pinned[UserSlot.USER_1]),
            pinned_user_2=frozenset(pinned[UserSlot.USER_2]),
            details=(
                f"Pinned away from user_1: {len(pinned[UserSlot.USER_1])}, "
                f"from user_2: {len(pinned[UserSlot.USER_2])}"
            ),
        )
