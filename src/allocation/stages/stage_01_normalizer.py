"""STAGE 1: Normalizer

- Первая стадия в цепочке аллокации
- Считает один раз суммарную оценку времени каждого пользователя
- Для каждой задачи и каждого пользователя строит NormalizedEntry:
  fraction = round(estimate[user] / total[user], 3)

Доля измеряет относительную, а не абсолютную стоимость задачи для пользователя.

Интеграция:
- Вход: проверенный набор ChoreEstimate (порядок входа сохраняется)
- Нулевая сумма пользователя → ZeroTotalEstimateError (inf/NaN не производятся)
"""

from collections.abc import Sequence
from dataclasses import dataclass

from src.allocation.validation import compute_totals
from src.core.domain.chore import ChoreEstimate, NormalizedEntry, UserSlot
from src.core.math.numerical_safeguards import FRACTION_DECIMALS, fraction_of_total


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Stage01Result:
    """Результат STAGE 1."""

    # Суммарные оценки (user_1, user_2)
    totals: tuple[float, float]

    # Нормированные записи в порядке входа
    user_1_entries: tuple[NormalizedEntry, ...]
    user_2_entries: tuple[NormalizedEntry, ...]

    # Детали
    details: str

    def entries_for(self, user: UserSlot) -> tuple[NormalizedEntry, ...]:
        return self.user_1_entries if user is UserSlot.USER_1 else self.user_2_entries


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class NormalizerConfig:
    """Конфигурация STAGE 1."""

    # Число знаков округления доли
    fraction_decimals: int = FRACTION_DECIMALS


# =============================================================================
# STAGE 1
# =============================================================================


class Stage01Normalizer:
    """STAGE 1: оценки времени → нормированные доли.

    Порядок:
    1. total[user] = Σ estimate[user] (один проход)
    2. Нулевая сумма → ZeroTotalEstimateError
    3. fraction = round(estimate[user] / total[user], fraction_decimals)
    """

    def __init__(self, config: NormalizerConfig | None = None):
        self.config = config or NormalizerConfig()

    def evaluate(
        self,
        chores: Sequence[ChoreEstimate],
        totals: tuple[float, float] | None = None,
    ) -> Stage01Result:
        """Нормализация оценок.

        Args:
            chores: задачи в порядке входа
            totals: суммы, уже посчитанные validate_chores (None → посчитать здесь)

        Returns:
            Stage01Result с долями обоих пользователей

        Raises:
            ZeroTotalEstimateError: если сумма оценок пользователя равна нулю
        """
        if not chores:
            return Stage01Result(
                totals=(0.0, 0.0),
                user_1_entries=(),
                user_2_entries=(),
                details="No chores: nothing to normalize",
            )

        if totals is None:
            totals = compute_totals(chores)

        entries = {
            user: tuple(
                NormalizedEntry(
                    key=chore.key,
                    fraction=fraction_of_total(
                        chore.estimate_for(user),
                        totals[user.index],
                        self.config.fraction_decimals,
                    ),
                )
                for chore in chores
            )
            for user in UserSlot
        }

        return Stage01Result(
            totals=totals,
            user_1_entries=entries[UserSlot.USER_1],
            user_2_entries=entries[UserSlot.USER_2],
            details=(
                f"Normalized {len(chores)} chores: "
                f"total_user_1={totals[0]}, total_user_2={totals[1]}"
            ),
        )
