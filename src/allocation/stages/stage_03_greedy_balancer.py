"""STAGE 3: Greedy Balancer

Пошаговое жадное назначение задач с учётом накопленной нагрузки:
- Оба списка сортируются по доле по убыванию (стабильно: равные доли
  сохраняют порядок входа)
- Нагрузки load1/load2 стартуют с персистентной CumulativeLoad
- Пока оба списка не пусты: получатель — пользователь с меньшей нагрузкой
  (при равенстве — User 1); один selection pass назначает ровно одну задачу

Selection pass (получатель R, другой пользователь O), скан списка R с индекса 0:
- own = R[i].fraction, other = доля той же задачи в списке O
- own < other (сравнительное преимущество R) → задача назначается R
- отсутствующая пара в O — нет информации о преимуществе → следующий индекс
- скан исчерпан → fallback: назначается R[0] безусловно

Fallback намеренно берёт R[0], а не последний просмотренный элемент.
Вместе с sentinel-долей это значит, что задача, закреплённая от R,
может быть назначена R, когда других кандидатов с преимуществом нет.

Назначенный ключ удаляется из обоих списков, поэтому списки уменьшаются
синхронно и опустевают одновременно.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from src.allocation.stages.stage_02_exception_resolver import Stage02Result
from src.core.domain.assignment import AssignedChore
from src.core.domain.chore import ChoreEstimate, ChoreKey, NormalizedEntry, UserSlot
from src.core.domain.load import CumulativeLoad


logger = logging.getLogger(__name__)


# =============================================================================
# SELECTION PASS
# =============================================================================


@dataclass(frozen=True)
class Selection:
    """Результат одного selection pass."""

    chosen: NormalizedEntry

    # Снапшоты списков после удаления выбранного ключа
    recipient_remaining: tuple[NormalizedEntry, ...]
    other_remaining: tuple[NormalizedEntry, ...]

    # Индекс выбранной записи в списке получателя (0 для fallback)
    scan_index: int
    used_fallback: bool


def sort_entries(entries: Iterable[NormalizedEntry]) -> tuple[NormalizedEntry, ...]:
    """Сортировка по доле по убыванию; sorted() стабилен и при reverse=True."""
    return tuple(sorted(entries, key=lambda entry: entry.fraction, reverse=True))


def select_chore(
    recipient_entries: Sequence[NormalizedEntry],
    other_entries: Sequence[NormalizedEntry],
) -> Selection:
    """Один selection pass для получателя.

    Чистая функция: входные снапшоты не изменяются, обновлённые
    списки возвращаются в Selection.

    Args:
        recipient_entries: отсортированный список получателя
        other_entries: отсортированный список другого пользователя

    Returns:
        Selection с выбранной записью и обновлёнными списками

    Raises:
        ValueError: если список получателя пуст
    """
    if not recipient_entries:
        raise ValueError("recipient_entries must not be empty")

    other_fractions = {entry.key: entry.fraction for entry in other_entries}
    bound = min(len(recipient_entries), len(other_entries))

    chosen_index: int | None = None
    for i in range(bound):
        entry = recipient_entries[i]
        other_value = other_fractions.get(entry.key)
        if other_value is not None and entry.fraction < other_value:
            chosen_index = i
            break

    used_fallback = chosen_index is None
    if chosen_index is None:
        chosen_index = 0

    chosen = recipient_entries[chosen_index]

    return Selection(
        chosen=chosen,
        recipient_remaining=tuple(e for e in recipient_entries if e.key != chosen.key),
        other_remaining=tuple(e for e in other_entries if e.key != chosen.key),
        scan_index=chosen_index,
        used_fallback=used_fallback,
    )


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class BalancerStep:
    """Трассировка одного selection pass."""

    pass_number: int
    recipient: UserSlot
    key: ChoreKey
    time_value: float
    scan_index: int
    used_fallback: bool

    # True если задача была закреплена от получателя
    pinned_against_recipient: bool

    # Нагрузки после pass
    load_user_1: float
    load_user_2: float

    # Оставшиеся ключи после pass
    remaining_user_1: frozenset[ChoreKey]
    remaining_user_2: frozenset[ChoreKey]


@dataclass(frozen=True)
class Stage03Result:
    """Результат STAGE 3."""

    # Назначения в порядке принятия решений
    assignments: tuple[AssignedChore, ...]

    initial_load: CumulativeLoad
    final_load: CumulativeLoad

    steps: tuple[BalancerStep, ...]

    details: str


# =============================================================================
# STAGE 3
# =============================================================================


class Stage03GreedyBalancer:
    """STAGE 3: жадная балансировка по нагрузке.

    Число selection pass равно числу задач; получатели чередуются
    по мере смещения нагрузок.
    """

    def evaluate(
        self,
        chores: Sequence[ChoreEstimate],
        stage02_result: Stage02Result,
        initial_load: CumulativeLoad,
    ) -> Stage03Result:
        """Назначение всех задач.

        Args:
            chores: задачи в порядке входа (источник exception-тегов)
            stage02_result: списки после применения override
            initial_load: персистентная нагрузка на начало прогона

        Returns:
            Stage03Result с назначениями, итоговой нагрузкой и трассировкой
        """
        exception_keys = {chore.key for chore in chores if chore.is_exception}

        lists = {user: sort_entries(stage02_result.entries_for(user)) for user in UserSlot}
        loads = {user: initial_load.for_user(user) for user in UserSlot}

        assignments: list[AssignedChore] = []
        steps: list[BalancerStep] = []

        while lists[UserSlot.USER_1] and lists[UserSlot.USER_2]:
            recipient = (
                UserSlot.USER_1
                if loads[UserSlot.USER_1] <= loads[UserSlot.USER_2]
                else UserSlot.USER_2
            )
            other = recipient.other

            selection = select_chore(lists[recipient], lists[other])
            lists[recipient] = selection.recipient_remaining
            lists[other] = selection.other_remaining

            chosen = selection.chosen
            loads[recipient] += chosen.fraction

            assignments.append(
                AssignedChore(
                    name=chosen.key.name,
                    day=chosen.key.day,
                    time_value=chosen.fraction,
                    is_exception=chosen.key in exception_keys,
                    owner_user_id=recipient,
                )
            )

            step = BalancerStep(
                pass_number=len(steps) + 1,
                recipient=recipient,
                key=chosen.key,
                time_value=chosen.fraction,
                scan_index=selection.scan_index,
                used_fallback=selection.used_fallback,
                pinned_against_recipient=chosen.pinned,
                load_user_1=loads[UserSlot.USER_1],
                load_user_2=loads[UserSlot.USER_2],
                remaining_user_1=frozenset(e.key for e in lists[UserSlot.USER_1]),
                remaining_user_2=frozenset(e.key for e in lists[UserSlot.USER_2]),
            )
            steps.append(step)

            logger.debug(
                "Pass %d: %s -> user_%d (value=%.3f, index=%d, fallback=%s, loads=%.3f/%.3f)",
                step.pass_number,
                chosen.key,
                int(recipient),
                chosen.fraction,
                selection.scan_index,
                selection.used_fallback,
                step.load_user_1,
                step.load_user_2,
            )
            if chosen.pinned:
                logger.warning(
                    "Chore %s pinned away from user_%d assigned to that user by fallback",
                    chosen.key,
                    int(recipient),
                )

            if step.remaining_user_1 != step.remaining_user_2:
                raise RuntimeError(
                    f"Lockstep invariant violated after pass {step.pass_number}: "
                    f"user_1 keys {sorted(map(str, step.remaining_user_1))} != "
                    f"user_2 keys {sorted(map(str, step.remaining_user_2))}"
                )

        final_load = CumulativeLoad(
            user_1=loads[UserSlot.USER_1],
            user_2=loads[UserSlot.USER_2],
        )
        fallback_count = sum(1 for step in steps if step.used_fallback)

        return Stage03Result(
            assignments=tuple(assignments),
            initial_load=initial_load,
            final_load=final_load,
            steps=tuple(steps),
            details=(
                f"Assigned {len(assignments)} chores in {len(steps)} passes "
                f"({fallback_count} by fallback): "
                f"load_user_1={final_load.user_1:.3f}, load_user_2={final_load.user_2:.3f}"
            ),
        )
