"""Валидация входа аллокатора.

Все ошибки входа обнаруживаются до запуска первой стадии:
- Некорректные записи (пустые name/day, не две оценки, отрицательные/NaN оценки,
  exception вне {0, 1, 2}) → jsonschema.ValidationError / pydantic.ValidationError
- Дубликат естественного ключа (name, day) → DuplicateChoreKeyError
- Нулевая суммарная оценка пользователя → ZeroTotalEstimateError
- Сумма оценок пользователя вне конечного диапазона float → AllocationInputError
- Невалидная нагрузка из load store → AllocationInputError

Пустой набор задач ошибкой не является.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from src.core.contracts import validate_chore_estimate
from src.core.domain.chore import ChoreEstimate, ChoreKey, UserSlot
from src.core.domain.load import CumulativeLoad
from src.core.math.numerical_safeguards import is_valid_float, sum_non_negative


# =============================================================================
# EXCEPTIONS
# =============================================================================


class AllocationInputError(ValueError):
    """Вход аллокатора отклонён до начала аллокации."""
    pass


class DuplicateChoreKeyError(AllocationInputError):
    """Естественный ключ (name, day) встречается в прогоне больше одного раза."""

    def __init__(self, key: ChoreKey):
        self.key = key
        super().__init__(f"Duplicate chore key: name={key.name!r}, day={key.day!r}")


class ZeroTotalEstimateError(AllocationInputError):
    """
    Суммарная оценка пользователя равна нулю.

    Нормированные доли для такого пользователя не определены
    (деление на ноль), поэтому прогон отклоняется целиком.
    """

    def __init__(self, user: UserSlot):
        self.user = user
        super().__init__(
            f"Total estimated time of user {int(user)} is zero; "
            f"normalized fractions are undefined"
        )


# =============================================================================
# PARSING
# =============================================================================


def parse_chore(
    record: ChoreEstimate | Mapping[str, Any],
    validate_contract: bool = True,
) -> ChoreEstimate:
    """Приведение одной записи к ChoreEstimate.

    Dict-записи (например, прочитанные из JSON) сначала проверяются
    по схеме chore_estimate, затем строится pydantic модель.

    Raises:
        jsonschema.ValidationError: Запись не соответствует контракту
        pydantic.ValidationError: Запись не проходит валидацию модели
    """
    if isinstance(record, ChoreEstimate):
        return record

    data = dict(record)
    if validate_contract:
        validate_chore_estimate(data)
    return ChoreEstimate.model_validate(data)


def parse_chores(
    records: Iterable[ChoreEstimate | Mapping[str, Any]],
    validate_contracts: bool = True,
) -> tuple[ChoreEstimate, ...]:
    """Приведение записей к ChoreEstimate с сохранением порядка входа."""
    return tuple(parse_chore(record, validate_contracts) for record in records)


# =============================================================================
# CHECKS
# =============================================================================


def check_unique_keys(chores: Sequence[ChoreEstimate]) -> None:
    """
    Raises:
        DuplicateChoreKeyError: Если ключ (name, day) повторяется
    """
    seen: set[ChoreKey] = set()
    for chore in chores:
        key = chore.key
        if key in seen:
            raise DuplicateChoreKeyError(key)
        seen.add(key)


def compute_totals(chores: Sequence[ChoreEstimate]) -> tuple[float, float]:
    """
    Суммарная оценка времени для каждого пользователя.

    Raises:
        AllocationInputError: Если сумма пользователя переполняется до inf
        ZeroTotalEstimateError: Если у непустого набора задач сумма пользователя 0
    """
    totals = tuple(
        sum_non_negative(
            (chore.estimate_for(user) for chore in chores),
            name=f"estimate[user_{int(user)}]",
        )
        for user in UserSlot
    )

    for user in UserSlot:
        if not is_valid_float(totals[user.index]):
            raise AllocationInputError(
                f"Total estimated time of user {int(user)} is not finite "
                f"({totals[user.index]}); estimates are too large to normalize"
            )

    if chores:
        for user in UserSlot:
            if totals[user.index] == 0:
                raise ZeroTotalEstimateError(user)

    return totals


def validate_chores(chores: Sequence[ChoreEstimate]) -> tuple[float, float]:
    """Полная проверка набора задач перед аллокацией.

    Returns:
        Суммарные оценки (user_1, user_2)
    """
    check_unique_keys(chores)
    return compute_totals(chores)


def parse_loads(loads: Sequence[float]) -> CumulativeLoad:
    """
    Приведение ответа load store к CumulativeLoad.

    Raises:
        AllocationInputError: Если нагрузок не две или они невалидны
    """
    values = tuple(loads)
    if len(values) != len(UserSlot):
        raise AllocationInputError(
            f"Load store must return {len(UserSlot)} loads, got {len(values)}"
        )

    try:
        return CumulativeLoad(user_1=values[0], user_2=values[1])
    except ValidationError as e:
        raise AllocationInputError(f"Invalid cumulative load {values}: {e}") from e
