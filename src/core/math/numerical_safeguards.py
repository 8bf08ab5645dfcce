"""
Numerical Safeguards — примитивы для нормированных долей и нагрузок

Модуль обеспечивает численную корректность расчётов аллокатора:
- Проверка float на NaN/Inf
- Валидация неотрицательных оценок и нагрузок
- Точное деление доли на сумму (без epsilon-подмены знаменателя)
- Округление долей до фиксированного числа знаков

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не маскируется fallback-значением — это ошибка входа
2. NaN/Inf никогда не попадают в доли и нагрузки
3. Округление детерминировано (встроенный round, half-to-even)
"""

import math
from collections.abc import Iterable
from typing import Final

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Число знаков после запятой для нормированной доли
FRACTION_DECIMALS: Final[int] = 3

# Верхняя граница нормированной доли (одна задача = вся нагрузка пользователя)
FRACTION_MAX: Final[float] = 1.0


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное и конечное.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_in_range(value: float, name: str, low: float, high: float) -> None:
    """
    Валидация, что значение конечное и лежит в замкнутом интервале [low, high].

    Используется для нормированных долей: [0, FRACTION_MAX].

    Raises:
        ValueError: Если value вне [low, high] или NaN/Inf
    """
    if not (is_valid_float(value) and low <= value <= high):
        raise ValueError(f"{name} must be within [{low}, {high}], got {value}")


# =============================================================================
# СУММЫ И ДОЛИ
# =============================================================================


def sum_non_negative(values: Iterable[float], name: str) -> float:
    """
    Сумма неотрицательных конечных значений.

    Args:
        values: Значения для суммирования
        name: Имя величины (для сообщения об ошибке)

    Returns:
        Сумма значений (0.0 для пустого набора)

    Raises:
        ValueError: Если хотя бы одно значение отрицательное или NaN/Inf
    """
    total = 0.0
    for index, value in enumerate(values):
        validate_non_negative(value, f"{name}[{index}]")
        total += value
    return total


def round_fraction(value: float, decimals: int = FRACTION_DECIMALS) -> float:
    """
    Округление доли до заданного числа знаков.

    Examples:
        >>> round_fraction(0.6666666)
        0.667
        >>> round_fraction(0.25)
        0.25
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    return round(value, decimals)


def fraction_of_total(
    part: float,
    total: float,
    decimals: int = FRACTION_DECIMALS,
) -> float:
    """
    Нормированная доля part / total, округлённая до decimals знаков.

    В отличие от epsilon-защищённого деления, нулевой знаменатель здесь
    не подменяется: доля от нулевой суммы не определена.

    Args:
        part: Оценка одной задачи
        total: Суммарная оценка пользователя за период
        decimals: Число знаков округления

    Returns:
        Доля в [0, 1] при 0 <= part <= total

    Raises:
        ValueError: Если total <= 0 или аргументы невалидны

    Examples:
        >>> fraction_of_total(10, 40)
        0.25
        >>> fraction_of_total(20, 30)
        0.667
    """
    validate_non_negative(part, "part")
    validate_non_negative(total, "total")

    if total == 0:
        raise ValueError("total must be positive to compute a fraction, got 0")

    return round_fraction(part / total, decimals)
