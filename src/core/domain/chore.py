"""
Chore — модели задачи и её оценок

Immutable модели входа аллокатора:
- ChoreEstimate: задача с оценками времени для обоих пользователей
- ChoreKey: естественный ключ (name, day), уникальный в пределах одного прогона
- NormalizedEntry: нормированная доля задачи для одного пользователя

Пользователей ровно двое, слоты нумеруются 1 и 2.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.core.math.numerical_safeguards import (
    FRACTION_MAX,
    validate_in_range,
    validate_non_negative,
)


# =============================================================================
# ENUMS
# =============================================================================


class UserSlot(IntEnum):
    """Слот пользователя в паре"""

    USER_1 = 1
    USER_2 = 2

    @property
    def other(self) -> "UserSlot":
        """Второй пользователь пары"""
        return UserSlot.USER_2 if self is UserSlot.USER_1 else UserSlot.USER_1

    @property
    def index(self) -> int:
        """Индекс в векторе оценок/нагрузок (0 или 1)"""
        return int(self) - 1


class ChoreException(IntEnum):
    """
    Ручной override назначения.

    FORCE_USER_1 убирает задачу из обычного рассмотрения User 1
    (его запись получает sentinel-долю), FORCE_USER_2 — симметрично.
    """

    NONE = 0
    FORCE_USER_1 = 1
    FORCE_USER_2 = 2

    @property
    def pinned_user(self) -> UserSlot | None:
        """Пользователь, от которого задача закреплена (None если override нет)"""
        if self is ChoreException.FORCE_USER_1:
            return UserSlot.USER_1
        if self is ChoreException.FORCE_USER_2:
            return UserSlot.USER_2
        return None


# =============================================================================
# VALUE OBJECTS
# =============================================================================


@dataclass(frozen=True)
class ChoreKey:
    """Естественный ключ задачи: (name, day)."""

    name: str
    day: str

    def __str__(self) -> str:
        return f"{self.name}@{self.day}"


@dataclass(frozen=True)
class NormalizedEntry:
    """Нормированная доля задачи для одного пользователя.

    fraction в [0, 1] для обычной записи; закреплённая запись несёт
    sentinel-значение (по умолчанию 1.5), которое больше любой доли.
    """

    key: ChoreKey
    fraction: float
    pinned: bool = False

    def __post_init__(self) -> None:
        if not self.pinned:
            validate_in_range(self.fraction, f"fraction[{self.key}]", 0.0, FRACTION_MAX)


# =============================================================================
# CHORE ESTIMATE MODEL
# =============================================================================


class ChoreEstimate(BaseModel):
    """
    Задача с оценками времени для обоих пользователей.

    Immutable модель (frozen=True). Оценки — неотрицательные длительности
    в любых единицах, одинаковых в пределах прогона.
    """

    name: str = Field(..., min_length=1, description="Название задачи (например, 'dishes')")
    day: str = Field(..., min_length=1, description="День задачи (например, 'mon')")
    estimate: tuple[float, float] = Field(
        ..., description="Оценки времени [User 1, User 2]"
    )
    exception: ChoreException = Field(
        ChoreException.NONE, description="Override: 0 = нет, 1/2 = закреплена от User 1/2"
    )

    model_config = {"frozen": True}

    @field_validator("name", "day")
    @classmethod
    def validate_not_blank(cls, v: str, info) -> str:
        """Ключевые поля не могут состоять из одних пробелов"""
        if not v.strip():
            raise ValueError(f"{info.field_name} must not be blank")
        return v

    @field_validator("exception", mode="before")
    @classmethod
    def reject_bool_exception(cls, v: Any) -> Any:
        """bool не приводится к override (True != FORCE_USER_1)"""
        if isinstance(v, bool):
            raise ValueError(f"exception must be 0, 1 or 2, got {v!r}")
        return v

    @field_validator("estimate")
    @classmethod
    def validate_estimate_values(cls, v: tuple[float, float]) -> tuple[float, float]:
        """Каждая оценка конечная и неотрицательная"""
        for slot, value in zip(UserSlot, v):
            validate_non_negative(value, f"estimate[user_{int(slot)}]")
        return v

    @property
    def key(self) -> ChoreKey:
        """Естественный ключ (name, day)"""
        return ChoreKey(name=self.name, day=self.day)

    def estimate_for(self, user: UserSlot) -> float:
        """Оценка времени задачи для пользователя"""
        return self.estimate[user.index]

    @property
    def is_exception(self) -> bool:
        """True если у задачи есть ручной override"""
        return self.exception is not ChoreException.NONE
