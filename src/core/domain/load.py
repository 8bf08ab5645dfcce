"""
Load — модели накопленной нагрузки пользователей

CumulativeLoad — персистентная нагрузка пары, переносимая между периодами.
LoadDelta — аддитивная поправка, которую аллокатор передаёт в load store
по завершении прогона.

Полная совместимость с JSON Schema (contracts/schema/cumulative_load.json).
"""

from pydantic import BaseModel, Field, model_validator

from .chore import UserSlot


class CumulativeLoad(BaseModel):
    """
    Накопленная нагрузка обоих пользователей.

    Нагрузка измеряется в нормированных долях (сумма долей назначенных задач).
    """

    user_1: float = Field(..., ge=0, allow_inf_nan=False, description="Нагрузка User 1")
    user_2: float = Field(..., ge=0, allow_inf_nan=False, description="Нагрузка User 2")

    model_config = {"frozen": True}

    @classmethod
    def zero(cls) -> "CumulativeLoad":
        """Нулевая нагрузка (первый период)"""
        return cls(user_1=0.0, user_2=0.0)

    def for_user(self, user: UserSlot) -> float:
        """Нагрузка пользователя"""
        return self.user_1 if user is UserSlot.USER_1 else self.user_2

    def as_tuple(self) -> tuple[float, float]:
        """(user_1, user_2) в формате load store"""
        return (self.user_1, self.user_2)


class LoadDelta(BaseModel):
    """
    Аддитивная поправка нагрузки на следующий период.

    Менее нагруженный пользователь получает положительный перенос,
    более нагруженный — 0. Ненулевой может быть максимум одна компонента.
    """

    user_1: float = Field(0.0, ge=0, allow_inf_nan=False, description="Перенос для User 1")
    user_2: float = Field(0.0, ge=0, allow_inf_nan=False, description="Перенос для User 2")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_single_recipient(self) -> "LoadDelta":
        """Проверка, что перенос получает не более одного пользователя"""
        if self.user_1 > 0 and self.user_2 > 0:
            raise ValueError(
                f"only one user may receive a carry-forward, got "
                f"user_1={self.user_1}, user_2={self.user_2}"
            )
        return self

    def for_user(self, user: UserSlot) -> float:
        """Поправка для пользователя"""
        return self.user_1 if user is UserSlot.USER_1 else self.user_2

    def as_tuple(self) -> tuple[float, float]:
        """(delta1, delta2) в формате load store"""
        return (self.user_1, self.user_2)

    @property
    def is_zero(self) -> bool:
        """True если поправка нулевая"""
        return self.user_1 == 0 and self.user_2 == 0
