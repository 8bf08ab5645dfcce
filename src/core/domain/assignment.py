"""
AssignedChore — итоговое решение по одной задаче

Immutable Pydantic модель. Создаётся ровно один раз на задачу за прогон
и передаётся в assignment sink в порядке принятия решений.
Соответствует схеме contracts/schema/assigned_chore.json.
"""

from pydantic import BaseModel, Field

from .chore import ChoreKey, UserSlot


class AssignedChore(BaseModel):
    """
    Назначенная задача.

    time_value — нормированная доля, списанная на владельца (включая
    sentinel-значение, если закреплённая запись назначена через fallback).
    """

    name: str = Field(..., min_length=1, description="Название задачи")
    day: str = Field(..., min_length=1, description="День задачи")
    time_value: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Нормированная доля владельца"
    )
    is_exception: bool = Field(..., description="True если у задачи был ручной override")
    owner_user_id: UserSlot = Field(..., description="Владелец (1 или 2)")

    model_config = {"frozen": True}

    @property
    def key(self) -> ChoreKey:
        """Естественный ключ (name, day)"""
        return ChoreKey(name=self.name, day=self.day)
