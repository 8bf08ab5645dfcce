"""Контракты внешних коллабораторов аллокатора.

- LoadStore: персистентная накопленная нагрузка пары пользователей
- AssignmentSink: приёмник итоговых назначений

Аллокатор получает оба объекта через конструктор; глобальных
экземпляров нет.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LoadStore(Protocol):
    """Хранилище накопленной нагрузки."""

    def get_loads(self) -> tuple[float, float]:
        """Текущие нагрузки (user_1, user_2)."""
        ...

    def set_loads(self, delta1: float, delta2: float) -> None:
        """Применение аддитивной поправки (не абсолютных значений)."""
        ...


@runtime_checkable
class AssignmentSink(Protocol):
    """Приёмник назначений; вызывается один раз на задачу в порядке решений."""

    def add_assigned_chore(
        self,
        name: str,
        day: str,
        time: float,
        is_exception: bool,
        owner_user_id: int,
    ) -> None:
        ...
