"""In-memory реализации LoadStore и AssignmentSink.

Используются в тестах и во встраивающих приложениях без собственной БД.
Обе реализации потокобезопасны.
"""

from threading import RLock

from src.core.domain.assignment import AssignedChore
from src.core.domain.chore import UserSlot
from src.core.domain.load import CumulativeLoad


class InMemoryLoadStore:
    """Накопленная нагрузка в памяти процесса.

    set_loads прибавляет поправку к хранимым значениям.
    """

    def __init__(self, user_1: float = 0.0, user_2: float = 0.0):
        self._load = CumulativeLoad(user_1=user_1, user_2=user_2)
        self._lock = RLock()

        # История применённых поправок (для диагностики)
        self.applied_deltas: list[tuple[float, float]] = []

    def get_loads(self) -> tuple[float, float]:
        with self._lock:
            return self._load.as_tuple()

    def set_loads(self, delta1: float, delta2: float) -> None:
        with self._lock:
            # CumulativeLoad отклоняет отрицательный/NaN результат
            self._load = CumulativeLoad(
                user_1=self._load.user_1 + delta1,
                user_2=self._load.user_2 + delta2,
            )
            self.applied_deltas.append((delta1, delta2))

    @property
    def load(self) -> CumulativeLoad:
        with self._lock:
            return self._load


class InMemoryAssignmentSink:
    """Упорядоченный список назначений."""

    def __init__(self):
        self._assignments: list[AssignedChore] = []
        self._lock = RLock()

    def add_assigned_chore(
        self,
        name: str,
        day: str,
        time: float,
        is_exception: bool,
        owner_user_id: int,
    ) -> None:
        chore = AssignedChore(
            name=name,
            day=day,
            time_value=time,
            is_exception=is_exception,
            owner_user_id=UserSlot(owner_user_id),
        )
        with self._lock:
            self._assignments.append(chore)

    @property
    def assignments(self) -> tuple[AssignedChore, ...]:
        with self._lock:
            return tuple(self._assignments)

    def for_user(self, user: UserSlot) -> tuple[AssignedChore, ...]:
        return tuple(a for a in self.assignments if a.owner_user_id is user)

    def clear(self) -> None:
        with self._lock:
            self._assignments.clear()
