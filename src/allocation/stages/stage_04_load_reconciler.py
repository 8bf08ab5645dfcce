"""STAGE 4: Load Reconciler

- Последняя стадия в цепочке аллокации
- Сравнивает итоговые нагрузки STAGE 3 и вычисляет аддитивную поправку
  для load store:
  * L1 < L2 → (L2 - L1, 0): перенос получает менее нагруженный User 1
  * L2 < L1 → (0, L1 - L2): перенос получает менее нагруженный User 2
  * L1 == L2 → (0, 0)

Поправка равна разрыву итоговых нагрузок и прибавляется к хранимой нагрузке
менее нагруженного пользователя. В следующем периоде он стартует с этим
разрывом, поэтому первую задачу периода получает другой пользователь.
Назначения текущего периода поправка не меняет.
"""

from dataclasses import dataclass

from src.core.domain.chore import UserSlot
from src.core.domain.load import CumulativeLoad, LoadDelta


@dataclass(frozen=True)
class Stage04Result:
    """Результат STAGE 4."""

    delta: LoadDelta
    final_load: CumulativeLoad

    # Получатель переноса (None при равных нагрузках)
    lower_loaded_user: UserSlot | None

    details: str


class Stage04LoadReconciler:
    """STAGE 4: итоговые нагрузки → поправка на следующий период."""

    def evaluate(self, final_load: CumulativeLoad) -> Stage04Result:
        load_1 = final_load.user_1
        load_2 = final_load.user_2

        if load_1 < load_2:
            lower = UserSlot.USER_1
            delta = LoadDelta(user_1=load_2 - load_1, user_2=0.0)
        elif load_2 < load_1:
            lower = UserSlot.USER_2
            delta = LoadDelta(user_1=0.0, user_2=load_1 - load_2)
        else:
            lower = None
            delta = LoadDelta(user_1=0.0, user_2=0.0)

        if lower is None:
            details = f"Balanced: load_user_1=load_user_2={load_1:.3f}"
        else:
            details = (
                f"Carry-forward {delta.for_user(lower):.3f} to user_{int(lower)} "
                f"(load_user_1={load_1:.3f}, load_user_2={load_2:.3f})"
            )

        return Stage04Result(
            delta=delta,
            final_load=final_load,
            lower_loaded_user=lower,
            details=details,
        )
