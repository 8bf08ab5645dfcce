"""Unit тесты для STAGE 4: Load Reconciler.

Coverage:
- L1 < L2 → перенос (L2 - L1) для User 1
- L2 < L1 → перенос (L1 - L2) для User 2
- L1 == L2 → (0, 0)
- Поправка никогда не отрицательна
"""

import pytest

from src.allocation.stages.stage_04_load_reconciler import Stage04LoadReconciler
from src.core.domain.chore import UserSlot
from src.core.domain.load import CumulativeLoad


@pytest.fixture
def stage04():
    """Fixture для STAGE 4."""
    return Stage04LoadReconciler()


def test_stage04_user_1_lower(stage04):
    """Менее нагруженный User 1 получает перенос."""
    result = stage04.evaluate(CumulativeLoad(user_1=0.25, user_2=0.333))

    assert result.lower_loaded_user is UserSlot.USER_1
    assert result.delta.user_1 == pytest.approx(0.083)
    assert result.delta.user_2 == 0.0
    assert "user_1" in result.details


def test_stage04_user_2_lower(stage04):
    """Менее нагруженный User 2 получает перенос."""
    result = stage04.evaluate(CumulativeLoad(user_1=1.5, user_2=0.5))

    assert result.lower_loaded_user is UserSlot.USER_2
    assert result.delta.as_tuple() == (0.0, 1.0)


def test_stage04_equal_loads(stage04):
    """Равные нагрузки → нулевая поправка."""
    result = stage04.evaluate(CumulativeLoad(user_1=0.75, user_2=0.75))

    assert result.lower_loaded_user is None
    assert result.delta.as_tuple() == (0.0, 0.0)
    assert result.delta.is_zero
    assert "Balanced" in result.details


def test_stage04_zero_loads(stage04):
    result = stage04.evaluate(CumulativeLoad.zero())

    assert result.delta.is_zero


@pytest.mark.parametrize(
    "load_1, load_2",
    [(0.0, 3.2), (3.2, 0.0), (1.25, 1.0), (10.0, 10.5)],
)
def test_stage04_gap_credited_to_lower_loaded_user(stage04, load_1, load_2):
    """Поправка менее нагруженного равна разрыву итоговых нагрузок, у другого 0."""
    result = stage04.evaluate(CumulativeLoad(user_1=load_1, user_2=load_2))
    lower = result.lower_loaded_user

    assert result.delta.for_user(lower) == pytest.approx(abs(load_1 - load_2))
    assert result.delta.for_user(lower.other) == 0.0


def test_stage04_keeps_final_load(stage04):
    load = CumulativeLoad(user_1=0.4, user_2=0.1)
    result = stage04.evaluate(load)

    assert result.final_load == load
