"""Unit тесты для STAGE 2: Exception Resolver.

Coverage:
- FORCE_USER_1 / FORCE_USER_2 → sentinel-доля в списке соответствующего пользователя
- Закреплённая запись переставляется в конец списка
- Задачи без override не меняются
- Override после задачи без override тоже применяется
- Конфигурация sentinel
"""

import pytest

from src.allocation.stages.stage_01_normalizer import Stage01Normalizer
from src.allocation.stages.stage_02_exception_resolver import (
    EXCEPTION_SENTINEL_FRACTION,
    ExceptionResolverConfig,
    Stage02ExceptionResolver,
)
from src.core.domain.chore import ChoreEstimate, ChoreException, ChoreKey, UserSlot


@pytest.fixture
def stage02():
    """Fixture для STAGE 2."""
    return Stage02ExceptionResolver()


def run(stage02, chores):
    return stage02.evaluate(chores, Stage01Normalizer().evaluate(chores))


# =============================================================================
# PINNING
# =============================================================================


def test_stage02_no_exceptions_unchanged(stage02):
    """Без override списки совпадают с STAGE 1."""
    chores = [
        ChoreEstimate(name="dishes", day="mon", estimate=(10, 20)),
        ChoreEstimate(name="trash", day="mon", estimate=(30, 10)),
    ]
    stage01_result = Stage01Normalizer().evaluate(chores)
    result = stage02.evaluate(chores, stage01_result)

    assert result.user_1_entries == stage01_result.user_1_entries
    assert result.user_2_entries == stage01_result.user_2_entries
    assert result.pinned_user_1 == frozenset()
    assert result.pinned_user_2 == frozenset()


def test_stage02_force_user_1(stage02):
    """FORCE_USER_1: запись User 1 получает 1.5 и уходит в конец списка."""
    chores = [
        ChoreEstimate(name="laundry", day="sat", estimate=(10, 10), exception=ChoreException.FORCE_USER_1),
        ChoreEstimate(name="dishes", day="mon", estimate=(10, 30)),
    ]
    result = run(stage02, chores)

    assert [(e.key.name, e.fraction, e.pinned) for e in result.user_1_entries] == [
        ("dishes", 0.5, False),
        ("laundry", 1.5, True),
    ]
    # Список User 2 не меняется
    assert [(e.key.name, e.fraction, e.pinned) for e in result.user_2_entries] == [
        ("laundry", 0.25, False),
        ("dishes", 0.75, False),
    ]
    assert result.pinned_for(UserSlot.USER_1) == frozenset({ChoreKey("laundry", "sat")})


def test_stage02_force_user_2(stage02):
    """FORCE_USER_2 симметричен FORCE_USER_1."""
    chores = [
        ChoreEstimate(name="hoover", day="sun", estimate=(20, 20), exception=2),
        ChoreEstimate(name="dishes", day="mon", estimate=(20, 20)),
    ]
    result = run(stage02, chores)

    assert [e.fraction for e in result.user_1_entries] == [0.5, 0.5]
    assert [(e.key.name, e.fraction) for e in result.user_2_entries] == [
        ("dishes", 0.5),
        ("hoover", EXCEPTION_SENTINEL_FRACTION),
    ]
    assert result.pinned_user_2 == frozenset({ChoreKey("hoover", "sun")})


def test_stage02_exception_after_plain_chore(stage02):
    """Override применяется к каждой задаче, а не только к ведущим."""
    chores = [
        ChoreEstimate(name="dishes", day="mon", estimate=(10, 10)),
        ChoreEstimate(name="trash", day="mon", estimate=(10, 10), exception=2),
        ChoreEstimate(name="mop", day="tue", estimate=(10, 10)),
        ChoreEstimate(name="laundry", day="sat", estimate=(10, 10), exception=1),
    ]
    result = run(stage02, chores)

    assert result.pinned_user_1 == frozenset({ChoreKey("laundry", "sat")})
    assert result.pinned_user_2 == frozenset({ChoreKey("trash", "mon")})
    assert [e.key.name for e in result.user_2_entries] == ["dishes", "mop", "laundry", "trash"]


def test_stage02_keeps_key_sets_equal(stage02):
    """Перестановка не меняет множества ключей."""
    chores = [
        ChoreEstimate(name="a", day="mon", estimate=(1, 2), exception=1),
        ChoreEstimate(name="b", day="mon", estimate=(3, 4), exception=2),
        ChoreEstimate(name="c", day="mon", estimate=(5, 6)),
    ]
    result = run(stage02, chores)

    assert len(result.user_1_entries) == len(result.user_2_entries) == 3
    assert {e.key for e in result.user_1_entries} == {e.key for e in result.user_2_entries}


def test_stage02_sentinel_exceeds_normal_range(stage02):
    """Sentinel строго больше любой нормированной доли."""
    chores = [
        ChoreEstimate(name="a", day="mon", estimate=(10, 0), exception=1),
        ChoreEstimate(name="b", day="mon", estimate=(0, 10)),
    ]
    result = run(stage02, chores)

    pinned = [e for e in result.user_1_entries if e.pinned]
    plain = [e for e in result.user_1_entries if not e.pinned]
    assert all(p.fraction > e.fraction for p in pinned for e in plain)


# =============================================================================
# CONFIG
# =============================================================================


def test_stage02_custom_sentinel():
    """Sentinel задаётся конфигурацией."""
    stage02 = Stage02ExceptionResolver(ExceptionResolverConfig(sentinel_fraction=2.0))
    chores = [ChoreEstimate(name="a", day="mon", estimate=(1, 1), exception=1)]
    result = run(stage02, chores)

    assert result.user_1_entries[0].fraction == 2.0


def test_stage02_sentinel_inside_range_rejected():
    """Sentinel в нормальном диапазоне долей недопустим."""
    with pytest.raises(ValueError, match="sentinel_fraction"):
        Stage02ExceptionResolver(ExceptionResolverConfig(sentinel_fraction=1.0))
