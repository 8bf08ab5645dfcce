"""
Тесты для реализаций LoadStore и AssignmentSink

Проверяет:
1. InMemoryLoadStore: аддитивные поправки, отказ от отрицательной нагрузки
2. InMemoryAssignmentSink: порядок, фильтр по пользователю, очистка
3. JsonFileLoadStore: отсутствующий файл, накопление, контракт файла
4. Прогон аллокатора поверх JSON файла
"""

import json

import pytest
from jsonschema import ValidationError as SchemaValidationError
from pydantic import ValidationError

from src.allocation import ChoresAllocator
from src.core.domain import ChoreEstimate, CumulativeLoad, UserSlot
from src.storage import InMemoryAssignmentSink, InMemoryLoadStore, JsonFileLoadStore


# =============================================================================
# IN-MEMORY LOAD STORE
# =============================================================================


class TestInMemoryLoadStore:
    """Тесты для InMemoryLoadStore"""

    def test_default_zero(self) -> None:
        assert InMemoryLoadStore().get_loads() == (0.0, 0.0)

    def test_initial_values(self) -> None:
        assert InMemoryLoadStore(user_1=0.5, user_2=1.0).get_loads() == (0.5, 1.0)

    def test_set_loads_is_additive(self) -> None:
        store = InMemoryLoadStore(user_1=0.5, user_2=0.0)
        store.set_loads(0.0, 0.25)
        store.set_loads(0.1, 0.0)

        assert store.get_loads() == pytest.approx((0.6, 0.25))
        assert store.applied_deltas == [(0.0, 0.25), (0.1, 0.0)]

    def test_negative_result_rejected(self) -> None:
        store = InMemoryLoadStore(user_1=0.1, user_2=0.0)
        with pytest.raises(ValidationError):
            store.set_loads(-0.5, 0.0)
        assert store.get_loads() == (0.1, 0.0)

    def test_negative_initial_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InMemoryLoadStore(user_1=-1.0)


# =============================================================================
# IN-MEMORY SINK
# =============================================================================


class TestInMemoryAssignmentSink:
    """Тесты для InMemoryAssignmentSink"""

    @pytest.fixture
    def sink(self) -> InMemoryAssignmentSink:
        sink = InMemoryAssignmentSink()
        sink.add_assigned_chore("dishes", "mon", 0.25, False, 1)
        sink.add_assigned_chore("trash", "mon", 0.333, False, 2)
        sink.add_assigned_chore("laundry", "sat", 1.5, True, 1)
        return sink

    def test_order_preserved(self, sink: InMemoryAssignmentSink) -> None:
        assert [a.name for a in sink.assignments] == ["dishes", "trash", "laundry"]

    def test_for_user(self, sink: InMemoryAssignmentSink) -> None:
        assert [a.name for a in sink.for_user(UserSlot.USER_1)] == ["dishes", "laundry"]
        assert [a.name for a in sink.for_user(UserSlot.USER_2)] == ["trash"]

    def test_fields(self, sink: InMemoryAssignmentSink) -> None:
        laundry = sink.assignments[2]
        assert laundry.time_value == 1.5
        assert laundry.is_exception is True
        assert laundry.owner_user_id is UserSlot.USER_1

    def test_invalid_owner(self, sink: InMemoryAssignmentSink) -> None:
        with pytest.raises(ValueError):
            sink.add_assigned_chore("mop", "fri", 0.1, False, 3)

    def test_clear(self, sink: InMemoryAssignmentSink) -> None:
        sink.clear()
        assert sink.assignments == ()


# =============================================================================
# JSON FILE LOAD STORE
# =============================================================================


class TestJsonFileLoadStore:
    """Тесты для JsonFileLoadStore"""

    def test_missing_file_is_zero(self, tmp_path) -> None:
        store = JsonFileLoadStore(tmp_path / "loads.json")
        assert store.get_loads() == (0.0, 0.0)

    def test_set_loads_creates_file(self, tmp_path) -> None:
        path = tmp_path / "state" / "loads.json"
        store = JsonFileLoadStore(path)
        store.set_loads(0.083, 0.0)

        assert json.loads(path.read_text(encoding="utf-8")) == {"user_1": 0.083, "user_2": 0.0}
        assert not (path.parent / "loads.json.tmp").exists()

    def test_set_loads_accumulates(self, tmp_path) -> None:
        store = JsonFileLoadStore(tmp_path / "loads.json")
        store.set_loads(0.5, 0.0)
        store.set_loads(0.0, 1.25)

        assert store.get_loads() == (0.5, 1.25)

    def test_reads_existing_file(self, tmp_path) -> None:
        path = tmp_path / "loads.json"
        path.write_text(json.dumps({"user_1": 2.0, "user_2": 0.5}), encoding="utf-8")

        assert JsonFileLoadStore(path).read() == CumulativeLoad(user_1=2.0, user_2=0.5)

    def test_invalid_file_rejected(self, tmp_path) -> None:
        path = tmp_path / "loads.json"
        path.write_text(json.dumps({"user_1": -2.0, "user_2": 0.5}), encoding="utf-8")

        with pytest.raises(SchemaValidationError):
            JsonFileLoadStore(path).get_loads()

    def test_allocation_over_json_file(self, tmp_path) -> None:
        """Два периода аллокации поверх JSON файла."""
        store = JsonFileLoadStore(tmp_path / "loads.json")
        sink = InMemoryAssignmentSink()
        allocator = ChoresAllocator(store, sink)
        chores = [
            ChoreEstimate(name="dishes", day="mon", estimate=(10, 20)),
            ChoreEstimate(name="trash", day="mon", estimate=(30, 10)),
        ]

        allocator.allocate_chores(chores)
        load_1, load_2 = store.get_loads()
        assert load_1 == pytest.approx(0.083)
        assert load_2 == 0.0

        allocator.allocate_chores(chores)
        assert len(sink.assignments) == 4
