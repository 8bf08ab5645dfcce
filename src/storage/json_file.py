"""JSON-файловый LoadStore.

Формат файла соответствует contracts/schema/cumulative_load.json:

    {"user_1": 0.25, "user_2": 0.0}

Отсутствующий файл означает нулевую нагрузку (первый период).
Запись атомарна: временный файл рядом с целевым + os.replace.
"""

import json
import os
from pathlib import Path
from threading import RLock

from src.core.contracts import validate_cumulative_load
from src.core.domain.load import CumulativeLoad


class JsonFileLoadStore:
    """Накопленная нагрузка пары в JSON файле."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = RLock()

    def read(self) -> CumulativeLoad:
        """
        Чтение нагрузки из файла.

        Raises:
            jsonschema.ValidationError: Если содержимое не соответствует контракту
            json.JSONDecodeError: Если файл не является валидным JSON
        """
        with self._lock:
            if not self.path.exists():
                return CumulativeLoad.zero()

            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)

            validate_cumulative_load(data)
            return CumulativeLoad.model_validate(data)

    def write(self, load: CumulativeLoad) -> None:
        """Атомарная запись нагрузки в файл."""
        data = load.model_dump()
        validate_cumulative_load(data)

        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_name(f"{self.path.name}.tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)

    # LoadStore protocol

    def get_loads(self) -> tuple[float, float]:
        return self.read().as_tuple()

    def set_loads(self, delta1: float, delta2: float) -> None:
        with self._lock:
            current = self.read()
            self.write(
                CumulativeLoad(
                    user_1=current.user_1 + delta1,
                    user_2=current.user_2 + delta2,
                )
            )
