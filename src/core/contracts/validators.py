"""
JSON Schema Contract Validators

Проверка данных на границе аллокатора по JSON Schema контрактам (jsonschema,
Draft 2020-12):
- chore_estimate.json: входная задача, dict-записи до построения модели
- assigned_chore.json: назначение перед передачей в AssignmentSink
- cumulative_load.json: нагрузка пары, читаемая и записываемая JsonFileLoadStore

Валидатор каждого контракта строится один раз и переиспользуется.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# Имена контрактов (файлы contracts/schema/<name>.json)
CHORE_ESTIMATE: Final[str] = "chore_estimate"
ASSIGNED_CHORE: Final[str] = "assigned_chore"
CUMULATIVE_LOAD: Final[str] = "cumulative_load"

CONTRACTS: Final[tuple[str, ...]] = (CHORE_ESTIMATE, ASSIGNED_CHORE, CUMULATIVE_LOAD)

# contracts/schema/ в корне репозитория (4 уровня вверх от этого файла)
DEFAULT_SCHEMA_DIR: Final[Path] = Path(__file__).resolve().parents[3] / "contracts" / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Чтение и meta-валидация схем из каталога контрактов (с кэшем)."""

    def __init__(self, schema_dir: Path | None = None):
        self.schema_dir = Path(schema_dir) if schema_dir is not None else DEFAULT_SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")
        self._schemas: dict[str, dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> dict[str, Any]:
        """
        Raises:
            FileNotFoundError: Файла схемы нет в каталоге
            ValueError: Схема не проходит meta-validation Draft 2020-12
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self.schema_dir / f"{schema_name}.json"
        if not schema_path.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


# =============================================================================
# CONTRACT VALIDATOR
# =============================================================================


class ContractValidator:
    """Валидатор одного из контрактов CONTRACTS."""

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        if schema_name not in CONTRACTS:
            raise ValueError(f"Unknown contract {schema_name!r}; expected one of {CONTRACTS}")
        self.schema_name = schema_name
        self.validator = Draft202012Validator((loader or SchemaLoader()).load_schema(schema_name))

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Raises:
            ValidationError: Данные не соответствуют контракту
        """
        self.validator.validate(dict(data))


_VALIDATORS: dict[str, ContractValidator] = {}


def get_validator(schema_name: str) -> ContractValidator:
    """Общий валидатор контракта (строится при первом обращении)."""
    validator = _VALIDATORS.get(schema_name)
    if validator is None:
        validator = _VALIDATORS.setdefault(schema_name, ContractValidator(schema_name))
    return validator


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_chore_estimate(data: Mapping[str, Any]) -> None:
    """Raises ValidationError, если запись задачи нарушает chore_estimate."""
    get_validator(CHORE_ESTIMATE).validate(data)


def validate_assigned_chore(data: Mapping[str, Any]) -> None:
    """Raises ValidationError, если назначение нарушает assigned_chore."""
    get_validator(ASSIGNED_CHORE).validate(data)


def validate_cumulative_load(data: Mapping[str, Any]) -> None:
    """Raises ValidationError, если нагрузка нарушает cumulative_load."""
    get_validator(CUMULATIVE_LOAD).validate(data)


__all__ = [
    "ASSIGNED_CHORE",
    "CHORE_ESTIMATE",
    "CONTRACTS",
    "CUMULATIVE_LOAD",
    "ContractValidator",
    "SchemaLoader",
    "ValidationError",
    "get_validator",
    "validate_assigned_chore",
    "validate_chore_estimate",
    "validate_cumulative_load",
]
