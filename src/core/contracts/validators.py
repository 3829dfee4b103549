"""
Event Contracts — JSON Schema контракты исходящих событий

Каждый тип события описан схемой contracts/schema/<event_type>.json
(Draft 2020-12). Схема выбирается по полю event_type полезной нагрузки,
поэтому writer проверяет любое событие одним вызовом check_event().

ИНВАРИАНТ: событие, не прошедшее проверку, не публикуется.
"""

import json
from pathlib import Path
from typing import Any, Mapping

import jsonschema
from jsonschema import Draft202012Validator
from pydantic import BaseModel

# contracts/schema/ в корне проекта
DEFAULT_SCHEMA_DIR = Path(__file__).resolve().parents[3] / "contracts" / "schema"


class EventContracts:
    """
    Реестр контрактов событий по event_type.

    Валидаторы компилируются при первом обращении; сама схема проходит
    meta-валидацию перед использованием.
    """

    def __init__(self, schema_dir: Path | None = None):
        self.schema_dir = Path(schema_dir) if schema_dir is not None else DEFAULT_SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")
        self._validators: dict[str, Draft202012Validator] = {}

    def validator_for(self, event_type: str) -> Draft202012Validator:
        """
        Raises:
            FileNotFoundError: Для event_type нет схемы
            ValueError: Файл не является валидной JSON Schema
        """
        validator = self._validators.get(event_type)
        if validator is not None:
            return validator

        path = self.schema_dir / f"{event_type}.json"
        if not path.exists():
            raise FileNotFoundError(f"No contract for event type '{event_type}': {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {path.name}: {e.message}") from e

        validator = Draft202012Validator(schema)
        self._validators[event_type] = validator
        return validator

    def check(self, payload: Mapping[str, Any]) -> None:
        """
        Проверка полезной нагрузки против схемы её event_type.

        Raises:
            jsonschema.ValidationError: Нарушение контракта или нет event_type
        """
        event_type = payload.get("event_type")
        if not isinstance(event_type, str):
            raise jsonschema.ValidationError("payload has no string 'event_type'")
        self.validator_for(event_type).validate(payload)

    def violations(self, payload: Mapping[str, Any]) -> list[str]:
        """Все нарушения контракта в виде 'path: message' (пусто — валидно)."""
        event_type = payload.get("event_type")
        if not isinstance(event_type, str):
            return ["event_type: missing"]
        errors = self.validator_for(event_type).iter_errors(payload)
        return sorted(
            f"{'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"
            for e in errors
        )

    def check_event(self, event: BaseModel) -> dict[str, Any]:
        """JSON-сериализация события с проверкой; возвращает проверенный payload."""
        payload = event.model_dump(mode="json")
        self.check(payload)
        return payload


_default_contracts: EventContracts | None = None


def default_contracts() -> EventContracts:
    """Общий реестр для contracts/schema/ проекта."""
    global _default_contracts
    if _default_contracts is None:
        _default_contracts = EventContracts()
    return _default_contracts
