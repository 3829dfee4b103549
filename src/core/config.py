"""
ValuationConfig — конфигурация прохода оценки leader-инструментов

Константы системы (leader_value_share, price_scale, ask_floor,
full_liquidity_volume) передаются как конфигурация, а не литералы.

Источники (по убыванию приоритета):
1. Переменные окружения (LEADER_VALUE_SHARE, PRICE_SCALE, ASK_FLOOR,
   FULL_LIQUIDITY_VOLUME, VALUATION_READONLY, VALUATION_PARALLEL_COMPONENTS,
   VALUATION_MAX_WORKERS, VALUATION_CONDITION_LIMIT)
2. YAML-файл / явные аргументы конструктора
3. Значения по умолчанию
"""

from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# Значения по умолчанию
LEADER_VALUE_SHARE_DEFAULT: Final[float] = 100.0
PRICE_SCALE_DEFAULT: Final[float] = 100.0
ASK_FLOOR_DEFAULT: Final[float] = 10000.0
FULL_LIQUIDITY_VOLUME_DEFAULT: Final[int] = 100_000_000


class ValuationConfig(BaseSettings):
    """
    Конфигурация valuation engine.

    leader_value_share — число долей инструмента, представляющих полный
    net worth лидера при единичной цене. Входит в матрицу как
    A[k][L] -= shares / leader_value_share.
    """

    leader_value_share: float = Field(
        LEADER_VALUE_SHARE_DEFAULT,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("leader_value_share", "LEADER_VALUE_SHARE"),
    )
    price_scale: float = Field(
        PRICE_SCALE_DEFAULT,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("price_scale", "PRICE_SCALE"),
    )
    ask_floor: float = Field(
        ASK_FLOOR_DEFAULT,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("ask_floor", "ASK_FLOOR"),
    )
    full_liquidity_volume: int = Field(
        FULL_LIQUIDITY_VOLUME_DEFAULT,
        ge=0,
        validation_alias=AliasChoices("full_liquidity_volume", "FULL_LIQUIDITY_VOLUME"),
    )

    # Исполнение
    parallel_components: bool = Field(
        False,
        description="Решать компоненты на пуле потоков",
        validation_alias=AliasChoices("parallel_components", "VALUATION_PARALLEL_COMPONENTS"),
    )
    max_workers: int = Field(
        4, ge=1, validation_alias=AliasChoices("max_workers", "VALUATION_MAX_WORKERS")
    )
    condition_limit: float | None = Field(
        None,
        gt=1,
        description="Порог числа обусловленности; None — только нулевой ведущий элемент",
        validation_alias=AliasChoices("condition_limit", "VALUATION_CONDITION_LIMIT"),
    )

    # Read-only режим: проход пропускается целиком
    readonly: bool = Field(
        False, validation_alias=AliasChoices("readonly", "VALUATION_READONLY")
    )

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Окружение перекрывает значения из файла
        return env_settings, init_settings


def read_config_file(path: str | Path) -> dict[str, Any]:
    """
    Чтение YAML-файла конфигурации.

    Поддерживается плоский файл или секция 'valuation'. Отсутствующий
    файл — пустой словарь.
    """
    path = Path(path)
    if not path.exists():
        return {}

    with open(path, "r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"config root must be a mapping, got {type(loaded).__name__}")
    return dict(loaded.get("valuation", loaded))


def load_config(path: str | Path | None = None) -> ValuationConfig:
    """
    Загрузка конфигурации.

    Приоритет: окружение > YAML-файл > значения по умолчанию.

    Raises:
        ValueError: Корень YAML не является mapping
        pydantic.ValidationError: Если значения невалидны
    """
    data = read_config_file(path) if path is not None else {}
    return ValuationConfig(**data)
