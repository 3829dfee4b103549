"""
Tests for ValuationConfig / load_config

Покрывает:
- Значения по умолчанию (100 / 100 / 10000 / 100000000)
- Загрузку из YAML (плоский и секция 'valuation')
- Переопределения из окружения
- Валидацию ограничений
"""

import pytest
from pydantic import ValidationError

from src.core.config import ValuationConfig, load_config

ENV_NAMES = (
    "LEADER_VALUE_SHARE",
    "PRICE_SCALE",
    "ASK_FLOOR",
    "FULL_LIQUIDITY_VOLUME",
    "VALUATION_READONLY",
    "VALUATION_PARALLEL_COMPONENTS",
    "VALUATION_MAX_WORKERS",
    "VALUATION_CONDITION_LIMIT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Значения по умолчанию"""

    def test_system_constants(self) -> None:
        config = ValuationConfig()
        assert config.leader_value_share == 100.0
        assert config.price_scale == 100.0
        assert config.ask_floor == 10_000.0
        assert config.full_liquidity_volume == 100_000_000
        assert not config.readonly
        assert not config.parallel_components
        assert config.condition_limit is None

    def test_missing_file_yields_defaults(self, tmp_path) -> None:
        config = load_config(tmp_path / "absent.yaml")
        assert config == ValuationConfig()


class TestLoadConfig:
    """YAML и окружение"""

    def test_flat_yaml(self, tmp_path) -> None:
        path = tmp_path / "valuation.yaml"
        path.write_text("leader_value_share: 50\nask_floor: 500\n", encoding="utf-8")

        config = load_config(path)

        assert config.leader_value_share == 50.0
        assert config.ask_floor == 500.0
        assert config.price_scale == 100.0

    def test_nested_section(self, tmp_path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text(
            "valuation:\n  price_scale: 10\n  parallel_components: true\n  max_workers: 8\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.price_scale == 10.0
        assert config.parallel_components
        assert config.max_workers == 8

    def test_env_overrides_file(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "valuation.yaml"
        path.write_text("ask_floor: 500\n", encoding="utf-8")

        monkeypatch.setenv("ASK_FLOOR", "750")
        monkeypatch.setenv("VALUATION_READONLY", "true")
        monkeypatch.setenv("PRICE_SCALE", "")

        config = load_config(path)

        assert config.ask_floor == 750.0
        assert config.readonly
        assert config.price_scale == 100.0

    def test_env_without_file(self, monkeypatch) -> None:
        monkeypatch.setenv("VALUATION_PARALLEL_COMPONENTS", "1")
        monkeypatch.setenv("VALUATION_MAX_WORKERS", "2")
        monkeypatch.setenv("VALUATION_CONDITION_LIMIT", "1e10")

        config = load_config()

        assert config.parallel_components
        assert config.max_workers == 2
        assert config.condition_limit == 1e10

    def test_env_overrides_constructor(self, monkeypatch) -> None:
        monkeypatch.setenv("FULL_LIQUIDITY_VOLUME", "5")
        assert ValuationConfig(full_liquidity_volume=7).full_liquidity_volume == 5

    def test_empty_yaml(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == ValuationConfig()

    def test_non_mapping_root(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)


class TestValidation:
    """Ограничения"""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("leader_value_share", 0),
            ("leader_value_share", -100),
            ("price_scale", 0),
            ("ask_floor", -1),
            ("full_liquidity_volume", -1),
            ("max_workers", 0),
            ("condition_limit", 1),
        ],
    )
    def test_invalid_values(self, field: str, value) -> None:
        with pytest.raises(ValidationError):
            ValuationConfig(**{field: value})

    def test_invalid_env_value(self, monkeypatch) -> None:
        monkeypatch.setenv("LEADER_VALUE_SHARE", "abc")
        with pytest.raises(ValidationError):
            load_config(None)

    def test_frozen(self) -> None:
        config = ValuationConfig()
        with pytest.raises(ValidationError):
            config.ask_floor = 1.0
