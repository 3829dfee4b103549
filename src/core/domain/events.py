"""
Events — уведомления, публикуемые valuation engine

- ValuationChangedEvent: одно событие на leader-инструмент после commit
- ValuationErrorEvent: фатальная ошибка прохода (ничего не записано)

Форма событий зафиксирована JSON Schema контрактами
(contracts/schema/valuation_changed.json, valuation_error.json).
"""

from enum import Enum

from pydantic import BaseModel, Field

from .valuation import LeaderQuote


class ErrorKind(str, Enum):
    """Класс фатальной ошибки прохода."""

    DATA_INCONSISTENCY = "data_inconsistency"
    NUMERICAL_FAILURE = "numerical_failure"
    INTERNAL_FAILURE = "internal_failure"  # хранилище, commit, прочие сбои прохода


class ValuationChangedEvent(BaseModel):
    """Новая котировка leader-инструмента (потребители: кэш, допуск к торговле)."""

    event_type: str = Field("valuation_changed", pattern="^valuation_changed$")
    instrument_id: str = Field(..., min_length=1)
    instrument_name: str = ""
    leader_id: int
    bid: float
    ask: float
    mid: float
    tradable_volume: int = Field(..., ge=0)
    checked_at: float = Field(..., ge=0)

    model_config = {"frozen": True}

    @classmethod
    def from_quote(cls, quote: LeaderQuote) -> "ValuationChangedEvent":
        return cls(
            instrument_id=quote.instrument_id,
            instrument_name=quote.instrument_name,
            leader_id=quote.leader_id,
            bid=quote.bid,
            ask=quote.ask,
            mid=quote.mid,
            tradable_volume=quote.tradable_volume,
            checked_at=quote.checked_at,
        )


class ValuationErrorEvent(BaseModel):
    """Фатальная ошибка прохода оценки."""

    event_type: str = Field("valuation_error", pattern="^valuation_error$")
    kind: ErrorKind
    message: str = Field(..., min_length=1)
    participant_ids: list[int] = Field(default_factory=list)
    occurred_at: float = Field(..., ge=0)

    model_config = {"frozen": True}
