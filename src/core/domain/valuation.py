"""
Valuation — модели результатов прохода оценки

ValuationResult — write-only выход прохода: решённые net worth каждого
участника и выведенные котировки каждого leader-инструмента.
"""

from pydantic import BaseModel, Field


class ParticipantValuation(BaseModel):
    """Решённая оценка участника."""

    participant_id: int
    net_worth_bid: float = Field(..., allow_inf_nan=False)
    net_worth_ask: float = Field(..., allow_inf_nan=False)
    gross_total_value: float = Field(
        ..., allow_inf_nan=False, description="net_worth_bid + provision_balance"
    )

    model_config = {"frozen": True}


class LeaderQuote(BaseModel):
    """
    Выведенная котировка leader-инструмента.

    tradable_volume == 0 останавливает торговлю инструментом до восстановления
    оценки выше ask_floor.
    """

    instrument_id: str
    instrument_name: str = ""
    leader_id: int
    bid: float = Field(..., allow_inf_nan=False)
    ask: float = Field(..., allow_inf_nan=False)
    mid: float = Field(..., allow_inf_nan=False)
    tradable_volume: int = Field(..., ge=0)
    checked_at: float = Field(..., ge=0, description="Время прохода (Unix, секунды)")

    model_config = {"frozen": True}

    @property
    def is_tradable(self) -> bool:
        return self.tradable_volume > 0


class PassTimings(BaseModel):
    """Длительности фаз прохода (миллисекунды)."""

    fetch_ms: float = 0.0
    build_ms: float = 0.0
    solve_ms: float = 0.0
    derive_ms: float = 0.0
    write_ms: float = 0.0
    total_ms: float = 0.0

    model_config = {"frozen": True}

    def summary(self) -> str:
        return (
            f"{self.fetch_ms:.1f} ms fetching, {self.build_ms:.1f} ms building, "
            f"{self.solve_ms:.1f} ms solving, {self.derive_ms:.1f} ms deriving, "
            f"{self.write_ms:.1f} ms writing, {self.total_ms:.1f} ms total"
        )


class ValuationResult(BaseModel):
    """Результат одного прохода оценки."""

    participants: dict[int, ParticipantValuation] = Field(default_factory=dict)
    quotes: dict[int, LeaderQuote] = Field(
        default_factory=dict, description="Котировки по leader_id"
    )
    component_count: int = Field(0, ge=0)
    skipped: bool = Field(False, description="Проход пропущен (read-only режим)")
    timings: PassTimings = Field(default_factory=PassTimings)

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.participants
