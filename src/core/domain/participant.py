"""
Participant — модели снапшота экономики

Immutable Pydantic модели входных данных одного прохода оценки:
- Participant: финансовое состояние участника (cash, provisions, внешние активы)
- OwnershipEdge: владение follower-а долями leader-инструмента
- LeaderInstrument: торгуемый инструмент, цена которого выводится из net worth лидера
- ValuationSnapshot: согласованный снапшот всех трёх наборов

Все модели frozen=True: снапшот читается один раз и не изменяется в ходе прохода.
"""

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# PARTICIPANT
# =============================================================================


class Participant(BaseModel):
    """
    Участник экономики (держатель позиций и/или лидер).

    external_value_bid/ask — стоимость всех НЕ-leader позиций по bid (ликвидация)
    и по ask (замещение). Участник, владеющий только leader-инструментами,
    не имеет внешней оценки: null приводится к 0.
    """

    participant_id: int = Field(..., description="Идентификатор участника")
    cash: float = Field(..., allow_inf_nan=False, description="Свободные средства")
    provision_balance: float = Field(
        0.0, allow_inf_nan=False, description="Сумма уплаченных/полученных provisions"
    )
    external_value_bid: float = Field(
        0.0, allow_inf_nan=False, description="Стоимость внешних позиций по bid"
    )
    external_value_ask: float = Field(
        0.0, allow_inf_nan=False, description="Стоимость внешних позиций по ask"
    )

    model_config = {"frozen": True}

    @field_validator("external_value_bid", "external_value_ask", "provision_balance", mode="before")
    @classmethod
    def coerce_missing_to_zero(cls, v):
        if v is None:
            return 0.0
        return v

    def base_value_bid(self) -> float:
        """Базовая стоимость (bid): external + cash - provisions."""
        return self.external_value_bid + self.cash - self.provision_balance

    def base_value_ask(self) -> float:
        """Базовая стоимость (ask): external + cash - provisions."""
        return self.external_value_ask + self.cash - self.provision_balance


# =============================================================================
# OWNERSHIP EDGE
# =============================================================================


class OwnershipEdge(BaseModel):
    """
    Владение follower-а долями leader-инструмента.

    Позиция лидера в собственном инструменте никогда не представлена ребром:
    self-edge отвергается при валидации.
    """

    follower_id: int = Field(..., description="Идентификатор владельца долей")
    leader_id: int = Field(..., description="Идентификатор лидера")
    shares_held: float = Field(
        ..., gt=0, allow_inf_nan=False, description="Количество долей (> 0)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_not_self_holding(self) -> "OwnershipEdge":
        if self.follower_id == self.leader_id:
            raise ValueError(
                f"self-holding edge for participant {self.leader_id} is not allowed"
            )
        return self


# =============================================================================
# LEADER INSTRUMENT
# =============================================================================


class LeaderInstrument(BaseModel):
    """Торгуемый инструмент лидера (ровно один на лидера)."""

    instrument_id: str = Field(..., min_length=1, description="Идентификатор инструмента")
    leader_id: int = Field(..., description="Идентификатор лидера")
    name: str = Field("", description="Отображаемое имя инструмента")

    model_config = {"frozen": True}


# =============================================================================
# SNAPSHOT
# =============================================================================


class ValuationSnapshot(BaseModel):
    """
    Согласованный снапшот для одного прохода оценки.

    Ссылочная целостность (рёбра → участники, инструменты → участники)
    здесь НЕ проверяется: это задача engine (DataInconsistencyError).
    """

    participants: list[Participant] = Field(default_factory=list)
    edges: list[OwnershipEdge] = Field(default_factory=list)
    leaders: list[LeaderInstrument] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not self.participants
