"""
Tests for domain models

Покрывает:
- Participant: base values, null → 0, запрет NaN/Inf
- OwnershipEdge: shares > 0, запрет self-holding
- LeaderQuote / ValuationResult: immutability, is_tradable
- Events: построение из котировки
"""

import pytest
from pydantic import ValidationError

from src.core.domain import (
    ErrorKind,
    LeaderInstrument,
    LeaderQuote,
    OwnershipEdge,
    Participant,
    ValuationChangedEvent,
    ValuationErrorEvent,
    ValuationResult,
    ValuationSnapshot,
)


@pytest.fixture
def quote() -> LeaderQuote:
    return LeaderQuote(
        instrument_id="LDR-1",
        instrument_name="Leader One",
        leader_id=1,
        bid=12_000.0,
        ask=12_500.0,
        mid=12_250.0,
        tradable_volume=100_000_000,
        checked_at=1_700_000_000.0,
    )


class TestParticipant:
    """Participant"""

    def test_base_values(self) -> None:
        p = Participant(
            participant_id=1,
            cash=100.0,
            provision_balance=30.0,
            external_value_bid=1_000.0,
            external_value_ask=1_100.0,
        )
        assert p.base_value_bid() == 1_070.0
        assert p.base_value_ask() == 1_170.0

    def test_null_external_value_is_zero(self) -> None:
        """Участник, владеющий только leader-инструментами"""
        p = Participant(
            participant_id=2,
            cash=50.0,
            provision_balance=None,
            external_value_bid=None,
            external_value_ask=None,
        )
        assert p.external_value_bid == 0.0
        assert p.provision_balance == 0.0
        assert p.base_value_bid() == 50.0

    def test_negative_cash_allowed(self) -> None:
        p = Participant(participant_id=3, cash=-10.0)
        assert p.base_value_bid() == -10.0

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_rejected(self, value: float) -> None:
        with pytest.raises(ValidationError):
            Participant(participant_id=1, cash=value)

    def test_frozen(self) -> None:
        p = Participant(participant_id=1, cash=1.0)
        with pytest.raises(ValidationError):
            p.cash = 2.0


class TestOwnershipEdge:
    """OwnershipEdge"""

    def test_valid_edge(self) -> None:
        e = OwnershipEdge(follower_id=1, leader_id=2, shares_held=5.5)
        assert e.shares_held == 5.5

    @pytest.mark.parametrize("shares", [0.0, -1.0])
    def test_non_positive_shares_rejected(self, shares: float) -> None:
        with pytest.raises(ValidationError):
            OwnershipEdge(follower_id=1, leader_id=2, shares_held=shares)

    def test_self_holding_rejected(self) -> None:
        with pytest.raises(ValidationError, match="self-holding"):
            OwnershipEdge(follower_id=4, leader_id=4, shares_held=1.0)


class TestSnapshotAndResult:
    """ValuationSnapshot / ValuationResult"""

    def test_empty_snapshot(self) -> None:
        assert ValuationSnapshot().is_empty
        assert not ValuationSnapshot(participants=[Participant(participant_id=1, cash=0.0)]).is_empty

    def test_instrument_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            LeaderInstrument(instrument_id="", leader_id=1)

    def test_quote_tradable_flag(self, quote) -> None:
        assert quote.is_tradable
        halted = quote.model_copy(update={"tradable_volume": 0})
        assert not halted.is_tradable

    def test_negative_volume_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LeaderQuote(
                instrument_id="X", leader_id=1, bid=1.0, ask=1.0, mid=1.0,
                tradable_volume=-1, checked_at=0.0,
            )

    def test_result_defaults(self) -> None:
        result = ValuationResult()
        assert result.is_empty
        assert not result.skipped
        assert result.timings.total_ms == 0.0


class TestEvents:
    """Events"""

    def test_changed_event_from_quote(self, quote) -> None:
        event = ValuationChangedEvent.from_quote(quote)
        assert event.event_type == "valuation_changed"
        assert event.instrument_id == "LDR-1"
        assert event.instrument_name == "Leader One"
        assert (event.bid, event.ask, event.mid) == (12_000.0, 12_500.0, 12_250.0)
        assert event.tradable_volume == 100_000_000

    def test_error_event_kind_serialized(self) -> None:
        event = ValuationErrorEvent(
            kind=ErrorKind.NUMERICAL_FAILURE,
            message="singular",
            participant_ids=[1, 2],
            occurred_at=5.0,
        )
        assert event.model_dump(mode="json")["kind"] == "numerical_failure"

    def test_event_type_is_fixed(self) -> None:
        with pytest.raises(ValidationError):
            ValuationErrorEvent(
                event_type="other",
                kind=ErrorKind.DATA_INCONSISTENCY,
                message="x",
                occurred_at=0.0,
            )
