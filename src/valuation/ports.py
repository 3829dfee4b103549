"""
Ports — контракты внешних коллабораторов valuation engine

Хранилище, транзакции/блокировки и шина уведомлений предоставляются
окружающей системой. Engine зависит только от этих протоколов.
"""

from typing import ContextManager, Final, Protocol, Sequence, Union

from src.core.domain import (
    LeaderInstrument,
    LeaderQuote,
    OwnershipEdge,
    Participant,
    ValuationChangedEvent,
    ValuationErrorEvent,
)

# Области хранилища, блокируемые на время прохода
HOLDINGS: Final[str] = "holdings"
LEADER_INSTRUMENTS: Final[str] = "leader_instruments"
PARTICIPANT_FINANCE: Final[str] = "participant_finance"

READ_REGIONS: Final[tuple[str, ...]] = (HOLDINGS,)
WRITE_REGIONS: Final[tuple[str, ...]] = (LEADER_INSTRUMENTS, PARTICIPANT_FINANCE)

ValuationEvent = Union[ValuationChangedEvent, ValuationErrorEvent]


class ValuationTransaction(Protocol):
    """
    Открытая транзакция с захваченными блокировками.

    Чтения возвращают согласованный снапшот; записи видны другим только
    после commit() и все сразу.
    """

    def read_participants(self) -> Sequence[Participant]:
        """Участники: union(есть позиции, является лидером)."""
        ...

    def read_ownership_edges(self) -> Sequence[OwnershipEdge]:
        """Рёбра follower → leader, без self-holdings."""
        ...

    def read_leader_instruments(self) -> Sequence[LeaderInstrument]:
        ...

    def write_leader_quote(self, quote: LeaderQuote) -> None:
        ...

    def write_gross_total_value(self, participant_id: int, value: float) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class TransactionScope(Protocol):
    """Фабрика транзакций: блокировки освобождаются при выходе из контекста."""

    def begin(
        self,
        read_regions: Sequence[str],
        write_regions: Sequence[str],
    ) -> ContextManager[ValuationTransaction]:
        ...


class NotificationSink(Protocol):
    """Приёмник событий (кэш котировок, допуск к торговле, мониторинг)."""

    def publish(self, event: ValuationEvent) -> None:
        ...
