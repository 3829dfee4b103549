"""
In-memory adapters — эталонная реализация внешних контрактов

- InMemoryValuationStore: хранилище + TransactionScope (эксклюзивная
  блокировка, staged-записи, атомарный commit/rollback)
- RecordingSink: NotificationSink, сохраняющий события в список

Используются в тестах и при локальных запусках engine.
"""

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, Sequence

from src.core.domain import LeaderInstrument, LeaderQuote, OwnershipEdge, Participant

from .ports import ValuationEvent


class InMemoryTransaction:
    """Транзакция над InMemoryValuationStore: записи видны только после commit."""

    def __init__(self, store: "InMemoryValuationStore"):
        self._store = store
        self._quotes: dict[int, LeaderQuote] = {}
        self._gross_totals: dict[int, float] = {}
        self.committed = False
        self.rolled_back = False

    # --- snapshot reads -----------------------------------------------------

    def read_participants(self) -> Sequence[Participant]:
        return list(self._store.participants.values())

    def read_ownership_edges(self) -> Sequence[OwnershipEdge]:
        return [e for e in self._store.edges if e.follower_id != e.leader_id]

    def read_leader_instruments(self) -> Sequence[LeaderInstrument]:
        return list(self._store.instruments.values())

    # --- staged writes ------------------------------------------------------

    def write_leader_quote(self, quote: LeaderQuote) -> None:
        self._ensure_open()
        self._quotes[quote.leader_id] = quote

    def write_gross_total_value(self, participant_id: int, value: float) -> None:
        self._ensure_open()
        self._gross_totals[participant_id] = value

    def commit(self) -> None:
        self._ensure_open()
        if self._store.fail_on_commit:
            raise RuntimeError("commit failed")
        self._store.quotes.update(self._quotes)
        self._store.gross_totals.update(self._gross_totals)
        self._store.commit_count += 1
        self.committed = True

    def rollback(self) -> None:
        if self.committed:
            return
        self._quotes.clear()
        self._gross_totals.clear()
        self.rolled_back = True

    def _ensure_open(self) -> None:
        if self.committed or self.rolled_back:
            raise RuntimeError("transaction is already closed")


class InMemoryValuationStore:
    """
    Хранилище участников, рёбер владения и leader-инструментов.

    begin() захватывает эксклюзивную блокировку на время транзакции и
    записывает запрошенные области в lock_log.
    """

    def __init__(
        self,
        participants: Iterable[Participant] = (),
        edges: Iterable[OwnershipEdge] = (),
        instruments: Iterable[LeaderInstrument] = (),
    ):
        self.participants: dict[int, Participant] = {p.participant_id: p for p in participants}
        self.edges: list[OwnershipEdge] = list(edges)
        self.instruments: dict[str, LeaderInstrument] = {i.instrument_id: i for i in instruments}

        # Записанные результаты
        self.quotes: dict[int, LeaderQuote] = {}
        self.gross_totals: dict[int, float] = {}
        self.commit_count = 0

        # Диагностика блокировок
        self.lock_log: list[tuple[tuple[str, ...], tuple[str, ...]]] = []
        self.fail_on_commit = False
        self._lock = threading.Lock()

    @property
    def is_locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def begin(
        self,
        read_regions: Sequence[str],
        write_regions: Sequence[str],
    ) -> Iterator[InMemoryTransaction]:
        with self._lock:
            self.lock_log.append((tuple(read_regions), tuple(write_regions)))
            tx = InMemoryTransaction(self)
            try:
                yield tx
            finally:
                if not tx.committed:
                    tx.rollback()

    # --- mutations between passes ---------------------------------------------

    def upsert_participant(self, participant: Participant) -> None:
        self.participants[participant.participant_id] = participant

    def add_edge(self, edge: OwnershipEdge) -> None:
        self.edges.append(edge)

    def add_instrument(self, instrument: LeaderInstrument) -> None:
        self.instruments[instrument.instrument_id] = instrument


class RecordingSink:
    """NotificationSink, сохраняющий опубликованные события."""

    def __init__(self):
        self.events: list[ValuationEvent] = []

    def publish(self, event: ValuationEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[ValuationEvent]:
        return [e for e in self.events if e.event_type == event_type]
