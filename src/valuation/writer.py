"""
Result Writer — применение результатов прохода и публикация событий

apply(): все котировки лидеров и gross_total_value всех участников
записываются в ОДНУ транзакцию (commit выполняет engine).
publish(): после commit — одно ValuationChangedEvent на leader-инструмент.

Каждое событие проверяется по своему JSON Schema контракту до публикации.
"""

import logging
from typing import Iterable

from pydantic import BaseModel

from src.core.contracts import EventContracts, default_contracts
from src.core.domain import ErrorKind, ValuationChangedEvent, ValuationErrorEvent, ValuationResult

from .ports import NotificationSink, ValuationTransaction

logger = logging.getLogger(__name__)


class ResultWriter:
    """Запись результатов в транзакцию и публикация уведомлений."""

    def __init__(self, sink: NotificationSink, contracts: EventContracts | None = None):
        self._sink = sink
        self._contracts = contracts or default_contracts()

    def apply(self, tx: ValuationTransaction, result: ValuationResult) -> None:
        """Запись котировок и gross totals в открытую транзакцию (без commit)."""
        if result.is_empty:
            return

        for leader_id in sorted(result.quotes):
            tx.write_leader_quote(result.quotes[leader_id])

        for pid in sorted(result.participants):
            tx.write_gross_total_value(pid, result.participants[pid].gross_total_value)

    def publish(self, result: ValuationResult) -> int:
        """
        Публикация ValuationChangedEvent по каждому лидеру.

        Вызывается только после успешного commit. Все события проверяются
        до первой публикации.

        Returns:
            Количество опубликованных событий

        Raises:
            jsonschema.ValidationError: Событие нарушает контракт
        """
        events = [
            ValuationChangedEvent.from_quote(result.quotes[leader_id])
            for leader_id in sorted(result.quotes)
        ]
        for event in events:
            self._contracts.check_event(event)
        for event in events:
            self._sink.publish(event)
        logger.debug("published %d valuation_changed events", len(events))
        return len(events)

    def publish_error(
        self,
        kind: ErrorKind,
        message: str,
        participant_ids: Iterable[int],
        occurred_at: float,
    ) -> ValuationErrorEvent:
        """Публикация фатальной ошибки прохода."""
        event = ValuationErrorEvent(
            kind=kind,
            message=message or kind.value,
            participant_ids=list(participant_ids),
            occurred_at=occurred_at,
        )
        self._emit(event)
        return event

    def _emit(self, event: BaseModel) -> None:
        self._contracts.check_event(event)
        self._sink.publish(event)
