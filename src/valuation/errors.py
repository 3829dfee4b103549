"""
Valuation errors — таксономия фатальных ошибок прохода оценки

- DataInconsistencyError: нарушение ссылочной целостности снапшота
- NumericalFailureError: система компоненты не имеет конечного решения

Обе ошибки фатальны для ВСЕГО прохода: транзакция откатывается, ничего не
записывается, автоматический retry не выполняется (тот же снапшот даст ту же
ошибку).

Сбои вне таксономии (чтение снапшота, запись, commit) публикуются
с kind=internal_failure.
"""

from typing import Iterable

from src.core.domain.events import ErrorKind


class ValuationError(Exception):
    """Базовая ошибка прохода оценки."""

    kind: ErrorKind = ErrorKind.INTERNAL_FAILURE

    def __init__(self, message: str, participant_ids: Iterable[int] = ()):
        super().__init__(message)
        self.message = message
        self.participant_ids: list[int] = sorted(set(participant_ids))


class DataInconsistencyError(ValuationError):
    """
    Нарушение целостности данных снапшота.

    Примеры: ребро ссылается на неизвестного участника, ребро на участника
    без leader-инструмента, дублирующиеся идентификаторы.
    """

    kind = ErrorKind.DATA_INCONSISTENCY


class NumericalFailureError(ValuationError):
    """
    Решение системы компоненты невозможно (вырожденная или плохо обусловленная
    матрица, non-finite результат).

    participant_ids — полный состав компоненты для диагностики.
    """

    kind = ErrorKind.NUMERICAL_FAILURE

    def __init__(
        self,
        message: str,
        participant_ids: Iterable[int] = (),
        matrix_size: int = 0,
        condition: float | None = None,
    ):
        super().__init__(message, participant_ids)
        self.matrix_size = matrix_size
        self.condition = condition
