"""
Leader Valuation Engine — периодический пересчёт цен leader-инструментов

Цена leader-инструмента — линейная функция net worth лидера, а net worth
может включать доли других лидеров (в т.ч. циклы владения A ↔ B). Проход:

    1. Снапшот (под read-блокировкой holdings и write-блокировками
       leader_instruments / participant_finance)
    2. Разбиение на компоненты связности (union-find)
    3. Построение A, B для каждой компоненты
    4. Решение A·X = [B_bid, B_ask] одной факторизацией
    5. Вывод bid/ask/mid/tradable_volume и gross_total_value
    6. Атомарная запись, commit, затем события valuation_changed

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Любая ошибка прохода → rollback, ничего не записано, событие ошибки
   (публикуется после снятия блокировок)
2. Запись начинается только после успешного решения ВСЕХ компонент
3. Пустой снапшот — no-op (не ошибка)
4. Повторный проход на неизменных данных даёт те же результаты
"""

import logging
import time
from pathlib import Path
from typing import Callable, Iterable

from src.core.config import ValuationConfig, load_config
from src.core.domain import (
    ErrorKind,
    LeaderInstrument,
    PassTimings,
    ValuationResult,
    ValuationSnapshot,
)
from src.core.logger import setup_logger

from .decomposer import decompose_components
from .errors import DataInconsistencyError, ValuationError
from .ports import READ_REGIONS, WRITE_REGIONS, NotificationSink, TransactionScope
from .price_deriver import derive_results
from .solver import solve_components
from .system_builder import build_component_system
from .writer import ResultWriter

logger = logging.getLogger(__name__)


def check_snapshot_integrity(snapshot: ValuationSnapshot) -> dict[int, LeaderInstrument]:
    """
    Проверка ссылочной целостности снапшота.

    Returns:
        Leader-инструменты по leader_id

    Raises:
        DataInconsistencyError: Дублирующиеся участники/лидеры, инструмент
            неизвестного участника, ребро на участника без leader-инструмента
    """
    known: set[int] = set()
    for p in snapshot.participants:
        if p.participant_id in known:
            raise DataInconsistencyError(
                f"duplicate participant id {p.participant_id} in snapshot",
                participant_ids=[p.participant_id],
            )
        known.add(p.participant_id)

    leaders: dict[int, LeaderInstrument] = {}
    for instrument in snapshot.leaders:
        if instrument.leader_id in leaders:
            raise DataInconsistencyError(
                f"leader {instrument.leader_id} owns more than one instrument",
                participant_ids=[instrument.leader_id],
            )
        if instrument.leader_id not in known:
            raise DataInconsistencyError(
                f"instrument {instrument.instrument_id} belongs to unknown leader "
                f"{instrument.leader_id}",
                participant_ids=[instrument.leader_id],
            )
        leaders[instrument.leader_id] = instrument

    for edge in snapshot.edges:
        if edge.follower_id not in known:
            raise DataInconsistencyError(
                f"ownership edge references unknown follower {edge.follower_id}",
                participant_ids=[edge.follower_id, edge.leader_id],
            )
        if edge.leader_id not in leaders:
            raise DataInconsistencyError(
                f"ownership edge {edge.follower_id} -> {edge.leader_id} references "
                f"a participant that is not a known leader",
                participant_ids=[edge.follower_id, edge.leader_id],
            )

    return leaders


def compute_valuations(
    snapshot: ValuationSnapshot,
    config: ValuationConfig,
    checked_at: float,
) -> tuple[ValuationResult, PassTimings]:
    """
    Чистое вычисление прохода по снапшоту (без I/O).

    Raises:
        DataInconsistencyError: Нарушение целостности снапшота
        NumericalFailureError: Компонента не имеет конечного решения
    """
    t0 = time.perf_counter()
    if snapshot.is_empty:
        return ValuationResult(), PassTimings()

    leaders = check_snapshot_integrity(snapshot)
    participants = {p.participant_id: p for p in snapshot.participants}

    components = decompose_components(list(participants), snapshot.edges)
    systems = [
        build_component_system(c, participants, config.leader_value_share)
        for c in components
    ]
    t_build = time.perf_counter()

    solutions = solve_components(
        systems,
        condition_limit=config.condition_limit,
        parallel=config.parallel_components,
        max_workers=config.max_workers,
    )
    t_solve = time.perf_counter()

    valuations, quotes = derive_results(solutions, leaders, config, checked_at)
    t_derive = time.perf_counter()

    result = ValuationResult(
        participants=valuations,
        quotes=quotes,
        component_count=len(components),
    )
    timings = PassTimings(
        build_ms=(t_build - t0) * 1000.0,
        solve_ms=(t_solve - t_build) * 1000.0,
        derive_ms=(t_derive - t_solve) * 1000.0,
    )
    return result, timings


class LeaderValuationEngine:
    """
    Единственная точка входа: recompute_valuations().

    Вызывается внешним периодическим планировщиком; не предназначена для
    перекрывающихся вызовов (эксклюзивность обеспечивают блокировки scope).
    """

    def __init__(
        self,
        scope: TransactionScope,
        sink: NotificationSink,
        config: ValuationConfig | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.scope = scope
        self.config = config or ValuationConfig()
        self.writer = ResultWriter(sink)
        self._clock = clock

    def recompute_valuations(self) -> ValuationResult:
        """
        Пересчёт всех оценок из текущего состояния хранилища.

        Returns:
            ValuationResult записанного прохода (пустой для пустого снапшота,
            skipped=True в read-only режиме)

        Raises:
            DataInconsistencyError, NumericalFailureError: после rollback и
                публикации ValuationErrorEvent
            Exception: любой другой сбой прохода (хранилище, commit),
                после rollback и ValuationErrorEvent с kind=internal_failure
        """
        if self.config.readonly:
            logger.info("read-only mode, valuation pass skipped")
            return ValuationResult(skipped=True)

        t_start = time.perf_counter()
        checked_at = self._clock()

        try:
            with self.scope.begin(READ_REGIONS, WRITE_REGIONS) as tx:
                try:
                    snapshot = ValuationSnapshot(
                        participants=list(tx.read_participants()),
                        edges=list(tx.read_ownership_edges()),
                        leaders=list(tx.read_leader_instruments()),
                    )
                    t_fetch = time.perf_counter()

                    if snapshot.is_empty:
                        logger.info("no active participants, nothing to value")
                        tx.rollback()
                        return ValuationResult()

                    logger.info(
                        "valuation pass: %d participants, %d leaders, %d ownership edges",
                        len(snapshot.participants),
                        len(snapshot.leaders),
                        len(snapshot.edges),
                    )

                    result, timings = compute_valuations(snapshot, self.config, checked_at)

                    t_write = time.perf_counter()
                    self.writer.apply(tx, result)
                    tx.commit()
                    t_end = time.perf_counter()
                except Exception:
                    tx.rollback()
                    raise
        except ValuationError as e:
            logger.error(
                "valuation pass aborted (%s), no values written: %s; participants=%s",
                e.kind.value,
                e.message,
                e.participant_ids,
            )
            self._report_failure(e.kind, e.message, e.participant_ids)
            raise
        except Exception as e:
            logger.exception("valuation pass aborted, transaction rolled back")
            self._report_failure(ErrorKind.INTERNAL_FAILURE, f"{type(e).__name__}: {e}")
            raise

        result = result.model_copy(
            update={
                "timings": timings.model_copy(
                    update={
                        "fetch_ms": (t_fetch - t_start) * 1000.0,
                        "write_ms": (t_end - t_write) * 1000.0,
                        "total_ms": (t_end - t_start) * 1000.0,
                    }
                )
            }
        )

        published = self.writer.publish(result)
        logger.info(
            "valuation pass complete: %d components, %d quotes published; %s",
            result.component_count,
            published,
            result.timings.summary(),
        )
        return result

    def _report_failure(
        self, kind: ErrorKind, message: str, participant_ids: Iterable[int] = ()
    ) -> None:
        # Блокировки уже сняты, транзакция откачена
        self.writer.publish_error(kind, message, participant_ids, occurred_at=self._clock())


def create_engine(
    scope: TransactionScope,
    sink: NotificationSink,
    config_path: str | Path | None = None,
    log_level: str = "INFO",
    log_dir: str | None = None,
) -> LeaderValuationEngine:
    """
    Сборка engine для планировщика: логирование, конфигурация, адаптеры.

    Args:
        scope: Транзакционный scope хранилища
        sink: Шина уведомлений
        config_path: YAML-файл конфигурации (окружение имеет приоритет)
        log_level: Уровень логгера проекта
        log_dir: Каталог для файлового лога (None — только stdout)
    """
    setup_logger(log_level, log_dir)
    config = load_config(config_path)
    logger.info(
        "valuation engine configured: leader_value_share=%s price_scale=%s ask_floor=%s "
        "readonly=%s parallel=%s",
        config.leader_value_share,
        config.price_scale,
        config.ask_floor,
        config.readonly,
        config.parallel_components,
    )
    return LeaderValuationEngine(scope, sink, config=config)
