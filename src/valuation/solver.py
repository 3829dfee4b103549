"""
Solver integration — решение систем компонент

Каждая компонента решается одной факторизацией для обоих базисов (bid, ask).
Компоненты независимы и могут решаться параллельно; результат возвращается
только если ВСЕ компоненты решены успешно.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from src.core.math import SingularSystemError, solve_shared

from .errors import NumericalFailureError
from .system_builder import ComponentSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentSolution:
    """Решённые net worth участников компоненты (в локальном порядке)."""

    member_ids: tuple[int, ...]
    net_worth_bid: np.ndarray
    net_worth_ask: np.ndarray
    provision_out: np.ndarray

    def items(self):
        """(participant_id, net_worth_bid, net_worth_ask, provision) по участникам."""
        for k, pid in enumerate(self.member_ids):
            yield (
                pid,
                float(self.net_worth_bid[k]),
                float(self.net_worth_ask[k]),
                float(self.provision_out[k]),
            )


def solve_component(
    system: ComponentSystem,
    condition_limit: float | None = None,
) -> ComponentSolution:
    """
    Решение системы компоненты: solve(A, [B_bid, B_ask]).

    Raises:
        NumericalFailureError: Система вырождена или решение не конечно;
            содержит полный состав компоненты
    """
    try:
        x_bid, x_ask = solve_shared(
            system.A, [system.rhs_bid, system.rhs_ask], condition_limit=condition_limit
        )
    except SingularSystemError as e:
        raise NumericalFailureError(
            f"linear system for component of {system.size} participant(s) "
            f"{list(system.member_ids)} has no finite solution: {e}",
            participant_ids=system.member_ids,
            matrix_size=system.size,
            condition=e.condition,
        ) from e

    return ComponentSolution(
        member_ids=system.member_ids,
        net_worth_bid=x_bid,
        net_worth_ask=x_ask,
        provision_out=system.provision_out,
    )


def solve_components(
    systems: Sequence[ComponentSystem],
    condition_limit: float | None = None,
    parallel: bool = False,
    max_workers: int = 4,
) -> list[ComponentSolution]:
    """
    Решение всех компонент.

    При parallel=True системы решаются на пуле потоков
    (LAPACK освобождает GIL). Первая по порядку ошибка пробрасывается,
    остальные результаты отбрасываются.
    """
    if not parallel or len(systems) < 2:
        return [solve_component(s, condition_limit) for s in systems]

    logger.debug("solving %d components on %d workers", len(systems), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="valuation") as executor:
        return list(executor.map(lambda s: solve_component(s, condition_limit), systems))
