"""
System Builder — построение линейной системы компоненты

Для компоненты из n участников (локальные индексы 0..n-1):

    A = I (n×n)
    B[k] = [external_bid(k) + cash(k) - provision(k),
            external_ask(k) + cash(k) - provision(k)]
    для каждого ребра (k, L, shares):  A[k][index(L)] -= shares / leader_value_share

Решение A·X = B даёт net worth каждого участника по bid- и ask-базису:
    X_k = base_k + Σ_L (shares_kL / leader_value_share) · X_L
"""

from dataclasses import dataclass
from typing import Mapping

import numpy as np

from src.core.domain import Participant
from src.core.math import identity_system, validate_positive

from .decomposer import Component
from .errors import DataInconsistencyError

# Столбцы правой части
BID_COLUMN = 0
ASK_COLUMN = 1


@dataclass(frozen=True)
class ComponentSystem:
    """Линейная система одной компоненты."""

    member_ids: tuple[int, ...]
    index: Mapping[int, int]
    A: np.ndarray
    B: np.ndarray
    provision_out: np.ndarray

    @property
    def size(self) -> int:
        return len(self.member_ids)

    @property
    def rhs_bid(self) -> np.ndarray:
        return self.B[:, BID_COLUMN]

    @property
    def rhs_ask(self) -> np.ndarray:
        return self.B[:, ASK_COLUMN]


def build_component_system(
    component: Component,
    participants: Mapping[int, Participant],
    leader_value_share: float,
) -> ComponentSystem:
    """
    Построение (A, B, provision_out) для компоненты.

    Args:
        component: Компонента связности
        participants: Участники по id (должен содержать всех членов компоненты)
        leader_value_share: Число долей, представляющих полный net worth лидера

    Raises:
        ValueError: Если leader_value_share <= 0
        DataInconsistencyError: Ребро выходит за пределы компоненты или
            участник отсутствует в снапшоте
    """
    validate_positive(leader_value_share, "leader_value_share")

    member_ids = component.member_ids
    index = {pid: k for k, pid in enumerate(member_ids)}
    n = len(member_ids)

    A, B = identity_system(n, rhs_count=2)
    provision_out = np.zeros(n, dtype=float)

    for pid, k in index.items():
        participant = participants.get(pid)
        if participant is None:
            raise DataInconsistencyError(
                f"participant {pid} missing from snapshot", participant_ids=[pid]
            )
        B[k, BID_COLUMN] = participant.base_value_bid()
        B[k, ASK_COLUMN] = participant.base_value_ask()
        provision_out[k] = participant.provision_balance

    for edge in component.edges:
        k = index.get(edge.follower_id)
        col = index.get(edge.leader_id)
        if k is None or col is None:
            raise DataInconsistencyError(
                f"ownership edge {edge.follower_id} -> {edge.leader_id} leaves its component",
                participant_ids=[edge.follower_id, edge.leader_id],
            )
        if k == col:
            raise DataInconsistencyError(
                f"self-holding edge for participant {edge.leader_id}",
                participant_ids=[edge.leader_id],
            )
        # Повторные рёбра одной пары суммируются
        A[k, col] -= edge.shares_held / leader_value_share

    return ComponentSystem(
        member_ids=member_ids,
        index=index,
        A=A,
        B=B,
        provision_out=provision_out,
    )
