"""
Component Decomposer — разбиение графа владения на компоненты связности

Компонента — максимальное множество участников, связанных неориентированным
замыканием рёбер владения. Участник без рёбер образует singleton-компоненту.
Компоненты независимы: net worth участников разных компонент не зависят друг
от друга, поэтому каждая решается отдельной системой.

ИНВАРИАНТЫ:
1. Результат — разбиение: каждый участник ровно в одной компоненте
2. Два участника в одной компоненте ⇔ связаны неориентированным путём
3. Порядок обработки рёбер не влияет на разбиение
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from src.core.domain import OwnershipEdge
from src.core.math import DisjointSet

from .errors import DataInconsistencyError


@dataclass(frozen=True)
class Component:
    """
    Компонента связности графа владения.

    member_ids отсортированы по возрастанию; edges — все рёбра, оба конца
    которых лежат в компоненте (по построению — все рёбра её участников).
    """

    member_ids: tuple[int, ...]
    edges: tuple[OwnershipEdge, ...]

    @property
    def size(self) -> int:
        return len(self.member_ids)

    @property
    def is_singleton(self) -> bool:
        return len(self.member_ids) == 1 and not self.edges


def decompose_components(
    participant_ids: Sequence[int],
    edges: Iterable[OwnershipEdge],
) -> list[Component]:
    """
    Разбиение участников на компоненты связности (union-find).

    Args:
        participant_ids: Идентификаторы всех участников прохода
        edges: Рёбра владения follower → leader (направление игнорируется)

    Returns:
        Компоненты, упорядоченные по наименьшему id участника

    Raises:
        DataInconsistencyError: Дублирующийся id участника или ребро,
            ссылающееся на участника вне снапшота
    """
    index: dict[int, int] = {}
    for pid in participant_ids:
        if pid in index:
            raise DataInconsistencyError(
                f"duplicate participant id {pid} in snapshot", participant_ids=[pid]
            )
        index[pid] = len(index)

    edge_list = list(edges)
    ds = DisjointSet(len(index))

    for edge in edge_list:
        unknown = [pid for pid in (edge.follower_id, edge.leader_id) if pid not in index]
        if unknown:
            raise DataInconsistencyError(
                f"ownership edge {edge.follower_id} -> {edge.leader_id} references "
                f"unknown participant(s) {unknown}",
                participant_ids=[edge.follower_id, edge.leader_id],
            )
        ds.union(index[edge.follower_id], index[edge.leader_id])

    ids_by_index = list(index)
    groups = ds.groups()

    group_of: dict[int, int] = {}
    for g, members in enumerate(groups):
        for i in members:
            group_of[i] = g

    edges_by_group: list[list[OwnershipEdge]] = [[] for _ in groups]
    for edge in edge_list:
        edges_by_group[group_of[index[edge.follower_id]]].append(edge)

    components = [
        Component(
            member_ids=tuple(sorted(ids_by_index[i] for i in members)),
            edges=tuple(edges_by_group[g]),
        )
        for g, members in enumerate(groups)
    ]
    components.sort(key=lambda c: c.member_ids[0])
    return components
