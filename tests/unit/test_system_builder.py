"""
Тесты для System Builder

Проверяет:
1. A = I для участников без рёбер
2. B = external + cash - provision (bid и ask базис)
3. A[k][L] -= shares / leader_value_share, суммирование повторных рёбер
4. Независимость от порядка локальных индексов (через index)
"""

import numpy as np
import pytest

from src.core.domain import OwnershipEdge, Participant
from src.valuation import build_component_system, decompose_components
from src.valuation.decomposer import Component
from src.valuation.errors import DataInconsistencyError


@pytest.fixture
def participants() -> dict[int, Participant]:
    return {
        1: Participant(
            participant_id=1,
            cash=500_000.0,
            provision_balance=100_000.0,
            external_value_bid=600_000.0,
            external_value_ask=650_000.0,
        ),
        2: Participant(
            participant_id=2,
            cash=2_000_000.0,
            provision_balance=0.0,
            external_value_bid=0.0,
            external_value_ask=0.0,
        ),
        3: Participant(participant_id=3, cash=10.0, provision_balance=-5.0),
    }


class TestBuildComponentSystem:
    """Построение (A, B, provision_out)"""

    def test_singleton_identity(self, participants) -> None:
        component = Component(member_ids=(3,), edges=())
        system = build_component_system(component, participants, leader_value_share=100.0)

        assert system.A.tolist() == [[1.0]]
        assert system.B.tolist() == [[15.0, 15.0]]
        assert system.provision_out.tolist() == [-5.0]

    def test_rhs_bid_and_ask(self, participants) -> None:
        edges = [OwnershipEdge(follower_id=1, leader_id=2, shares_held=20.0)]
        (component,) = decompose_components([1, 2], edges)
        system = build_component_system(component, participants, leader_value_share=100.0)

        k1 = system.index[1]
        k2 = system.index[2]
        assert system.B[k1].tolist() == [1_000_000.0, 1_050_000.0]
        assert system.B[k2].tolist() == [2_000_000.0, 2_000_000.0]
        assert system.provision_out[k1] == 100_000.0

    def test_edge_coefficients(self, participants) -> None:
        edges = [
            OwnershipEdge(follower_id=1, leader_id=2, shares_held=20.0),
            OwnershipEdge(follower_id=2, leader_id=1, shares_held=10.0),
        ]
        (component,) = decompose_components([1, 2], edges)
        system = build_component_system(component, participants, leader_value_share=100.0)

        k1, k2 = system.index[1], system.index[2]
        assert system.A[k1, k1] == 1.0
        assert system.A[k2, k2] == 1.0
        assert system.A[k1, k2] == pytest.approx(-0.2)
        assert system.A[k2, k1] == pytest.approx(-0.1)

    def test_repeated_edges_accumulate(self, participants) -> None:
        edges = [
            OwnershipEdge(follower_id=3, leader_id=1, shares_held=5.0),
            OwnershipEdge(follower_id=3, leader_id=1, shares_held=15.0),
        ]
        (component,) = decompose_components([1, 3], edges)
        system = build_component_system(component, participants, leader_value_share=50.0)

        assert system.A[system.index[3], system.index[1]] == pytest.approx(-0.4)

    def test_leader_value_share_scales_coefficient(self, participants) -> None:
        edges = [OwnershipEdge(follower_id=1, leader_id=2, shares_held=20.0)]
        (component,) = decompose_components([1, 2], edges)

        small = build_component_system(component, participants, leader_value_share=200.0)
        assert small.A[small.index[1], small.index[2]] == pytest.approx(-0.1)

    def test_diagonal_untouched_by_edges(self, participants) -> None:
        edges = [
            OwnershipEdge(follower_id=1, leader_id=2, shares_held=30.0),
            OwnershipEdge(follower_id=3, leader_id=2, shares_held=30.0),
        ]
        (component,) = decompose_components([1, 2, 3], edges)
        system = build_component_system(component, participants, leader_value_share=100.0)
        np.testing.assert_array_equal(np.diag(system.A), np.ones(3))

    def test_invalid_leader_value_share(self, participants) -> None:
        component = Component(member_ids=(3,), edges=())
        with pytest.raises(ValueError, match="leader_value_share"):
            build_component_system(component, participants, leader_value_share=0.0)


class TestBuilderInconsistency:
    """Ошибки целостности при построении"""

    def test_missing_participant(self, participants) -> None:
        component = Component(member_ids=(3, 77), edges=())
        with pytest.raises(DataInconsistencyError, match="77"):
            build_component_system(component, participants, leader_value_share=100.0)

    def test_edge_outside_component(self, participants) -> None:
        component = Component(
            member_ids=(1,),
            edges=(OwnershipEdge(follower_id=1, leader_id=2, shares_held=1.0),),
        )
        with pytest.raises(DataInconsistencyError, match="leaves its component"):
            build_component_system(component, participants, leader_value_share=100.0)
