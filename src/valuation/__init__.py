"""Valuation — пересчёт цен leader-инструментов через решение линейных систем.

- Разбиение графа владения на компоненты (union-find)
- Система A·X = [B_bid, B_ask] на компоненту, одна факторизация
- Котировки bid/ask/mid и liquidity gate (tradable_volume)
- Атомарная запись и события valuation_changed после commit
"""

from .decomposer import Component, decompose_components
from .engine import (
    LeaderValuationEngine,
    check_snapshot_integrity,
    compute_valuations,
    create_engine,
)
from .errors import DataInconsistencyError, NumericalFailureError, ValuationError
from .memory import InMemoryTransaction, InMemoryValuationStore, RecordingSink
from .ports import (
    HOLDINGS,
    LEADER_INSTRUMENTS,
    PARTICIPANT_FINANCE,
    READ_REGIONS,
    WRITE_REGIONS,
    NotificationSink,
    TransactionScope,
    ValuationTransaction,
)
from .price_deriver import derive_prices, derive_quote, derive_results
from .solver import ComponentSolution, solve_component, solve_components
from .system_builder import ComponentSystem, build_component_system
from .writer import ResultWriter

__all__ = [
    # Engine
    "LeaderValuationEngine",
    "create_engine",
    "compute_valuations",
    "check_snapshot_integrity",
    # Errors
    "ValuationError",
    "DataInconsistencyError",
    "NumericalFailureError",
    # Decomposer
    "Component",
    "decompose_components",
    # System Builder
    "ComponentSystem",
    "build_component_system",
    # Solver
    "ComponentSolution",
    "solve_component",
    "solve_components",
    # Price Deriver
    "derive_prices",
    "derive_quote",
    "derive_results",
    # Writer
    "ResultWriter",
    # Ports
    "HOLDINGS",
    "LEADER_INSTRUMENTS",
    "PARTICIPANT_FINANCE",
    "READ_REGIONS",
    "WRITE_REGIONS",
    "NotificationSink",
    "TransactionScope",
    "ValuationTransaction",
    # In-memory adapters
    "InMemoryTransaction",
    "InMemoryValuationStore",
    "RecordingSink",
]
