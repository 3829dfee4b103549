"""
Price Deriver — котировки leader-инструментов из решённых net worth

ФОРМУЛЫ:
    bid  = net_worth_bid / price_scale
    ask  = max(net_worth_ask / price_scale, ask_floor)
    mid  = (bid + ask) / 2
    tradable_volume = 0 если bid < ask_floor, иначе full_liquidity_volume

    gross_total_value(u) = net_worth_bid(u) + provision_balance(u)

tradable_volume = 0 — единственный liquidity gate системы: торговля
инструментом останавливается до восстановления оценки выше ask_floor.
"""

from typing import Iterable, Mapping

from src.core.config import ValuationConfig
from src.core.domain import LeaderInstrument, LeaderQuote, ParticipantValuation
from src.core.math import is_valid_float

from .errors import NumericalFailureError
from .solver import ComponentSolution


def derive_prices(
    net_worth_bid: float,
    net_worth_ask: float,
    config: ValuationConfig,
) -> tuple[float, float, float, int]:
    """
    Цены и объём по net worth лидера.

    Returns:
        (bid, ask, mid, tradable_volume)

    Examples:
        >>> derive_prices(2_000_000.0, 2_100_000.0, ValuationConfig())
        (20000.0, 21000.0, 20500.0, 100000000)
        >>> derive_prices(500_000.0, 500_000.0, ValuationConfig())
        (5000.0, 10000.0, 7500.0, 0)
    """
    bid = net_worth_bid / config.price_scale
    ask = max(net_worth_ask / config.price_scale, config.ask_floor)
    mid = (bid + ask) / 2.0
    volume = 0 if bid < config.ask_floor else config.full_liquidity_volume
    return bid, ask, mid, volume


def derive_quote(
    instrument: LeaderInstrument,
    net_worth_bid: float,
    net_worth_ask: float,
    config: ValuationConfig,
    checked_at: float,
) -> LeaderQuote:
    bid, ask, mid, volume = derive_prices(net_worth_bid, net_worth_ask, config)
    return LeaderQuote(
        instrument_id=instrument.instrument_id,
        instrument_name=instrument.name,
        leader_id=instrument.leader_id,
        bid=bid,
        ask=ask,
        mid=mid,
        tradable_volume=volume,
        checked_at=checked_at,
    )


def derive_results(
    solutions: Iterable[ComponentSolution],
    leaders: Mapping[int, LeaderInstrument],
    config: ValuationConfig,
    checked_at: float,
) -> tuple[dict[int, ParticipantValuation], dict[int, LeaderQuote]]:
    """
    Оценки всех участников и котировки всех лидеров.

    Args:
        solutions: Решения компонент
        leaders: Leader-инструменты по leader_id
        config: Конфигурация (price_scale, ask_floor, full_liquidity_volume)
        checked_at: Время прохода (Unix, секунды)

    Returns:
        (participants, quotes): оценки по participant_id, котировки по leader_id

    Raises:
        NumericalFailureError: Решение содержит NaN/Inf
    """
    participants: dict[int, ParticipantValuation] = {}
    quotes: dict[int, LeaderQuote] = {}

    for solution in solutions:
        for pid, nw_bid, nw_ask, provision in solution.items():
            if not (is_valid_float(nw_bid) and is_valid_float(nw_ask)):
                raise NumericalFailureError(
                    f"non-finite net worth for participant {pid}",
                    participant_ids=solution.member_ids,
                    matrix_size=len(solution.member_ids),
                )

            participants[pid] = ParticipantValuation(
                participant_id=pid,
                net_worth_bid=nw_bid,
                net_worth_ask=nw_ask,
                gross_total_value=nw_bid + provision,
            )

            instrument = leaders.get(pid)
            if instrument is not None:
                quotes[pid] = derive_quote(instrument, nw_bid, nw_ask, config, checked_at)

    return participants, quotes
