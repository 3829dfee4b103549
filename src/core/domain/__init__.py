"""
Domain models and value objects.

Contains the valuation snapshot entities (Participant, OwnershipEdge,
LeaderInstrument), pass results and outbound events.
"""

from src.core.domain.events import ErrorKind, ValuationChangedEvent, ValuationErrorEvent
from src.core.domain.participant import (
    LeaderInstrument,
    OwnershipEdge,
    Participant,
    ValuationSnapshot,
)
from src.core.domain.valuation import (
    LeaderQuote,
    ParticipantValuation,
    PassTimings,
    ValuationResult,
)

__all__ = [
    # Snapshot
    "Participant",
    "OwnershipEdge",
    "LeaderInstrument",
    "ValuationSnapshot",
    # Results
    "ParticipantValuation",
    "LeaderQuote",
    "PassTimings",
    "ValuationResult",
    # Events
    "ErrorKind",
    "ValuationChangedEvent",
    "ValuationErrorEvent",
]
