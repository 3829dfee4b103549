"""
Contract Validation Module

JSON Schema контракты событий valuation engine.
"""

from .validators import DEFAULT_SCHEMA_DIR, EventContracts, default_contracts

__all__ = [
    "DEFAULT_SCHEMA_DIR",
    "EventContracts",
    "default_contracts",
]
