"""
Core domain models, mathematical primitives, configuration and contracts.

This module contains the foundational building blocks of the valuation
engine that are independent of external systems (storage, event bus, etc.).
"""
