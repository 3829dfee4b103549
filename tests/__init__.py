"""
Test suite for leader valuation engine

Contains:
- tests/unit/          : Unit tests for individual modules and the full pass
"""
