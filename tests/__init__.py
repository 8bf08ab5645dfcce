"""
Test suite for choresplit

Contains:
- tests/unit/          : Unit tests for stages, domain models, contracts, stores
"""
