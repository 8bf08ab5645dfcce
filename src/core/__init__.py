"""
Core domain models, numerical primitives, and input contracts.

This module contains the foundational building blocks that are independent
of external systems (load stores, assignment sinks, etc.).
"""
