"""Storage — внешние коллабораторы аллокатора.

- LoadStore / AssignmentSink: контракты (typing.Protocol)
- InMemoryLoadStore / InMemoryAssignmentSink: реализации в памяти
- JsonFileLoadStore: нагрузка в JSON файле
"""

from .json_file import JsonFileLoadStore
from .memory import InMemoryAssignmentSink, InMemoryLoadStore
from .protocols import AssignmentSink, LoadStore

__all__ = [
    "LoadStore",
    "AssignmentSink",
    "InMemoryLoadStore",
    "InMemoryAssignmentSink",
    "JsonFileLoadStore",
]
