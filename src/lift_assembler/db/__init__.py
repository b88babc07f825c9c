"""Database layer for lift-assembler."""

from .engine import get_db_path, init_db
from .repositories import ProgramRepository

__all__ = [
    "get_db_path",
    "init_db",
    "ProgramRepository",
]
