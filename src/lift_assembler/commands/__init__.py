"""CLI commands for lift-assembler."""

from .assemble import assemble
from .init import init
from .match import match
from .programs import programs
from .serve import serve
from .validate import validate

__all__ = [
    "assemble",
    "init",
    "match",
    "programs",
    "serve",
    "validate",
]
