"""lift-assembler: Deterministic multi-week training program assembly."""

__version__ = "0.1.0"
