"""JSON API for lift-assembler."""

from .app import create_app

__all__ = ["create_app"]
