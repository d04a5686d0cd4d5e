"""CLI commands."""

from . import (
    call,
    init,
    methods,
    run,
    status,
)

__all__ = [
    "call",
    "init",
    "methods",
    "run",
    "status",
]
