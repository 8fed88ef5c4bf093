"""Error taxonomy raised by the calculation engine."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for calculation failures caused by caller input."""


class InvalidArgument(EngineError, ValueError):
    """A magnitude is negative or outside its domain."""


class DivisionDomainError(EngineError, ZeroDivisionError):
    """An average was requested over zero days."""
