"""Exceptions raised by the PIR8 engine."""


class PIR8Error(Exception):
    """Base class for engine errors."""


class InvalidCoordinateError(PIR8Error, ValueError):
    """A coordinate string could not be parsed."""


class GameStateError(PIR8Error, RuntimeError):
    """A lifecycle operation was attempted in the wrong game status."""


class InvariantViolationError(PIR8Error, AssertionError):
    """Player territory indexes and cell owners disagree."""
