"""Exceptions raised by the game engine."""

from __future__ import annotations


class GameError(Exception):
    """Base class for game engine errors."""


class InvalidConfigurationError(GameError):
    """Players or moves do not fit the game (role pairing, turn, offer)."""


class InvalidStateError(GameError):
    """Operation not allowed in the game's current lifecycle state."""


class InvariantViolationError(GameError):
    """Strategy input contradicts the marking; a programming error."""


class EmptyChoicesError(InvariantViolationError):
    """A strategy was asked to choose from no moves."""


class NoValidMoveError(InvariantViolationError):
    """No move satisfies the strategy's winning condition."""
