"""Abstract interfaces for the game layer.

High-level game classes depend on these ABCs, not on concrete player or
scheduler implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from bisimgame.core.enums import Role

if TYPE_CHECKING:
    from bisimgame.core.move import Move
    from bisimgame.game.controller import DgGame


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states of a dependency-graph game."""

    NOT_STARTED = auto()
    ATTACKER_TO_MOVE = auto()
    DEFENDER_TO_MOVE = auto()
    FINISHED = auto()

    @classmethod
    def to_move(cls, role: Role) -> GamePhase:
        return cls.ATTACKER_TO_MOVE if role is Role.ATTACKER else cls.DEFENDER_TO_MOVE

    @property
    def role_to_move(self) -> Role | None:
        if self is GamePhase.ATTACKER_TO_MOVE:
            return Role.ATTACKER
        if self is GamePhase.DEFENDER_TO_MOVE:
            return Role.DEFENDER
        return None


# ── Deferred tasks ───────────────────────────────────────────────────────────


class TaskHandle(ABC):
    """Handle of a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """True while the callback is still due to run."""


class IScheduler(ABC):
    """Runs callbacks later on the thread that owns the game."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TaskHandle:
        """Schedule *callback* to run once after *delay_ms* milliseconds."""


# ── Players ──────────────────────────────────────────────────────────────────


class IPlayer(ABC):
    """Interface for a game participant (human or automated)."""

    @property
    @abstractmethod
    def play_type(self) -> Role: ...

    @property
    @abstractmethod
    def color(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def prepare_turn(self, choices: Sequence[Move], game: DgGame) -> None:
        """Begin choosing one of *choices*.

        Humans surface the choices to the UI.  Automated players schedule a
        decision that later calls ``game.play``.
        """

    @abstractmethod
    def abort_play(self) -> None:
        """Drop any pending decision. No-op when nothing is pending."""

    def play_type_str(self) -> str:
        return str(self.play_type)
