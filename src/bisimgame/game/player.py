"""Concrete player implementations."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from bisimgame.core.enums import Role
from bisimgame.game.errors import InvalidConfigurationError
from bisimgame.game.interfaces import IPlayer, IScheduler, TaskHandle

if TYPE_CHECKING:
    from bisimgame.core.move import Move
    from bisimgame.game.controller import DgGame

_LOGGER = logging.getLogger(__name__)

PLAYER1_COLOR = "#e74c3c"
PLAYER2_COLOR = "#2980b9"
HUMAN_COLOR = PLAYER1_COLOR
COMPUTER_COLOR = PLAYER2_COLOR


class HumanPlayer(IPlayer):
    """A human participant whose moves come from the UI.

    ``prepare_turn`` only records the offered moves and notifies the UI;
    the UI then calls :meth:`submit` (or ``game.play`` directly).
    """

    __slots__ = ("_color", "_play_type", "_on_prepare_turn", "_choices", "_game")

    def __init__(
        self,
        color: str,
        play_type: Role,
        on_prepare_turn: Callable[[Sequence[Move]], None] | None = None,
    ) -> None:
        self._color = color
        self._play_type = play_type
        self._on_prepare_turn = on_prepare_turn
        self._choices: tuple[Move, ...] = ()
        self._game: DgGame | None = None

    @property
    def color(self) -> str:
        return self._color

    @property
    def play_type(self) -> Role:
        return self._play_type

    @property
    def is_human(self) -> bool:
        return True

    @property
    def choices(self) -> tuple[Move, ...]:
        """Moves offered for the current turn; empty when not to move."""
        return self._choices

    def prepare_turn(self, choices: Sequence[Move], game: DgGame) -> None:
        self._choices = tuple(choices)
        self._game = game
        if self._on_prepare_turn is not None:
            self._on_prepare_turn(self._choices)

    def abort_play(self) -> None:
        self._choices = ()
        self._game = None

    def submit(self, move: Move) -> None:
        """Play one of the offered moves."""
        game = self._game
        if game is None or move not in self._choices:
            raise InvalidConfigurationError(f"Move {move} was not offered")
        self._choices = ()
        game.play_move(self, move)


class ComputerPlayer(IPlayer):
    """Automated participant that decides after a "thinking" delay.

    Plays optimally when it is the game's overall winner and uniformly at
    random otherwise.  At most one decision is pending at a time; a newer
    ``prepare_turn`` or ``abort_play`` supersedes it.

    Args:
        color: Display colour.
        play_type: Role played.
        scheduler: Runs the deferred decision.
        delay_ms: Thinking delay.
        rng: Source of randomness for losing play.
    """

    DELAY_MS = 2000

    __slots__ = (
        "_color",
        "_play_type",
        "_scheduler",
        "_delay_ms",
        "_rng",
        "_pending",
        "_generation",
    )

    def __init__(
        self,
        color: str,
        play_type: Role,
        *,
        scheduler: IScheduler,
        delay_ms: int = DELAY_MS,
        rng: random.Random | None = None,
    ) -> None:
        self._color = color
        self._play_type = play_type
        self._scheduler = scheduler
        self._delay_ms = delay_ms
        self._rng = rng or random.Random()
        self._pending: TaskHandle | None = None
        self._generation = 0

    @property
    def color(self) -> str:
        return self._color

    @property
    def play_type(self) -> Role:
        return self._play_type

    @property
    def is_human(self) -> bool:
        return False

    @property
    def has_pending_play(self) -> bool:
        return self._pending is not None

    def prepare_turn(self, choices: Sequence[Move], game: DgGame) -> None:
        self.abort_play()

        # Select strategy
        winning = game.is_winner(self)
        if self._play_type == Role.ATTACKER:
            decide = self._winning_attack if winning else self._losing_play
        else:
            decide = self._winning_defend if winning else self._losing_play

        options = list(choices)
        generation = self._generation
        self._pending = self._scheduler.call_later(
            self._delay_ms,
            lambda: self._fire(generation, decide, options, game),
        )

    def abort_play(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    # ── Internal ─────────────────────────────────────────────────────────

    def _fire(
        self,
        generation: int,
        decide: Callable[[list[Move], DgGame], None],
        choices: list[Move],
        game: DgGame,
    ) -> None:
        if generation != self._generation:
            _LOGGER.debug("Suppressed stale %s decision", self.play_type_str())
            return
        self._pending = None
        decide(choices, game)

    def _winning_attack(self, choices: list[Move], game: DgGame) -> None:
        game.play_move(self, game.get_best_winning_attack(choices))

    def _winning_defend(self, choices: list[Move], game: DgGame) -> None:
        game.play_move(self, game.get_winning_defend(choices))

    def _losing_play(self, choices: list[Move], game: DgGame) -> None:
        game.play_move(self, self._rng.choice(choices))
