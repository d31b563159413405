"""Game session: owns the single live game shown on a display surface."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from bisimgame.core.enums import Role
from bisimgame.core.move import Move
from bisimgame.core.process import ProcessGraph, Transition
from bisimgame.core.successors import expand_bfs, get_succ_generator
from bisimgame.game.bisimulation import BisimulationGame
from bisimgame.game.errors import GameError
from bisimgame.game.interfaces import IPlayer, IScheduler
from bisimgame.game.log import GameLog
from bisimgame.game.player import (
    PLAYER1_COLOR,
    PLAYER2_COLOR,
    ComputerPlayer,
    HumanPlayer,
)
from bisimgame.game.scheduler import QtScheduler

_LOGGER = logging.getLogger(__name__)


# ── Settings data class ──────────────────────────────────────────────────────


@dataclass
class GameSettings:
    """All user-configurable game settings."""

    # Defender semantics; the Attacker always plays strong transitions
    game_type: str = "strong"

    # Players
    human_role: Role | None = None
    computer_delay_ms: int = ComputerPlayer.DELAY_MS
    seed: int | None = None

    # Display
    expand_depth: int = 1000
    echo_log: bool = False


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession:
    """Creates bisimulation games for a process graph, one live at a time.

    Installing a new game always stops the previous one first, so a stale
    automated decision can never reach a superseded game.

    Args:
        graph: Process graph the games are played on.
        settings: Initial settings.
        scheduler: Runs automated decisions; errors raised through a
            :class:`QtScheduler` abort the live game.
        on_human_turn: Receives the offered moves whenever a human player
            is to move.
    """

    __slots__ = ("_graph", "_settings", "_scheduler", "_on_human_turn", "_game", "_rng")

    def __init__(
        self,
        graph: ProcessGraph,
        *,
        settings: GameSettings | None = None,
        scheduler: IScheduler | None = None,
        on_human_turn: Callable[[Sequence[Move]], None] | None = None,
    ) -> None:
        self._graph = graph
        self._settings = settings or GameSettings()
        if scheduler is None:
            scheduler = QtScheduler()
        if isinstance(scheduler, QtScheduler):
            scheduler.set_error_handler(self.on_decision_error)
        self._scheduler = scheduler
        self._on_human_turn = on_human_turn
        self._game: BisimulationGame | None = None
        self._rng = random.Random(self._settings.seed)

    @property
    def game(self) -> BisimulationGame | None:
        return self._game

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def scheduler(self) -> IScheduler:
        return self._scheduler

    def apply_settings(self, settings: GameSettings) -> None:
        """Replace settings; they apply from the next :meth:`new_game`."""
        if settings.seed != self._settings.seed:
            self._rng = random.Random(settings.seed)
        self._settings = replace(settings)

    def display_options(self) -> tuple[list[str], str | None]:
        """Selectable process names and the default right-hand selection."""
        names = list(reversed(self._graph.named_processes()))
        if not names:
            return names, None
        return names, names[1] if len(names) > 1 else names[0]

    def new_game(self, left_process: str, right_process: str) -> BisimulationGame:
        """Stop the live game and start a new one for the given pair."""
        self.stop()

        s = self._settings
        game = BisimulationGame(
            self._graph,
            get_succ_generator(self._graph, "strong"),
            get_succ_generator(self._graph, s.game_type),
            left_process,
            right_process,
            log=GameLog(echo=s.echo_log),
        )
        attacker, defender = self._make_players()
        game.set_players(attacker, defender)
        self._game = game
        game.start()
        return game

    def stop(self) -> None:
        if self._game is not None:
            self._game.stop()

    def expand(self, process_name: str) -> dict[int, list[Transition]]:
        """Transition system around *process_name* for drawing."""
        succ_gen = get_succ_generator(self._graph, self._settings.game_type)
        process = self._graph.process_by_name(process_name)
        return expand_bfs(succ_gen, process, self._settings.expand_depth)

    def on_decision_error(self, exc: GameError) -> None:
        """Abort the live game after an automated decision failed."""
        if self._game is not None:
            self._game.abort(str(exc))

    def _make_players(self) -> tuple[IPlayer, IPlayer]:
        # Roles do not depend on which side wins overall; only ``human_role``
        # changes who is automated.
        return (
            self._make_player(PLAYER2_COLOR, Role.ATTACKER),
            self._make_player(PLAYER1_COLOR, Role.DEFENDER),
        )

    def _make_player(self, color: str, role: Role) -> IPlayer:
        if self._settings.human_role == role:
            return HumanPlayer(color, role, on_prepare_turn=self._on_human_turn)
        return ComputerPlayer(
            color,
            role,
            scheduler=self._scheduler,
            delay_ms=self._settings.computer_delay_ms,
            rng=self._rng,
        )
