"""DgGame — turn protocol shared by all dependency-graph games.

Coordinates: Players, GameLog, the dependency graph and its marking.
Emits events via simple callbacks so a renderer / tests can subscribe.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from bisimgame.core.enums import Role, Side
from bisimgame.core.move import Move
from bisimgame.core.process import Action, Process
from bisimgame.core.successors import SuccessorGenerator
from bisimgame.dg.graph import DependencyGraph
from bisimgame.dg.marking import LevelMarking
from bisimgame.game.errors import InvalidConfigurationError, InvalidStateError
from bisimgame.game.interfaces import GamePhase, IPlayer
from bisimgame.game.log import GameLog

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlayRecord:
    """One accepted move, enough to highlight it or replay it."""

    role: Role
    destination_process: Process
    source_node: int
    next_node: int
    action: Action | None
    side: Side | None
    step: int


# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[PlayRecord], None]
GameOverCallback = Callable[["IPlayer | None"], None]  # None when aborted
PhaseCallback = Callable[[GamePhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event.

    ``on_phase_changed`` fires before the player to move is handed its
    choices; a UI reads the offered moves from
    ``HumanPlayer(on_prepare_turn=...)`` instead.
    """

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── Game ─────────────────────────────────────────────────────────────────────


class DgGame(ABC):
    """Turn-based game played on a dependency graph.

    The Attacker moves first; after every accepted move the opponent is
    handed its legal moves, and a player left without moves loses.
    Concrete games supply the dependency graph, its marking, the overall
    winner and the strategy helpers used by automated players.

    Single-threaded: ``play`` runs to completion on the caller's thread and
    is only valid for the player that currently holds the turn.
    """

    __slots__ = (
        "_dependency_graph",
        "_marking",
        "_log",
        "_attacker",
        "_defender",
        "_phase",
        "_stopped",
        "_step",
        "_current_node",
        "_last_action",
        "_last_side",
        "_winner",
        "_abort_reason",
        "_history",
        "events",
    )

    def __init__(
        self,
        attacker_succ_gen: SuccessorGenerator,
        defender_succ_gen: SuccessorGenerator,
        *,
        log: GameLog | None = None,
    ) -> None:
        self._dependency_graph = self._create_dependency_graph(
            attacker_succ_gen, defender_succ_gen
        )
        self._marking = self._create_marking()

        self._log = log if log is not None else GameLog()
        self._attacker: IPlayer | None = None
        self._defender: IPlayer | None = None
        self._phase = GamePhase.NOT_STARTED
        self._stopped = False
        self._step = 0
        self._current_node = self._dependency_graph.root
        self._last_action: Action | None = None
        self._last_side: Side | None = None
        self._winner: IPlayer | None = None
        self._abort_reason: str | None = None
        self._history: list[PlayRecord] = []
        self.events = GameEvents()

    # ── Abstract hooks ───────────────────────────────────────────────────

    @abstractmethod
    def _create_dependency_graph(
        self,
        attacker_succ_gen: SuccessorGenerator,
        defender_succ_gen: SuccessorGenerator,
    ) -> DependencyGraph: ...

    @abstractmethod
    def _create_marking(self) -> LevelMarking: ...

    @abstractmethod
    def get_winner(self) -> IPlayer | None:
        """Player that wins with optimal play, as decided at construction."""

    @abstractmethod
    def get_current_choices(self, role: Role) -> list[Move]:
        """Legal moves for *role* at the current node."""

    @abstractmethod
    def get_best_winning_attack(self, choices: Sequence[Move]) -> Move: ...

    @abstractmethod
    def get_winning_defend(self, choices: Sequence[Move]) -> Move: ...

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def dependency_graph(self) -> DependencyGraph:
        return self._dependency_graph

    @property
    def marking(self) -> LevelMarking:
        return self._marking

    @property
    def log(self) -> GameLog:
        return self._log

    @property
    def attacker(self) -> IPlayer | None:
        return self._attacker

    @property
    def defender(self) -> IPlayer | None:
        return self._defender

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def step(self) -> int:
        return self._step

    @property
    def current_node(self) -> int:
        return self._current_node

    @property
    def last_action(self) -> Action | None:
        return self._last_action

    @property
    def history(self) -> tuple[PlayRecord, ...]:
        return tuple(self._history)

    @property
    def winner(self) -> IPlayer | None:
        """Player that actually won; ``None`` until finished or if aborted."""
        return self._winner

    @property
    def abort_reason(self) -> str | None:
        return self._abort_reason

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    @property
    def is_finished(self) -> bool:
        return self._phase == GamePhase.FINISHED

    # ── Queries ──────────────────────────────────────────────────────────

    def get_round(self) -> int:
        return self._step // 2 + 1

    def get_last_move(self) -> Side | None:
        return self._last_side

    def is_winner(self, player: IPlayer) -> bool:
        return self.get_winner() is player

    # ── Lifecycle ────────────────────────────────────────────────────────

    def set_players(self, attacker: IPlayer, defender: IPlayer) -> None:
        if attacker.play_type == defender.play_type:
            raise InvalidConfigurationError(
                f"Cannot make game with two {attacker.play_type_str()}s"
            )
        if attacker.play_type != Role.ATTACKER or defender.play_type != Role.DEFENDER:
            raise InvalidConfigurationError(
                "set_players(...): first argument must be attacker and second defender"
            )
        if self._phase != GamePhase.NOT_STARTED or self._stopped:
            raise InvalidStateError("Players can only be set before the game starts")

        self._attacker = attacker
        self._defender = defender

    def start(self) -> None:
        if self._attacker is None or self._defender is None:
            raise InvalidStateError("No players in game.")
        if self._stopped:
            raise InvalidStateError("Game has been stopped")
        if self._phase != GamePhase.NOT_STARTED:
            raise InvalidStateError("Game already started")

        self._current_node = self._dependency_graph.root
        self._step = 0
        self._history.clear()
        _LOGGER.info("Game started at node %s", self._current_node)

        self._set_phase(GamePhase.ATTACKER_TO_MOVE)
        self._prepare_player(self._attacker)

    def stop(self) -> None:
        """Cancel outstanding decisions and refuse further plays. Idempotent."""
        if self._attacker is not None:
            self._attacker.abort_play()
        if self._defender is not None:
            self._defender.abort_play()
        if not self._stopped:
            self._stopped = True
            _LOGGER.debug("Game stopped at step %d", self._step)

    def abort(self, reason: str) -> None:
        """End the game without a winner after an unrecoverable error."""
        if self._stopped:
            return
        _LOGGER.error("Game aborted: %s", reason)
        self._abort_reason = reason
        self._log.print_abort(reason)
        self._set_phase(GamePhase.FINISHED)
        self.stop()
        self._emit_game_over(None)

    # ── Moves ────────────────────────────────────────────────────────────

    def play(
        self,
        player: IPlayer,
        destination_process: Process,
        next_node: int,
        action: Action | None = None,
        side: Side | None = None,
    ) -> None:
        """Apply a move of *player*, then hand the turn to the opponent."""
        if self._stopped:
            raise InvalidStateError("Game is stopped")
        role = self._phase.role_to_move
        if role is None:
            raise InvalidStateError("Game is not in progress")
        if player is not self._player_for(role):
            raise InvalidConfigurationError(
                f"It is not the turn of {player.play_type_str()}"
            )

        if action is None:
            action = self._last_action

        self._step += 1
        source_node = self._current_node
        self._current_node = next_node

        if role == Role.ATTACKER:
            self._log.print_round(self.get_round())
            self._log.print_play(player, action or "", destination_process.label)
            self._last_action = action
            self._last_side = side
        else:
            self._log.print_play(player, action or "", destination_process.label)
            # The play is a defence: flip the remembered side.
            self._last_side = Side.LEFT if self._last_side == Side.RIGHT else Side.RIGHT

        record = PlayRecord(
            role=role,
            destination_process=destination_process,
            source_node=source_node,
            next_node=next_node,
            action=action,
            side=side,
            step=self._step,
        )
        self._history.append(record)
        self._emit_move(record)

        opponent = self._player_for(role.opposite)
        self._set_phase(GamePhase.to_move(role.opposite))
        self._prepare_player(opponent)

    def play_move(self, player: IPlayer, move: Move) -> None:
        self.play(player, move.target_process, move.next_node, move.action, move.side)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _player_for(self, role: Role) -> IPlayer:
        player = self._attacker if role == Role.ATTACKER else self._defender
        assert player is not None
        return player

    def _prepare_player(self, player: IPlayer) -> None:
        choices = self.get_current_choices(player.play_type)
        if not choices:
            # The player to move cannot move and has lost.
            self._finish(self._player_for(player.play_type.opposite))
        else:
            player.prepare_turn(choices, self)

    def _finish(self, winner: IPlayer) -> None:
        self._winner = winner
        self._log.print_winner(winner)
        _LOGGER.info("%s wins after %d steps", winner.play_type_str(), self._step)
        self._set_phase(GamePhase.FINISHED)
        self.stop()
        self._emit_game_over(winner)

    def _set_phase(self, phase: GamePhase) -> None:
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_move(self, record: PlayRecord) -> None:
        for cb in self.events.on_move:
            cb(record)

    def _emit_game_over(self, winner: IPlayer | None) -> None:
        for cb in self.events.on_game_over:
            cb(winner)
