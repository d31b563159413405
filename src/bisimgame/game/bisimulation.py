"""Bisimulation game: Attacker tries to tell two processes apart."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from bisimgame.core.enums import Role
from bisimgame.core.move import Move
from bisimgame.core.process import Process, ProcessGraph
from bisimgame.core.successors import SuccessorGenerator
from bisimgame.dg.graph import BisimulationDependencyGraph, DependencyGraph
from bisimgame.dg.marking import LevelMarking, Mark, solve_dg_global_level
from bisimgame.game.controller import DgGame
from bisimgame.game.errors import (
    EmptyChoicesError,
    InvalidConfigurationError,
    NoValidMoveError,
)
from bisimgame.game.interfaces import IPlayer
from bisimgame.game.log import GameLog

_LOGGER = logging.getLogger(__name__)


class BisimulationGame(DgGame):
    """Game deciding whether two named processes are bisimilar.

    The Attacker moves with *attacker_succ_gen* (strong semantics keep the
    game sound), the Defender answers with *defender_succ_gen*, which fixes
    the equivalence being played (strong or weak bisimulation).  The
    dependency graph and its marking are computed here, once.

    Args:
        graph: Process graph holding both processes.
        attacker_succ_gen: Successor semantics for attacks.
        defender_succ_gen: Successor semantics for defences.
        left_process_name: Name of the left process of the pair.
        right_process_name: Name of the right process of the pair.
        log: Sink for the move history.
    """

    __slots__ = ("_graph", "_left_process", "_right_process", "_bisimilar")

    def __init__(
        self,
        graph: ProcessGraph,
        attacker_succ_gen: SuccessorGenerator,
        defender_succ_gen: SuccessorGenerator,
        left_process_name: str,
        right_process_name: str,
        *,
        log: GameLog | None = None,
    ) -> None:
        self._graph = graph
        self._left_process = self._resolve(left_process_name)
        self._right_process = self._resolve(right_process_name)
        self._bisimilar = False
        # Builds the dependency graph and the marking.
        super().__init__(attacker_succ_gen, defender_succ_gen, log=log)

    # ── Construction hooks ───────────────────────────────────────────────

    def _create_dependency_graph(
        self,
        attacker_succ_gen: SuccessorGenerator,
        defender_succ_gen: SuccessorGenerator,
    ) -> DependencyGraph:
        return BisimulationDependencyGraph(
            attacker_succ_gen,
            defender_succ_gen,
            self._left_process.id,
            self._right_process.id,
        )

    def _create_marking(self) -> LevelMarking:
        marking = solve_dg_global_level(self._dependency_graph)
        self._bisimilar = (
            marking.get_marking(self._dependency_graph.root) == Mark.ZERO
        )
        _LOGGER.info(
            "%s and %s are %sbisimilar",
            self._left_process.label,
            self._right_process.label,
            "" if self._bisimilar else "not ",
        )
        return marking

    def _resolve(self, name: str) -> Process:
        try:
            return self._graph.process_by_name(name)
        except KeyError:
            raise InvalidConfigurationError(f"Unknown process: {name!r}") from None

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def left_process(self) -> Process:
        return self._left_process

    @property
    def right_process(self) -> Process:
        return self._right_process

    @property
    def bisimulation_graph(self) -> BisimulationDependencyGraph:
        assert isinstance(self._dependency_graph, BisimulationDependencyGraph)
        return self._dependency_graph

    def is_bisimilar(self) -> bool:
        return self._bisimilar

    def current_configuration(self) -> tuple[Process, Process]:
        """Left and right process at the current node."""
        node = self.bisimulation_graph.node(self._current_node)
        return (
            self._graph.process_by_id(node.left),
            self._graph.process_by_id(node.right),
        )

    def get_winner(self) -> IPlayer | None:
        return self._defender if self._bisimilar else self._attacker

    def get_current_choices(self, role: Role) -> list[Move]:
        if role == Role.ATTACKER:
            return self.bisimulation_graph.get_attacker_options(self._current_node)
        return self.bisimulation_graph.get_defender_options(self._current_node)

    # ── Strategies ───────────────────────────────────────────────────────

    def get_best_winning_attack(self, choices: Sequence[Move]) -> Move:
        """Attack reaching the lowest level strictly below the current one.

        Falls back to the first choice when no attack lowers the level.
        """
        if not choices:
            raise EmptyChoicesError("No choices for attacker")

        best_index = 0
        best_level = math.inf
        own_level = self._marking.get_level(self._current_node)

        for i, option in enumerate(choices):
            level = self._marking.get_level(option.next_node)
            if level < own_level and level < best_level:
                best_level = level
                best_index = i

        return choices[best_index]

    def get_winning_defend(self, choices: Sequence[Move]) -> Move:
        """First defence leading to a node the Defender wins."""
        if not choices:
            raise EmptyChoicesError("No choices for defender")
        for option in choices:
            if self._marking.get_marking(option.next_node) == Mark.ZERO:
                return option
        raise NoValidMoveError("No defender moves")
