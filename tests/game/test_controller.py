"""Tests for the DgGame turn protocol, driven through BisimulationGame."""

import pytest

from bisimgame.core.enums import Role, Side
from bisimgame.core.process import Action, ProcessGraph
from bisimgame.core.successors import StrongSuccessorGenerator, get_succ_generator
from bisimgame.game.bisimulation import BisimulationGame
from bisimgame.game.controller import DgGame, PlayRecord
from bisimgame.game.errors import InvalidConfigurationError, InvalidStateError
from bisimgame.game.interfaces import GamePhase
from bisimgame.game.player import PLAYER1_COLOR, PLAYER2_COLOR, HumanPlayer


def _game(graph: ProcessGraph, left: str, right: str) -> BisimulationGame:
    strong = get_succ_generator(graph, "strong")
    return BisimulationGame(graph, strong, strong, left, right)


def _humans() -> tuple[HumanPlayer, HumanPlayer]:
    return (
        HumanPlayer(PLAYER2_COLOR, Role.ATTACKER),
        HumanPlayer(PLAYER1_COLOR, Role.DEFENDER),
    )


def _started(
    graph: ProcessGraph, left: str, right: str
) -> tuple[BisimulationGame, HumanPlayer, HumanPlayer]:
    game = _game(graph, left, right)
    attacker, defender = _humans()
    game.set_players(attacker, defender)
    game.start()
    return game, attacker, defender


class TestAbstractGame:
    def test_base_cannot_be_instantiated(self, graph: ProcessGraph) -> None:
        gen = StrongSuccessorGenerator(graph)
        with pytest.raises(TypeError):
            DgGame(gen, gen)  # type: ignore[abstract]


class TestSetPlayers:
    def test_two_attackers_rejected(self, graph: ProcessGraph) -> None:
        game = _game(graph, "A", "B")
        first = HumanPlayer(PLAYER1_COLOR, Role.ATTACKER)
        second = HumanPlayer(PLAYER2_COLOR, Role.ATTACKER)
        with pytest.raises(InvalidConfigurationError, match="two ATTACKERs"):
            game.set_players(first, second)
        assert game.phase == GamePhase.NOT_STARTED
        assert game.attacker is None and game.defender is None

    def test_swapped_roles_rejected(self, graph: ProcessGraph) -> None:
        game = _game(graph, "A", "B")
        attacker, defender = _humans()
        with pytest.raises(InvalidConfigurationError):
            game.set_players(defender, attacker)
        assert game.attacker is None

    def test_players_assigned(self, graph: ProcessGraph) -> None:
        game = _game(graph, "A", "B")
        attacker, defender = _humans()
        game.set_players(attacker, defender)
        assert game.attacker is attacker
        assert game.defender is defender

    def test_cannot_change_players_while_running(self, graph: ProcessGraph) -> None:
        game, _, _ = _started(graph, "Loop", "Loop")
        with pytest.raises(InvalidStateError):
            game.set_players(*_humans())


class TestStart:
    def test_requires_players(self, graph: ProcessGraph) -> None:
        game = _game(graph, "A", "B")
        with pytest.raises(InvalidStateError, match="No players"):
            game.start()
        assert game.phase == GamePhase.NOT_STARTED

    def test_attacker_is_prompted(self, graph: ProcessGraph) -> None:
        game, attacker, defender = _started(graph, "A", "B")
        assert game.phase == GamePhase.ATTACKER_TO_MOVE
        assert game.step == 0
        assert game.get_round() == 1
        assert game.current_node == game.dependency_graph.root
        assert list(attacker.choices) == game.get_current_choices(Role.ATTACKER)
        assert defender.choices == ()

    def test_start_twice_rejected(self, graph: ProcessGraph) -> None:
        game, _, _ = _started(graph, "A", "B")
        with pytest.raises(InvalidStateError):
            game.start()

    def test_attacker_without_moves_loses_at_root(self, graph: ProcessGraph) -> None:
        game, attacker, defender = _started(graph, "Nil", "Nil")
        assert game.phase == GamePhase.FINISHED
        assert game.winner is defender
        assert game.is_winner(defender)
        assert game.log.lines == ("DEFENDER wins.",)
        assert attacker.choices == ()


class TestPlay:
    def test_attack_then_defend(self, graph: ProcessGraph) -> None:
        game, attacker, defender = _started(graph, "Coffee", "Coffee2")
        attack = attacker.choices[0]
        attacker.submit(attack)

        assert game.step == 1
        assert game.get_round() == 1
        assert game.phase == GamePhase.DEFENDER_TO_MOVE
        assert game.current_node == attack.next_node
        assert game.last_action == Action("coin")
        assert game.get_last_move() == Side.LEFT
        assert game.log.lines == ("Round 1:", "ATTACKER: --- coin --->   1")

        defence = defender.choices[0]
        defender.submit(defence)
        assert game.step == 2
        assert game.get_round() == 2
        assert game.phase == GamePhase.ATTACKER_TO_MOVE
        assert game.get_last_move() == Side.RIGHT
        assert game.log.lines[-1] == "DEFENDER: --- coin --->   4"

    def test_defence_defaults_to_last_action(self, graph: ProcessGraph) -> None:
        game, attacker, defender = _started(graph, "Coffee", "Coffee2")
        attacker.submit(attacker.choices[0])
        defence = defender.choices[0]
        game.play(defender, defence.target_process, defence.next_node)
        assert game.history[-1].action == Action("coin")
        assert game.history[-1].side is None

    def test_out_of_turn_rejected(self, graph: ProcessGraph) -> None:
        game, attacker, defender = _started(graph, "Coffee", "Coffee2")
        move = attacker.choices[0]
        with pytest.raises(InvalidConfigurationError):
            game.play_move(defender, move)
        assert game.step == 0
        assert game.phase == GamePhase.ATTACKER_TO_MOVE

    def test_stranger_rejected(self, graph: ProcessGraph) -> None:
        game, attacker, _ = _started(graph, "Coffee", "Coffee2")
        stranger = HumanPlayer(PLAYER1_COLOR, Role.ATTACKER)
        with pytest.raises(InvalidConfigurationError):
            game.play_move(stranger, attacker.choices[0])

    def test_play_before_start_rejected(self, graph: ProcessGraph) -> None:
        game = _game(graph, "A", "B")
        attacker, defender = _humans()
        game.set_players(attacker, defender)
        move = game.get_current_choices(Role.ATTACKER)[0]
        with pytest.raises(InvalidStateError):
            game.play_move(attacker, move)

    def test_defender_without_answer_loses(self, graph: ProcessGraph) -> None:
        game, attacker, defender = _started(graph, "A", "B")
        attacker.submit(attacker.choices[0])
        assert game.phase == GamePhase.FINISHED
        assert game.winner is attacker
        assert game.is_stopped
        assert game.log.lines[-1] == "ATTACKER wins."
        assert defender.choices == ()

    def test_play_after_finish_rejected(self, graph: ProcessGraph) -> None:
        game, attacker, defender = _started(graph, "A", "B")
        move = attacker.choices[0]
        attacker.submit(move)
        with pytest.raises(InvalidStateError):
            game.play_move(attacker, move)

    def test_round_formula(self, graph: ProcessGraph) -> None:
        game, attacker, defender = _started(graph, "Loop", "Loop")
        for _ in range(9):
            mover = attacker if game.phase == GamePhase.ATTACKER_TO_MOVE else defender
            mover.submit(mover.choices[0])
            assert game.get_round() == game.step // 2 + 1
        assert game.step == 9
        assert game.get_round() == 5
        assert not game.is_finished


class TestStop:
    def test_stop_before_start(self, graph: ProcessGraph) -> None:
        game = _game(graph, "A", "B")
        game.stop()
        game.stop()
        assert game.is_stopped
        assert game.phase == GamePhase.NOT_STARTED

    def test_stop_is_idempotent(self, graph: ProcessGraph) -> None:
        game, attacker, _ = _started(graph, "Coffee", "Coffee2")
        attacker.submit(attacker.choices[0])
        game.stop()
        snapshot = (game.phase, game.step, game.current_node, game.log.lines)
        game.stop()
        game.stop()
        assert (game.phase, game.step, game.current_node, game.log.lines) == snapshot

    def test_stop_withdraws_offers(self, graph: ProcessGraph) -> None:
        game, attacker, _ = _started(graph, "Coffee", "Coffee2")
        game.stop()
        assert attacker.choices == ()

    def test_play_after_stop_rejected(self, graph: ProcessGraph) -> None:
        game, attacker, _ = _started(graph, "Coffee", "Coffee2")
        move = attacker.choices[0]
        game.stop()
        with pytest.raises(InvalidStateError):
            game.play_move(attacker, move)
        assert game.step == 0

    def test_start_after_stop_rejected(self, graph: ProcessGraph) -> None:
        game = _game(graph, "A", "B")
        game.set_players(*_humans())
        game.stop()
        with pytest.raises(InvalidStateError):
            game.start()


class TestAbort:
    def test_abort_finishes_without_winner(self, graph: ProcessGraph) -> None:
        game, _, _ = _started(graph, "Coffee", "Coffee2")
        results: list[object] = []
        game.events.on_game_over.append(results.append)
        game.abort("boom")
        assert game.phase == GamePhase.FINISHED
        assert game.winner is None
        assert game.abort_reason == "boom"
        assert game.is_stopped
        assert game.log.lines[-1] == "Game aborted: boom"
        assert results == [None]

    def test_abort_after_stop_is_noop(self, graph: ProcessGraph) -> None:
        game, _, _ = _started(graph, "Coffee", "Coffee2")
        game.stop()
        game.abort("late")
        assert game.abort_reason is None
        assert game.phase == GamePhase.ATTACKER_TO_MOVE


class TestEvents:
    def test_move_and_game_over_events(self, graph: ProcessGraph) -> None:
        game = _game(graph, "A", "B")
        attacker, defender = _humans()
        game.set_players(attacker, defender)
        records: list[PlayRecord] = []
        phases: list[GamePhase] = []
        winners: list[object] = []
        game.events.on_move.append(records.append)
        game.events.on_phase_changed.append(phases.append)
        game.events.on_game_over.append(winners.append)

        game.start()
        move = attacker.choices[0]
        attacker.submit(move)

        (record,) = records
        assert record.role == Role.ATTACKER
        assert record.source_node == game.dependency_graph.root
        assert record.next_node == move.next_node
        assert record.destination_process == move.target_process
        assert record.action == move.action
        assert record.side == Side.LEFT
        assert record.step == 1
        assert phases == [
            GamePhase.ATTACKER_TO_MOVE,
            GamePhase.DEFENDER_TO_MOVE,
            GamePhase.FINISHED,
        ]
        assert winners == [attacker]
