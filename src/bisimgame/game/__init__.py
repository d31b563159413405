"""Game management layer — turn protocol, bisimulation game, players.

Quick start::

    from bisimgame.core import Role, get_succ_generator
    from bisimgame.game import (
        PLAYER1_COLOR,
        PLAYER2_COLOR,
        BisimulationGame,
        ComputerPlayer,
        QtScheduler,
    )

    game = BisimulationGame(
        graph,
        get_succ_generator(graph, "strong"),
        get_succ_generator(graph, "weak"),
        "P",
        "Q",
    )
    scheduler = QtScheduler()
    game.set_players(
        ComputerPlayer(PLAYER2_COLOR, Role.ATTACKER, scheduler=scheduler),
        ComputerPlayer(PLAYER1_COLOR, Role.DEFENDER, scheduler=scheduler),
    )
    game.start()
"""

from bisimgame.game.bisimulation import BisimulationGame
from bisimgame.game.controller import DgGame, GameEvents, PlayRecord
from bisimgame.game.errors import (
    EmptyChoicesError,
    GameError,
    InvalidConfigurationError,
    InvalidStateError,
    InvariantViolationError,
    NoValidMoveError,
)
from bisimgame.game.interfaces import GamePhase, IPlayer, IScheduler, TaskHandle
from bisimgame.game.log import GameLog, LogLine
from bisimgame.game.player import (
    COMPUTER_COLOR,
    HUMAN_COLOR,
    PLAYER1_COLOR,
    PLAYER2_COLOR,
    ComputerPlayer,
    HumanPlayer,
)
from bisimgame.game.scheduler import QtScheduler, QtTaskHandle

__all__ = [
    # Interfaces
    "GamePhase",
    "IPlayer",
    "IScheduler",
    "TaskHandle",
    # Errors
    "EmptyChoicesError",
    "GameError",
    "InvalidConfigurationError",
    "InvalidStateError",
    "InvariantViolationError",
    "NoValidMoveError",
    # Concrete
    "BisimulationGame",
    "ComputerPlayer",
    "DgGame",
    "GameEvents",
    "GameLog",
    "HumanPlayer",
    "LogLine",
    "PlayRecord",
    "QtScheduler",
    "QtTaskHandle",
    # Colours
    "COMPUTER_COLOR",
    "HUMAN_COLOR",
    "PLAYER1_COLOR",
    "PLAYER2_COLOR",
]
