"""Append-only, human-readable record of a game."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bisimgame.core.process import Action
    from bisimgame.game.interfaces import IPlayer

_LOGGER = logging.getLogger(__name__)

_PLAY_MARGIN = 20


@dataclass(frozen=True, slots=True)
class LogLine:
    text: str
    margin: int = 0


class GameLog:
    """Ordered sequence of rendered lines.

    Printing never fails: a listener that raises is logged and skipped.

    Args:
        echo: Also emit every line through the module logger at INFO
            (otherwise DEBUG).
    """

    __slots__ = ("_entries", "_echo", "listeners")

    def __init__(self, echo: bool = False) -> None:
        self._entries: list[LogLine] = []
        self._echo = echo
        self.listeners: list[Callable[[LogLine], None]] = []

    @property
    def entries(self) -> tuple[LogLine, ...]:
        return tuple(self._entries)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(entry.text for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def print(self, line: str, margin: int = 0) -> None:
        entry = LogLine(line, margin)
        self._entries.append(entry)
        _LOGGER.log(
            logging.INFO if self._echo else logging.DEBUG,
            "%s%s",
            " " * (margin // 5),
            line,
        )
        for listener in self.listeners:
            try:
                listener(entry)
            except Exception:
                _LOGGER.exception("Game log listener failed on %r", line)

    def print_round(self, round_number: int) -> None:
        self.print(f"Round {round_number}:")

    def print_play(self, player: IPlayer, action: Action | str, destination: str) -> None:
        self.print(f"{player.play_type_str()}: --- {action} --->   {destination}", _PLAY_MARGIN)

    def print_winner(self, winner: IPlayer) -> None:
        self.print(f"{winner.play_type_str()} wins.")

    def print_abort(self, reason: str) -> None:
        self.print(f"Game aborted: {reason}")
