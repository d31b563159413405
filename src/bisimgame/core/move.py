"""Move representation for the dependency-graph game."""

from __future__ import annotations

from dataclasses import dataclass

from bisimgame.core.enums import Side
from bisimgame.core.process import Action, Process


@dataclass(frozen=True, slots=True)
class Move:
    """A legal move: an edge from the current node to *next_node*.

    Attributes:
        target_process: Process reached on the moving side.
        next_node: Dependency-graph node the game continues from.
        action: Label of the transition taken.
        side: Process of the pair the transition was taken on.
    """

    target_process: Process
    next_node: int
    action: Action
    side: Side

    def __str__(self) -> str:
        return f"--{self.action}--> {self.target_process} ({self.side})"
