"""Core enumerations for the bisimulation game domain."""

from __future__ import annotations

from enum import IntEnum


class Role(IntEnum):
    """Side of the game a player takes."""

    ATTACKER = 0
    DEFENDER = 1

    @property
    def opposite(self) -> Role:
        return Role(1 - self.value)

    def __str__(self) -> str:
        return self.name


class Side(IntEnum):
    """Which process of the compared pair a move was taken on."""

    LEFT = 1
    RIGHT = 2

    @property
    def opposite(self) -> Side:
        return Side.RIGHT if self is Side.LEFT else Side.LEFT

    def __str__(self) -> str:
        return self.name.lower()
