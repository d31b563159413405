"""Dependency graphs, their game instantiation and the level-marking solver."""

from bisimgame.dg.graph import (
    BisimulationDependencyGraph,
    DependencyGraph,
    DgNode,
    NodeKind,
)
from bisimgame.dg.marking import LevelMarking, Mark, solve_dg_global_level

__all__ = [
    "BisimulationDependencyGraph",
    "DependencyGraph",
    "DgNode",
    "LevelMarking",
    "Mark",
    "NodeKind",
    "solve_dg_global_level",
]
