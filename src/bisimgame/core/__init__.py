"""Core domain layer: processes, transitions and successor semantics.

Quick start::

    from bisimgame.core import ProcessGraph, get_succ_generator

    graph = ProcessGraph()
    p = graph.new_process("P")
    nil = graph.new_process()
    graph.add_transition(p, "a", nil)
    for t in get_succ_generator(graph, "weak").get_successors(p.id):
        print(t.action, t.target_process)
"""

from bisimgame.core.enums import Role, Side
from bisimgame.core.move import Move
from bisimgame.core.process import TAU_LABEL, Action, Process, ProcessGraph, Transition
from bisimgame.core.successors import (
    StrongSuccessorGenerator,
    SuccessorGenerator,
    WeakSuccessorGenerator,
    expand_bfs,
    get_succ_generator,
)

__all__ = [
    # Enums
    "Role",
    "Side",
    # Domain objects
    "TAU_LABEL",
    "Action",
    "Move",
    "Process",
    "ProcessGraph",
    "Transition",
    # Successor semantics
    "StrongSuccessorGenerator",
    "SuccessorGenerator",
    "WeakSuccessorGenerator",
    "expand_bfs",
    "get_succ_generator",
]
