"""Successor generators: strong and weak transition semantics."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque

from bisimgame.core.process import TAU_LABEL, Action, Process, ProcessGraph, Transition

_TAU = Action(TAU_LABEL)


class SuccessorGenerator(ABC):
    """Enumerates the outgoing transitions of a process under some semantics."""

    __slots__ = ("_graph",)

    def __init__(self, graph: ProcessGraph) -> None:
        self._graph = graph

    @property
    def graph(self) -> ProcessGraph:
        return self._graph

    def get_process_by_id(self, process_id: int) -> Process:
        return self._graph.process_by_id(process_id)

    @abstractmethod
    def get_successors(self, process_id: int) -> list[Transition]:
        """Ordered transitions leaving *process_id*."""


class StrongSuccessorGenerator(SuccessorGenerator):
    """Every transition of the graph is observable as-is."""

    __slots__ = ()

    def get_successors(self, process_id: int) -> list[Transition]:
        return list(self._graph.transitions_from(process_id))


class WeakSuccessorGenerator(SuccessorGenerator):
    """Weak transitions ``p =a=> q``, i.e. ``p tau* -a-> tau* q``.

    ``p =tau=> q`` holds for every ``q`` reachable by zero or more tau steps,
    so each process has a weak tau transition to itself.
    """

    __slots__ = ("_closures", "_successors")

    def __init__(self, graph: ProcessGraph) -> None:
        super().__init__(graph)
        self._closures: dict[int, list[int]] = {}
        self._successors: dict[int, list[Transition]] = {}

    def get_successors(self, process_id: int) -> list[Transition]:
        cached = self._successors.get(process_id)
        if cached is None:
            cached = self._compute(process_id)
            self._successors[process_id] = cached
        return list(cached)

    def _compute(self, process_id: int) -> list[Transition]:
        result: list[Transition] = []
        seen: set[tuple[Action, int]] = set()

        def add(action: Action, target_id: int) -> None:
            key = (action, target_id)
            if key not in seen:
                seen.add(key)
                result.append(Transition(action, self.get_process_by_id(target_id)))

        closure = self._tau_closure(process_id)
        for target_id in closure:
            add(_TAU, target_id)
        for source_id in closure:
            for transition in self._graph.transitions_from(source_id):
                if transition.action.is_tau:
                    continue
                for target_id in self._tau_closure(transition.target_process.id):
                    add(transition.action, target_id)
        return result

    def _tau_closure(self, process_id: int) -> list[int]:
        cached = self._closures.get(process_id)
        if cached is not None:
            return cached
        order = [process_id]
        seen = {process_id}
        queue = deque([process_id])
        while queue:
            current = queue.popleft()
            for transition in self._graph.transitions_from(current):
                target_id = transition.target_process.id
                if transition.action.is_tau and target_id not in seen:
                    seen.add(target_id)
                    order.append(target_id)
                    queue.append(target_id)
        self._closures[process_id] = order
        return order


_GENERATORS: dict[str, type[SuccessorGenerator]] = {
    "strong": StrongSuccessorGenerator,
    "weak": WeakSuccessorGenerator,
}


def get_succ_generator(graph: ProcessGraph, kind: str = "strong") -> SuccessorGenerator:
    """Return a successor generator for *kind* (``"strong"`` or ``"weak"``)."""
    try:
        generator_cls = _GENERATORS[kind]
    except KeyError:
        raise ValueError(f"Unknown successor semantics: {kind!r}") from None
    return generator_cls(graph)


def expand_bfs(
    succ_gen: SuccessorGenerator,
    process: Process,
    max_depth: int,
) -> dict[int, list[Transition]]:
    """Breadth-first expansion of the transition system around *process*.

    Maps each expanded process id to its transitions.  Processes first met at
    *max_depth* appear as targets only.
    """
    result: dict[int, list[Transition]] = {}
    queue: list[tuple[int, Process]] = [(1, process)]
    index = 0
    while index < len(queue):
        depth, current = queue[index]
        index += 1
        if current.id in result:
            continue
        transitions = succ_gen.get_successors(current.id)
        result[current.id] = transitions
        for transition in transitions:
            target = transition.target_process
            if target.id not in result and depth < max_depth:
                queue.append((depth + 1, target))
    return result
