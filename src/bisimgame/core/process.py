"""Labelled transition systems: actions, processes and the process graph."""

from __future__ import annotations

from dataclasses import dataclass

TAU_LABEL = "tau"


@dataclass(frozen=True, slots=True)
class Action:
    """Transition label with a stable string rendering."""

    label: str

    @property
    def is_tau(self) -> bool:
        return self.label == TAU_LABEL

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, slots=True)
class Process:
    """A state of the transition system, optionally bound to a name."""

    id: int
    name: str | None = None

    @property
    def label(self) -> str:
        """Display label: the process name, or its id when anonymous."""
        return self.name if self.name is not None else str(self.id)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, slots=True)
class Transition:
    """Outgoing edge ``source --action--> target_process``."""

    action: Action
    target_process: Process


class ProcessGraph:
    """Mutable container of processes and their strong transitions.

    Processes receive consecutive integer ids in creation order.  Names are
    unique; anonymous processes are addressed by id only.
    """

    __slots__ = ("_processes", "_by_name", "_transitions")

    def __init__(self) -> None:
        self._processes: list[Process] = []
        self._by_name: dict[str, Process] = {}
        self._transitions: dict[int, list[Transition]] = {}

    def __len__(self) -> int:
        return len(self._processes)

    def new_process(self, name: str | None = None) -> Process:
        if name is not None and name in self._by_name:
            raise ValueError(f"Duplicate process name: {name!r}")
        process = Process(len(self._processes), name)
        self._processes.append(process)
        self._transitions[process.id] = []
        if name is not None:
            self._by_name[name] = process
        return process

    def add_transition(
        self,
        source: Process,
        action: Action | str,
        target: Process,
    ) -> Transition:
        if isinstance(action, str):
            action = Action(action)
        self._check_owned(source)
        self._check_owned(target)
        transition = Transition(action, target)
        self._transitions[source.id].append(transition)
        return transition

    def process_by_id(self, process_id: int) -> Process:
        if not 0 <= process_id < len(self._processes):
            raise KeyError(process_id)
        return self._processes[process_id]

    def process_by_name(self, name: str) -> Process:
        return self._by_name[name]

    def named_processes(self) -> list[str]:
        """Names of all named processes in creation order."""
        return list(self._by_name)

    def transitions_from(self, process_id: int) -> tuple[Transition, ...]:
        if process_id not in self._transitions:
            raise KeyError(process_id)
        return tuple(self._transitions[process_id])

    def _check_owned(self, process: Process) -> None:
        if self.process_by_id(process.id) != process:
            raise ValueError(f"Process {process} does not belong to this graph")
