"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator

import pytest

from bisimgame.core.process import ProcessGraph
from bisimgame.game.interfaces import IScheduler, TaskHandle

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for timer tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


# ── Scheduler stubs ──────────────────────────────────────────────────────────


class ManualTask(TaskHandle):
    def __init__(self, callback: Callable[[], None], *, honour_cancel: bool) -> None:
        self.callback = callback
        self.cancelled = False
        self.fired = False
        self._honour_cancel = honour_cancel

    @property
    def is_active(self) -> bool:
        return not self.cancelled and not self.fired

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def due(self) -> bool:
        if self.fired:
            return False
        return not self.cancelled or not self._honour_cancel


class ManualScheduler(IScheduler):
    """Runs scheduled callbacks only when the test asks for it.

    With ``honour_cancel=False`` cancelled tasks still fire, modelling a
    timer that could not be stopped in time.
    """

    def __init__(self, *, honour_cancel: bool = True) -> None:
        self.tasks: list[ManualTask] = []
        self.delays: list[int] = []
        self._honour_cancel = honour_cancel

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TaskHandle:
        task = ManualTask(callback, honour_cancel=self._honour_cancel)
        self.tasks.append(task)
        self.delays.append(delay_ms)
        return task

    @property
    def pending(self) -> list[ManualTask]:
        return [task for task in self.tasks if task.due]

    def run_next(self) -> bool:
        """Fire the oldest due task. Returns False when none is due."""
        for task in self.tasks:
            if task.due:
                task.fired = True
                task.callback()
                return True
        return False

    def run_all(self, limit: int = 1000) -> int:
        """Fire due tasks until none is left; returns how many fired."""
        count = 0
        while count < limit and self.run_next():
            count += 1
        return count


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def leaky_scheduler() -> ManualScheduler:
    return ManualScheduler(honour_cancel=False)


# ── Process graphs ───────────────────────────────────────────────────────────


@pytest.fixture
def graph() -> ProcessGraph:
    """Small CCS-style system used across game tests.

    ``Coffee = coin.(coffee.0 + tea.0)`` and ``Choice = coin.coffee.0 +
    coin.tea.0`` are not bisimilar; ``Coffee2`` is a copy of ``Coffee``.
    ``A = a.0``, ``B = b.0``, ``Nil = 0``, ``Loop = a.Loop``.
    """
    g = ProcessGraph()

    def coffee_machine(name: str) -> None:
        start = g.new_process(name)
        brewing = g.new_process()
        done = g.new_process()
        g.add_transition(start, "coin", brewing)
        g.add_transition(brewing, "coffee", done)
        g.add_transition(brewing, "tea", done)

    coffee_machine("Coffee")
    coffee_machine("Coffee2")

    choice = g.new_process("Choice")
    want_coffee = g.new_process()
    want_tea = g.new_process()
    choice_done = g.new_process()
    g.add_transition(choice, "coin", want_coffee)
    g.add_transition(choice, "coin", want_tea)
    g.add_transition(want_coffee, "coffee", choice_done)
    g.add_transition(want_tea, "tea", choice_done)

    a = g.new_process("A")
    b = g.new_process("B")
    nil = g.new_process("Nil")
    g.add_transition(a, "a", nil)
    g.add_transition(b, "b", nil)

    loop = g.new_process("Loop")
    g.add_transition(loop, "a", loop)
    return g
