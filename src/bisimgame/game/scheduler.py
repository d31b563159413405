"""Qt-backed scheduler for deferred, cancellable player decisions."""

from __future__ import annotations

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, QTimer

from bisimgame.game.errors import GameError
from bisimgame.game.interfaces import IScheduler, TaskHandle

_LOGGER = logging.getLogger(__name__)

ErrorHandler = Callable[[GameError], None]


class QtTaskHandle(TaskHandle):
    """Owns the single-shot timer of one scheduled callback."""

    __slots__ = ("_timer",)

    def __init__(self, timer: QTimer) -> None:
        self._timer: QTimer | None = timer

    @property
    def is_active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        timer = self._timer
        if timer is None:
            return
        self._timer = None
        timer.stop()
        timer.deleteLater()

    def _release(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.deleteLater()


class QtScheduler(IScheduler):
    """Schedules callbacks on the Qt event loop of the calling thread.

    A :class:`GameError` escaping a callback is logged and handed to
    *on_error*; without a handler it propagates to Qt.

    Args:
        parent: Optional owner of the created timers.
        on_error: Receives game errors raised by callbacks.
    """

    __slots__ = ("_parent", "_on_error", "_live")

    def __init__(
        self,
        parent: QObject | None = None,
        on_error: ErrorHandler | None = None,
    ) -> None:
        self._parent = parent
        self._on_error = on_error
        self._live: set[QtTaskHandle] = set()

    def set_error_handler(self, on_error: ErrorHandler | None) -> None:
        self._on_error = on_error

    @property
    def pending_count(self) -> int:
        return sum(1 for handle in self._live if handle.is_active)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TaskHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        handle = QtTaskHandle(timer)
        timer.timeout.connect(lambda: self._fire(handle, callback))
        self._live = {live for live in self._live if live._timer is not None}
        self._live.add(handle)
        timer.start(max(0, delay_ms))
        return handle

    def cancel_all(self) -> None:
        for handle in list(self._live):
            handle.cancel()
        self._live.clear()

    def _fire(self, handle: QtTaskHandle, callback: Callable[[], None]) -> None:
        self._live.discard(handle)
        if handle._timer is None:
            return
        handle._release()
        try:
            callback()
        except GameError as exc:
            _LOGGER.exception("Deferred game decision failed")
            if self._on_error is None:
                raise
            self._on_error(exc)
