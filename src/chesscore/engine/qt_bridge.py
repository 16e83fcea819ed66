"""Qt bridge to run AI move selection in a worker thread."""

from __future__ import annotations

import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chesscore.core.position import Position
from chesscore.engine import DefaultEngine
from chesscore.engine.selector import DEFAULT_AI_TIMEOUT, select_move


class AIMoveWorker(QObject):
    """Thread-affine worker that computes AI moves on demand."""

    move_ready = pyqtSignal(int, object)
    ai_unavailable = pyqtSignal(int, str)
    search_cancelled = pyqtSignal(int)

    __slots__ = ("_cancel_event", "_engine", "_timeout")

    def __init__(self, *, timeout: float = DEFAULT_AI_TIMEOUT) -> None:
        super().__init__()
        self._engine = DefaultEngine()
        self._timeout = timeout
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int, int)
    def request_move(
        self, position_obj: object, difficulty: int, request_id: int
    ) -> None:
        """Select a move for *position_obj* and emit the outcome."""
        if not isinstance(position_obj, Position):
            self.ai_unavailable.emit(request_id, "Engine received invalid position")
            return

        self._cancel_event.clear()
        move = select_move(
            position_obj,
            difficulty,
            self._timeout,
            engine=self._engine,
            is_cancelled=self._cancel_event.is_set,
        )

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if move is None:
            self.ai_unavailable.emit(request_id, "AI could not produce a move")
            return

        self.move_ready.emit(request_id, move)

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current search."""
        self._cancel_event.set()

    @pyqtSlot(float)
    def set_timeout(self, timeout: float) -> None:
        """Update the per-move budget (takes effect on the next search)."""
        self._timeout = timeout
