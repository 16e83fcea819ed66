"""Abstract interfaces for the game layer.

Follows Dependency Inversion: high-level GameController depends on
these ABCs, not on concrete Player implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chesscore.core.enums import Color

if TYPE_CHECKING:
    from chesscore.core.move import Move
    from chesscore.core.position import Position


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game.

    ``IN_PROGRESS`` and ``CHECK`` alternate freely; the remaining three are
    terminal.
    """

    IN_PROGRESS = auto()
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    DRAW = auto()

    @property
    def is_terminal(self) -> bool:
        return self >= GamePhase.CHECKMATE


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(ABC):
    """Interface for a game participant (human or AI)."""

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def choose_move(
        self, position: Position, timeout: float | None = None
    ) -> Move | None:
        """Pick a move for *position*.

        Humans return ``None`` (their moves arrive through the controller);
        AI players run the move selector.
        """


class IGameController(ABC):
    """Interface for the game orchestrator."""

    @abstractmethod
    def new_game(
        self,
        white: IPlayer,
        black: IPlayer,
        fen: str | None = None,
    ) -> None:
        """Set up a new game."""

    @abstractmethod
    def submit_move(self, move: Move | str) -> bool:
        """Submit a move. Returns True if legal and applied."""

    @abstractmethod
    def play_ai_turn(self, timeout: float | None = None) -> bool:
        """Let the AI on move play. Returns True if a move was applied."""

    @abstractmethod
    def resign(self, color: Color) -> None:
        """Player of *color* resigns."""

    @abstractmethod
    def undo_move(self) -> bool:
        """Undo back to the previous human turn. Returns True on success."""
