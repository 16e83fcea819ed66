"""Concrete player implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesscore.core.enums import Color
from chesscore.engine.selector import Difficulty, describe_difficulty, select_move
from chesscore.game.interfaces import IPlayer

if TYPE_CHECKING:
    from chesscore.core.move import Move
    from chesscore.core.position import Position
    from chesscore.engine.search import CancelCheck, IEngine


class HumanPlayer(IPlayer):
    """A human participant; moves come from the caller.

    ``choose_move`` returns ``None`` because humans submit moves through
    the controller.
    """

    __slots__ = ("_color", "_name")

    def __init__(self, color: Color, name: str = "") -> None:
        self._color = color
        self._name = name or f"Player ({color})"

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return True

    def choose_move(
        self, position: Position, timeout: float | None = None
    ) -> Move | None:
        return None


class AIPlayer(IPlayer):
    """An AI participant backed by the difficulty-scaled move selector.

    Args:
        color: Side the AI plays.
        difficulty: Level 1-4; unknown levels play as intermediate.
        name: Display name, defaults to the difficulty description.
        engine: Engine to search with; a fresh default engine per move
            when omitted.
        is_cancelled: Polled during the search to abort it.
    """

    __slots__ = ("_color", "_difficulty", "_name", "_engine", "_is_cancelled")

    def __init__(
        self,
        color: Color,
        difficulty: int = Difficulty.INTERMEDIATE,
        name: str = "",
        engine: IEngine | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> None:
        self._color = color
        self._difficulty = difficulty
        self._name = name or f"Engine, {describe_difficulty(difficulty)}"
        self._engine = engine
        self._is_cancelled = is_cancelled

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return False

    @property
    def difficulty(self) -> int:
        return self._difficulty

    def choose_move(
        self, position: Position, timeout: float | None = None
    ) -> Move | None:
        return select_move(
            position,
            self._difficulty,
            timeout,
            engine=self._engine,
            is_cancelled=self._is_cancelled,
        )
