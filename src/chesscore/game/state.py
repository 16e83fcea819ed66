"""Immutable game state: start position, current position and history."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from chesscore.core.enums import Color, DrawReason, GameResult
from chesscore.core.move import Move
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.notation import position_to_fen
from chesscore.core.position import Position
from chesscore.core.rules import Rules
from chesscore.game.interfaces import GamePhase


@dataclass(frozen=True)
class GameState:
    """One snapshot of a game.

    ``history`` is authoritative: ``position`` is always the result of
    playing ``history`` from ``start_position``, and every flag below is
    derived from that pair.  Instances are never modified; the tracker
    functions return new ones.
    """

    start_position: Position
    position: Position
    history: tuple[Move, ...] = ()
    # Positions preceding ``position``, oldest first; used for repetition.
    previous_positions: tuple[Position, ...] = field(default=(), repr=False)

    @cached_property
    def _legal_moves(self) -> tuple[Move, ...]:
        return tuple(MoveGenerator(self.position).generate_legal_moves())

    @property
    def is_check(self) -> bool:
        return Rules.is_in_check(self.position)

    @property
    def is_checkmate(self) -> bool:
        return self.is_check and not self._legal_moves

    @property
    def is_stalemate(self) -> bool:
        return not self.is_check and not self._legal_moves

    @cached_property
    def draw_reason(self) -> DrawReason | None:
        return Rules.draw_reason(self.position, self.previous_positions)

    @property
    def is_draw(self) -> bool:
        return self.draw_reason is not None

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_draw

    @property
    def phase(self) -> GamePhase:
        if self.is_checkmate:
            return GamePhase.CHECKMATE
        if self.is_stalemate:
            return GamePhase.STALEMATE
        if self.is_draw:
            return GamePhase.DRAW
        if self.is_check:
            return GamePhase.CHECK
        return GamePhase.IN_PROGRESS

    @property
    def result(self) -> GameResult:
        return Rules.game_result(self.position, self.previous_positions)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.history)

    @property
    def fullmove_display(self) -> int:
        """Current full-move number for display."""
        return self.position.fullmove_number

    @property
    def last_move(self) -> Move | None:
        return self.history[-1] if self.history else None

    @property
    def fen(self) -> str:
        return position_to_fen(self.position)
