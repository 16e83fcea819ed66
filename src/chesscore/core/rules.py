"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from chesscore.core.enums import Color, DrawReason, GameResult, PieceType
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.types import light_square

if TYPE_CHECKING:
    from chesscore.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Repetition needs the game's earlier positions; callers pass them as
    *previous* (oldest first, current position excluded).
    """

    # Draw policy: stalemate, insufficient material, 50-move rule and
    # threefold repetition all end the game without a claim.

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        gen = MoveGenerator(position)
        if not gen.is_in_check(position.side_to_move):
            return False
        return not gen.generate_legal_moves()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        gen = MoveGenerator(position)
        if gen.is_in_check(position.side_to_move):
            return False
        return not gen.generate_legal_moves()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        if position.placement.count(None) < 60:
            return False
        board = position.to_board()
        white_occ = board.occupied(Color.WHITE)
        black_occ = board.occupied(Color.BLACK)
        total = (white_occ | black_occ).bit_count()

        # K vs K
        if total == 2:
            return True

        # K+minor vs K
        if total == 3:
            return (
                board.has_piece(Color.WHITE, PieceType.KNIGHT)
                or board.has_piece(Color.WHITE, PieceType.BISHOP)
                or board.has_piece(Color.BLACK, PieceType.KNIGHT)
                or board.has_piece(Color.BLACK, PieceType.BISHOP)
            )

        # K+B vs K+B with same-colour bishops
        if total == 4:
            white_bishops = board.pieces(Color.WHITE, PieceType.BISHOP)
            black_bishops = board.pieces(Color.BLACK, PieceType.BISHOP)
            if len(white_bishops) == 1 and len(black_bishops) == 1:
                return light_square(white_bishops[0]) == light_square(black_bishops[0])

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def repetition_count(position: Position, previous: Iterable[Position]) -> int:
        """How many times *position* has occurred, counting itself."""
        key = position.repetition_key
        return 1 + sum(1 for p in previous if p.repetition_key == key)

    @staticmethod
    def is_threefold_repetition(
        position: Position, previous: Iterable[Position]
    ) -> bool:
        return Rules.repetition_count(position, previous) >= 3

    @staticmethod
    def draw_reason(
        position: Position,
        previous: Iterable[Position] = (),
    ) -> DrawReason | None:
        """Why *position* is drawn, or ``None`` if it is not."""
        if Rules.is_stalemate(position):
            return DrawReason.STALEMATE
        if Rules.is_checkmate(position):
            return None
        if Rules.is_insufficient_material(position):
            return DrawReason.INSUFFICIENT_MATERIAL
        if Rules.is_fifty_move_rule(position):
            return DrawReason.FIFTY_MOVE_RULE
        if Rules.is_threefold_repetition(position, previous):
            return DrawReason.THREEFOLD_REPETITION
        return None

    @staticmethod
    def game_result(
        position: Position,
        previous: Iterable[Position] = (),
    ) -> GameResult:
        """Determine the current game result."""
        gen = MoveGenerator(position)

        if not gen.generate_legal_moves():
            if gen.is_in_check(position.side_to_move):
                return (
                    GameResult.BLACK_WINS
                    if position.side_to_move == Color.WHITE
                    else GameResult.WHITE_WINS
                )
            return GameResult.DRAW  # stalemate

        if Rules.draw_reason(position, previous) is not None:
            return GameResult.DRAW

        return GameResult.IN_PROGRESS
