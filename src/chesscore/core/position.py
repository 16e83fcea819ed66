"""Immutable chess position value (placement plus game metadata)."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from chesscore.core.board import Board
from chesscore.core.enums import CastlingRights, Color, PieceType
from chesscore.core.move import Move
from chesscore.core.piece import Piece
from chesscore.core.types import Square, file_of, make_square, rank_of
from chesscore.core.zobrist import hash_position

_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}


@dataclass(frozen=True)
class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Positions are values: equality is structural and every transition
    (:meth:`play`, :meth:`pass_turn`) returns a new instance.
    """

    placement: tuple[Piece | None, ...]
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    def __post_init__(self) -> None:
        if len(self.placement) != 64:
            raise ValueError(
                f"Placement must have 64 squares, got {len(self.placement)}"
            )

    @classmethod
    def initial(cls) -> Position:
        """Standard starting position."""
        return cls(Board.initial().placement())

    # ── Queries ──────────────────────────────────────────────────────────

    def __getitem__(self, sq: Square) -> Piece | None:
        return self.placement[sq]

    def to_board(self) -> Board:
        """Fresh mutable :class:`Board` holding this placement."""
        return Board.from_placement(self.placement)

    def king_square(self, color: Color) -> Square:
        king = Piece(color, PieceType.KING)
        for sq, piece in enumerate(self.placement):
            if piece == king:
                return sq
        raise ValueError(f"No {color.name} king on board")

    @cached_property
    def zobrist_hash(self) -> int:
        """Zobrist key of placement, side, castling and en passant."""
        return hash_position(
            self.placement, self.side_to_move, self.castling, self.en_passant
        )

    @property
    def repetition_key(self) -> tuple[object, ...]:
        """Identity used for repetition detection (clocks excluded)."""
        return (self.placement, self.side_to_move, self.castling, self.en_passant)

    # ── Transitions ──────────────────────────────────────────────────────

    def play(self, move: Move) -> Position:
        """Return the position after *move* without checking legality.

        Special moves are recognised from the geometry of the move, so a
        bare ``Move(from_sq, to_sq, promotion)`` is enough.
        """
        squares = list(self.placement)
        piece = squares[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        captured = squares[move.to_sq]
        from_file, from_rank = file_of(move.from_sq), rank_of(move.from_sq)
        to_file, to_rank = file_of(move.to_sq), rank_of(move.to_sq)

        if piece.piece_type == PieceType.PAWN:
            # En passant: the captured pawn sits beside the origin square
            if captured is None and from_file != to_file:
                ep_capture_sq = make_square(to_file, from_rank)
                captured = squares[ep_capture_sq]
                squares[ep_capture_sq] = None

        squares[move.from_sq] = None
        if move.promotion is not None:
            squares[move.to_sq] = Piece(piece.color, move.promotion)
        else:
            squares[move.to_sq] = piece

        # Slide the rook for castling
        if piece.piece_type == PieceType.KING and abs(to_file - from_file) == 2:
            if to_file == 6:
                rook_from, rook_to = from_rank * 8 + 7, from_rank * 8 + 5
            else:
                rook_from, rook_to = from_rank * 8, from_rank * 8 + 3
            squares[rook_to] = squares[rook_from]
            squares[rook_from] = None

        # En passant target for the opponent
        en_passant: Square | None = None
        if piece.piece_type == PieceType.PAWN and abs(to_rank - from_rank) == 2:
            en_passant = make_square(from_file, (from_rank + to_rank) // 2)

        # Castling rights
        castling = self.castling
        if piece.piece_type == PieceType.KING:
            castling &= ~CastlingRights.both(piece.color)
        for sq in (move.from_sq, move.to_sq):
            if sq in _ROOK_CORNERS:
                castling &= ~_ROOK_CORNERS[sq]

        # Clocks
        if piece.piece_type == PieceType.PAWN or captured is not None:
            halfmove_clock = 0
        else:
            halfmove_clock = self.halfmove_clock + 1
        fullmove_number = self.fullmove_number
        if self.side_to_move == Color.BLACK:
            fullmove_number += 1

        return Position(
            tuple(squares),
            self.side_to_move.opposite,
            castling,
            en_passant,
            halfmove_clock,
            fullmove_number,
        )

    def pass_turn(self) -> Position:
        """Null move: hand the turn to the opponent (search-only)."""
        fullmove_number = self.fullmove_number
        if self.side_to_move == Color.BLACK:
            fullmove_number += 1
        return Position(
            self.placement,
            self.side_to_move.opposite,
            self.castling,
            None,
            self.halfmove_clock + 1,
            fullmove_number,
        )

    def __repr__(self) -> str:
        from chesscore.core.notation.fen import position_to_fen

        return f"Position({position_to_fen(self)!r})"
