"""Static evaluation: material plus piece-square tables.

Scores are centipawns from the point of view of the side to move.  The
tables are written for White with a1 at index 0; Black reads them with the
rank mirrored.
"""

from __future__ import annotations

from collections.abc import Callable

from chesscore.core.enums import Color, PieceType
from chesscore.core.piece import Piece
from chesscore.core.position import Position
from chesscore.core.types import Square, file_of, rank_of

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 0,
}

# Non-pawn material (both sides) at or below which the king walks out.
_ENDGAME_MATERIAL = 2 * (PIECE_VALUES[PieceType.ROOK] + PIECE_VALUES[PieceType.BISHOP])

Table = tuple[int, ...]


def _table(bonus: Callable[[int, int], int]) -> Table:
    return tuple(bonus(file_of(sq), rank_of(sq)) for sq in range(64))


def _center_distance(file: int, rank: int) -> int:
    return abs(file - 3) + abs(rank - 3)


_PAWN = _table(lambda f, r: r * 12 - abs(f - 3) * 2)
_KNIGHT = _table(lambda f, r: 28 - _center_distance(f, r) * 8)
_BISHOP = _table(lambda f, r: 22 - _center_distance(f, r) * 5 + r * 2)
_ROOK = _table(lambda f, r: 10 + r * 3 - abs(f - 3))
_QUEEN = _table(lambda f, r: 6 - _center_distance(f, r) * 2)
_KING_MIDDLEGAME = _table(lambda f, r: 18 - abs(f - 4) * 2 if r <= 1 else -r * 8)
_KING_ENDGAME = _table(lambda f, r: 20 - _center_distance(f, r) * 6)

_TABLES: dict[PieceType, Table] = {
    PieceType.PAWN: _PAWN,
    PieceType.KNIGHT: _KNIGHT,
    PieceType.BISHOP: _BISHOP,
    PieceType.ROOK: _ROOK,
    PieceType.QUEEN: _QUEEN,
    PieceType.KING: _KING_MIDDLEGAME,
}


def _relative(color: Color, sq: Square) -> Square:
    return sq if color == Color.WHITE else sq ^ 56


def square_bonus(piece: Piece, sq: Square) -> int:
    """Middlegame table value of *piece* standing on *sq*."""
    return _TABLES[piece.piece_type][_relative(piece.color, sq)]


def has_non_pawn_material(position: Position, color: Color) -> bool:
    return any(
        piece is not None
        and piece.color == color
        and piece.piece_type not in (PieceType.PAWN, PieceType.KING)
        for piece in position.placement
    )


def evaluate(position: Position) -> int:
    score = 0
    officers = 0
    kings: list[tuple[Color, Square]] = []
    for sq, piece in enumerate(position.placement):
        if piece is None:
            continue
        if piece.piece_type == PieceType.KING:
            kings.append((piece.color, sq))
            continue
        value = PIECE_VALUES[piece.piece_type] + square_bonus(piece, sq)
        if piece.piece_type != PieceType.PAWN:
            officers += PIECE_VALUES[piece.piece_type]
        score += value if piece.color == Color.WHITE else -value

    king_table = _KING_ENDGAME if officers <= _ENDGAME_MATERIAL else _KING_MIDDLEGAME
    for color, sq in kings:
        value = king_table[_relative(color, sq)]
        score += value if color == Color.WHITE else -value

    return score if position.side_to_move == Color.WHITE else -score
