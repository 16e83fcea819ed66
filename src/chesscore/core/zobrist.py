"""Zobrist hashing of positions.

Keys come from a fixed-seed generator so hashes are stable across runs.
The search uses them for its transposition table and for spotting
repetitions along the current line.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Final

from chesscore.core.enums import CastlingRights, Color
from chesscore.core.piece import Piece
from chesscore.core.types import Square, file_of

_rng = random.Random(0x5EED_C4E55)

# 12 piece slots x 64 squares, slot = color * 6 + piece_type - 1
_PIECE_SQUARE: Final = tuple(_rng.getrandbits(64) for _ in range(12 * 64))
_BLACK_TO_MOVE: Final = _rng.getrandbits(64)
_CASTLING: Final = {
    right: _rng.getrandbits(64)
    for right in (
        CastlingRights.WHITE_KINGSIDE,
        CastlingRights.WHITE_QUEENSIDE,
        CastlingRights.BLACK_KINGSIDE,
        CastlingRights.BLACK_QUEENSIDE,
    )
}
_EP_FILE: Final = tuple(_rng.getrandbits(64) for _ in range(8))

del _rng


def piece_key(piece: Piece, sq: Square) -> int:
    slot = int(piece.color) * 6 + int(piece.piece_type) - 1
    return _PIECE_SQUARE[slot * 64 + sq]


def hash_position(
    placement: Sequence[Piece | None],
    side_to_move: Color,
    castling: CastlingRights,
    en_passant: Square | None,
) -> int:
    """Key of everything that identifies a position except the clocks."""
    key = 0
    for sq, piece in enumerate(placement):
        if piece is not None:
            key ^= piece_key(piece, sq)
    if side_to_move == Color.BLACK:
        key ^= _BLACK_TO_MOVE
    for right, right_key in _CASTLING.items():
        if castling & right:
            key ^= right_key
    if en_passant is not None:
        key ^= _EP_FILE[file_of(en_passant)]
    return key
