"""Scratch board used by move generation and material checks.

:class:`~chesscore.core.position.Position` keeps its placement as an
immutable tuple.  Code that needs per-piece lookups, or that wants to try a
move and take it back, builds a :class:`Board` from that tuple instead.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from chesscore.core.enums import Color, PieceType
from chesscore.core.piece import Piece
from chesscore.core.types import Square

_BACK_RANK = "RNBQKBNR"


def iter_bits(bitboard: int) -> Iterator[Square]:
    """Squares set in *bitboard*, lowest first."""
    while bitboard:
        lsb = bitboard & -bitboard
        yield lsb.bit_length() - 1
        bitboard ^= lsb


def _slot(color: Color, piece_type: PieceType) -> int:
    return int(color) * 6 + int(piece_type) - 1


class Board:
    """64 squares plus one bitboard per (color, piece type)."""

    __slots__ = ("_squares", "_bitboards", "_occupied")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        self._bitboards = [0] * 12
        self._occupied = [0, 0]

    @classmethod
    def from_placement(cls, placement: Iterable[Piece | None]) -> Board:
        board = cls()
        squares = list(placement)
        bitboards = board._bitboards
        occupied = board._occupied
        for sq, piece in enumerate(squares):
            if piece is not None:
                color = int(piece.color)
                bitboards[color * 6 + int(piece.piece_type) - 1] |= 1 << sq
                occupied[color] |= 1 << sq
        board._squares = squares
        return board

    @classmethod
    def initial(cls) -> Board:
        board = cls()
        for file, char in enumerate(_BACK_RANK):
            board[file] = Piece.from_char(char)
            board[8 + file] = Piece(Color.WHITE, PieceType.PAWN)
            board[48 + file] = Piece(Color.BLACK, PieceType.PAWN)
            board[56 + file] = Piece.from_char(char.lower())
        return board

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        mask = 1 << sq
        old = self._squares[sq]
        if old is not None:
            self._bitboards[_slot(old.color, old.piece_type)] &= ~mask
            self._occupied[int(old.color)] &= ~mask
        self._squares[sq] = piece
        if piece is not None:
            self._bitboards[_slot(piece.color, piece.piece_type)] |= mask
            self._occupied[int(piece.color)] |= mask

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def bitboard(self, color: Color, piece_type: PieceType) -> int:
        return self._bitboards[_slot(color, piece_type)]

    def occupied(self, color: Color) -> int:
        """Bitboard of every square holding a *color* piece."""
        return self._occupied[int(color)]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        return list(iter_bits(self.bitboard(color, piece_type)))

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return self.bitboard(color, piece_type) != 0

    def king_square(self, color: Color) -> Square:
        kings = self.bitboard(color, PieceType.KING)
        if not kings:
            raise ValueError(f"No {color.name} king on board")
        return kings.bit_length() - 1

    def placement(self) -> tuple[Piece | None, ...]:
        """Immutable snapshot of the 64 squares."""
        return tuple(self._squares)
