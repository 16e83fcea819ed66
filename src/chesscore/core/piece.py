"""Piece value object and promotion letters."""

from __future__ import annotations

from dataclasses import dataclass

from chesscore.core.enums import Color, PieceType

PROMOTION_CHARS: dict[PieceType, str] = {
    pt: pt.symbol
    for pt in (PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)
}
PROMOTION_TYPES: dict[str, PieceType] = {v: k for k, v in PROMOTION_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN letter: upper case for white, lower case for black."""
        symbol = self.piece_type.symbol
        return symbol.upper() if self.color == Color.WHITE else symbol

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Piece for a FEN letter, e.g. ``"N"`` is a white knight."""
        try:
            piece_type = PieceType.from_symbol(char)
        except ValueError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, piece_type)
