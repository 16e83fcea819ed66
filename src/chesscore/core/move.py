"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from chesscore.core.enums import MoveFlag, PieceType
from chesscore.core.piece import PROMOTION_CHARS, PROMOTION_TYPES
from chesscore.core.types import Square, parse_square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    Identity is ``(from_sq, to_sq, promotion)``.  ``flag`` classifies special
    moves for the move generator and ``san`` carries the rendering recorded
    in game history; neither takes part in equality or hashing, so a caller
    can write ``Move(E2, E4)`` and match the generator's double-push move.
    """

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None
    flag: MoveFlag = field(default=MoveFlag.NORMAL, compare=False)
    san: str | None = field(default=None, compare=False)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += PROMOTION_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse long-algebraic text such as ``"e2e4"`` or ``"e7e8q"``."""
        if len(text) not in (4, 5):
            raise ValueError(f"Invalid UCI move: {text!r}")
        promotion: PieceType | None = None
        if len(text) == 5:
            promotion = PROMOTION_TYPES.get(text[4])
            if promotion is None:
                raise ValueError(f"Invalid UCI promotion piece: {text!r}")
        return cls(parse_square(text[0:2]), parse_square(text[2:4]), promotion)

    def with_san(self, san: str) -> Move:
        return replace(self, san=san)
