"""Coordinate adapter between the rules model and the search engine.

The rules model names squares in lower case (``"e2"``); the search engine
speaks upper case (``"E2"``) and reports its choice as a
``{"E2": "E4"}`` mapping.  This module is the only place that translates
between the two, and it accepts nothing outside the 64-square domain of
each convention.
"""

from __future__ import annotations

from dataclasses import dataclass

from chesscore.core.errors import MalformedCoordinate
from chesscore.core.move import Move
from chesscore.core.piece import PROMOTION_CHARS, PROMOTION_TYPES
from chesscore.core.types import Square, file_of, make_square, rank_of

_ENGINE_FILES = "ABCDEFGH"
_ENGINE_RANKS = "12345678"


@dataclass(frozen=True, slots=True)
class EngineMove:
    """A move as reported by the search engine: ``EngineMove("E7", "E8", "q")``."""

    from_square: str
    to_square: str
    promotion: str | None = None

    def as_mapping(self) -> dict[str, str]:
        """The engine's native ``{from: to}`` form (promotion is not carried)."""
        return {self.from_square: self.to_square}

    @classmethod
    def from_mapping(cls, mapping: dict[str, str]) -> EngineMove:
        if len(mapping) != 1:
            raise MalformedCoordinate(f"Expected a single engine move: {mapping!r}")
        ((from_square, to_square),) = mapping.items()
        return cls(from_square, to_square)


def engine_square_name(sq: Square) -> str:
    """Engine token for a square index, e.g. 12 → ``"E2"``."""
    if not isinstance(sq, int) or not 0 <= sq < 64:
        raise MalformedCoordinate(f"Square index out of range: {sq!r}")
    return _ENGINE_FILES[file_of(sq)] + _ENGINE_RANKS[rank_of(sq)]


def parse_engine_square(token: str) -> Square:
    """Square index for an engine token, e.g. ``"E2"`` → 12."""
    if (
        not isinstance(token, str)
        or len(token) != 2
        or token[0] not in _ENGINE_FILES
        or token[1] not in _ENGINE_RANKS
    ):
        raise MalformedCoordinate(f"Invalid engine square: {token!r}")
    return make_square(_ENGINE_FILES.index(token[0]), _ENGINE_RANKS.index(token[1]))


def to_engine_notation(move: Move) -> EngineMove:
    """Rules-model :class:`Move` → :class:`EngineMove`."""
    promotion = None
    if move.promotion is not None:
        promotion = PROMOTION_CHARS.get(move.promotion)
        if promotion is None:
            raise MalformedCoordinate(f"Invalid promotion piece: {move.promotion!r}")
    return EngineMove(
        engine_square_name(move.from_sq),
        engine_square_name(move.to_sq),
        promotion,
    )


def to_standard_notation(engine_move: EngineMove) -> Move:
    """:class:`EngineMove` → rules-model :class:`Move` (flag left unresolved)."""
    promotion = None
    if engine_move.promotion is not None:
        promotion = PROMOTION_TYPES.get(engine_move.promotion)
        if promotion is None:
            raise MalformedCoordinate(
                f"Invalid promotion piece: {engine_move.promotion!r}"
            )
    return Move(
        parse_engine_square(engine_move.from_square),
        parse_engine_square(engine_move.to_square),
        promotion,
    )
