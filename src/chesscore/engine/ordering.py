"""Move ordering for the alpha-beta search.

Order: hash move, promotions, captures by MVV-LVA, killer moves, then quiet
moves by history score.
"""

from __future__ import annotations

from chesscore.core.enums import Color, MoveFlag, PieceType
from chesscore.core.move import Move
from chesscore.core.position import Position
from chesscore.engine.evaluation import PIECE_VALUES, square_bonus

MAX_PLY = 128

_HASH_MOVE = 100_000
_PROMOTION = 20_000
_CAPTURE = 10_000
_KILLER = (9_000, 8_000)
_CASTLE = 120
_HISTORY_FACTOR = 32
_HISTORY_CAP = 8_000


def is_quiet(position: Position, move: Move) -> bool:
    """Neither a capture nor a promotion."""
    if move.flag in (MoveFlag.PROMOTION, MoveFlag.EN_PASSANT):
        return False
    return position[move.to_sq] is None


class MoveOrderer:
    """Killer slots per ply and a from/to history table per side."""

    __slots__ = ("_killers", "_history")

    def __init__(self) -> None:
        self._killers: list[list[Move | None]] = []
        self._history: list[list[int]] = []
        self.reset()

    def reset(self) -> None:
        self._killers = [[None, None] for _ in range(MAX_PLY)]
        self._history = [[0] * 4096 for _ in range(2)]

    def order(
        self,
        position: Position,
        moves: list[Move],
        ply: int = 0,
        hash_move: Move | None = None,
    ) -> list[Move]:
        return sorted(
            moves,
            key=lambda m: self.score(position, m, ply, hash_move),
            reverse=True,
        )

    def score(
        self,
        position: Position,
        move: Move,
        ply: int = 0,
        hash_move: Move | None = None,
    ) -> int:
        mover = position[move.from_sq]
        if mover is None:
            return -_HASH_MOVE
        score = _HASH_MOVE if move == hash_move else 0

        if move.promotion is not None:
            score += _PROMOTION + PIECE_VALUES[move.promotion]

        if move.flag == MoveFlag.EN_PASSANT:
            victim: PieceType | None = PieceType.PAWN
        else:
            target = position[move.to_sq]
            victim = target.piece_type if target is not None else None

        if victim is not None:
            score += _CAPTURE + 10 * PIECE_VALUES[victim]
            score -= PIECE_VALUES[mover.piece_type]
        elif move.promotion is None:
            score += self.killer_bonus(move, ply)
            score += self.history(position.side_to_move, move)

        if move.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE):
            score += _CASTLE
        score += square_bonus(mover, move.to_sq) - square_bonus(mover, move.from_sq)
        return score

    # ── Cutoff bookkeeping ───────────────────────────────────────────────

    def record_cutoff(self, side: Color, move: Move, depth: int, ply: int) -> None:
        """A quiet *move* refuted the opponent's play at *ply*."""
        self.add_killer(move, ply)
        self.add_history(side, move, depth)

    def add_killer(self, move: Move, ply: int) -> None:
        if not 0 <= ply < MAX_PLY:
            return
        slots = self._killers[ply]
        if slots[0] != move:
            slots[1], slots[0] = slots[0], move

    def killer_bonus(self, move: Move, ply: int) -> int:
        if not 0 <= ply < MAX_PLY:
            return 0
        for slot, killer in enumerate(self._killers[ply]):
            if killer == move:
                return _KILLER[slot]
        return 0

    def add_history(self, side: Color, move: Move, depth: int) -> None:
        depth = max(depth, 1)
        table = self._history[int(side)]
        index = move.from_sq * 64 + move.to_sq
        table[index] = min(_HISTORY_CAP, table[index] + depth * depth * _HISTORY_FACTOR)

    def history(self, side: Color, move: Move) -> int:
        return self._history[int(side)][move.from_sq * 64 + move.to_sq]
