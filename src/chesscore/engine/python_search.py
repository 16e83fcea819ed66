"""Pure-Python engine: iterative-deepening negamax with alpha-beta.

Each call to :meth:`PythonSearchEngine.search` starts from a clean slate
(transposition table, killers, history).  A depth iteration that is
interrupted by the deadline or by cancellation is thrown away; the result
reports the deepest iteration that finished.
"""

from __future__ import annotations

import random
from enum import IntEnum
from time import perf_counter, sleep
from typing import NamedTuple

from chesscore.core.move import Move
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.notation import position_from_fen
from chesscore.core.position import Position
from chesscore.core.rules import Rules
from chesscore.engine.coordinates import to_engine_notation
from chesscore.engine.evaluation import evaluate, has_non_pawn_material
from chesscore.engine.ordering import MAX_PLY, MoveOrderer, is_quiet
from chesscore.engine.search import CancelCheck, IEngine, SearchLimits, SearchResult

MATE_SCORE = 100_000
# Scores beyond this bound encode a mate distance.
_MATE_BOUND = MATE_SCORE - MAX_PLY
_INF = 1_000_000

_NULL_MOVE_MIN_DEPTH = 3
_NULL_MOVE_REDUCTION = 2
_LMR_MIN_DEPTH = 4
_LMR_MIN_MOVE_INDEX = 3
_QUIESCENCE_MAX_DEPTH = 8
_YIELD_INTERVAL = 4096


class _Bound(IntEnum):
    EXACT = 0
    LOWER = 1
    UPPER = 2


class _Entry(NamedTuple):
    depth: int
    score: int
    bound: _Bound
    move: Move | None


class _SearchStopped(Exception):
    pass


def _score_to_tt(score: int, ply: int) -> int:
    """Make a mate score relative to the node instead of the root."""
    if score >= _MATE_BOUND:
        return score + ply
    if score <= -_MATE_BOUND:
        return score - ply
    return score


def _score_from_tt(score: int, ply: int) -> int:
    if score >= _MATE_BOUND:
        return score - ply
    if score <= -_MATE_BOUND:
        return score + ply
    return score


def _never_cancelled() -> bool:
    return False


class _Budget:
    """Deadline plus cancellation, polled once per node."""

    __slots__ = ("_deadline", "_is_cancelled", "_next_yield")

    def __init__(
        self, time_limit_ms: int | None, is_cancelled: CancelCheck | None
    ) -> None:
        self._deadline: float | None = None
        if time_limit_ms is not None:
            self._deadline = perf_counter() + max(time_limit_ms, 1) / 1000.0
        self._is_cancelled = is_cancelled or _never_cancelled
        self._next_yield = _YIELD_INTERVAL

    def exhausted(self, nodes: int) -> bool:
        if nodes >= self._next_yield:
            # Let a GUI thread waiting on the GIL run.
            self._next_yield = nodes + _YIELD_INTERVAL
            sleep(0.001)
        if self._is_cancelled():
            return True
        return self._deadline is not None and perf_counter() >= self._deadline


class PythonSearchEngine(IEngine):
    """Alpha-beta searcher with a transposition table, null-move pruning,
    late-move reductions and an optional quiescence search."""

    __slots__ = (
        "_budget",
        "_nodes",
        "_tt",
        "_tt_size",
        "_ordering",
        "_path_keys",
        "_quiescence",
        "_rng",
    )

    def __init__(self, tt_size: int = 200_000) -> None:
        self._budget = _Budget(None, None)
        self._nodes = 0
        self._tt: dict[int, _Entry] = {}
        self._tt_size = tt_size
        self._ordering = MoveOrderer()
        # Hashes of the positions between the root and the current node.
        self._path_keys: list[int] = []
        self._quiescence = True
        self._rng = random.Random()

    def search(
        self,
        fen: str,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        position = position_from_fen(fen)
        move, score, depth = self.search_position(position, limits, is_cancelled)
        engine_move = to_engine_notation(move) if move is not None else None
        return SearchResult(engine_move, score, depth, self._nodes)

    def search_position(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> tuple[Move | None, int, int]:
        """Search *position*; returns ``(best_move, score_cp, completed_depth)``."""
        if limits.max_depth < 1:
            raise ValueError("Search depth must be >= 1")

        self._budget = _Budget(limits.time_limit_ms, is_cancelled)
        self._nodes = 0
        self._tt.clear()
        self._ordering.reset()
        self._path_keys = []
        self._quiescence = limits.quiescence
        self._rng = random.Random(limits.seed)

        gen = MoveGenerator(position)
        root_moves = gen.generate_legal_moves()
        if not root_moves:
            mated = gen.is_in_check(position.side_to_move)
            return None, -MATE_SCORE if mated else 0, 0

        root_moves = self._ordering.order(position, root_moves)
        best_move, best_score, completed = root_moves[0], evaluate(position), 0
        for depth in range(1, limits.max_depth + 1):
            try:
                best_score, best_move = self._search_root(
                    position, root_moves, depth, limits.noise_cp
                )
            except _SearchStopped:
                break
            completed = depth
            root_moves.remove(best_move)
            root_moves.insert(0, best_move)
        return best_move, best_score, completed

    # ── Tree search ──────────────────────────────────────────────────────

    def _search_root(
        self,
        position: Position,
        moves: list[Move],
        depth: int,
        noise_cp: int,
    ) -> tuple[int, Move]:
        alpha = -_INF
        best_move = moves[0]
        self._path_keys.append(position.zobrist_hash)
        try:
            for move in moves:
                score = -self._negamax(position.play(move), depth - 1, -_INF, -alpha, 1)
                if noise_cp:
                    score += self._rng.randint(-noise_cp, noise_cp)
                if score > alpha:
                    alpha, best_move = score, move
        finally:
            self._path_keys.pop()
        return alpha, best_move

    def _negamax(
        self,
        position: Position,
        depth: int,
        alpha: int,
        beta: int,
        ply: int,
        allow_null: bool = True,
    ) -> int:
        self._visit()
        if self._is_draw(position):
            return 0

        key = position.zobrist_hash
        entry = self._tt.get(key)
        hash_move = entry.move if entry is not None else None
        if entry is not None and entry.depth >= depth:
            stored = _score_from_tt(entry.score, ply)
            if (
                entry.bound == _Bound.EXACT
                or (entry.bound == _Bound.LOWER and stored >= beta)
                or (entry.bound == _Bound.UPPER and stored <= alpha)
            ):
                return stored

        if depth <= 0:
            if self._quiescence:
                return self._quiesce(position, alpha, beta, ply)
            return self._leaf_eval(position, ply)

        gen = MoveGenerator(position)
        side = position.side_to_move
        in_check = gen.is_in_check(side)
        alpha_orig = alpha
        best_score, best_move = -_INF, None

        self._path_keys.append(key)
        try:
            if self._can_apply_null_move(position, depth, in_check, allow_null):
                reduced = max(0, depth - 1 - _NULL_MOVE_REDUCTION - depth // 4)
                score = -self._negamax(
                    self._make_null_move(position),
                    reduced,
                    -beta,
                    -beta + 1,
                    ply + 1,
                    allow_null=False,
                )
                if score >= beta:
                    return beta

            moves = gen.generate_legal_moves()
            if not moves:
                return -MATE_SCORE + ply if in_check else 0

            ordered = self._ordering.order(position, moves, ply, hash_move)
            for index, move in enumerate(ordered):
                quiet = is_quiet(position, move)
                child = position.play(move)
                if self._can_try_lmr(
                    depth=depth,
                    move_index=index,
                    in_check=in_check,
                    is_quiet=quiet,
                    move=move,
                    hash_move=hash_move,
                ) and not Rules.is_in_check(child):
                    reduced = max(0, depth - 1 - self._lmr_reduction(depth, index))
                    score = -self._negamax(child, reduced, -alpha - 1, -alpha, ply + 1)
                    if score > alpha:
                        score = -self._negamax(child, depth - 1, -beta, -alpha, ply + 1)
                else:
                    score = -self._negamax(child, depth - 1, -beta, -alpha, ply + 1)

                if score > best_score:
                    best_score, best_move = score, move
                alpha = max(alpha, score)
                if alpha >= beta:
                    if quiet:
                        self._ordering.record_cutoff(side, move, depth, ply)
                    break
        finally:
            self._path_keys.pop()

        if best_score <= alpha_orig:
            bound = _Bound.UPPER
        elif best_score >= beta:
            bound = _Bound.LOWER
        else:
            bound = _Bound.EXACT
        stored = _score_to_tt(best_score, ply)
        self._store(key, _Entry(depth, stored, bound, best_move))
        return best_score

    def _quiesce(
        self,
        position: Position,
        alpha: int,
        beta: int,
        ply: int,
        q_depth: int = 0,
    ) -> int:
        """Resolve captures and promotions (all evasions when in check).

        Stalemate is only recognised by the main search; out of check the
        side to move may always stand pat.
        """
        self._visit()
        if self._is_draw(position):
            return 0

        gen = MoveGenerator(position)
        if gen.is_in_check(position.side_to_move):
            candidates = gen.generate_legal_moves()
            if not candidates:
                return -MATE_SCORE + ply
            if q_depth >= _QUIESCENCE_MAX_DEPTH:
                return evaluate(position)
        else:
            stand_pat = evaluate(position)
            if stand_pat >= beta:
                return beta
            alpha = max(alpha, stand_pat)
            if q_depth >= _QUIESCENCE_MAX_DEPTH:
                return alpha
            candidates = gen.generate_noisy_moves()

        for move in self._ordering.order(position, candidates, ply):
            score = -self._quiesce(
                position.play(move), -beta, -alpha, ply + 1, q_depth + 1
            )
            if score >= beta:
                return beta
            alpha = max(alpha, score)
        return alpha

    def _leaf_eval(self, position: Position, ply: int) -> int:
        """Static evaluation that still recognises mate and stalemate."""
        gen = MoveGenerator(position)
        if gen.generate_legal_moves():
            return evaluate(position)
        return -MATE_SCORE + ply if gen.is_in_check(position.side_to_move) else 0

    # ── Helpers ──────────────────────────────────────────────────────────

    def _visit(self) -> None:
        self._nodes += 1
        if self._budget.exhausted(self._nodes):
            raise _SearchStopped

    def _is_draw(self, position: Position) -> bool:
        """Repetition along the current line, fifty moves or bare material."""
        if position.zobrist_hash in self._path_keys:
            return True
        return Rules.is_fifty_move_rule(position) or Rules.is_insufficient_material(
            position
        )

    def _store(self, key: int, entry: _Entry) -> None:
        existing = self._tt.get(key)
        if existing is not None and existing.depth > entry.depth:
            return
        if existing is None and len(self._tt) >= self._tt_size:
            self._tt.clear()
        self._tt[key] = entry

    def _can_apply_null_move(
        self,
        position: Position,
        depth: int,
        in_check: bool,
        allow_null: bool,
    ) -> bool:
        if not allow_null or in_check or depth < _NULL_MOVE_MIN_DEPTH:
            return False
        # Zugzwang is common with only king and pawns left.
        return has_non_pawn_material(position, position.side_to_move)

    def _make_null_move(self, position: Position) -> Position:
        return position.pass_turn()

    def _can_try_lmr(
        self,
        depth: int,
        move_index: int,
        in_check: bool,
        is_quiet: bool,
        move: Move,
        hash_move: Move | None,
    ) -> bool:
        return (
            not in_check
            and is_quiet
            and depth >= _LMR_MIN_DEPTH
            and move_index >= _LMR_MIN_MOVE_INDEX
            and move != hash_move
        )

    def _lmr_reduction(self, depth: int, move_index: int) -> int:
        return 2 if depth >= 8 and move_index >= 8 else 1
