"""Tests for the built-in Python chess engine."""

import pytest

from chesscore.core.move import Move
from chesscore.core.move_generator import legal_moves
from chesscore.core.notation import STARTING_FEN, position_from_fen
from chesscore.core.position import Position
from chesscore.core.rules import Rules
from chesscore.core.types import parse_square
from chesscore.engine import EngineMove, PythonSearchEngine, SearchLimits
from chesscore.engine.coordinates import to_standard_notation
from chesscore.engine.python_search import MATE_SCORE, _score_from_tt, _score_to_tt

_BACK_RANK_MATE = "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"


class _NullTrackingEngine(PythonSearchEngine):
    def __init__(self) -> None:
        super().__init__()
        self.null_move_calls = 0

    def _make_null_move(self, position: Position) -> Position:
        self.null_move_calls += 1
        return super()._make_null_move(position)


class _LmrTrackingEngine(PythonSearchEngine):
    def __init__(self) -> None:
        super().__init__()
        self.lmr_calls = 0

    def _lmr_reduction(self, depth: int, move_index: int) -> int:
        self.lmr_calls += 1
        return super()._lmr_reduction(depth, move_index)

    def _can_apply_null_move(
        self,
        position: Position,
        depth: int,
        in_check: bool,
        allow_null: bool,
    ) -> bool:
        return False


class TestPythonSearchEngine:
    def test_returns_legal_move_from_start(self) -> None:
        engine = PythonSearchEngine()

        result = engine.search(
            STARTING_FEN, SearchLimits(max_depth=2, time_limit_ms=None)
        )

        assert result.best_move is not None
        move = to_standard_notation(result.best_move)
        assert move in legal_moves(position_from_fen(STARTING_FEN))
        assert result.depth == 2
        assert result.nodes > 0

    def test_answers_in_engine_coordinates(self) -> None:
        engine = PythonSearchEngine()

        result = engine.search(
            STARTING_FEN, SearchLimits(max_depth=1, time_limit_ms=None)
        )

        assert isinstance(result.best_move, EngineMove)
        assert result.best_move.from_square.isupper()

    def test_finds_mate_in_one(self) -> None:
        engine = PythonSearchEngine()

        result = engine.search(
            _BACK_RANK_MATE, SearchLimits(max_depth=2, time_limit_ms=None)
        )

        assert result.best_move == EngineMove("A1", "A8")
        pos = position_from_fen(_BACK_RANK_MATE)
        assert Rules.is_checkmate(pos.play(to_standard_notation(result.best_move)))

    def test_finds_mate_without_quiescence(self) -> None:
        engine = PythonSearchEngine()

        result = engine.search(
            _BACK_RANK_MATE,
            SearchLimits(max_depth=1, time_limit_ms=None, quiescence=False),
        )

        assert result.best_move == EngineMove("A1", "A8")

    def test_returns_none_for_checkmated_side(self) -> None:
        # Fool's mate position: white to move is already checkmated.
        fen = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        engine = PythonSearchEngine()

        result = engine.search(fen, SearchLimits(max_depth=3, time_limit_ms=None))
        assert result.best_move is None
        assert result.score_cp <= -90_000

    def test_returns_none_for_stalemated_side(self) -> None:
        engine = PythonSearchEngine()

        result = engine.search(
            "7k/8/5KQ1/8/8/8/8/8 b - - 0 1",
            SearchLimits(max_depth=2, time_limit_ms=None),
        )
        assert result.best_move is None
        assert result.score_cp == 0

    def test_rejects_zero_depth(self) -> None:
        with pytest.raises(ValueError):
            PythonSearchEngine().search(STARTING_FEN, SearchLimits(max_depth=0))

    def test_honors_cancel_callback(self) -> None:
        engine = PythonSearchEngine()

        result = engine.search(
            STARTING_FEN,
            SearchLimits(max_depth=6, time_limit_ms=None),
            is_cancelled=lambda: True,
        )

        assert result.depth == 0

    def test_time_limit_stops_deep_search(self) -> None:
        engine = PythonSearchEngine()

        result = engine.search(
            STARTING_FEN, SearchLimits(max_depth=8, time_limit_ms=1)
        )

        assert result.depth < 8

    def test_same_seed_gives_same_noisy_move(self) -> None:
        limits = SearchLimits(max_depth=1, time_limit_ms=None, noise_cp=200, seed=7)

        first = PythonSearchEngine().search(STARTING_FEN, limits)
        second = PythonSearchEngine().search(STARTING_FEN, limits)

        assert first.best_move == second.best_move

    def test_populates_transposition_table(self) -> None:
        engine = PythonSearchEngine()

        _ = engine.search(STARTING_FEN, SearchLimits(max_depth=3, time_limit_ms=None))

        assert len(engine._tt) > 0

    @pytest.mark.slow
    def test_uses_null_move_pruning_in_normal_position(self) -> None:
        engine = _NullTrackingEngine()

        _ = engine.search(STARTING_FEN, SearchLimits(max_depth=4, time_limit_ms=None))

        assert engine.null_move_calls > 0

    def test_skips_null_move_pruning_in_pawn_only_endgame(self) -> None:
        engine = _NullTrackingEngine()

        _ = engine.search(
            "8/3k4/8/8/8/4K3/3P4/8 w - - 0 1",
            SearchLimits(max_depth=4, time_limit_ms=None),
        )

        assert engine.null_move_calls == 0

    def test_null_move_hands_over_the_turn(self) -> None:
        pos = position_from_fen(
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )
        passed = PythonSearchEngine()._make_null_move(pos)

        assert passed.side_to_move != pos.side_to_move
        assert passed.en_passant is None
        assert pos.en_passant == parse_square("e3")

    @pytest.mark.slow
    def test_uses_lmr_on_late_quiet_moves(self) -> None:
        engine = _LmrTrackingEngine()

        _ = engine.search(STARTING_FEN, SearchLimits(max_depth=5, time_limit_ms=None))

        assert engine.lmr_calls > 0

    def test_lmr_conditions_and_reduction_schedule(self) -> None:
        engine = PythonSearchEngine()
        quiet = Move(parse_square("e2"), parse_square("e4"))

        assert not engine._can_try_lmr(
            depth=3,
            move_index=3,
            in_check=False,
            is_quiet=True,
            move=quiet,
            hash_move=None,
        )
        assert not engine._can_try_lmr(
            depth=5,
            move_index=1,
            in_check=False,
            is_quiet=True,
            move=quiet,
            hash_move=None,
        )
        assert not engine._can_try_lmr(
            depth=5,
            move_index=4,
            in_check=False,
            is_quiet=False,
            move=quiet,
            hash_move=None,
        )
        assert engine._can_try_lmr(
            depth=5,
            move_index=4,
            in_check=False,
            is_quiet=True,
            move=quiet,
            hash_move=None,
        )
        assert engine._lmr_reduction(depth=5, move_index=4) == 1
        assert engine._lmr_reduction(depth=8, move_index=8) == 2

    def test_fifty_move_rule_is_terminal_for_search(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4K2R/7r w - - 100 51")
        assert PythonSearchEngine()._is_draw(pos)

    def test_insufficient_material_is_terminal_for_search(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/3N4/8 w - - 0 1")
        assert PythonSearchEngine()._is_draw(pos)

    def test_repetition_on_search_path_is_a_draw(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        engine = PythonSearchEngine()

        assert not engine._is_draw(pos)
        engine._path_keys.append(pos.zobrist_hash)
        assert engine._is_draw(pos)


class TestMateScores:
    def test_mate_in_one_scores_distance_from_root(self) -> None:
        result = PythonSearchEngine().search(
            _BACK_RANK_MATE, SearchLimits(max_depth=3, time_limit_ms=None)
        )
        assert result.score_cp == MATE_SCORE - 1

    def test_table_scores_are_relative_to_the_node(self) -> None:
        # Mate found five plies from the root, seen from a node at ply 3.
        stored = _score_to_tt(MATE_SCORE - 5, 3)
        assert stored == MATE_SCORE - 2
        # The same node reached at ply 1 is mated two plies sooner.
        assert _score_from_tt(stored, 1) == MATE_SCORE - 3
        assert _score_from_tt(_score_to_tt(-MATE_SCORE + 6, 4), 2) == -MATE_SCORE + 4

    def test_ordinary_scores_are_stored_unchanged(self) -> None:
        assert _score_to_tt(250, 7) == 250
        assert _score_from_tt(-40, 3) == -40
