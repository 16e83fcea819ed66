"""Tests for static evaluation."""

from chesscore.core.enums import Color, PieceType
from chesscore.core.notation import STARTING_FEN, position_from_fen
from chesscore.core.piece import Piece
from chesscore.core.types import A1, D4, E2, E4, E7
from chesscore.engine.evaluation import evaluate, has_non_pawn_material, square_bonus


class TestEvaluate:
    def test_start_position_is_balanced(self) -> None:
        assert evaluate(position_from_fen(STARTING_FEN)) == 0

    def test_score_is_side_relative(self) -> None:
        white = position_from_fen("4k3/8/8/8/8/8/8/Q3K3 w - - 0 1")
        black = position_from_fen("4k3/8/8/8/8/8/8/Q3K3 b - - 0 1")
        assert evaluate(white) > 800
        assert evaluate(black) == -evaluate(white)

    def test_mirrored_position_is_symmetric(self) -> None:
        pos = position_from_fen("4k3/8/8/8/3N4/8/8/4K3 w - - 0 1")
        mirrored = position_from_fen("4k3/8/8/3n4/8/8/8/4K3 b - - 0 1")
        assert evaluate(pos) == evaluate(mirrored)


class TestSquareBonus:
    def test_central_knight_beats_corner_knight(self) -> None:
        knight = Piece(Color.WHITE, PieceType.KNIGHT)
        assert square_bonus(knight, D4) > square_bonus(knight, A1)

    def test_black_tables_are_mirrored(self) -> None:
        white_pawn = Piece(Color.WHITE, PieceType.PAWN)
        black_pawn = Piece(Color.BLACK, PieceType.PAWN)
        assert square_bonus(white_pawn, E4) > square_bonus(white_pawn, E2)
        assert square_bonus(black_pawn, E7) == square_bonus(white_pawn, E2)


class TestMaterial:
    def test_non_pawn_material(self) -> None:
        pos = position_from_fen("4k3/pppp4/8/8/8/8/8/R3K3 w - - 0 1")
        assert has_non_pawn_material(pos, Color.WHITE)
        assert not has_non_pawn_material(pos, Color.BLACK)
