"""Perft and validation tests for the move generator.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from chesscore.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chesscore.core.errors import InvalidMove
from chesscore.core.move import Move
from chesscore.core.move_generator import (
    MoveGenerator,
    apply_move,
    legal_destinations,
    legal_moves,
    resolve_move,
)
from chesscore.core.notation import STARTING_FEN, position_from_fen
from chesscore.core.piece import Piece
from chesscore.core.position import Position
from chesscore.core.types import E1, E2, E4, parse_square


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* (bulk-counted at the last ply)."""
    moves = MoveGenerator(position).generate_legal_moves()
    if depth == 1:
        return len(moves)
    return sum(perft(position.play(move), depth - 1) for move in moves)


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 1) == 20

    def test_depth_2(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 2) == 400

    def test_depth_3(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 3) == 8_902

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 4) == 197_281


# ── Kiwipete (rich in tactics: castling, ep, promotions) ─────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 1) == 48

    def test_depth_2(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 2) == 2_039

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 3) == 97_862


# ── Position 3: en-passant + promotion edge cases ───────────────────────────

POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftPos3:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 1) == 14

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 2) == 191

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 3) == 2_812


# ── Position 4: mirrored, many promotions ────────────────────────────────────

POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


class TestPerftPos4:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 1) == 6

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 2) == 264

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 3) == 9_467


# ── Position 5 ───────────────────────────────────────────────────────────────

POS5 = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"


class TestPerftPos5:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 1) == 44

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 2) == 1_486


# ── Validation helpers ───────────────────────────────────────────────────────


class TestLegality:
    def test_every_legal_move_leaves_own_king_safe(self) -> None:
        for fen in (STARTING_FEN, KIWIPETE, POS3, POS4, POS5):
            pos = position_from_fen(fen)
            mover = pos.side_to_move
            for move in legal_moves(pos):
                after = pos.play(move)
                assert not MoveGenerator(after).is_in_check(mover), f"{fen}: {move}"

    def test_legal_destinations_of_knight(self) -> None:
        pos = Position.initial()
        assert legal_destinations(pos, parse_square("g1")) == {
            parse_square("f3"),
            parse_square("h3"),
        }

    def test_no_destinations_for_opponent_piece_or_empty_square(self) -> None:
        pos = Position.initial()
        assert legal_destinations(pos, parse_square("e7")) == set()
        assert legal_destinations(pos, E4) == set()

    def test_pinned_piece_cannot_move(self) -> None:
        pos = position_from_fen("4r1k1/8/8/8/8/8/4B3/4K3 w - - 0 1")
        assert legal_destinations(pos, E2) == set()

    def test_en_passant_needs_enemy_pawn_beside(self) -> None:
        # Bypasses FEN validation: a knight stands where the pawn should be.
        placement = [None] * 64
        placement[parse_square("e8")] = Piece(Color.BLACK, PieceType.KING)
        placement[parse_square("e1")] = Piece(Color.WHITE, PieceType.KING)
        placement[parse_square("d5")] = Piece(Color.WHITE, PieceType.PAWN)
        placement[parse_square("e5")] = Piece(Color.WHITE, PieceType.KNIGHT)
        pos = Position(
            tuple(placement), Color.WHITE, CastlingRights.NONE, parse_square("e6")
        )

        d5 = parse_square("d5")
        assert parse_square("e6") not in legal_destinations(pos, d5)

    def test_en_passant_capture_generated(self) -> None:
        pos = position_from_fen("4k3/8/8/3Pp3/8/8/8/4K3 w - e6 0 1")
        moves = MoveGenerator(pos).legal_moves_from(parse_square("d5"))
        flags = {m.to_sq: m.flag for m in moves}
        assert flags[parse_square("e6")] == MoveFlag.EN_PASSANT

    def test_pinned_piece_may_move_along_the_pin(self) -> None:
        pos = position_from_fen("4r1k1/8/8/8/8/8/4R3/4K3 w - - 0 1")
        assert legal_destinations(pos, E2) == {
            parse_square(name) for name in ("e3", "e4", "e5", "e6", "e7", "e8")
        }

    def test_pinned_pawn_cannot_capture_en_passant_off_the_file(self) -> None:
        pos = position_from_fen("3rk3/8/8/3Pp3/8/8/8/3K4 w - e6 0 1")
        assert legal_destinations(pos, parse_square("d5")) == {parse_square("d6")}

    def test_en_passant_exposing_rank_is_illegal(self) -> None:
        pos = position_from_fen("8/8/8/K2Pp2r/8/8/8/7k w - e6 0 1")
        assert parse_square("e6") not in legal_destinations(pos, parse_square("d5"))


class TestResolveMove:
    def test_returns_flagged_generator_move(self) -> None:
        resolved = resolve_move(Position.initial(), Move(E2, E4))
        assert resolved == Move(E2, E4)
        assert resolved.flag == MoveFlag.DOUBLE_PAWN

    def test_castling_flag(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        resolved = resolve_move(pos, Move(E1, parse_square("g1")))
        assert resolved.flag == MoveFlag.CASTLE_KINGSIDE

    def test_promotion_defaults_to_queen(self) -> None:
        pos = position_from_fen("8/4P3/8/8/8/8/k7/4K3 w - - 0 1")
        resolved = resolve_move(pos, Move(parse_square("e7"), parse_square("e8")))
        assert resolved.promotion == PieceType.QUEEN

    def test_promotion_on_non_promoting_move_rejected(self) -> None:
        with pytest.raises(InvalidMove):
            resolve_move(Position.initial(), Move(E2, E4, PieceType.QUEEN))

    def test_king_promotion_rejected(self) -> None:
        pos = position_from_fen("8/4P3/8/8/8/8/k7/4K3 w - - 0 1")
        with pytest.raises(InvalidMove):
            resolve_move(
                pos, Move(parse_square("e7"), parse_square("e8"), PieceType.KING)
            )

    def test_moving_into_check_rejected(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/3r4/4K3 w - - 0 1")
        with pytest.raises(InvalidMove):
            resolve_move(pos, Move(E1, E2))

    def test_wrong_side_rejected(self) -> None:
        with pytest.raises(InvalidMove):
            resolve_move(
                Position.initial(), Move(parse_square("e7"), parse_square("e5"))
            )

    def test_apply_move_validates(self) -> None:
        pos = apply_move(Position.initial(), Move(E2, E4))
        assert pos[E4] == Piece(Color.WHITE, PieceType.PAWN)
        with pytest.raises(InvalidMove):
            apply_move(pos, Move(E4, parse_square("e6")))
