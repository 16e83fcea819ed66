"""Tests for the rules-model ↔ engine coordinate adapter."""

import pytest

from chesscore.core.enums import PieceType
from chesscore.core.errors import ErrorKind, MalformedCoordinate
from chesscore.core.move import Move
from chesscore.core.types import E2, E4, parse_square
from chesscore.engine.coordinates import (
    EngineMove,
    engine_square_name,
    parse_engine_square,
    to_engine_notation,
    to_standard_notation,
)


class TestSquares:
    def test_all_squares_round_trip(self) -> None:
        for sq in range(64):
            token = engine_square_name(sq)
            assert token == token.upper()
            assert parse_engine_square(token) == sq

    def test_corner_names(self) -> None:
        assert engine_square_name(0) == "A1"
        assert engine_square_name(63) == "H8"

    @pytest.mark.parametrize("token", ["e2", "E9", "I1", "E", "E22", "", "e2 "])
    def test_rejects_tokens_outside_domain(self, token: str) -> None:
        with pytest.raises(MalformedCoordinate) as info:
            parse_engine_square(token)
        assert info.value.kind is ErrorKind.MALFORMED_COORDINATE

    @pytest.mark.parametrize("sq", [-1, 64, 100])
    def test_rejects_out_of_range_index(self, sq: int) -> None:
        with pytest.raises(MalformedCoordinate):
            engine_square_name(sq)


class TestMoves:
    def test_to_engine_notation(self) -> None:
        assert to_engine_notation(Move(E2, E4)) == EngineMove("E2", "E4")

    def test_to_standard_notation(self) -> None:
        assert to_standard_notation(EngineMove("E2", "E4")) == Move(E2, E4)

    def test_promotion_round_trip(self) -> None:
        move = Move(parse_square("a7"), parse_square("a8"), PieceType.KNIGHT)
        engine_move = to_engine_notation(move)
        assert engine_move == EngineMove("A7", "A8", "n")
        assert to_standard_notation(engine_move) == move

    def test_unknown_promotion_letter_rejected(self) -> None:
        with pytest.raises(MalformedCoordinate):
            to_standard_notation(EngineMove("A7", "A8", "k"))

    def test_lower_case_engine_move_rejected(self) -> None:
        with pytest.raises(MalformedCoordinate):
            to_standard_notation(EngineMove("e2", "e4"))

    def test_mapping_form(self) -> None:
        engine_move = EngineMove.from_mapping({"E2": "E4"})
        assert engine_move.as_mapping() == {"E2": "E4"}
        assert to_standard_notation(engine_move) == Move(E2, E4)

    def test_mapping_must_hold_one_move(self) -> None:
        with pytest.raises(MalformedCoordinate):
            EngineMove.from_mapping({})
        with pytest.raises(MalformedCoordinate):
            EngineMove.from_mapping({"E2": "E4", "D2": "D4"})
