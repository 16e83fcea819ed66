"""Tests for the scratch Board."""

import pytest

from chesscore.core.board import Board, iter_bits
from chesscore.core.enums import Color, PieceType
from chesscore.core.piece import Piece
from chesscore.core.position import Position
from chesscore.core.types import A1, D1, E1, E4, E8, H8

_WHITE_PAWN = Piece(Color.WHITE, PieceType.PAWN)
_BLACK_KNIGHT = Piece(Color.BLACK, PieceType.KNIGHT)


class TestIterBits:
    def test_empty(self) -> None:
        assert list(iter_bits(0)) == []

    def test_lowest_first(self) -> None:
        assert list(iter_bits((1 << H8) | (1 << A1) | (1 << E4))) == [A1, E4, H8]


class TestInitialBoard:
    def test_kings_and_queens(self) -> None:
        board = Board.initial()
        assert board.king_square(Color.WHITE) == E1
        assert board.king_square(Color.BLACK) == E8
        assert board[D1] == Piece(Color.WHITE, PieceType.QUEEN)
        assert board[D1 + 56] == Piece(Color.BLACK, PieceType.QUEEN)

    def test_occupancy(self) -> None:
        board = Board.initial()
        assert board.occupied(Color.WHITE) == 0xFFFF
        assert board.occupied(Color.BLACK) == 0xFFFF << 48

    def test_matches_initial_position(self) -> None:
        assert Board.initial().placement() == Position.initial().placement


class TestBoardUpdates:
    def test_set_and_clear(self) -> None:
        board = Board()
        board[E4] = _WHITE_PAWN
        assert board[E4] == _WHITE_PAWN
        assert board.pieces(Color.WHITE, PieceType.PAWN) == [E4]

        board[E4] = None
        assert board.is_empty(E4)
        assert board.occupied(Color.WHITE) == 0

    def test_overwrite_moves_bit_between_indexes(self) -> None:
        board = Board()
        board[E4] = _WHITE_PAWN
        board[E4] = _BLACK_KNIGHT
        assert not board.has_piece(Color.WHITE, PieceType.PAWN)
        assert board.bitboard(Color.BLACK, PieceType.KNIGHT) == 1 << E4
        assert board.occupied(Color.WHITE) == 0

    def test_missing_king_raises(self) -> None:
        with pytest.raises(ValueError, match="No WHITE king"):
            Board().king_square(Color.WHITE)

    def test_from_placement_round_trip(self) -> None:
        placement = Board.initial().placement()
        assert Board.from_placement(placement).placement() == placement
