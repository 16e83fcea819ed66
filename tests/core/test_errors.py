"""Tests for error kinds."""

import pytest

from chesscore.core.errors import (
    AIUnavailable,
    ChessError,
    ErrorKind,
    GameOver,
    InvalidFEN,
    InvalidMove,
    MalformedCoordinate,
    NothingToUndo,
)


class TestErrorKinds:
    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (InvalidFEN, ErrorKind.INVALID_FEN),
            (InvalidMove, ErrorKind.INVALID_MOVE),
            (GameOver, ErrorKind.GAME_OVER),
            (MalformedCoordinate, ErrorKind.MALFORMED_COORDINATE),
            (AIUnavailable, ErrorKind.AI_UNAVAILABLE),
            (NothingToUndo, ErrorKind.NOTHING_TO_UNDO),
        ],
    )
    def test_kind_tag(self, error: type[ChessError], kind: ErrorKind) -> None:
        exc = error("boom")
        assert isinstance(exc, ChessError)
        assert exc.kind is kind
        assert str(exc) == "boom"

    def test_input_errors_are_value_errors(self) -> None:
        for error in (InvalidFEN, InvalidMove, MalformedCoordinate):
            assert issubclass(error, ValueError)

    def test_state_errors_are_not_value_errors(self) -> None:
        for error in (GameOver, AIUnavailable, NothingToUndo):
            assert not issubclass(error, ValueError)
