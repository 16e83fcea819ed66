"""Error kinds raised by the chess core.

Every error carries an :class:`ErrorKind` tag so callers that prefer to
dispatch on a value rather than on exception classes can do so::

    try:
        state = submit_move(state, move)
    except ChessError as exc:
        if exc.kind is ErrorKind.GAME_OVER:
            ...
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    INVALID_FEN = "invalid_fen"
    INVALID_MOVE = "invalid_move"
    GAME_OVER = "game_over"
    MALFORMED_COORDINATE = "malformed_coordinate"
    AI_UNAVAILABLE = "ai_unavailable"
    NOTHING_TO_UNDO = "nothing_to_undo"


class ChessError(Exception):
    """Base class for all caller-recoverable chess core errors."""

    kind: ErrorKind


class InvalidFEN(ChessError, ValueError):
    """Malformed Forsyth–Edwards position text."""

    kind = ErrorKind.INVALID_FEN


class InvalidMove(ChessError, ValueError):
    """Move is not a member of the current legal-move set."""

    kind = ErrorKind.INVALID_MOVE


class GameOver(ChessError):
    """A move was submitted to a game that has already ended."""

    kind = ErrorKind.GAME_OVER


class MalformedCoordinate(ChessError, ValueError):
    """Square token outside the 64-square domain of a notation."""

    kind = ErrorKind.MALFORMED_COORDINATE


class AIUnavailable(ChessError):
    """The AI selector produced no validated move."""

    kind = ErrorKind.AI_UNAVAILABLE


class NothingToUndo(ChessError):
    """Undo requested on a game with an empty move history."""

    kind = ErrorKind.NOTHING_TO_UNDO
