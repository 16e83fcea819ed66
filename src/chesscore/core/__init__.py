"""Core domain layer: pure chess logic with no external dependencies.

Quick start::

    from chesscore.core import (
        STARTING_FEN, Move, apply_move, legal_moves, position_from_fen,
    )

    pos = position_from_fen(STARTING_FEN)
    for move in legal_moves(pos):
        print(move)
    pos = apply_move(pos, Move.from_uci("e2e4"))
"""

from chesscore.core.board import Board
from chesscore.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    GameResult,
    MoveFlag,
    PieceType,
)
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
from chesscore.core.move import Move
from chesscore.core.move_generator import (
    MoveGenerator,
    apply_move,
    legal_destinations,
    legal_moves,
    resolve_move,
)
from chesscore.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from chesscore.core.piece import Piece
from chesscore.core.position import Position
from chesscore.core.rules import Rules
from chesscore.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawReason",
    "GameResult",
    "MoveFlag",
    "PieceType",
    # Errors
    "AIUnavailable",
    "ChessError",
    "ErrorKind",
    "GameOver",
    "InvalidFEN",
    "InvalidMove",
    "MalformedCoordinate",
    "NothingToUndo",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    # Validation
    "apply_move",
    "legal_destinations",
    "legal_moves",
    "resolve_move",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]
