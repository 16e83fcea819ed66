"""FEN parsing and serialization."""

from __future__ import annotations

from chesscore.core.board import Board
from chesscore.core.enums import CastlingRights, Color, PieceType
from chesscore.core.errors import InvalidFEN
from chesscore.core.piece import Piece
from chesscore.core.position import Position
from chesscore.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`."""
    parts = fen.split()
    if len(parts) != 6:
        raise InvalidFEN(f"Invalid FEN (need 6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part, halfmove_part, fullmove_part = parts

    # 1. Piece placement
    board = _parse_placement(placement, fen)

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise InvalidFEN(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        rights = dict(_CASTLING_CHARS)
        seen: set[str] = set()
        for ch in castling_part:
            right = rights.get(ch)
            if right is None or ch in seen:
                raise InvalidFEN(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except ValueError:
            raise InvalidFEN(f"Invalid FEN en-passant square: {ep_part!r}") from None
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise InvalidFEN(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )
        # The pawn that just double-pushed sits beyond the target square
        # and both the target and its start square are empty.
        step = -8 if side == Color.WHITE else 8
        pusher = board[ep + step]
        if (
            board[ep] is not None
            or board[ep - step] is not None
            or pusher != Piece(side.opposite, PieceType.PAWN)
        ):
            raise InvalidFEN(
                f"Invalid FEN en-passant square without a double-pushed pawn: "
                f"{ep_part!r}"
            )

    # 5–6. Clocks
    if not (halfmove_part.isascii() and halfmove_part.isdigit()):
        raise InvalidFEN(f"Invalid FEN halfmove clock: {halfmove_part!r}")
    fullmove_ok = fullmove_part.isascii() and fullmove_part.isdigit()
    if not fullmove_ok or int(fullmove_part) < 1:
        raise InvalidFEN(f"Invalid FEN fullmove number: {fullmove_part!r}")

    return Position(
        board.placement(),
        side,
        castling,
        ep,
        int(halfmove_part),
        int(fullmove_part),
    )


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidFEN(f"Invalid FEN board (must contain 8 ranks): {fen!r}")

    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        previous_was_digit = False
        for ch in rank_text:
            if ch in "12345678":
                step = int(ch)
                if previous_was_digit:
                    raise InvalidFEN(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
                previous_was_digit = True
            else:
                if file >= 8:
                    raise InvalidFEN(f"Invalid FEN rank width: {fen!r}")
                try:
                    piece = Piece.from_char(ch)
                except ValueError as exc:
                    raise InvalidFEN(f"{exc}: {fen!r}") from None
                if piece.piece_type == PieceType.PAWN and rank in (0, 7):
                    raise InvalidFEN(f"Invalid FEN pawn on back rank: {fen!r}")
                board[make_square(file, rank)] = piece
                file += 1
                previous_was_digit = False
            if file > 8:
                raise InvalidFEN(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise InvalidFEN(f"Invalid FEN rank width: {fen!r}")

    for color in Color:
        if len(board.pieces(color, PieceType.KING)) != 1:
            raise InvalidFEN(
                f"Invalid FEN: {color} must have exactly one king: {fen!r}"
            )
    return board


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Castling
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right)

    # 3. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return (
        f"{board_str} {pos.side_to_move.fen_char} {castling_str or '-'} {ep_str} "
        f"{pos.halfmove_clock} {pos.fullmove_number}"
    )
