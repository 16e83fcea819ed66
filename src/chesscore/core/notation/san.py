"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

from chesscore.core.enums import MoveFlag, PieceType
from chesscore.core.errors import InvalidMove
from chesscore.core.move import Move
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.position import Position
from chesscore.core.types import FILE_NAMES, file_of, parse_square, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    piece = position[move.from_sq]
    if piece is None:
        raise InvalidMove(f"No piece on {square_name(move.from_sq)}")

    # Castling
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        san = ""
        is_capture = (
            position[move.to_sq] is not None or move.flag == MoveFlag.EN_PASSANT
        )

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += FILE_NAMES[file_of(move.from_sq)]
        else:
            san += _SAN_PIECE[piece.piece_type]
            san += _disambiguation(position, move, piece.piece_type)

        if is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    # Check / checkmate suffix
    gen_after = MoveGenerator(position.play(move))
    after_side = position.side_to_move.opposite
    if gen_after.is_in_check(after_side):
        san += "+" if gen_after.generate_legal_moves() else "#"

    return san


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    ambiguous = []
    for m in MoveGenerator(position).generate_legal_moves():
        if m.to_sq != move.to_sq or m.from_sq == move.from_sq:
            continue
        other = position[m.from_sq]
        if other is not None and other.piece_type == piece_type:
            ambiguous.append(m)
    if not ambiguous:
        return ""

    same_file = any(file_of(m.from_sq) == file_of(move.from_sq) for m in ambiguous)
    same_rank = any(rank_of(m.from_sq) == rank_of(move.from_sq) for m in ambiguous)
    if not same_file:
        return FILE_NAMES[file_of(move.from_sq)]
    if not same_rank:
        return str(rank_of(move.from_sq) + 1)
    return square_name(move.from_sq)


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a legal :class:`Move` for *position*."""
    legal = MoveGenerator(position).generate_legal_moves()

    clean = san.strip().rstrip("+#!?")

    # Castling
    if clean in ("O-O", "0-0"):
        return _find_flag(legal, MoveFlag.CASTLE_KINGSIDE, san)
    if clean in ("O-O-O", "0-0-0"):
        return _find_flag(legal, MoveFlag.CASTLE_QUEENSIDE, san)

    # Promotion
    promotion: PieceType | None = None
    if "=" in clean:
        clean, _, promo_text = clean.partition("=")
        promotion = _SAN_PIECE_REV.get(promo_text)
        if promotion is None or promotion == PieceType.KING:
            raise InvalidMove(f"Illegal promotion in SAN: {san!r}")

    # Destination (last two chars)
    try:
        to_sq = parse_square(clean[-2:])
    except ValueError:
        raise InvalidMove(f"Unreadable SAN: {san!r}") from None
    clean = clean[:-2]

    # Capture marker
    if clean.endswith("x"):
        clean = clean[:-1]

    # Piece type
    if clean and clean[0] in _SAN_PIECE_REV:
        piece_type = _SAN_PIECE_REV[clean[0]]
        clean = clean[1:]
    else:
        piece_type = PieceType.PAWN

    # Disambiguation
    from_file: int | None = None
    from_rank: int | None = None
    for ch in clean:
        if ch in FILE_NAMES:
            from_file = FILE_NAMES.index(ch)
        elif ch in "12345678":
            from_rank = int(ch) - 1
        else:
            raise InvalidMove(f"Unreadable SAN: {san!r}")

    # Find matching legal move
    candidates: list[Move] = []
    for m in legal:
        p = position[m.from_sq]
        if p is None or p.piece_type != piece_type:
            continue
        if m.to_sq != to_sq:
            continue
        if m.flag == MoveFlag.PROMOTION:
            if m.promotion != (promotion or PieceType.QUEEN):
                continue
        elif promotion is not None:
            continue
        if from_file is not None and file_of(m.from_sq) != from_file:
            continue
        if from_rank is not None and rank_of(m.from_sq) != from_rank:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise InvalidMove(f"Illegal move: {san}")
    raise InvalidMove(f"Ambiguous move: {san} → {[str(c) for c in candidates]}")


def _find_flag(legal: list[Move], flag: MoveFlag, san: str) -> Move:
    for m in legal:
        if m.flag == flag:
            return m
    raise InvalidMove(f"Illegal move: {san}")
