"""Legal and pseudo-legal move generation, attack detection and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesscore.core.board import iter_bits
from chesscore.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chesscore.core.errors import InvalidMove
from chesscore.core.move import Move
from chesscore.core.types import Square, make_square

if TYPE_CHECKING:
    from chesscore.core.piece import Piece
    from chesscore.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)
_COLOR_OPPOSITE: tuple[Color, Color] = (Color.BLACK, Color.WHITE)

# Per color: (push direction, start rank, last rank before promotion)
_PAWN_GEOMETRY: dict[Color, tuple[int, int, int]] = {
    Color.WHITE: (8, 1, 6),
    Color.BLACK: (-8, 6, 1),
}


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_attack_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = [0] * 64
    for sq in range(64):
        mask = 0
        for to_sq in targets[sq]:
            mask |= 1 << to_sq
        masks[sq] = mask
    return tuple(masks)


def _build_pawn_attacker_masks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Per color, squares from which a pawn of that color attacks each square."""
    white_masks: list[int] = [0] * 64
    black_masks: list[int] = [0] * 64

    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3

        white_mask = 0
        if rank_idx > 0:
            if file_idx > 0:
                white_mask |= 1 << make_square(file_idx - 1, rank_idx - 1)
            if file_idx < 7:
                white_mask |= 1 << make_square(file_idx + 1, rank_idx - 1)

        black_mask = 0
        if rank_idx < 7:
            if file_idx > 0:
                black_mask |= 1 << make_square(file_idx - 1, rank_idx + 1)
            if file_idx < 7:
                black_mask |= 1 << make_square(file_idx + 1, rank_idx + 1)

        white_masks[sq] = white_mask
        black_masks[sq] = black_mask

    return (tuple(white_masks), tuple(black_masks))


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = _build_attack_masks(_KNIGHT_TARGETS)
_KING_ATTACK_MASKS = _build_attack_masks(_KING_TARGETS)
_PAWN_ATTACKER_MASKS = _build_pawn_attacker_masks()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The position itself is immutable; the generator works on a private
    :class:`~chesscore.core.board.Board` copy and simulates each candidate
    move on it to filter out those that leave the mover's king attacked.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.to_board()

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return self._filter_legal(self.generate_pseudo_legal_moves())

    def generate_noisy_moves(self) -> list[Move]:
        """Legal captures, en-passant captures and promotions."""
        board = self._board
        noisy = [
            m
            for m in self.generate_pseudo_legal_moves()
            if m.promotion is not None
            or m.flag == MoveFlag.EN_PASSANT
            or not board.is_empty(m.to_sq)
        ]
        return self._filter_legal(noisy)

    def legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves of the piece standing on *sq* (empty if not ours)."""
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        moves: list[Move] = []
        self._gen_piece(sq, piece, moves)
        return self._filter_legal(moves)

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        board = self._board

        for sq in iter_bits(board.bitboard(color, PieceType.PAWN)):
            self._gen_pawn(sq, color, moves)

        for sq in iter_bits(board.bitboard(color, PieceType.KNIGHT)):
            self._gen_steps(sq, color, _KNIGHT_TARGETS, moves)

        for piece_type, rays in (
            (PieceType.BISHOP, _BISHOP_RAYS),
            (PieceType.ROOK, _ROOK_RAYS),
            (PieceType.QUEEN, _QUEEN_RAYS),
        ):
            for sq in iter_bits(board.bitboard(color, piece_type)):
                self._gen_sliding(sq, color, rays[sq], moves)

        for sq in iter_bits(board.bitboard(color, PieceType.KING)):
            self._gen_king(sq, color, moves)

        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, _COLOR_OPPOSITE[int(color)])

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        board = self._board
        by_idx = int(by_color)

        if (
            board.bitboard(by_color, PieceType.PAWN)
            & _PAWN_ATTACKER_MASKS[by_idx][sq]
        ):
            return True

        if board.bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
            return True

        if board.bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
            return True

        queens = board.bitboard(by_color, PieceType.QUEEN)
        if queens or board.bitboard(by_color, PieceType.BISHOP):
            if self._ray_hits(_BISHOP_RAYS[sq], by_color, PieceType.BISHOP):
                return True

        if queens or board.bitboard(by_color, PieceType.ROOK):
            if self._ray_hits(_ROOK_RAYS[sq], by_color, PieceType.ROOK):
                return True

        return False

    def _ray_hits(
        self,
        rays: tuple[tuple[Square, ...], ...],
        by_color: Color,
        slider: PieceType,
    ) -> bool:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in (
                    slider,
                    PieceType.QUEEN,
                ):
                    return True
                break
        return False

    # -- Legality filter ----------------------------------------------------

    def _filter_legal(self, moves: list[Move]) -> list[Move]:
        """Keep the legal *moves*.

        Out of check, a move by an unpinned piece other than the king can
        not expose the king, so only king moves, en-passant captures and
        pinned pieces are simulated.
        """
        color = self._pos.side_to_move
        king_sq = self._board.king_square(color)
        if self.is_square_attacked(king_sq, _COLOR_OPPOSITE[int(color)]):
            return [m for m in moves if self._is_legal(m)]

        pinned = self._pinned_mask(king_sq, color)
        return [
            m
            for m in moves
            if (
                m.from_sq != king_sq
                and m.flag != MoveFlag.EN_PASSANT
                and not pinned & (1 << m.from_sq)
            )
            or self._is_legal(m)
        ]

    def _pinned_mask(self, king_sq: Square, color: Color) -> int:
        """Bitboard of *color* pieces pinned to the king on *king_sq*."""
        board = self._board
        pinned = 0
        for index, ray in enumerate(_QUEEN_RAYS[king_sq]):
            # _QUEEN_RAYS lists the four diagonals before the four lines.
            slider = PieceType.BISHOP if index < 4 else PieceType.ROOK
            shield: Square | None = None
            for sq in ray:
                piece = board[sq]
                if piece is None:
                    continue
                if shield is None:
                    if piece.color != color:
                        break
                    shield = sq
                    continue
                if piece.color != color and piece.piece_type in (
                    slider,
                    PieceType.QUEEN,
                ):
                    pinned |= 1 << shield
                break
        return pinned

    def _is_legal(self, move: Move) -> bool:
        """Simulate *move* on the board and test the mover's king."""
        board = self._board
        color = self._pos.side_to_move
        piece = board[move.from_sq]

        capture_sq = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            capture_sq = make_square(move.to_sq & 7, move.from_sq >> 3)
        captured = board[capture_sq]

        rook_from = rook_to = None
        if move.flag == MoveFlag.CASTLE_KINGSIDE:
            rook_from, rook_to = move.from_sq + 3, move.from_sq + 1
        elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
            rook_from, rook_to = move.from_sq - 4, move.from_sq - 1

        board[capture_sq] = None
        board[move.from_sq] = None
        board[move.to_sq] = piece
        if rook_from is not None and rook_to is not None:
            board[rook_to] = board[rook_from]
            board[rook_from] = None

        safe = not self.is_in_check(color)

        if rook_from is not None and rook_to is not None:
            board[rook_from] = board[rook_to]
            board[rook_to] = None
        board[move.to_sq] = None
        board[move.from_sq] = piece
        board[capture_sq] = captured
        return safe

    # -- Piece-specific generators (private) -------------------------------

    def _gen_piece(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        color = piece.color
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            self._gen_pawn(sq, color, moves)
        elif ptype == PieceType.KNIGHT:
            self._gen_steps(sq, color, _KNIGHT_TARGETS, moves)
        elif ptype == PieceType.BISHOP:
            self._gen_sliding(sq, color, _BISHOP_RAYS[sq], moves)
        elif ptype == PieceType.ROOK:
            self._gen_sliding(sq, color, _ROOK_RAYS[sq], moves)
        elif ptype == PieceType.QUEEN:
            self._gen_sliding(sq, color, _QUEEN_RAYS[sq], moves)
        else:
            self._gen_king(sq, color, moves)

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        file_idx = sq & 7
        rank_idx = sq >> 3
        push, start_rank, pre_promotion_rank = _PAWN_GEOMETRY[color]
        promotes = rank_idx == pre_promotion_rank

        one_step = sq + push
        if board.is_empty(one_step):
            if promotes:
                for pt in _PROMOTION_TYPES:
                    moves.append(Move(sq, one_step, pt, MoveFlag.PROMOTION))
            else:
                moves.append(Move(sq, one_step))
                two_step = one_step + push
                if rank_idx == start_rank and board.is_empty(two_step):
                    moves.append(Move(sq, two_step, flag=MoveFlag.DOUBLE_PAWN))

        for file_delta in (-1, 1):
            if not 0 <= file_idx + file_delta < 8:
                continue
            cap_sq = one_step + file_delta
            target = board[cap_sq]
            if target is not None and target.color != color:
                if promotes:
                    for pt in _PROMOTION_TYPES:
                        moves.append(Move(sq, cap_sq, pt, MoveFlag.PROMOTION))
                else:
                    moves.append(Move(sq, cap_sq))
            elif target is None and cap_sq == self._pos.en_passant:
                beside = board[sq + file_delta]
                if (
                    beside is not None
                    and beside.color != color
                    and beside.piece_type == PieceType.PAWN
                ):
                    moves.append(Move(sq, cap_sq, flag=MoveFlag.EN_PASSANT))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets[sq]:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_king(self, sq: Square, color: Color, moves: list[Move]) -> None:
        self._gen_steps(sq, color, _KING_TARGETS, moves)
        self._gen_castling(sq, color, moves)

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        offset = 0 if color == Color.WHITE else 56
        if king_sq != offset + 4:
            return
        if not self._pos.castling & CastlingRights.both(color):
            return
        if self.is_in_check(color):
            return

        board = self._board
        rights = self._pos.castling
        opponent = _COLOR_OPPOSITE[int(color)]

        kingside = CastlingRights.kingside(color)
        if rights & kingside and self._has_own_rook(offset + 7, color):
            f_sq = offset + 5
            g_sq = offset + 6
            if (
                board.is_empty(f_sq)
                and board.is_empty(g_sq)
                and not self.is_square_attacked(f_sq, opponent)
                and not self.is_square_attacked(g_sq, opponent)
            ):
                moves.append(Move(king_sq, g_sq, flag=MoveFlag.CASTLE_KINGSIDE))

        queenside = CastlingRights.queenside(color)
        if rights & queenside and self._has_own_rook(offset, color):
            b_sq = offset + 1
            c_sq = offset + 2
            d_sq = offset + 3
            if (
                board.is_empty(b_sq)
                and board.is_empty(c_sq)
                and board.is_empty(d_sq)
                and not self.is_square_attacked(c_sq, opponent)
                and not self.is_square_attacked(d_sq, opponent)
            ):
                moves.append(Move(king_sq, c_sq, flag=MoveFlag.CASTLE_QUEENSIDE))

    def _has_own_rook(self, sq: Square, color: Color) -> bool:
        piece = self._board[sq]
        return (
            piece is not None
            and piece.color == color
            and piece.piece_type == PieceType.ROOK
        )


# -- Validation ------------------------------------------------------------


def legal_moves(position: Position) -> list[Move]:
    """All legal moves in *position*."""
    return MoveGenerator(position).generate_legal_moves()


def legal_destinations(position: Position, sq: Square) -> set[Square]:
    """Destination squares reachable by the piece on *sq*."""
    return {m.to_sq for m in MoveGenerator(position).legal_moves_from(sq)}


def resolve_move(position: Position, move: Move) -> Move:
    """Match a caller-supplied move against the legal-move set.

    Returns the generator's own :class:`Move` (with its flag set).  A
    promoting move given without a piece promotes to a queen; a promotion
    piece on a move that does not promote is rejected.
    """
    if move.promotion in (PieceType.PAWN, PieceType.KING):
        raise InvalidMove(f"Illegal promotion piece: {move.promotion.name.lower()}")

    candidates = [
        m
        for m in MoveGenerator(position).legal_moves_from(move.from_sq)
        if m.to_sq == move.to_sq
    ]
    if not candidates:
        raise InvalidMove(f"Illegal move: {move}")

    if candidates[0].flag != MoveFlag.PROMOTION:
        if move.promotion is not None:
            raise InvalidMove(f"Move does not promote: {move}")
        return candidates[0]

    wanted = move.promotion if move.promotion is not None else PieceType.QUEEN
    for m in candidates:
        if m.promotion == wanted:
            return m
    raise InvalidMove(f"Illegal move: {move}")


def apply_move(position: Position, move: Move) -> Position:
    """Validate *move* and return the resulting position."""
    return position.play(resolve_move(position, move))
