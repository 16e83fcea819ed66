"""Game state tracker: the public operations over :class:`GameState`.

Every function takes a state and returns a new one; nothing here mutates
its input, and a failing call leaves the caller's state untouched.

Quick start::

    from chesscore.game import new_game, submit_move, request_ai_move

    state = new_game()
    state = submit_move(state, "e4")
    state = request_ai_move(state, difficulty=2)
"""

from __future__ import annotations

import logging

from chesscore.core.enums import Color, DrawReason
from chesscore.core.errors import (
    AIUnavailable,
    GameOver,
    InvalidMove,
    MalformedCoordinate,
    NothingToUndo,
)
from chesscore.core.move import Move
from chesscore.core.move_generator import MoveGenerator, resolve_move
from chesscore.core.notation import (
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from chesscore.core.position import Position
from chesscore.core.types import Square, is_valid_square, parse_square
from chesscore.engine.search import CancelCheck, IEngine
from chesscore.engine.selector import select_move
from chesscore.game.state import GameState

_LOGGER = logging.getLogger(__name__)

_DRAW_MESSAGES: dict[DrawReason, str] = {
    DrawReason.STALEMATE: "Draw by stalemate",
    DrawReason.INSUFFICIENT_MATERIAL: "Draw by insufficient material",
    DrawReason.FIFTY_MOVE_RULE: "Draw by fifty-move rule",
    DrawReason.THREEFOLD_REPETITION: "Draw by threefold repetition",
}


# ── Construction ─────────────────────────────────────────────────────────────


def new_game() -> GameState:
    """A game from the standard initial position."""
    start = Position.initial()
    return GameState(start_position=start, position=start)


def from_fen(text: str) -> GameState:
    """A game starting from *text*; raises :class:`InvalidFEN`."""
    start = position_from_fen(text)
    return GameState(start_position=start, position=start)


def to_fen(state: GameState) -> str:
    return position_to_fen(state.position)


def reset(state: GameState) -> GameState:
    """A fresh game from *state*'s start position."""
    start = state.start_position
    return GameState(start_position=start, position=start)


# ── Queries ──────────────────────────────────────────────────────────────────


def legal_moves(
    state: GameState, square: Square | str | None = None
) -> frozenset[Move] | frozenset[Square]:
    """Legal moves of *state*, or destinations of the piece on *square*.

    Without *square* the result is the set of legal :class:`Move` objects
    (empty once the game is over).  With *square*, given as an index or a
    name such as ``"e2"``, it is the set of reachable destination squares.
    """
    if state.is_game_over:
        return frozenset()
    gen = MoveGenerator(state.position)
    if square is None:
        return frozenset(gen.generate_legal_moves())
    return frozenset(m.to_sq for m in gen.legal_moves_from(_coerce_square(square)))


def legal_moves_san(state: GameState) -> list[str]:
    """SAN of every legal move, in generation order."""
    if state.is_game_over:
        return []
    position = state.position
    return [
        move_to_san(position, m)
        for m in MoveGenerator(position).generate_legal_moves()
    ]


def move_history_san(state: GameState) -> list[str]:
    return [m.san or str(m) for m in state.history]


def get_result_message(
    state: GameState, human_color: Color = Color.WHITE
) -> str | None:
    """Human-readable outcome of a finished game, ``None`` while it runs."""
    if state.is_checkmate:
        winner = state.side_to_move.opposite
        if winner == human_color:
            return "Checkmate! You win!"
        return f"Checkmate! {'White' if winner == Color.WHITE else 'Black'} wins!"
    reason = state.draw_reason
    if reason is not None:
        return _DRAW_MESSAGES[reason]
    return None


# ── Transitions ──────────────────────────────────────────────────────────────


def submit_move(state: GameState, move: Move | str) -> GameState:
    """Play *move* and return the resulting state.

    *move* may be a :class:`Move`, UCI text (``"e7e8q"``) or SAN
    (``"Nf3"``).  Raises :class:`GameOver` on a finished game and
    :class:`InvalidMove` when the move is not legal.
    """
    if state.is_game_over:
        raise GameOver(f"Game is over: {state.phase.name.lower()}")

    position = state.position
    legal = _coerce_move(position, move)
    recorded = legal.with_san(move_to_san(position, legal))
    _LOGGER.debug("Move %s (%s)", recorded.san, recorded)

    return GameState(
        start_position=state.start_position,
        position=position.play(legal),
        history=state.history + (recorded,),
        previous_positions=state.previous_positions + (position,),
    )


def undo(state: GameState) -> GameState:
    """Take back the last move by replaying the rest of the history.

    Raises :class:`NothingToUndo` when no move has been played.  Undoing is
    allowed on finished games.
    """
    if not state.history:
        raise NothingToUndo("No moves to undo")

    _LOGGER.debug("Undo %s", state.history[-1].san)
    return _replay(state.start_position, state.history[:-1])


def request_ai_move(
    state: GameState,
    difficulty: int,
    timeout: float | None = None,
    *,
    engine: IEngine | None = None,
    is_cancelled: CancelCheck | None = None,
) -> GameState:
    """Let the AI play for the side to move.

    Raises :class:`GameOver` on a finished game and :class:`AIUnavailable`
    when the selector returns no move (no legal move, no search iteration
    finished in time, cancelled, or its answer failed validation).
    """
    if state.is_game_over:
        raise GameOver(f"Game is over: {state.phase.name.lower()}")

    move = select_move(
        state.position,
        difficulty,
        timeout,
        engine=engine,
        is_cancelled=is_cancelled,
    )
    if move is None:
        raise AIUnavailable("AI could not produce a move")
    return submit_move(state, move)


# ── Internal ─────────────────────────────────────────────────────────────────


def _replay(start: Position, moves: tuple[Move, ...]) -> GameState:
    position = start
    previous: list[Position] = []
    for move in moves:
        previous.append(position)
        position = position.play(move)
    return GameState(
        start_position=start,
        position=position,
        history=moves,
        previous_positions=tuple(previous),
    )


def _coerce_move(position: Position, move: Move | str) -> Move:
    if isinstance(move, str):
        try:
            move = Move.from_uci(move)
        except ValueError:
            return parse_san(position, move)
    if not (
        isinstance(move, Move)
        and is_valid_square(move.from_sq)
        and is_valid_square(move.to_sq)
    ):
        raise InvalidMove(f"Not a move: {move!r}")
    return resolve_move(position, move)


def _coerce_square(square: Square | str) -> Square:
    if isinstance(square, str):
        try:
            return parse_square(square)
        except ValueError as exc:
            raise MalformedCoordinate(str(exc)) from exc
    if not isinstance(square, int) or not is_valid_square(square):
        raise MalformedCoordinate(f"Square index out of range: {square!r}")
    return square
