"""GameController: the central orchestrator of a chess game.

Coordinates: Players, GameState and the tracker operations.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chesscore.core.enums import Color, GameResult
from chesscore.core.errors import InvalidMove, NothingToUndo
from chesscore.core.move import Move
from chesscore.game import tracker
from chesscore.game.interfaces import IGameController, IPlayer
from chesscore.game.state import GameState

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, str, GameState], None]  # move, san, state
GameOverCallback = Callable[[GameResult], None]
AIUnavailableCallback = Callable[[Color], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_ai_unavailable: list[AIUnavailableCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Runs one game session: validates moves, lets the AI play its turns,
    notifies listeners.

    Thread-safety: methods are designed to be called from a single thread.
    Background searches go through ``AIMoveWorker`` and hand their move
    back to ``submit_move`` on the calling thread.
    """

    __slots__ = ("_state", "_players", "_resigned", "events")

    def __init__(self) -> None:
        self._state = tracker.new_game()
        self._players: dict[Color, IPlayer] = {}
        self._resigned: Color | None = None
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def current_player(self) -> IPlayer | None:
        return self._players.get(self._state.side_to_move)

    def player(self, color: Color) -> IPlayer | None:
        return self._players.get(color)

    @property
    def is_game_over(self) -> bool:
        return self._resigned is not None or self._state.is_game_over

    @property
    def result(self) -> GameResult:
        if self._resigned is not None:
            return (
                GameResult.BLACK_WINS
                if self._resigned == Color.WHITE
                else GameResult.WHITE_WINS
            )
        return self._state.result

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(
        self,
        white: IPlayer,
        black: IPlayer,
        fen: str | None = None,
    ) -> None:
        self._players = {Color.WHITE: white, Color.BLACK: black}
        self._resigned = None
        self._state = tracker.new_game() if fen is None else tracker.from_fen(fen)

    def submit_move(self, move: Move | str) -> bool:
        if self.is_game_over:
            return False
        try:
            self._state = tracker.submit_move(self._state, move)
        except InvalidMove as exc:
            _LOGGER.debug("Rejected move %s: %s", move, exc)
            return False

        played = self._state.history[-1]
        self._emit_move(played, played.san or str(played))
        if self._state.is_game_over:
            self._emit_game_over(self._state.result)
        return True

    def play_ai_turn(self, timeout: float | None = None) -> bool:
        if self.is_game_over:
            return False
        cp = self.current_player
        if cp is None or cp.is_human:
            return False

        move = cp.choose_move(self._state.position, timeout)
        if move is None:
            for cb in self.events.on_ai_unavailable:
                cb(cp.color)
            return False
        return self.submit_move(move)

    def resign(self, color: Color) -> None:
        if self.is_game_over:
            return
        self._resigned = color
        self._emit_game_over(self.result)

    def undo_move(self) -> bool:
        """Take back moves until a human is on move again.

        Against an AI this removes the AI's reply together with the human
        move that preceded it.
        """
        if self._resigned is not None:
            return False
        try:
            state = tracker.undo(self._state)
        except NothingToUndo:
            return False

        has_human = any(p.is_human for p in self._players.values())
        while has_human and state.history and not self._is_human(state.side_to_move):
            state = tracker.undo(state)
        self._state = state
        return True

    def result_message(self, human_color: Color | None = None) -> str | None:
        """Outcome text for a finished game, ``None`` while it runs.

        *human_color* defaults to the single human side when there is one.
        """
        if human_color is None:
            humans = [c for c, p in self._players.items() if p.is_human]
            human_color = humans[0] if len(humans) == 1 else Color.WHITE
        if self._resigned is not None:
            if self._resigned == human_color:
                return "You resigned"
            return f"{self._resigned.name.capitalize()} resigns"
        return tracker.get_result_message(self._state, human_color)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _is_human(self, color: Color) -> bool:
        p = self._players.get(color)
        return p is None or p.is_human

    def _emit_move(self, move: Move, san: str) -> None:
        for cb in self.events.on_move:
            cb(move, san, self._state)

    def _emit_game_over(self, result: GameResult) -> None:
        for cb in self.events.on_game_over:
            cb(result)
