"""Game management layer: state tracking, the controller and players.

Quick start::

    from chesscore.game import (
        get_result_message, new_game, request_ai_move, submit_move,
    )

    state = new_game()
    state = submit_move(state, "e4")
    state = request_ai_move(state, difficulty=2)
    print(state.fen, get_result_message(state))

Session-style play::

    from chesscore.game import AIPlayer, GameController, HumanPlayer

    ctrl = GameController()
    ctrl.new_game(
        white=HumanPlayer(Color.WHITE, "Alice"),
        black=AIPlayer(Color.BLACK, difficulty=3),
    )
    ctrl.submit_move("e2e4")
    ctrl.play_ai_turn()
"""

from chesscore.game.controller import GameController, GameEvents
from chesscore.game.interfaces import GamePhase, IGameController, IPlayer
from chesscore.game.player import AIPlayer, HumanPlayer
from chesscore.game.state import GameState
from chesscore.game.tracker import (
    from_fen,
    get_result_message,
    legal_moves,
    legal_moves_san,
    move_history_san,
    new_game,
    request_ai_move,
    reset,
    submit_move,
    to_fen,
    undo,
)

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameController",
    "IPlayer",
    # State + tracker operations
    "GameState",
    "from_fen",
    "get_result_message",
    "legal_moves",
    "legal_moves_san",
    "move_history_san",
    "new_game",
    "request_ai_move",
    "reset",
    "submit_move",
    "to_fen",
    "undo",
    # Session
    "AIPlayer",
    "GameController",
    "GameEvents",
    "HumanPlayer",
]
