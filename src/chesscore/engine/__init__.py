"""Chess engine package: search and difficulty-scaled AI move selection.

The Qt worker lives in :mod:`chesscore.engine.qt_bridge` and is imported
separately so the search can run without an event loop.
"""

from chesscore.engine.coordinates import (
    EngineMove,
    engine_square_name,
    parse_engine_square,
    to_engine_notation,
    to_standard_notation,
)
from chesscore.engine.python_search import PythonSearchEngine
from chesscore.engine.search import IEngine, SearchLimits, SearchResult
from chesscore.engine.selector import (
    DEFAULT_AI_TIMEOUT,
    DIFFICULTY_PROFILES,
    Difficulty,
    DifficultyProfile,
    describe_difficulty,
    select_move,
)

DefaultEngine: type[IEngine] = PythonSearchEngine

__all__ = [
    "DEFAULT_AI_TIMEOUT",
    "DIFFICULTY_PROFILES",
    "DefaultEngine",
    "Difficulty",
    "DifficultyProfile",
    "EngineMove",
    "IEngine",
    "PythonSearchEngine",
    "SearchLimits",
    "SearchResult",
    "describe_difficulty",
    "engine_square_name",
    "parse_engine_square",
    "select_move",
    "to_engine_notation",
    "to_standard_notation",
]
