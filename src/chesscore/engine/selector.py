"""Difficulty-scaled AI move selection.

``select_move`` is the only way the game layer talks to an engine.  It
hands the engine a FEN snapshot, converts the engine's upper-case answer
back into a rules-model :class:`Move` and re-validates it against the
position's legal moves before returning it.  When the time budget runs
out the answer of the deepest completed search iteration is used; a
cancelled search, or one that completed no iteration, yields ``None``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

from chesscore.core.errors import InvalidMove, MalformedCoordinate
from chesscore.core.move import Move
from chesscore.core.move_generator import resolve_move
from chesscore.core.notation import position_to_fen
from chesscore.core.position import Position
from chesscore.engine.coordinates import to_standard_notation
from chesscore.engine.python_search import PythonSearchEngine
from chesscore.engine.search import CancelCheck, IEngine, SearchLimits

_LOGGER = logging.getLogger(__name__)

DEFAULT_AI_TIMEOUT = 10.0  # seconds


class Difficulty(IntEnum):
    """AI strength, weakest first."""

    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3
    EXPERT = 4


@dataclass(frozen=True, slots=True)
class DifficultyProfile:
    depth: int
    noise_cp: int
    quiescence: bool
    description: str


DIFFICULTY_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.BEGINNER: DifficultyProfile(1, 200, False, "Beginner (~800 Elo)"),
    Difficulty.INTERMEDIATE: DifficultyProfile(
        2, 50, True, "Intermediate (~1300 Elo)"
    ),
    Difficulty.ADVANCED: DifficultyProfile(3, 0, True, "Advanced (~1800 Elo)"),
    Difficulty.EXPERT: DifficultyProfile(4, 0, True, "Expert (~2200+ Elo)"),
}


def profile_for(level: int) -> DifficultyProfile:
    """Profile for *level*; unknown levels fall back to intermediate."""
    try:
        return DIFFICULTY_PROFILES[Difficulty(level)]
    except ValueError:
        return DIFFICULTY_PROFILES[Difficulty.INTERMEDIATE]


def describe_difficulty(level: int) -> str:
    return profile_for(level).description


def search_limits_for(
    level: int,
    timeout: float | None = None,
    seed: int | None = None,
) -> SearchLimits:
    profile = profile_for(level)
    if timeout is None:
        timeout = DEFAULT_AI_TIMEOUT
    return SearchLimits(
        max_depth=profile.depth,
        time_limit_ms=max(1, int(timeout * 1000)),
        noise_cp=profile.noise_cp,
        quiescence=profile.quiescence,
        seed=seed,
    )


def select_move(
    position: Position,
    difficulty: int,
    timeout: float | None = None,
    *,
    engine: IEngine | None = None,
    is_cancelled: CancelCheck | None = None,
    seed: int | None = None,
) -> Move | None:
    """Pick a legal move for the side to move, or ``None``.

    Args:
        position: Snapshot to search; never modified.
        difficulty: Level 1-4 (see :class:`Difficulty`).
        timeout: Wall-clock budget in seconds, ``DEFAULT_AI_TIMEOUT`` when
            omitted.
        engine: Engine to consult; a fresh :class:`PythonSearchEngine`
            when omitted.
        is_cancelled: Polled by the search; a cancelled search yields
            ``None``.
        seed: Seeds the root noise of the weaker levels.
    """
    limits = search_limits_for(difficulty, timeout, seed)
    if engine is None:
        engine = PythonSearchEngine()

    try:
        result = engine.search(position_to_fen(position), limits, is_cancelled)
    except Exception:
        _LOGGER.warning("Engine search failed", exc_info=True)
        return None

    _LOGGER.debug(
        "Search finished: depth=%d/%d nodes=%d score=%d",
        result.depth,
        limits.max_depth,
        result.nodes,
        result.score_cp,
    )

    if is_cancelled is not None and is_cancelled():
        return None
    if result.best_move is None:
        return None
    if result.depth < 1:
        _LOGGER.warning("Search timed out before completing a single iteration")
        return None
    if result.depth < limits.max_depth:
        _LOGGER.info(
            "Search timed out; playing the depth %d answer (wanted %d)",
            result.depth,
            limits.max_depth,
        )

    try:
        candidate = to_standard_notation(result.best_move)
        return resolve_move(position, candidate)
    except (MalformedCoordinate, InvalidMove) as exc:
        _LOGGER.warning("Discarding engine move %r: %s", result.best_move, exc)
        return None
