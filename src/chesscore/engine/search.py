"""Shared engine search models and protocol.

Engines sit behind a narrow boundary: a FEN string goes in and an
:class:`~chesscore.engine.coordinates.EngineMove` comes out.  Nothing on
this boundary shares types with the rules model beyond text, so a different
engine can be dropped in without touching the game layer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chesscore.engine.coordinates import EngineMove

CancelCheck = Callable[[], bool]


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation."""

    max_depth: int = 3
    time_limit_ms: int | None = 700
    noise_cp: int = 0  # random root-score jitter, simulates weaker play
    quiescence: bool = True
    seed: int | None = None


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search.

    ``depth`` is the deepest iteration that ran to completion; it is lower
    than the requested depth when the search was cancelled or timed out.
    """

    best_move: EngineMove | None
    score_cp: int
    depth: int
    nodes: int


class IEngine(Protocol):
    """Protocol for chess engines used by the AI move selector."""

    def search(
        self,
        fen: str,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...
