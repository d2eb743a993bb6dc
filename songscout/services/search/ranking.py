"""
Ranking view — the displayed result set and the dimension it is ordered by.

Re-ranking is a pure, synchronous re-sort of the candidates already held;
it never touches the network.
"""

import logging
from collections.abc import Iterable

from songscout.core.models import Candidate, RankingDimension

logger = logging.getLogger(__name__)

DEFAULT_DIMENSION = RankingDimension.final

# Display scale and label per dimension
_SCORE_DISPLAY: dict[RankingDimension, tuple[str, float]] = {
    RankingDimension.final: ("Final score", 1000.0),
    RankingDimension.audio: ("Audio score", 1.0),
    RankingDimension.text: ("Text score", 100.0),
}


def rank_candidates(
    candidates: Iterable[Candidate], dimension: RankingDimension
) -> tuple[Candidate, ...]:
    """Return candidates sorted descending by ``dimension``; ties keep their order."""
    return tuple(sorted(candidates, key=lambda c: c.score(dimension), reverse=True))


def display_score(candidate: Candidate, dimension: RankingDimension) -> str:
    """Scaled score for ``dimension`` formatted to three decimals."""
    _, divisor = _SCORE_DISPLAY[dimension]
    return f"{candidate.score(dimension) / divisor:.3f}"


def score_label(dimension: RankingDimension) -> str:
    return _SCORE_DISPLAY[dimension][0]


def rank_label(index: int) -> str:
    """1-based rank label for a zero-based position."""
    return f"#{index + 1}"


class RankingView:
    """Holds the current result set in display order.

    The set is either loading (cleared while a search runs) or settled.
    It is only ever replaced wholesale or re-sorted, never merged.
    """

    def __init__(self, dimension: RankingDimension = DEFAULT_DIMENSION) -> None:
        self._dimension = RankingDimension(dimension)
        self._candidates: tuple[Candidate, ...] = ()
        self._loading = False

    @property
    def dimension(self) -> RankingDimension:
        return self._dimension

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return self._candidates

    @property
    def loading(self) -> bool:
        return self._loading

    def __len__(self) -> int:
        return len(self._candidates)

    def clear(self) -> None:
        """Drop the current results and enter the loading state."""
        self._candidates = ()
        self._loading = True

    def settle(self) -> None:
        """Leave the loading state without installing results (failed search)."""
        self._loading = False

    def replace(self, candidates: Iterable[Candidate]) -> None:
        """Install a new result set in server order, then apply a non-default dimension."""
        self._candidates = tuple(candidates)
        if self._dimension != DEFAULT_DIMENSION:
            self._candidates = rank_candidates(self._candidates, self._dimension)
        self._loading = False
        logger.debug("Installed %d candidates", len(self._candidates))

    def set_dimension(self, dimension: RankingDimension | str) -> bool:
        """Re-sort by ``dimension``. Returns False if it was already active."""
        dimension = RankingDimension(dimension)
        if dimension == self._dimension:
            return False
        self._candidates = rank_candidates(self._candidates, dimension)
        self._dimension = dimension
        logger.debug("Ranked %d candidates by %s", len(self._candidates), dimension.value)
        return True
