"""
Story placement within a segment.

A segment reads best when no two consecutive stories share a presenter.
Stories arrive one at a time from different presenters, so each new story is
spliced in where it keeps (or restores) that alternation:

1. repair: split an existing run of two stories by some other presenter,
2. neutral: any slot whose neighbours are both by other presenters,
3. fallback: append.

Within a policy the slot is chosen uniformly at random so that a burst of
stories from one presenter spreads across the segment.
"""

import random
import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from util.logging import logger

from .schema import Story


class RandomSource(ABC):
    """Source of uniformly distributed integers."""

    @abstractmethod
    def intn(self, n: int) -> int:
        """Return an integer in ``[0, n)``. ``n`` is always positive."""


class LockedRandom(RandomSource):
    """Seedable ``random.Random`` safe to share between request threads."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def intn(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"intn requires a positive bound, got {n}")
        with self._lock:
            return self._rng.randrange(n)


def repair_candidates(stories: Sequence[Story], presenter: str) -> List[int]:
    """Indices that split a same-presenter pair not by ``presenter``."""
    return [
        i + 1
        for i in range(len(stories) - 1)
        if stories[i].presenter == stories[i + 1].presenter
        and stories[i].presenter != presenter
    ]


def neutral_candidates(stories: Sequence[Story], presenter: str) -> List[int]:
    """Indices where inserting creates no adjacency with ``presenter``.

    Empty for an empty segment; the caller appends in that case.
    """
    n = len(stories)
    if n == 0:
        return []

    candidates = []
    if stories[0].presenter != presenter:
        candidates.append(0)
    for i in range(n - 1):
        if stories[i].presenter != presenter and stories[i + 1].presenter != presenter:
            candidates.append(i + 1)
    if stories[n - 1].presenter != presenter:
        candidates.append(n)
    return candidates


def choose_index(stories: Sequence[Story], presenter: str, rng: RandomSource) -> int:
    """Pick the index in ``[0, len(stories)]`` at which to insert a story by ``presenter``."""
    for policy, candidates in (
        ("repair", repair_candidates(stories, presenter)),
        ("neutral", neutral_candidates(stories, presenter)),
    ):
        if candidates:
            index = candidates[rng.intn(len(candidates))]
            logger.log_placement(policy, index, len(candidates), presenter)
            return index

    logger.log_placement("append", len(stories), 0, presenter)
    return len(stories)
