"""
Parent pairing strategies for crossover.
"""

import random
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple


class CrossoverStrategy(Enum):
    """How parents are paired when building the next generation."""
    EVERY_PAIR = 'every_pair'
    SEQUENTIAL_PAIR = 'sequential_pair'
    SHUFFLED_SEQUENTIAL_PAIR = 'shuffled_sequential_pair'

    @classmethod
    def from_value(cls, value) -> 'CrossoverStrategy':
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


def every_pair(parents: Sequence, rng: random.Random) -> List[Tuple[int, int]]:
    """All unordered index pairs, O(n^2)."""
    n = len(parents)
    return [(i, j) for i in range(n - 1) for j in range(i + 1, n)]


def sequential_pair(parents: Sequence, rng: random.Random) -> List[Tuple[int, int]]:
    """Consecutive index pairs (0, 1), (1, 2), ..."""
    return [(i, i + 1) for i in range(len(parents) - 1)]


def shuffled_sequential_pair(parents: List, rng: random.Random) -> List[Tuple[int, int]]:
    """Shuffle the parent list in place once, then pair consecutively."""
    rng.shuffle(parents)
    return sequential_pair(parents, rng)


PAIRING_FUNCTIONS: Dict[CrossoverStrategy, Callable] = {
    CrossoverStrategy.EVERY_PAIR: every_pair,
    CrossoverStrategy.SEQUENTIAL_PAIR: sequential_pair,
    CrossoverStrategy.SHUFFLED_SEQUENTIAL_PAIR: shuffled_sequential_pair,
}


def make_pairs(strategy: CrossoverStrategy, parents: List,
               rng: random.Random) -> List[Tuple[int, int]]:
    """
    Form parent index pairs according to ``strategy``.

    Note that the shuffled strategy reorders ``parents`` in place; the returned
    indices refer to the reordered list.
    """
    return PAIRING_FUNCTIONS[CrossoverStrategy.from_value(strategy)](parents, rng)
