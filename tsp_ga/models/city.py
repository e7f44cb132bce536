"""
City model for TSP problems.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from tsp_ga.core.exceptions import DatasetFormatError


@dataclass(frozen=True)
class City:
    """A city in the tour: positive integer id and 2D coordinate."""
    id: int
    x: float
    y: float

    def __post_init__(self):
        """Validate city data after initialization."""
        if int(self.id) != self.id or self.id < 1:
            raise ValueError(f"City id must be a positive integer, got {self.id!r}")

    def to_tuple(self) -> Tuple[int, float, float]:
        return self.id, self.x, self.y


def create_cities(points: Iterable[Tuple[int, float, float]]) -> List[City]:
    """
    Build cities from ``(id, x, y)`` tuples and check their ids.

    Ids must be unique and span ``1..n`` so that any of them can be pinned
    as the start point and chromosome validity can be checked against the
    contiguous range.

    Raises:
        DatasetFormatError: On duplicate or non-contiguous ids
    """
    cities = [City(int(pid), float(x), float(y)) for pid, x, y in points]
    if not cities:
        raise DatasetFormatError("No cities given")

    ids = [city.id for city in cities]
    if len(set(ids)) != len(ids):
        duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
        raise DatasetFormatError("Duplicate city ids", {'duplicates': duplicates})

    if sorted(ids) != list(range(1, len(ids) + 1)):
        raise DatasetFormatError(
            "City ids must be contiguous starting at 1",
            {'min_id': min(ids), 'max_id': max(ids), 'count': len(ids)}
        )

    return cities
