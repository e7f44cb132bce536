"""
Distance oracle for TSP problems.
Builds a symmetric Euclidean distance matrix once and answers lookups by city id.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np

from tsp_ga.core.exceptions import DistanceLookupError
from tsp_ga.core.pipeline_profiler import pipeline_profiler
from tsp_ga.models.city import City

logger = logging.getLogger(__name__)


class DistanceMatrix:
    """Precomputed pairwise distances with O(1) lookup by city id."""

    def __init__(self, cities: Sequence[City]):
        """
        Build the matrix.

        Args:
            cities: Loaded cities; their ids become the lookup keys
        """
        self.city_ids: List[int] = [city.id for city in cities]
        self.id_to_index = {city_id: index for index, city_id in enumerate(self.city_ids)}
        coordinates = [(city.x, city.y) for city in cities]

        with pipeline_profiler.profile("distance.build"):
            self.matrix = self.calculate_euclidean_matrix(coordinates)

        logger.debug(f"Distance matrix built for {len(self.city_ids)} cities")

    @staticmethod
    def calculate_euclidean_matrix(coordinates: List[Tuple[float, float]]) -> np.ndarray:
        """Vectorized straight-line distances between all coordinate pairs."""
        if not coordinates:
            return np.zeros((0, 0))
        coords = np.asarray(coordinates, dtype=float)
        diff = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
        return np.sqrt(np.sum(diff ** 2, axis=-1))

    def get_distance(self, from_id: int, to_id: int) -> float:
        """
        Distance between two cities.

        Raises:
            DistanceLookupError: If either id is unknown
        """
        try:
            return float(self.matrix[self.id_to_index[from_id], self.id_to_index[to_id]])
        except KeyError:
            raise DistanceLookupError(from_id, to_id, reason="unknown city id") from None

    def get_size(self) -> int:
        return len(self.city_ids)

    def __contains__(self, city_id: int) -> bool:
        return city_id in self.id_to_index
