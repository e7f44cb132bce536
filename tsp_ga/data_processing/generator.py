"""
Mock city generator for TSP problems.
Creates random or regular-polygon city layouts.
"""

import math
from typing import Dict, List, Optional

import numpy as np

from config import TSP_CONFIG
from tsp_ga.models.city import City


class CityGenerator:
    """Generates synthetic city sets."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize generator with configuration.

        Args:
            config: Configuration dictionary, uses default if None
        """
        self.config = config or TSP_CONFIG.copy()
        self.rng = np.random.default_rng(self.config.get('seed'))

    def generate_random(self, n_cities: Optional[int] = None) -> List[City]:
        """Uniformly scattered cities inside ``area_bounds``."""
        n_cities = n_cities or self.config['n_cities']
        low, high = self.config['area_bounds']
        coords = self.rng.uniform(low, high, size=(n_cities, 2))
        return [City(i + 1, float(x), float(y)) for i, (x, y) in enumerate(coords)]

    def generate_polygon(self, n_cities: Optional[int] = None,
                         radius: Optional[float] = None) -> List[City]:
        """
        Cities on the vertices of a regular polygon.

        The optimal tour visits the vertices in order; its length is
        ``n * 2 * r * sin(pi / n)``.
        """
        n_cities = n_cities or self.config['n_cities']
        radius = radius or self.config['polygon_radius']
        cities = []
        for i in range(n_cities):
            angle = 2 * math.pi * i / n_cities
            cities.append(City(i + 1, radius * math.cos(angle), radius * math.sin(angle)))
        return cities

    @staticmethod
    def polygon_tour_length(n_cities: int, radius: float) -> float:
        """Perimeter of the regular polygon, i.e. the optimal tour length."""
        return n_cities * 2 * radius * math.sin(math.pi / n_cities)
