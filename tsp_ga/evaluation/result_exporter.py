"""
Result export module for TSP-GA system.
Writes the best tour and per-generation data for later analysis.
"""

import csv
import json
import logging
import os
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from tsp_ga.models.city import City

logger = logging.getLogger(__name__)


class ResultExporter:
    """Exports TSP-GA results as JSON and CSV."""

    EVOLUTION_FIELDS = [
        'generation', 'selected_size', 'population_size', 'generation_best_fitness',
        'best_fitness', 'avg_fitness', 'std_fitness', 'diversity',
        'stagnation_counter', 'mutated', 'mutation_rate', 'best_chromosomes_pct',
        'execution_time',
    ]

    def __init__(self, output_dir: str = "results"):
        """
        Initialize result exporter.

        Args:
            output_dir: Output directory for results
        """
        self.output_dir = output_dir
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        os.makedirs(self.output_dir, exist_ok=True)

    def export_evolution_data(self, evolution_data: List[Dict],
                              filename: Optional[str] = None) -> str:
        """
        Export per-generation data to CSV.

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = f"evolution_data_{self.timestamp}.csv"
        filepath = os.path.join(self.output_dir, filename)

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=self.EVOLUTION_FIELDS, extrasaction='ignore')
            writer.writeheader()
            writer.writerows(evolution_data)

        logger.info(f"Evolution data exported to: {filepath}")
        return filepath

    def export_best_tour(self, tour: Sequence[int], fitness: float,
                         cities: Optional[Sequence[City]] = None,
                         statistics: Optional[Dict] = None,
                         filename: Optional[str] = None) -> str:
        """
        Export the best tour to JSON, with coordinates when cities are given.

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = f"best_tour_{self.timestamp}.json"
        filepath = os.path.join(self.output_dir, filename)

        data = {
            'tour': [int(gene) for gene in tour],
            'length': float(fitness),
            'n_cities': len(tour),
        }
        if cities is not None:
            by_id = {city.id: city for city in cities}
            data['coordinates'] = [[by_id[gene].x, by_id[gene].y] for gene in tour]
        if statistics:
            data['statistics'] = statistics

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

        logger.info(f"Best tour exported to: {filepath}")
        return filepath
