"""
Fitness evaluation for TSP tours.
Fitness is the closed tour length; lower is better.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List

from tsp_ga.core.pipeline_profiler import pipeline_profiler
from tsp_ga.models.chromosome import Chromosome

logger = logging.getLogger(__name__)


class FitnessEvaluator:
    """Evaluates tour lengths against a distance oracle."""

    def __init__(self, distance_oracle, max_workers: int = 1):
        """
        Initialize fitness evaluator.

        Args:
            distance_oracle: Object exposing ``get_distance(id_a, id_b)``
            max_workers: Worker threads for batch evaluation (1 = inline)
        """
        self.distance_oracle = distance_oracle
        self.max_workers = max(1, int(max_workers))
        self.evaluations = 0

    def evaluate_fitness(self, chromosome: Chromosome) -> float:
        """Compute and cache the fitness of one chromosome."""
        self.evaluations += 1
        return chromosome.calculate_fitness_score(self.distance_oracle)

    def evaluate_all(self, chromosomes: Iterable[Chromosome]) -> List[float]:
        """
        Evaluate a batch of chromosomes.

        All results are available when this returns, so a following selection
        step always reads fully evaluated chromosomes.
        """
        batch = list(chromosomes)
        with pipeline_profiler.profile("ga.fitness_evaluation"):
            if self.max_workers == 1 or len(batch) < 2 * self.max_workers:
                return [self.evaluate_fitness(c) for c in batch]

            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                scores = list(executor.map(
                    lambda c: c.calculate_fitness_score(self.distance_oracle), batch
                ))
            self.evaluations += len(batch)
            logger.debug(f"Evaluated {len(batch)} chromosomes on {self.max_workers} workers")
            return scores
