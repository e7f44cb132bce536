"""
Mutable run state owned by the evolution driver.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from tsp_ga.models.chromosome import Chromosome
from tsp_ga.models.ga_config import GAConfig


@dataclass
class EvolutionState:
    """Best-ever tour plus the adaptive schedule of one run."""
    best_chromosomes_pct: float
    rest_chromosomes_pct: float
    mutation_rate: float
    best_chromosome: Optional[Chromosome] = None
    stagnation_counter: int = 0
    generation: int = 0
    last_best_fitness: Optional[float] = None
    mutation_count: int = 0

    @classmethod
    def from_config(cls, config: GAConfig) -> 'EvolutionState':
        return cls(
            best_chromosomes_pct=config.best_chromosomes_pct,
            rest_chromosomes_pct=config.rest_chromosomes_pct,
            mutation_rate=config.mutation_rate,
        )

    @property
    def best_fitness(self) -> Optional[float]:
        if self.best_chromosome is None:
            return None
        return self.best_chromosome.fitness

    def update_best(self, candidate: Chromosome) -> bool:
        """
        Store a copy of ``candidate`` if it strictly improves the best-ever tour.

        Returns:
            True if the best-ever tour changed
        """
        if self.best_chromosome is None or candidate.fitness < self.best_chromosome.fitness:
            self.best_chromosome = candidate.copy()
            return True
        return False

    def decay_selection(self, config: GAConfig):
        """Tighten the deterministic share and widen the random share of survivors."""
        self.best_chromosomes_pct = max(
            config.min_best_chromosomes_pct,
            self.best_chromosomes_pct * (1 - config.best_chromosomes_decrease_rate)
        )
        self.rest_chromosomes_pct = min(
            1.0,
            self.rest_chromosomes_pct * (1 + config.rest_chromosomes_increase_rate)
        )

    def grow_mutation_rate(self, config: GAConfig):
        self.mutation_rate = self.mutation_rate * (1 + config.mutation_increase_rate)

    def to_dict(self) -> Dict:
        return {
            'generation': self.generation,
            'best_fitness': self.best_fitness,
            'best_chromosomes_pct': self.best_chromosomes_pct,
            'rest_chromosomes_pct': self.rest_chromosomes_pct,
            'mutation_rate': self.mutation_rate,
            'stagnation_counter': self.stagnation_counter,
            'mutation_count': self.mutation_count,
        }
