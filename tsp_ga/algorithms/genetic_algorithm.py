"""
Main Genetic Algorithm engine for TSP.
Runs the generational loop with decaying selection pressure and stagnation-triggered mutation.
"""

import json
import logging
import random
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tsp_ga.algorithms.fitness import FitnessEvaluator
from tsp_ga.core.pipeline_profiler import pipeline_profiler
from tsp_ga.data_processing.distance import DistanceMatrix
from tsp_ga.models.chromosome import Chromosome
from tsp_ga.models.city import City
from tsp_ga.models.evolution_state import EvolutionState
from tsp_ga.models.ga_config import GAConfig
from tsp_ga.models.population import Population

logger = logging.getLogger(__name__)


class TerminationReason(Enum):
    """Why a run stopped."""
    CONVERGED = 'converged'
    MAX_GENERATIONS_REACHED = 'max_generations_reached'
    CANCELLED = 'cancelled'


@dataclass
class GAResult:
    """Outcome of one evolution run."""
    best_chromosome: Optional[Chromosome]
    termination_reason: TerminationReason
    generations: int
    execution_time: float
    evolution_data: List[Dict] = field(default_factory=list)

    @property
    def best_tour(self) -> List[int]:
        return list(self.best_chromosome.genes) if self.best_chromosome else []

    @property
    def best_fitness(self) -> Optional[float]:
        return self.best_chromosome.fitness if self.best_chromosome else None

    def to_dict(self) -> Dict:
        return {
            'best_tour': self.best_tour,
            'best_fitness': self.best_fitness,
            'termination_reason': self.termination_reason.value,
            'generations': self.generations,
            'execution_time': self.execution_time,
        }


class GeneticAlgorithm:
    """Main Genetic Algorithm engine for TSP optimization."""

    def __init__(self, distance_oracle, config: GAConfig,
                 rng: Optional[random.Random] = None):
        """
        Initialize GA engine.

        Args:
            distance_oracle: Object exposing ``get_distance(id_a, id_b)``
            config: Validated GA configuration
            rng: Random source; seeded from ``config.seed`` when omitted
        """
        self.distance_oracle = distance_oracle
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.fitness_evaluator = FitnessEvaluator(distance_oracle, max_workers=config.max_workers)

        # GA state
        self.population = Population()
        self.state = EvolutionState.from_config(config)
        self.evolution_data: List[Dict] = []
        self.termination_reason: Optional[TerminationReason] = None
        self.execution_time = 0.0
        self.result: Optional[GAResult] = None

    @property
    def expected_genes(self) -> range:
        return range(1, self.config.chromosome_size + 1)

    def initialize_population(self) -> Population:
        """Create and evaluate the random initial population."""
        self.population = Population()
        self.population.generate_random_initial_population(
            self.config, self.fitness_evaluator, self.rng
        )
        self.state.update_best(self.population.get_best_chromosome())
        logger.info(f"Initial population: {self.population.get_size()} tours, "
                    f"best length {self.state.best_fitness:.4f}")
        return self.population

    def step(self, max_generations: Optional[int] = None) -> Tuple[Optional[TerminationReason], Optional[Dict]]:
        """
        Run one generation transition.

        Returns:
            Tuple of (termination reason or None, generation data or None).
            Generation data is None when the population converged before
            recombination.
        """
        max_generations = max_generations or self.config.max_generations
        config = self.config
        state = self.state
        generation_start = time.perf_counter()

        with pipeline_profiler.profile("ga.generation"):
            generation_best = self.population.select_best_chromosomes(state, config, self.rng)
            size = self.population.get_size()

            if size < config.min_population_size:
                logger.info(f"Population shrank to {size} chromosomes; not enough to crossover")
                return TerminationReason.CONVERGED, None

            best_fitness = generation_best.fitness
            logger.debug(f"Best solution for generation {state.generation}: {best_fitness:.4f} "
                         f"with population size: {size}")

            if state.last_best_fitness is not None and best_fitness == state.last_best_fitness:
                state.stagnation_counter += 1
            else:
                state.stagnation_counter = 0
            state.last_best_fitness = best_fitness

            mutated = False
            if state.stagnation_counter >= config.mutation_patience:
                logger.info(f"Search is stuck in a local minimum at {best_fitness:.4f} "
                            f"for {state.stagnation_counter} generations; forcing mutation")
                self.population.mutate(state, config, self.rng)
                self.population.calculate_fitness_scores(self.fitness_evaluator)
                state.stagnation_counter = 0
                mutated = True

            self.population = self.population.generate_sub_population(
                config.crossover_strategy, config, self.fitness_evaluator, self.rng
            )
            self.population.calculate_fitness_scores(self.fitness_evaluator, stale_only=True)

        state.generation += 1
        stats = self.population.get_statistics()
        gen_data = {
            'generation': state.generation,
            'selected_size': size,
            'population_size': stats['size'],
            'generation_best_fitness': best_fitness,
            'best_fitness': state.best_fitness,
            'avg_fitness': stats['avg_fitness'],
            'std_fitness': stats['fitness_std'],
            'diversity': stats['diversity'],
            'stagnation_counter': state.stagnation_counter,
            'mutated': mutated,
            'mutation_rate': state.mutation_rate,
            'best_chromosomes_pct': state.best_chromosomes_pct,
            'execution_time': time.perf_counter() - generation_start,
        }
        self.evolution_data.append(gen_data)

        if state.generation >= max_generations:
            logger.info("Number of maximum generations has been reached")
            return TerminationReason.MAX_GENERATIONS_REACHED, gen_data

        return None, gen_data

    def evolve(self, max_generations: Optional[int] = None,
               cancel_event: Optional[threading.Event] = None,
               progress_callback: Optional[Callable[[Dict], None]] = None) -> GAResult:
        """
        Run generations until the population converges, the generation limit
        is reached, ``cancel_event`` is set, or the run is interrupted (Ctrl-C).

        Args:
            max_generations: Overrides ``config.max_generations``
            cancel_event: Checked between generations
            progress_callback: Called with each generation's data

        Returns:
            GAResult holding the best-ever tour

        Raises:
            InvalidChromosomeError: If the best-ever tour is not a valid permutation
        """
        max_generations = max_generations or self.config.max_generations
        start_time = time.time()

        if self.population.is_empty():
            self.initialize_population()

        reason = None
        try:
            while reason is None:
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(f"Evolution cancelled after {self.state.generation} generations")
                    reason = TerminationReason.CANCELLED
                    break

                reason, gen_data = self.step(max_generations)
                if gen_data is not None and progress_callback is not None:
                    progress_callback(gen_data)
        except KeyboardInterrupt:
            # Best-ever tour is a separate copy and stays valid mid-generation
            logger.info(f"Evolution interrupted after {self.state.generation} generations")
            reason = TerminationReason.CANCELLED

        self.execution_time = time.time() - start_time
        self.termination_reason = reason

        best = self.state.best_chromosome
        best.validate(self.expected_genes)

        logger.info(f"Evolution finished ({reason.value}) after {self.state.generation} generations "
                    f"in {self.execution_time:.2f}s. Best tour length: {best.fitness:.4f}")

        self.result = GAResult(
            best_chromosome=best.copy(),
            termination_reason=reason,
            generations=self.state.generation,
            execution_time=self.execution_time,
            evolution_data=list(self.evolution_data),
        )
        return self.result

    def solve(self) -> GAResult:
        """Run a full evolution with the configured limits."""
        return self.evolve()

    def get_statistics(self) -> Dict:
        """Get GA execution statistics."""
        return {
            'generations': self.state.generation,
            'total_evaluations': self.fitness_evaluator.evaluations,
            'execution_time': self.execution_time,
            'termination_reason': self.termination_reason.value if self.termination_reason else None,
            'best_fitness': self.state.best_fitness,
            'mutation_count': self.state.mutation_count,
            'mutation_rate': self.state.mutation_rate,
            'best_chromosomes_pct': self.state.best_chromosomes_pct,
            'population_size': self.population.get_size(),
        }

    def get_convergence_data(self) -> Dict:
        """Get convergence data for visualization."""
        return {
            'generations': [d['generation'] for d in self.evolution_data],
            'best_fitness': [d['best_fitness'] for d in self.evolution_data],
            'generation_best_fitness': [d['generation_best_fitness'] for d in self.evolution_data],
            'avg_fitness': [d['avg_fitness'] for d in self.evolution_data],
            'population_size': [d['population_size'] for d in self.evolution_data],
            'mutations': [d['generation'] for d in self.evolution_data if d['mutated']],
        }

    def save_best_solution(self, filepath: str):
        """Save best tour and run statistics to a JSON file."""
        if self.state.best_chromosome is None:
            raise ValueError("No solution to save")

        solution_data = {
            'tour': list(self.state.best_chromosome.genes),
            'fitness': self.state.best_fitness,
            'config': self.config.to_dict(),
            'statistics': self.get_statistics(),
        }

        with open(filepath, 'w') as f:
            json.dump(solution_data, f, indent=2)


def run_genetic_algorithm(cities: Sequence[City],
                          config: Optional[Dict] = None,
                          preset: Optional[str] = None,
                          cancel_event: Optional[threading.Event] = None) -> Tuple[GAResult, Dict]:
    """
    Convenience function to run GA.

    Args:
        cities: Cities with ids ``1..n``
        config: GA parameter overrides
        preset: Optional GA preset name
        cancel_event: Optional cancellation flag checked between generations

    Returns:
        Tuple of (result, statistics)
    """
    ga_config = GAConfig.from_dict(config, n_cities=len(cities), preset=preset)
    ga = GeneticAlgorithm(DistanceMatrix(cities), ga_config)
    result = ga.evolve(cancel_event=cancel_event)
    return result, ga.get_statistics()
