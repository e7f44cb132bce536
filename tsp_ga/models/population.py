"""
Population of candidate tours.
Initialization, batch evaluation, selection, recombination and mutation.
"""

import logging
import random
from typing import Dict, List, Optional, Tuple

import numpy as np

from tsp_ga.algorithms.fitness import FitnessEvaluator
from tsp_ga.algorithms.operators import CrossoverOperator, MutationOperator, SelectionOperator
from tsp_ga.algorithms.pairing import CrossoverStrategy, make_pairs
from tsp_ga.core.exceptions import InsufficientPopulationError
from tsp_ga.core.pipeline_profiler import pipeline_profiler
from tsp_ga.models.chromosome import Chromosome
from tsp_ga.models.evolution_state import EvolutionState
from tsp_ga.models.ga_config import GAConfig

logger = logging.getLogger(__name__)


class Population:
    """An ordered collection of chromosomes; order matters only after sorting."""

    def __init__(self, chromosomes: Optional[List[Chromosome]] = None):
        """
        Initialize population.

        Args:
            chromosomes: List of chromosomes (empty if None)
        """
        self.chromosomes: List[Chromosome] = chromosomes or []

    def add_chromosome(self, chromosome: Chromosome):
        self.chromosomes.append(chromosome)

    def get_chromosome(self, index: int) -> Chromosome:
        return self.chromosomes[index]

    def get_chromosomes(self) -> List[Chromosome]:
        return self.chromosomes

    def get_size(self) -> int:
        return len(self.chromosomes)

    def is_empty(self) -> bool:
        return len(self.chromosomes) == 0

    def clear(self):
        self.chromosomes.clear()

    def calculate_fitness_scores(self, evaluator: FitnessEvaluator, stale_only: bool = False):
        """
        Evaluate every chromosome.

        Args:
            evaluator: Fitness evaluator bound to the distance oracle
            stale_only: Skip chromosomes whose cached score is current
        """
        if stale_only:
            evaluator.evaluate_all(c for c in self.chromosomes if not c.has_fitness())
        else:
            evaluator.evaluate_all(self.chromosomes)

    def generate_random_initial_population(self, config: GAConfig,
                                           evaluator: FitnessEvaluator,
                                           rng: random.Random):
        """
        Fill the population with shuffled tours pinned at the start city.

        Every tour is validated before it is evaluated.

        Raises:
            InvalidChromosomeError: If a generated tour is not a permutation
        """
        self.clear()

        start_id = config.start_point_id
        base = Chromosome()
        base.add_gene(start_id)
        # City ids start from 1
        for gene in range(1, config.chromosome_size + 1):
            if gene != start_id:
                base.add_gene(gene)

        expected = range(1, config.chromosome_size + 1)
        for _ in range(config.initial_population_size):
            base.shuffle_genes(rng, pinned_start=True)
            chromosome = base.copy()
            chromosome.validate(expected)
            self.add_chromosome(chromosome)

        self.calculate_fitness_scores(evaluator)
        logger.debug(f"Initial population of {self.get_size()} tours over "
                     f"{config.chromosome_size} cities, start city {start_id}")

    def select_best_chromosomes(self, state: EvolutionState, config: GAConfig,
                                rng: random.Random) -> Optional[Chromosome]:
        """
        Keep the best fraction, then a random share of the remainder.

        Updates the best-ever tour on strict improvement and decays the
        selection schedule on every call.

        Returns:
            The best chromosome of this generation (None if empty)
        """
        with pipeline_profiler.profile("ga.selection"):
            best, rest = SelectionOperator.truncate(self.chromosomes, state.best_chromosomes_pct)
            generation_best = best[0] if best else (rest[0] if rest else None)
            survivors = SelectionOperator.random_cull(rest, state.rest_chromosomes_pct, rng)
            self.chromosomes = best + survivors

            if generation_best is not None and state.update_best(generation_best):
                logger.debug(f"New best tour: {generation_best.fitness:.4f}")

            state.decay_selection(config)

        return generation_best

    def generate_sub_population(self, strategy: CrossoverStrategy, config: GAConfig,
                                evaluator: FitnessEvaluator,
                                rng: random.Random) -> 'Population':
        """
        Build the next generation.

        The elite fraction is copied forward unmodified. Each parent pair is
        recombined twice with independent draws; of each offspring pair only
        the fitter child survives.

        Raises:
            InsufficientPopulationError: With fewer than two parents
        """
        size = self.get_size()
        if size < 2:
            raise InsufficientPopulationError(size=size, required=2)

        new_population = Population()
        elite_count = int(size * config.elite_chromosomes_pct)
        for chromosome in self.chromosomes[:elite_count]:
            new_population.add_chromosome(chromosome.copy())

        crossover = CrossoverOperator.get(config.crossover_operator)
        offspring_pairs: List[Tuple[Chromosome, Chromosome]] = []

        with pipeline_profiler.profile("ga.crossover"):
            for i, j in make_pairs(strategy, self.chromosomes, rng):
                parent1, parent2 = self.chromosomes[i], self.chromosomes[j]
                offspring_pairs.append(crossover(parent1, parent2, rng))
                offspring_pairs.append(crossover(parent1, parent2, rng))

        evaluator.evaluate_all(child for pair in offspring_pairs for child in pair)

        expected = range(1, config.chromosome_size + 1)
        for child1, child2 in offspring_pairs:
            if config.validate_offspring:
                child1.validate(expected)
                child2.validate(expected)
            better = child1 if child1.fitness <= child2.fitness else child2
            new_population.add_chromosome(better)

        return new_population

    def shuffle(self, rng: random.Random):
        rng.shuffle(self.chromosomes)

    def mutate(self, state: EvolutionState, config: GAConfig, rng: random.Random):
        """
        Invert a random segment of every chromosome, then grow the mutation rate.

        The current rate bounds the inverted segment length, so repeated forced
        mutations become progressively more disruptive.
        """
        with pipeline_profiler.profile("ga.mutation"):
            logger.info(f"Mutation rate: {state.mutation_rate:.4f}")
            for chromosome in self.chromosomes:
                MutationOperator.inversion_mutation(
                    chromosome, rng, mutation_rate=state.mutation_rate, pinned_start=True
                )
            state.grow_mutation_rate(config)
            state.mutation_count += 1

    def sort_by_fitness(self):
        """Sort ascending (best tour first)."""
        self.chromosomes.sort(key=lambda c: c.fitness)

    def get_best_chromosome(self) -> Optional[Chromosome]:
        if not self.chromosomes:
            return None
        return min(self.chromosomes, key=lambda c: c.fitness)

    def get_fitness_values(self) -> List[float]:
        return [c.fitness for c in self.chromosomes]

    def calculate_diversity(self) -> float:
        """Share of distinct tours in the population (0-1)."""
        if not self.chromosomes:
            return 0.0
        distinct = {tuple(c.genes) for c in self.chromosomes}
        return len(distinct) / len(self.chromosomes)

    def get_statistics(self) -> Dict:
        """Get population statistics."""
        if not self.chromosomes:
            return {
                'size': 0, 'best_fitness': None, 'worst_fitness': None,
                'avg_fitness': None, 'fitness_std': 0.0, 'diversity': 0.0,
            }
        values = np.array(self.get_fitness_values(), dtype=float)
        return {
            'size': self.get_size(),
            'best_fitness': float(values.min()),
            'worst_fitness': float(values.max()),
            'avg_fitness': float(values.mean()),
            'fitness_std': float(values.std()),
            'diversity': self.calculate_diversity(),
        }
