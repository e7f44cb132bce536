"""
Unit tests for TSP-GA System core components.
Tests tour models, genetic operators, population management and the evolution driver.
"""

import math
import os
import random
import sys
import threading
import unittest

# Make the repository root importable when run from a checkout
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tsp_ga.algorithms.fitness import FitnessEvaluator
from tsp_ga.algorithms.genetic_algorithm import GeneticAlgorithm, TerminationReason, run_genetic_algorithm
from tsp_ga.algorithms.operators import CrossoverOperator, MutationOperator, SelectionOperator
from tsp_ga.algorithms.pairing import CrossoverStrategy, make_pairs
from tsp_ga.core.exceptions import (
    DatasetFormatError, InsufficientPopulationError, InvalidChromosomeError,
    InvalidConfigurationError, StaleFitnessError
)
from tsp_ga.data_processing.distance import DistanceMatrix
from tsp_ga.data_processing.generator import CityGenerator
from tsp_ga.models.chromosome import Chromosome
from tsp_ga.models.city import City, create_cities
from tsp_ga.models.evolution_state import EvolutionState
from tsp_ga.models.ga_config import GAConfig
from tsp_ga.models.population import Population


class ConstantDistance:
    """Oracle where every tour has the same length."""

    def get_distance(self, from_id, to_id):
        return 1.0


def random_permutation(n, rng, pinned=True):
    genes = list(range(1, n + 1))
    if pinned:
        tail = genes[1:]
        rng.shuffle(tail)
        return [1] + tail
    rng.shuffle(genes)
    return genes


def square_cities():
    return create_cities([(1, 0, 0), (2, 0, 1), (3, 1, 1), (4, 1, 0)])


class TestCityModel(unittest.TestCase):
    """Test city creation and id checks."""

    def test_city_creation(self):
        city = City(3, 1.5, -2.0)
        self.assertEqual(city.to_tuple(), (3, 1.5, -2.0))

    def test_city_rejects_non_positive_id(self):
        with self.assertRaises(ValueError):
            City(0, 0, 0)

    def test_create_cities_rejects_duplicates(self):
        with self.assertRaises(DatasetFormatError):
            create_cities([(1, 0, 0), (1, 1, 1)])

    def test_create_cities_rejects_gaps(self):
        with self.assertRaises(DatasetFormatError):
            create_cities([(1, 0, 0), (3, 1, 1)])


class TestChromosome(unittest.TestCase):
    """Test tour representation, fitness and validity."""

    def setUp(self):
        self.oracle = DistanceMatrix(square_cities())

    def test_add_genes_in_order(self):
        chromosome = Chromosome()
        for gene in (1, 3, 2):
            chromosome.add_gene(gene)
        self.assertEqual(chromosome.genes, [1, 3, 2])
        self.assertEqual(chromosome.get_size(), 3)

    def test_fitness_includes_closing_edge(self):
        chromosome = Chromosome([1, 2, 3, 4])
        self.assertAlmostEqual(chromosome.calculate_fitness_score(self.oracle), 4.0)

        crossed = Chromosome([1, 3, 2, 4])
        self.assertAlmostEqual(crossed.calculate_fitness_score(self.oracle), 2 + 2 * math.sqrt(2))

    def test_fitness_recalculation_is_idempotent(self):
        chromosome = Chromosome([1, 3, 4, 2])
        first = chromosome.calculate_fitness_score(self.oracle)
        second = chromosome.calculate_fitness_score(self.oracle)
        self.assertEqual(first, second)

    def test_stale_fitness_raises(self):
        """A stale score is not a permutation violation."""
        chromosome = Chromosome([1, 2, 3, 4])
        with self.assertRaises(StaleFitnessError):
            _ = chromosome.fitness
        self.assertTrue(chromosome.is_valid())
        chromosome.calculate_fitness_score(self.oracle)
        chromosome.invalidate_fitness()
        self.assertFalse(chromosome.has_fitness())

    def test_is_valid(self):
        self.assertTrue(Chromosome([2, 1, 4, 3]).is_valid())
        self.assertFalse(Chromosome([1, 2, 2, 4]).is_valid())
        self.assertFalse(Chromosome([1, 2, 3]).is_valid(range(1, 5)))
        self.assertFalse(Chromosome([1, 2, 3, 5]).is_valid())
        self.assertTrue(Chromosome([10, 30, 20]).is_valid([10, 20, 30]))

    def test_validate_raises(self):
        with self.assertRaises(InvalidChromosomeError):
            Chromosome([1, 1, 3]).validate()

    def test_shuffle_keeps_start_and_validity(self):
        rng = random.Random(3)
        chromosome = Chromosome(list(range(1, 21)))
        for _ in range(20):
            chromosome.shuffle_genes(rng, pinned_start=True)
            self.assertEqual(chromosome.genes[0], 1)
            self.assertTrue(chromosome.is_valid())

    def test_copy_is_independent(self):
        chromosome = Chromosome([1, 2, 3], fitness_score=3.0)
        copied = chromosome.copy()
        copied.genes.reverse()
        self.assertEqual(chromosome.genes, [1, 2, 3])
        self.assertEqual(copied.fitness_score, 3.0)


class TestCrossoverOperators(unittest.TestCase):
    """Test permutation-preserving crossover."""

    def setUp(self):
        self.a = [1, 2, 3, 4, 5, 6, 7, 8]
        self.b = [3, 7, 5, 1, 6, 8, 2, 4]

    def test_pmx_known_example(self):
        child = CrossoverOperator.pmx_child(self.a, self.b, 3, 5)
        self.assertEqual(child, [3, 7, 8, 4, 5, 6, 2, 1])

    def test_ox_known_example(self):
        child = CrossoverOperator.ox_child(self.a, self.b, 3, 5)
        self.assertEqual(child, [3, 7, 1, 4, 5, 6, 8, 2])

    def test_cx_known_example(self):
        child1, child2 = CrossoverOperator.cx_children(self.a, [8, 5, 2, 1, 3, 6, 4, 7])
        self.assertEqual(child1, [1, 5, 2, 4, 3, 6, 7, 8])
        self.assertEqual(child2, [8, 2, 3, 1, 5, 6, 4, 7])

    def test_cx_with_shared_start_recombines(self):
        """The cycle starts at the first differing position when gene 0 is shared."""
        child1, child2 = CrossoverOperator.cx_children([1, 2, 3, 4, 5], [1, 3, 2, 5, 4])
        self.assertEqual(child1, [1, 2, 3, 5, 4])
        self.assertEqual(child2, [1, 3, 2, 4, 5])

    def test_cx_pinned_parents_are_not_swapped_clones(self):
        """CX on differing pinned parents never returns the parents swapped."""
        rng = random.Random(17)
        for _ in range(200):
            p1 = Chromosome(random_permutation(10, rng))
            p2 = Chromosome(random_permutation(10, rng))
            if p1.genes == p2.genes:
                continue
            child1, child2 = CrossoverOperator.cycle_crossover(p1, p2)
            self.assertNotEqual(child1.genes, p2.genes)
            self.assertNotEqual(child2.genes, p1.genes)
            self.assertEqual(child1.genes[0], 1)
            self.assertTrue(child1.is_valid() and child2.is_valid())

    def test_cx_identical_parents(self):
        child1, child2 = CrossoverOperator.cx_children([1, 3, 2], [1, 3, 2])
        self.assertEqual(child1, [1, 3, 2])
        self.assertEqual(child2, [1, 3, 2])

    def test_helpers_closed_over_all_cut_points(self):
        """Every cut choice yields valid permutations, including the full span."""
        rng = random.Random(11)
        n = 9
        for _ in range(20):
            a = random_permutation(n, rng, pinned=False)
            b = random_permutation(n, rng, pinned=False)
            for start in range(n - 1):
                for end in range(start + 1, n):
                    for helper in (CrossoverOperator.pmx_child, CrossoverOperator.ox_child):
                        self.assertTrue(Chromosome(helper(a, b, start, end)).is_valid())
                        self.assertTrue(Chromosome(helper(b, a, start, end)).is_valid())

    def test_full_span_cut_copies_donor(self):
        self.assertEqual(CrossoverOperator.pmx_child(self.a, self.b, 0, 7), self.a)
        self.assertEqual(CrossoverOperator.ox_child(self.a, self.b, 0, 7), self.a)

    def test_random_operators_keep_validity_and_start(self):
        rng = random.Random(5)
        for name in ('pmx', 'ox', 'cx'):
            operator = CrossoverOperator.get(name)
            for _ in range(200):
                p1 = Chromosome(random_permutation(12, rng))
                p2 = Chromosome(random_permutation(12, rng))
                child1, child2 = operator(p1, p2, rng)
                for child in (child1, child2):
                    self.assertTrue(child.is_valid(), f"{name}: {child.genes}")
                    self.assertEqual(child.genes[0], 1)

    def test_operators_leave_parents_untouched(self):
        rng = random.Random(2)
        p1 = Chromosome(list(self.a))
        p2 = Chromosome(list(self.b))
        for name in ('pmx', 'ox', 'cx'):
            CrossoverOperator.get(name)(p1, p2, rng)
        self.assertEqual(p1.genes, self.a)
        self.assertEqual(p2.genes, self.b)

    def test_deterministic_given_seed(self):
        p1 = Chromosome(list(self.a))
        p2 = Chromosome(list(self.b))
        first = CrossoverOperator.partially_mapped_crossover(p1, p2, random.Random(42))
        second = CrossoverOperator.partially_mapped_crossover(p1, p2, random.Random(42))
        self.assertEqual([c.genes for c in first], [c.genes for c in second])

    def test_mismatched_parents_rejected(self):
        with self.assertRaises(ValueError):
            CrossoverOperator.order_crossover(Chromosome([1, 2, 3]), Chromosome([1, 2]),
                                              random.Random(0))

    def test_unknown_operator(self):
        with self.assertRaises(ValueError):
            CrossoverOperator.get('erx')


class TestMutationOperator(unittest.TestCase):
    """Test inversion mutation."""

    def test_inversion_keeps_validity_and_start(self):
        rng = random.Random(9)
        chromosome = Chromosome(list(range(1, 16)), fitness_score=1.0)
        for _ in range(100):
            i, j = MutationOperator.inversion_mutation(chromosome, rng)
            self.assertTrue(1 <= i < j <= 14)
            self.assertTrue(chromosome.is_valid())
            self.assertEqual(chromosome.genes[0], 1)
        self.assertFalse(chromosome.has_fitness())

    def test_inversion_is_an_involution(self):
        original = [1, 5, 2, 8, 3, 7, 4, 6]
        chromosome = Chromosome(list(original))
        MutationOperator.invert_segment(chromosome, 2, 6)
        self.assertEqual(chromosome.genes, [1, 5, 4, 7, 3, 8, 2, 6])
        MutationOperator.invert_segment(chromosome, 2, 6)
        self.assertEqual(chromosome.genes, original)

    def test_mutation_rate_bounds_segment_length(self):
        rng = random.Random(1)
        chromosome = Chromosome(list(range(1, 11)))
        for _ in range(50):
            i, j = MutationOperator.inversion_mutation(chromosome, rng, mutation_rate=0.1)
            self.assertEqual(j - i, 1)

        spans = set()
        for _ in range(300):
            i, j = MutationOperator.inversion_mutation(chromosome, rng, mutation_rate=1.0)
            spans.add(j - i + 1)
        self.assertGreater(max(spans), 2)
        self.assertLessEqual(max(spans), 9)

    def test_too_short_to_mutate(self):
        chromosome = Chromosome([1, 2])
        self.assertEqual(MutationOperator.inversion_mutation(chromosome, random.Random(0)), (-1, -1))
        self.assertEqual(chromosome.genes, [1, 2])

    def test_invalid_positions(self):
        with self.assertRaises(ValueError):
            MutationOperator.invert_segment(Chromosome([1, 2, 3]), 2, 1)


class TestSelectionOperator(unittest.TestCase):
    """Test truncation and random culling as separate steps."""

    def setUp(self):
        self.chromosomes = [Chromosome([1, 2, 3], fitness_score=float(f)) for f in range(10, 0, -1)]

    def test_truncate_sorts_and_splits(self):
        best, rest = SelectionOperator.truncate(self.chromosomes, 0.3)
        self.assertEqual([c.fitness for c in best], [1.0, 2.0, 3.0])
        self.assertEqual([c.fitness for c in rest], [4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0])

    def test_random_cull_keeps_fraction(self):
        _, rest = SelectionOperator.truncate(self.chromosomes, 0.3)
        survivors = SelectionOperator.random_cull(rest, 0.5, random.Random(0))
        self.assertEqual(len(survivors), 3)
        for survivor in survivors:
            self.assertIn(survivor, rest)


class TestPairing(unittest.TestCase):
    """Test parent pairing strategies."""

    def test_every_pair(self):
        pairs = make_pairs(CrossoverStrategy.EVERY_PAIR, list('abcd'), random.Random(0))
        self.assertEqual(len(pairs), 6)
        self.assertIn((0, 3), pairs)

    def test_sequential_pair(self):
        pairs = make_pairs(CrossoverStrategy.SEQUENTIAL_PAIR, list('abcd'), random.Random(0))
        self.assertEqual(pairs, [(0, 1), (1, 2), (2, 3)])

    def test_shuffled_sequential_pair_reorders_parents(self):
        parents = list(range(30))
        pairs = make_pairs('shuffled_sequential_pair', parents, random.Random(4))
        self.assertEqual(len(pairs), 29)
        self.assertEqual(sorted(parents), list(range(30)))
        self.assertNotEqual(parents, list(range(30)))


class TestGAConfig(unittest.TestCase):
    """Test configuration validation."""

    def test_defaults_fill_chromosome_size(self):
        config = GAConfig.from_dict(n_cities=12)
        self.assertEqual(config.chromosome_size, 12)
        self.assertEqual(config.crossover_strategy, CrossoverStrategy.SHUFFLED_SEQUENTIAL_PAIR)

    def test_preset_then_overrides(self):
        config = GAConfig.from_dict({'max_generations': 7}, n_cities=5, preset='fast')
        self.assertEqual(config.max_generations, 7)
        self.assertEqual(config.initial_population_size, 50)

    def test_invalid_values_rejected(self):
        bad_configs = [
            {'initial_population_size': 0},
            {'best_chromosomes_pct': 1.5},
            {'elite_chromosomes_pct': 0.6, 'best_chromosomes_pct': 0.6},
            {'start_point_id': 13},
            {'crossover_strategy': 'random_pair'},
            {'crossover_operator': 'erx'},
            {'max_generations': 0},
            {'mutation_patience': 0},
            {'unknown_parameter': 1},
        ]
        for overrides in bad_configs:
            with self.assertRaises(InvalidConfigurationError, msg=str(overrides)):
                GAConfig.from_dict(overrides, n_cities=12)

    def test_names_are_case_insensitive(self):
        config = GAConfig.from_dict({'crossover_strategy': ' EVERY_PAIR ',
                                     'crossover_operator': 'OX'}, n_cities=6)
        self.assertEqual(config.crossover_strategy, CrossoverStrategy.EVERY_PAIR)
        self.assertEqual(config.crossover_operator, 'ox')

    def test_unknown_preset(self):
        with self.assertRaises(InvalidConfigurationError):
            GAConfig.from_dict(n_cities=5, preset='turbo')

    def test_config_is_read_only(self):
        config = GAConfig.from_dict(n_cities=5)
        with self.assertRaises(Exception):
            config.max_generations = 3


class TestPopulation(unittest.TestCase):
    """Test population initialization, selection, recombination and mutation."""

    def setUp(self):
        self.cities = CityGenerator({'seed': 1, 'area_bounds': (0, 100), 'n_cities': 10}).generate_random()
        self.evaluator = FitnessEvaluator(DistanceMatrix(self.cities))
        self.config = GAConfig.from_dict({
            'initial_population_size': 40,
            'start_point_id': 4,
            'best_chromosomes_pct': 0.3,
            'rest_chromosomes_pct': 0.5,
        }, n_cities=10)
        self.rng = random.Random(123)
        self.population = Population()
        self.population.generate_random_initial_population(self.config, self.evaluator, self.rng)

    def test_initial_population(self):
        self.assertEqual(self.population.get_size(), 40)
        for chromosome in self.population.get_chromosomes():
            self.assertTrue(chromosome.is_valid())
            self.assertEqual(chromosome.genes[0], 4)
            self.assertTrue(chromosome.has_fitness())

    def test_select_best_keeps_best_and_thins_rest(self):
        state = EvolutionState.from_config(self.config)
        expected_best = min(self.population.get_fitness_values())

        generation_best = self.population.select_best_chromosomes(state, self.config, self.rng)

        # 12 best + half of the remaining 28
        self.assertEqual(self.population.get_size(), 12 + 14)
        self.assertEqual(generation_best.fitness, expected_best)
        self.assertEqual(state.best_fitness, expected_best)
        ranked = [c.fitness for c in self.population.get_chromosomes()[:12]]
        self.assertEqual(ranked, sorted(ranked))
        self.assertAlmostEqual(state.best_chromosomes_pct, 0.3 * (1 - 0.01))

    def test_best_ever_never_worsens(self):
        state = EvolutionState.from_config(self.config)
        self.population.select_best_chromosomes(state, self.config, self.rng)
        best_so_far = state.best_fitness
        stored = state.best_chromosome

        worse = Population([Chromosome(c.genes.copy(), fitness_score=c.fitness + 1000)
                            for c in self.population.get_chromosomes()])
        worse.select_best_chromosomes(state, self.config, self.rng)

        self.assertEqual(state.best_fitness, best_so_far)
        self.assertIs(state.best_chromosome, stored)

    def test_best_pct_decay_is_floored(self):
        config = GAConfig.from_dict({
            'best_chromosomes_decrease_rate': 0.5,
            'min_best_chromosomes_pct': 0.05,
        }, n_cities=10)
        state = EvolutionState.from_config(config)
        for _ in range(20):
            state.decay_selection(config)
        self.assertAlmostEqual(state.best_chromosomes_pct, 0.05)

    def test_sub_population_sizes(self):
        size = self.population.get_size()
        sequential = self.population.generate_sub_population(
            CrossoverStrategy.SEQUENTIAL_PAIR, self.config, self.evaluator, self.rng)
        self.assertEqual(sequential.get_size(), int(size * 0.1) + 2 * (size - 1))

        every = self.population.generate_sub_population(
            CrossoverStrategy.EVERY_PAIR, self.config, self.evaluator, self.rng)
        self.assertEqual(every.get_size(), int(size * 0.1) + size * (size - 1))

    def test_sub_population_children_are_valid_and_evaluated(self):
        config = GAConfig.from_dict({
            'initial_population_size': 40, 'start_point_id': 4, 'validate_offspring': True,
        }, n_cities=10)
        for operator in ('pmx', 'ox', 'cx'):
            config = GAConfig.from_dict({**config.to_dict(), 'crossover_operator': operator})
            children = self.population.generate_sub_population(
                CrossoverStrategy.SHUFFLED_SEQUENTIAL_PAIR, config, self.evaluator, self.rng)
            for child in children.get_chromosomes():
                self.assertTrue(child.is_valid())
                self.assertEqual(child.genes[0], 4)
                self.assertTrue(child.has_fitness())

    def test_elite_copied_unmodified(self):
        self.population.sort_by_fitness()
        elite = [c.genes.copy() for c in self.population.get_chromosomes()[:4]]
        children = self.population.generate_sub_population(
            CrossoverStrategy.SHUFFLED_SEQUENTIAL_PAIR, self.config, self.evaluator, self.rng)
        self.assertEqual([c.genes for c in children.get_chromosomes()[:4]], elite)

    def test_sub_population_needs_two_parents(self):
        lonely = Population([self.population.get_chromosome(0)])
        with self.assertRaises(InsufficientPopulationError):
            lonely.generate_sub_population(
                CrossoverStrategy.SEQUENTIAL_PAIR, self.config, self.evaluator, self.rng)

    def test_mutate_grows_rate_and_keeps_validity(self):
        state = EvolutionState.from_config(self.config)
        self.population.mutate(state, self.config, self.rng)
        self.assertAlmostEqual(state.mutation_rate, 0.1 * 1.05)
        self.assertEqual(state.mutation_count, 1)
        for chromosome in self.population.get_chromosomes():
            self.assertTrue(chromosome.is_valid())
            self.assertEqual(chromosome.genes[0], 4)
            self.assertFalse(chromosome.has_fitness())

    def test_statistics(self):
        stats = self.population.get_statistics()
        self.assertEqual(stats['size'], 40)
        self.assertLessEqual(stats['best_fitness'], stats['avg_fitness'])
        self.assertLessEqual(stats['avg_fitness'], stats['worst_fitness'])
        self.assertGreater(stats['diversity'], 0)


class TestGeneticAlgorithm(unittest.TestCase):
    """Test the evolution driver end to end."""

    def test_pentagon_converges_to_optimal_tour(self):
        generator = CityGenerator()
        cities = generator.generate_polygon(5, radius=10.0)
        optimum = CityGenerator.polygon_tour_length(5, 10.0)

        for seed in range(5):
            result, _ = run_genetic_algorithm(cities, {
                'initial_population_size': 20,
                'elite_chromosomes_pct': 0.1,
                'max_generations': 50,
                'seed': seed,
            })
            self.assertAlmostEqual(result.best_fitness, optimum, places=6)
            self.assertTrue(Chromosome(result.best_tour).is_valid())

    def test_decagon_improves_to_optimal_tour(self):
        """Ten cities on a circle: the random start is far off, evolution closes the gap."""
        cities = CityGenerator().generate_polygon(10, radius=10.0)
        optimum = CityGenerator.polygon_tour_length(10, 10.0)
        config = GAConfig.from_dict({
            'initial_population_size': 200,
            'elite_chromosomes_pct': 0.1,
            'best_chromosomes_pct': 0.25,
            'best_chromosomes_decrease_rate': 0.0,
            'rest_chromosomes_pct': 0.32,
            'mutation_patience': 5,
            'max_generations': 150,
            'seed': 7,
        }, n_cities=10)
        ga = GeneticAlgorithm(DistanceMatrix(cities), config)
        ga.initialize_population()
        initial_best = ga.state.best_fitness

        result = ga.evolve()

        # Any tour that crosses itself is at least 15% longer than the perimeter
        self.assertGreater(initial_best, optimum * 1.1)
        self.assertLess((result.best_fitness - optimum) / optimum, 0.01)
        self.assertTrue(Chromosome(result.best_tour).is_valid())

    def test_random_cities_improve_on_initial_population(self):
        cities = CityGenerator({'seed': 3, 'area_bounds': (0, 100), 'n_cities': 15}).generate_random()
        config = GAConfig.from_dict({'max_generations': 60, 'seed': 3}, n_cities=15)
        ga = GeneticAlgorithm(DistanceMatrix(cities), config)
        ga.initialize_population()
        initial_best = ga.state.best_fitness

        result = ga.evolve()

        self.assertLessEqual(result.best_fitness, initial_best)
        history = [d['best_fitness'] for d in result.evolution_data]
        self.assertEqual(history, sorted(history, reverse=True))

    def test_max_generations_bounds_transitions(self):
        cities = CityGenerator({'seed': 5, 'area_bounds': (0, 100), 'n_cities': 8}).generate_random()
        config = GAConfig.from_dict({
            'max_generations': 12,
            'best_chromosomes_decrease_rate': 0.0,
            'seed': 5,
        }, n_cities=8)
        ga = GeneticAlgorithm(DistanceMatrix(cities), config)
        result = ga.evolve()

        self.assertEqual(result.termination_reason, TerminationReason.MAX_GENERATIONS_REACHED)
        self.assertEqual(result.generations, 12)
        self.assertEqual(len(result.evolution_data), 12)

    def test_small_population_converges(self):
        cities = CityGenerator({'seed': 5, 'area_bounds': (0, 100), 'n_cities': 8}).generate_random()
        config = GAConfig.from_dict({
            'initial_population_size': 20,
            'best_chromosomes_pct': 0.1,
            'rest_chromosomes_pct': 0.0,
            'max_generations': 50,
        }, n_cities=8)
        result = GeneticAlgorithm(DistanceMatrix(cities), config).evolve()

        self.assertEqual(result.termination_reason, TerminationReason.CONVERGED)
        self.assertEqual(result.generations, 0)
        self.assertTrue(result.best_chromosome.is_valid())

    def test_stagnation_forces_mutation_once_per_boundary(self):
        config = GAConfig.from_dict({
            'initial_population_size': 40,
            'best_chromosomes_pct': 0.5,
            'best_chromosomes_decrease_rate': 0.0,
            'rest_chromosomes_pct': 0.0,
            'mutation_patience': 3,
            'max_generations': 7,
            'seed': 0,
        }, n_cities=6)
        ga = GeneticAlgorithm(ConstantDistance(), config)
        result = ga.evolve()

        mutated = [d['mutated'] for d in result.evolution_data]
        self.assertEqual(mutated, [False, False, False, True, False, False, True])
        counters = [d['stagnation_counter'] for d in result.evolution_data]
        self.assertEqual(counters, [0, 1, 2, 0, 1, 2, 0])
        self.assertEqual(ga.state.mutation_count, 2)
        self.assertAlmostEqual(ga.state.mutation_rate, 0.1 * 1.05 ** 2)

    def test_seeded_runs_are_reproducible(self):
        cities = CityGenerator({'seed': 8, 'area_bounds': (0, 100), 'n_cities': 12}).generate_random()
        overrides = {'max_generations': 25, 'seed': 99}
        first, _ = run_genetic_algorithm(cities, overrides)
        second, _ = run_genetic_algorithm(cities, overrides)
        self.assertEqual(first.best_tour, second.best_tour)
        self.assertEqual([d['best_fitness'] for d in first.evolution_data],
                         [d['best_fitness'] for d in second.evolution_data])

    def test_threaded_evaluation_matches_inline(self):
        cities = CityGenerator({'seed': 8, 'area_bounds': (0, 100), 'n_cities': 12}).generate_random()
        inline, _ = run_genetic_algorithm(cities, {'max_generations': 10, 'seed': 1})
        threaded, _ = run_genetic_algorithm(cities, {'max_generations': 10, 'seed': 1, 'max_workers': 4})
        self.assertEqual(inline.best_tour, threaded.best_tour)

    def test_cancellation_between_generations(self):
        cities = CityGenerator({'seed': 2, 'area_bounds': (0, 100), 'n_cities': 10}).generate_random()
        config = GAConfig.from_dict({'max_generations': 500, 'seed': 2}, n_cities=10)
        ga = GeneticAlgorithm(DistanceMatrix(cities), config)
        cancel = threading.Event()

        def stop_after_three(gen_data):
            if gen_data['generation'] == 3:
                cancel.set()

        result = ga.evolve(cancel_event=cancel, progress_callback=stop_after_three)
        self.assertEqual(result.termination_reason, TerminationReason.CANCELLED)
        self.assertEqual(result.generations, 3)
        self.assertTrue(result.best_chromosome.is_valid())

    def test_keyboard_interrupt_returns_best_so_far(self):
        """Ctrl-C during evolution ends the run as cancelled with a valid tour."""
        cities = CityGenerator({'seed': 2, 'area_bounds': (0, 100), 'n_cities': 10}).generate_random()
        config = GAConfig.from_dict({'max_generations': 500, 'seed': 2}, n_cities=10)
        ga = GeneticAlgorithm(DistanceMatrix(cities), config)

        def interrupt_after_two(gen_data):
            if gen_data['generation'] == 2:
                raise KeyboardInterrupt

        result = ga.evolve(progress_callback=interrupt_after_two)
        self.assertEqual(result.termination_reason, TerminationReason.CANCELLED)
        self.assertEqual(result.generations, 2)
        self.assertTrue(result.best_chromosome.is_valid())
        self.assertEqual(ga.get_statistics()['termination_reason'], 'cancelled')

    def test_statistics_and_convergence_data(self):
        cities = CityGenerator().generate_polygon(8)
        config = GAConfig.from_dict({'max_generations': 5, 'seed': 4}, n_cities=8)
        ga = GeneticAlgorithm(DistanceMatrix(cities), config)
        ga.evolve()

        stats = ga.get_statistics()
        self.assertEqual(stats['generations'], 5)
        self.assertEqual(stats['termination_reason'], 'max_generations_reached')
        self.assertGreater(stats['total_evaluations'], 0)

        convergence = ga.get_convergence_data()
        self.assertEqual(convergence['generations'], [1, 2, 3, 4, 5])
        self.assertEqual(len(convergence['best_fitness']), 5)


if __name__ == '__main__':
    unittest.main()
