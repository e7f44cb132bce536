"""
Genetic algorithm solver for the Traveling Salesman Problem.

Tours are permutations of city ids; the engine evolves them with
permutation-preserving crossover (PMX, OX, CX), inversion mutation,
decaying selection pressure and stagnation-triggered mutation.
"""

from .algorithms.genetic_algorithm import GAResult, GeneticAlgorithm, TerminationReason, run_genetic_algorithm
from .algorithms.pairing import CrossoverStrategy
from .data_processing.distance import DistanceMatrix
from .models.chromosome import Chromosome
from .models.city import City, create_cities
from .models.ga_config import GAConfig

__all__ = ['GeneticAlgorithm', 'GAResult', 'TerminationReason', 'run_genetic_algorithm',
           'CrossoverStrategy', 'DistanceMatrix', 'Chromosome', 'City', 'create_cities', 'GAConfig']

__version__ = '0.1.0'
