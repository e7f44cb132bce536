"""
Main application entry point for TSP-GA System.
Provides CLI interface for solving city files or generated layouts.
"""

import argparse
import logging
import os
import sys
import threading
from typing import Dict, List

from config import GA_PRESETS, PATHS, TSP_CONFIG
from tsp_ga.algorithms.genetic_algorithm import GeneticAlgorithm
from tsp_ga.core.exceptions import (
    DatasetFormatError, DatasetNotFoundError, InvalidChromosomeError,
    InvalidConfigurationError, TSPException
)
from tsp_ga.core.logger import setup_logger
from tsp_ga.core.pipeline_profiler import pipeline_profiler
from tsp_ga.data_processing.distance import DistanceMatrix
from tsp_ga.data_processing.generator import CityGenerator
from tsp_ga.data_processing.loader import CityLoader
from tsp_ga.evaluation.result_exporter import ResultExporter
from tsp_ga.models.city import City
from tsp_ga.models.ga_config import GAConfig


def main():
    """Main application entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    level = getattr(logging, args.log_level.upper())
    logger = setup_logger('tsp_ga', level=level, log_dir=PATHS['logs'])
    logger.info("=" * 60)
    logger.info("TSP-GA System Starting")
    logger.info("=" * 60)

    cancel_event = threading.Event()
    try:
        cities = load_cities(args)
        run(args, cities, cancel_event)
    except KeyboardInterrupt:
        # Interrupts during evolution end the run as cancelled; this covers loading and export
        logger.info("Operation cancelled by user")
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except (DatasetNotFoundError, DatasetFormatError, InvalidConfigurationError) as e:
        logger.error(f"Input error: {e}", exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)
    except InvalidChromosomeError as e:
        logger.error(f"Best tour failed validation: {e}", exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)
    except TSPException as e:
        logger.error(f"TSP Error: {e}", exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="TSP-GA System: Traveling Salesman Problem solver using Genetic Algorithm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a city file (CSV with id,x,y columns)
  python main.py --cities data/raw/tsp81cities_coords.csv

  # Generate and solve 50 random cities
  python main.py --generate 50 --seed 7

  # Cities on a regular polygon (known optimal tour)
  python main.py --polygon 12 --preset fast

  # Custom GA parameters
  python main.py --generate 40 --generations 1000 --population 200 --strategy every_pair
        """
    )

    data_group = parser.add_mutually_exclusive_group(required=True)
    data_group.add_argument('--cities', type=str,
                            help='CSV file with id,x,y columns')
    data_group.add_argument('--generate', type=int, metavar='N',
                            help='Generate N random cities')
    data_group.add_argument('--polygon', type=int, metavar='N',
                            help='Generate N cities on a regular polygon')

    ga_group = parser.add_argument_group('GA parameters')
    ga_group.add_argument('--preset', choices=sorted(GA_PRESETS), default=None,
                          help='GA preset applied before individual overrides')
    ga_group.add_argument('--generations', type=int, help='Maximum generations')
    ga_group.add_argument('--population', type=int, help='Initial population size')
    ga_group.add_argument('--elite', type=float, help='Elite fraction copied forward')
    ga_group.add_argument('--patience', type=int,
                          help='Stagnant generations before forced mutation')
    ga_group.add_argument('--mutation-rate', type=float, help='Initial mutation rate')
    ga_group.add_argument('--start-point', type=int, help='City id pinned at tour start')
    ga_group.add_argument('--strategy',
                          choices=['every_pair', 'sequential_pair', 'shuffled_sequential_pair'],
                          help='Parent pairing strategy')
    ga_group.add_argument('--crossover', choices=['pmx', 'ox', 'cx'],
                          help='Crossover operator')
    ga_group.add_argument('--workers', type=int, help='Fitness evaluation threads')
    ga_group.add_argument('--seed', type=int, help='Random seed')

    out_group = parser.add_argument_group('Output')
    out_group.add_argument('--output-dir', type=str, default=PATHS['results'],
                           help='Directory for exported results')
    out_group.add_argument('--export', action='store_true',
                           help='Export best tour (JSON) and evolution data (CSV)')
    out_group.add_argument('--plot', action='store_true',
                           help='Save convergence and tour plots')
    out_group.add_argument('--profile', action='store_true',
                           help='Print stage timing summary')
    out_group.add_argument('--log-level', default='INFO',
                           choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])

    return parser


def build_overrides(args) -> Dict:
    """Map CLI flags onto GA config keys; unset flags keep defaults."""
    mapping = {
        'generations': 'max_generations',
        'population': 'initial_population_size',
        'elite': 'elite_chromosomes_pct',
        'patience': 'mutation_patience',
        'mutation_rate': 'mutation_rate',
        'start_point': 'start_point_id',
        'strategy': 'crossover_strategy',
        'crossover': 'crossover_operator',
        'workers': 'max_workers',
        'seed': 'seed',
    }
    overrides = {}
    for arg_name, key in mapping.items():
        value = getattr(args, arg_name)
        if value is not None:
            overrides[key] = value
    return overrides


def load_cities(args) -> List[City]:
    """Load or generate the city set selected on the command line."""
    if args.cities:
        return CityLoader().load_from_file(args.cities)

    generator_config = TSP_CONFIG.copy()
    if args.seed is not None:
        generator_config['seed'] = args.seed
    generator = CityGenerator(generator_config)

    if args.generate:
        return generator.generate_random(args.generate)
    return generator.generate_polygon(args.polygon)


def run(args, cities: List[City], cancel_event: threading.Event):
    """Solve the TSP instance and report results."""
    logger = logging.getLogger('tsp_ga')

    config = GAConfig.from_dict(build_overrides(args), n_cities=len(cities), preset=args.preset)
    logger.info(f"Solving {len(cities)} cities: population={config.initial_population_size}, "
                f"generations={config.max_generations}, strategy={config.crossover_strategy.value}, "
                f"crossover={config.crossover_operator}")

    distance_matrix = DistanceMatrix(cities)
    logger.debug(f"Distance between city 1 and 2: {distance_matrix.get_distance(1, 2):.4f}")

    ga = GeneticAlgorithm(distance_matrix, config)
    result = ga.evolve(cancel_event=cancel_event)

    minutes, seconds = divmod(result.execution_time, 60)
    print("\n" + "=" * 60)
    print(f"Stopped: {result.termination_reason.value} after {result.generations} generations")
    print(f"Elapsed Time: {int(minutes)} mins {seconds:.3f} secs")
    print(f"Best Solution: {result.best_fitness:.4f}")
    print("Tour: " + " -> ".join(str(gene) for gene in result.best_tour))
    print("=" * 60)

    if args.polygon:
        optimum = CityGenerator.polygon_tour_length(len(cities), TSP_CONFIG['polygon_radius'])
        gap = (result.best_fitness - optimum) / optimum * 100
        print(f"Optimal polygon tour: {optimum:.4f} (gap {gap:.2f}%)")

    if args.export:
        exporter = ResultExporter(args.output_dir)
        exporter.export_best_tour(result.best_tour, result.best_fitness, cities,
                                  statistics=ga.get_statistics())
        exporter.export_evolution_data(result.evolution_data)

    if args.plot:
        from tsp_ga.visualization.plotter import Plotter
        os.makedirs(args.output_dir, exist_ok=True)
        plotter = Plotter()
        plotter.plot_convergence(ga.get_convergence_data(),
                                 save_path=os.path.join(args.output_dir, 'convergence.png'))
        plotter.plot_tour(cities, result.best_tour,
                          title=f"Best Tour ({result.best_fitness:.2f})",
                          save_path=os.path.join(args.output_dir, 'best_tour.png'))
        logger.info(f"Plots saved to {args.output_dir}")

    if args.profile:
        print(pipeline_profiler.format_summary())

    return result


if __name__ == '__main__':
    main()
