"""
Validation layer for TSP-GA System.
Rejects inconsistent GA configuration before any generation runs.
"""

from typing import Dict, Optional
from tsp_ga.core.exceptions import InvalidConfigurationError

CROSSOVER_STRATEGIES = ('every_pair', 'sequential_pair', 'shuffled_sequential_pair')
CROSSOVER_OPERATORS = ('pmx', 'ox', 'cx')
MIN_VIABLE_POPULATION = 4


class ConfigValidator:
    """Validate configuration parameters."""

    @staticmethod
    def validate_ga_config(config: Dict, n_cities: Optional[int] = None) -> bool:
        """
        Validate GA configuration.

        Args:
            config: GA configuration dictionary (defaults already merged in)
            n_cities: Number of loaded cities, used for the start point and
                chromosome size checks

        Returns:
            True if valid, raises InvalidConfigurationError otherwise

        Raises:
            InvalidConfigurationError: If configuration is invalid
        """
        required_keys = [
            'initial_population_size',
            'elite_chromosomes_pct',
            'best_chromosomes_pct',
            'rest_chromosomes_pct',
            'mutation_rate',
            'mutation_patience',
            'max_generations',
            'start_point_id',
            'crossover_strategy',
        ]

        for key in required_keys:
            if key not in config:
                raise InvalidConfigurationError(
                    parameter=key,
                    value=None,
                    expected="Required parameter"
                )

        min_size = config.get('min_population_size', MIN_VIABLE_POPULATION)
        if min_size < 2:
            raise InvalidConfigurationError(
                parameter='min_population_size',
                value=min_size,
                expected=">= 2"
            )

        if config['initial_population_size'] < min_size:
            raise InvalidConfigurationError(
                parameter='initial_population_size',
                value=config['initial_population_size'],
                expected=f">= {min_size}"
            )

        for key in ('elite_chromosomes_pct', 'best_chromosomes_pct', 'rest_chromosomes_pct'):
            if not 0 <= config[key] <= 1:
                raise InvalidConfigurationError(parameter=key, value=config[key], expected="[0, 1]")

        if config['best_chromosomes_pct'] == 0:
            raise InvalidConfigurationError(
                parameter='best_chromosomes_pct',
                value=0,
                expected="> 0"
            )

        total_pct = config['elite_chromosomes_pct'] + config['best_chromosomes_pct']
        if total_pct > 1:
            raise InvalidConfigurationError(
                parameter='elite_chromosomes_pct + best_chromosomes_pct',
                value=round(total_pct, 6),
                expected="<= 1"
            )

        for key in ('best_chromosomes_decrease_rate', 'min_best_chromosomes_pct'):
            value = config.get(key, 0.0)
            if not 0 <= value < 1:
                raise InvalidConfigurationError(parameter=key, value=value, expected="[0, 1)")

        for key in ('rest_chromosomes_increase_rate', 'mutation_increase_rate'):
            value = config.get(key, 0.0)
            if value < 0:
                raise InvalidConfigurationError(parameter=key, value=value, expected=">= 0")

        if config['mutation_rate'] < 0:
            raise InvalidConfigurationError(
                parameter='mutation_rate',
                value=config['mutation_rate'],
                expected=">= 0"
            )

        if config['mutation_patience'] < 1:
            raise InvalidConfigurationError(
                parameter='mutation_patience',
                value=config['mutation_patience'],
                expected=">= 1"
            )

        if config['max_generations'] < 1:
            raise InvalidConfigurationError(
                parameter='max_generations',
                value=config['max_generations'],
                expected=">= 1"
            )

        if config['crossover_strategy'] not in CROSSOVER_STRATEGIES:
            raise InvalidConfigurationError(
                parameter='crossover_strategy',
                value=config['crossover_strategy'],
                expected=" | ".join(CROSSOVER_STRATEGIES)
            )

        operator = config.get('crossover_operator', 'pmx')
        if operator not in CROSSOVER_OPERATORS:
            raise InvalidConfigurationError(
                parameter='crossover_operator',
                value=operator,
                expected=" | ".join(CROSSOVER_OPERATORS)
            )

        if config.get('max_workers', 1) < 1:
            raise InvalidConfigurationError(
                parameter='max_workers',
                value=config.get('max_workers'),
                expected=">= 1"
            )

        chromosome_size = config.get('chromosome_size') or n_cities
        if chromosome_size is not None:
            if chromosome_size < 2:
                raise InvalidConfigurationError(
                    parameter='chromosome_size',
                    value=chromosome_size,
                    expected=">= 2"
                )
            if n_cities is not None and chromosome_size != n_cities:
                raise InvalidConfigurationError(
                    parameter='chromosome_size',
                    value=chromosome_size,
                    expected=f"== number of cities ({n_cities})"
                )
            if not 1 <= config['start_point_id'] <= chromosome_size:
                raise InvalidConfigurationError(
                    parameter='start_point_id',
                    value=config['start_point_id'],
                    expected=f"[1, {chromosome_size}]"
                )

        return True
