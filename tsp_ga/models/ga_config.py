"""Read-only genetic algorithm configuration."""

from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional

from config import GA_CONFIG, GA_PRESETS
from tsp_ga.algorithms.pairing import CrossoverStrategy
from tsp_ga.core.exceptions import InvalidConfigurationError
from tsp_ga.core.validators import ConfigValidator


@dataclass(frozen=True)
class GAConfig:
    """Validated GA parameters, passed explicitly to the population and driver."""
    initial_population_size: int
    min_population_size: int
    elite_chromosomes_pct: float
    best_chromosomes_pct: float
    best_chromosomes_decrease_rate: float
    min_best_chromosomes_pct: float
    rest_chromosomes_pct: float
    rest_chromosomes_increase_rate: float
    mutation_rate: float
    mutation_increase_rate: float
    mutation_patience: int
    max_generations: int
    start_point_id: int
    chromosome_size: int
    crossover_strategy: CrossoverStrategy
    crossover_operator: str
    seed: Optional[int]
    max_workers: int
    validate_offspring: bool

    @classmethod
    def from_dict(cls, config: Optional[Dict] = None,
                  n_cities: Optional[int] = None,
                  preset: Optional[str] = None) -> 'GAConfig':
        """
        Merge overrides onto the defaults, validate, and freeze.

        Args:
            config: Parameter overrides
            n_cities: Number of loaded cities; fills ``chromosome_size``
            preset: Optional name from ``GA_PRESETS`` applied before overrides

        Raises:
            InvalidConfigurationError: On unknown keys or invalid values
        """
        merged = GA_CONFIG.copy()
        if preset is not None:
            if preset not in GA_PRESETS:
                raise InvalidConfigurationError(
                    parameter='preset', value=preset, expected=" | ".join(GA_PRESETS)
                )
            merged.update(GA_PRESETS[preset])
        if config:
            merged.update(config)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(merged) - known)
        if unknown:
            raise InvalidConfigurationError(
                parameter=unknown[0], value=merged[unknown[0]], expected="known GA parameter"
            )

        if isinstance(merged['crossover_strategy'], CrossoverStrategy):
            merged['crossover_strategy'] = merged['crossover_strategy'].value
        # Names are case-insensitive
        for key in ('crossover_strategy', 'crossover_operator'):
            merged[key] = str(merged[key]).strip().lower()

        ConfigValidator.validate_ga_config(merged, n_cities)

        if not merged.get('chromosome_size'):
            if n_cities is None:
                raise InvalidConfigurationError(
                    parameter='chromosome_size', value=None, expected="city count"
                )
            merged['chromosome_size'] = n_cities

        merged['crossover_strategy'] = CrossoverStrategy.from_value(merged['crossover_strategy'])
        return cls(**merged)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['crossover_strategy'] = self.crossover_strategy.value
        return data
