# Configuration parameters for TSP-GA System

# Genetic Algorithm Configuration
GA_CONFIG = {
    # POPULATION
    'initial_population_size': 100,
    'min_population_size': 4,        # Below this the run is considered converged

    # SELECTION (fractions of the current population)
    'elite_chromosomes_pct': 0.10,   # Copied unmodified into the next generation
    'best_chromosomes_pct': 0.30,    # Kept deterministically after fitness sort
    'best_chromosomes_decrease_rate': 0.01,  # best_pct *= (1 - rate) every generation
    'min_best_chromosomes_pct': 0.01,        # Floor for the decaying best_pct
    'rest_chromosomes_pct': 0.30,    # Share of the remainder kept after random shuffle
    'rest_chromosomes_increase_rate': 0.0,   # rest_pct *= (1 + rate), capped at 1.0

    # MUTATION (forced when the search stagnates)
    'mutation_rate': 0.10,           # Bounds the inversion segment length (fraction of tour)
    'mutation_increase_rate': 0.05,  # mutation_rate *= (1 + rate) after each forced mutation
    'mutation_patience': 10,         # Generations with identical best fitness before mutating

    # RUN CONTROL
    'max_generations': 500,
    'start_point_id': 1,             # City pinned at tour position 0
    'chromosome_size': None,         # Filled from the city count when None
    'crossover_strategy': 'shuffled_sequential_pair',  # every_pair | sequential_pair | shuffled_sequential_pair
    'crossover_operator': 'pmx',     # pmx | ox | cx
    'seed': None,                    # Random seed for reproducibility (None = nondeterministic)

    # EVALUATION
    'max_workers': 1,                # >1 fans fitness evaluation out over a thread pool
    'validate_offspring': False,     # Debug: check every child is a valid permutation
}

# GA Preset Configurations
GA_PRESETS = {
    'fast': {
        'initial_population_size': 50,
        'max_generations': 100,
        'mutation_patience': 5,
    },
    'standard': {
        'initial_population_size': 100,
        'max_generations': 500,
        'mutation_patience': 10,
    },
    'thorough': {
        'initial_population_size': 300,
        'max_generations': 2000,
        'best_chromosomes_decrease_rate': 0.002,
        'mutation_patience': 20,
        # Estimated runtime: several minutes for ~100 cities
    },
}

# Mock City Generation Configuration
TSP_CONFIG = {
    'n_cities': 30,
    'area_bounds': (0, 100),     # Cartesian 2D space [0,100]x[0,100]
    'polygon_radius': 50.0,
    'seed': 42,
}

# Visualization Configuration
VIZ_CONFIG = {
    'figure_size': (12, 8),
    'dpi': 150,
    'city_color': '#FF0000',
    'tour_color': '#0000FF',
    'start_color': '#00AA00',
    'marker_size': 50,
    'line_width': 2,
    'font_size': 12,
}

# File Paths
PATHS = {
    'data_raw': 'data/raw/',
    'results': 'results/',
    'logs': 'logs/',
}
