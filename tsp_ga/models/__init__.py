"""Tour, population, configuration and run-state models."""
