"""Evolution engine: operators, pairing strategies, fitness and the driver."""
