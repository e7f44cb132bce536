"""Core utilities: exceptions, logging, validation and profiling."""
