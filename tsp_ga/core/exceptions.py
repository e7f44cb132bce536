"""
Custom exceptions for TSP-GA System.
Provides specific exception classes for different error types.
"""


class TSPException(Exception):
    """Base exception for TSP-GA system."""

    def __init__(self, message: str = "", details: dict = None):
        """
        Initialize TSP exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidChromosomeError(TSPException):
    """Raised when a chromosome is not a permutation of the expected city ids."""

    def __init__(self, chromosome: list = None, reason: str = None):
        """
        Initialize invalid chromosome error.

        Args:
            chromosome: Offending gene sequence
            reason: Reason the chromosome was rejected
        """
        message = "Invalid chromosome"
        details = {}

        if chromosome is not None:
            details['chromosome_length'] = len(chromosome)
        if reason:
            details['reason'] = reason
            message += f": {reason}"

        super().__init__(message, details)


class StaleFitnessError(TSPException):
    """Raised when a fitness value is read before it was (re)calculated."""

    def __init__(self, chromosome: list = None):
        message = "Fitness score is stale, call calculate_fitness_score first"
        details = {}

        if chromosome is not None:
            details['chromosome_length'] = len(chromosome)

        super().__init__(message, details)


class InsufficientPopulationError(TSPException):
    """Raised when a population is too small for the requested operation."""

    def __init__(self, size: int = None, required: int = None):
        message = "Insufficient population"
        details = {}

        if size is not None:
            details['size'] = size
        if required is not None:
            details['required'] = required

        if details:
            message += f": {size} chromosomes (need at least {required})"

        super().__init__(message, details)


class DistanceLookupError(TSPException):
    """Raised when the distance oracle is asked about an unknown city."""

    def __init__(self, from_id: int = None, to_id: int = None, reason: str = None):
        """
        Initialize distance lookup error.

        Args:
            from_id: Source city ID
            to_id: Destination city ID
            reason: Reason for failure
        """
        message = "Distance lookup failed"
        details = {}

        if from_id is not None:
            details['from_id'] = from_id
        if to_id is not None:
            details['to_id'] = to_id
        if reason:
            details['reason'] = reason

        if from_id is not None or to_id is not None:
            message += f": no distance between {from_id} and {to_id}"
            if reason:
                message += f" ({reason})"

        super().__init__(message, details)


class DatasetNotFoundError(TSPException):
    """Raised when a city dataset file is not found."""

    def __init__(self, dataset_path: str = None):
        message = "Dataset not found"
        details = {}

        if dataset_path:
            details['dataset_path'] = dataset_path
            message += f": '{dataset_path}'"

        super().__init__(message, details)


class DatasetFormatError(TSPException):
    """Raised when city data is malformed (bad columns, duplicate or gapped ids)."""
    pass


class InvalidConfigurationError(TSPException):
    """Raised when configuration parameters are invalid."""

    def __init__(self, parameter: str = None, value: any = None,
                 expected: str = None):
        """
        Initialize invalid configuration error.

        Args:
            parameter: Parameter name
            value: Invalid value
            expected: Expected value or range
        """
        message = "Invalid configuration parameter"
        details = {}

        if parameter:
            details['parameter'] = parameter
        if value is not None:
            details['value'] = value
        if expected:
            details['expected'] = expected

        if parameter:
            message += f": {parameter} = {value}"
            if expected:
                message += f" (expected: {expected})"

        super().__init__(message, details)
