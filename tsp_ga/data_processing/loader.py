"""
City coordinate loader.
Reads ``id,x,y`` CSV files into City objects.
"""

import logging
import os
from typing import List

import pandas as pd

from tsp_ga.core.exceptions import DatasetFormatError, DatasetNotFoundError
from tsp_ga.models.city import City, create_cities

logger = logging.getLogger(__name__)


class CityLoader:
    """Loads city coordinates from CSV files."""

    REQUIRED_COLUMNS = ['id', 'x', 'y']

    def load_from_file(self, file_path: str) -> List[City]:
        """
        Load cities from a CSV file.

        The header is matched case-insensitively. A file without a header is
        read as three positional columns ``id, x, y``.

        Args:
            file_path: Path to the CSV file

        Returns:
            Cities in file order

        Raises:
            DatasetNotFoundError: If the file does not exist
            DatasetFormatError: On missing columns or bad ids
        """
        if not os.path.exists(file_path):
            raise DatasetNotFoundError(file_path)

        df = pd.read_csv(file_path, skipinitialspace=True)
        df.columns = [str(col).strip().lower() for col in df.columns]

        if not set(self.REQUIRED_COLUMNS).issubset(df.columns):
            if len(df.columns) != 3:
                raise DatasetFormatError(
                    f"Missing required columns: {self.REQUIRED_COLUMNS}",
                    {'columns': list(df.columns)}
                )
            df = pd.read_csv(file_path, header=None, names=self.REQUIRED_COLUMNS,
                             skipinitialspace=True)

        if df[self.REQUIRED_COLUMNS].isnull().values.any():
            raise DatasetFormatError("Empty cells in city data", {'file': file_path})

        try:
            cities = create_cities(df[self.REQUIRED_COLUMNS].itertuples(index=False, name=None))
        except ValueError as e:
            raise DatasetFormatError(str(e), {'file': file_path}) from e

        logger.info(f"Loaded {len(cities)} cities from {file_path}")
        return cities

    @staticmethod
    def save_to_file(cities: List[City], file_path: str) -> str:
        """Write cities to a CSV file with an ``id,x,y`` header."""
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        df = pd.DataFrame([city.to_tuple() for city in cities], columns=CityLoader.REQUIRED_COLUMNS)
        df.to_csv(file_path, index=False)
        return file_path


def load_cities(file_path: str) -> List[City]:
    """Convenience wrapper around ``CityLoader.load_from_file``."""
    return CityLoader().load_from_file(file_path)
