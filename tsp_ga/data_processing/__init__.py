"""City ingestion, mock generation and the distance oracle."""
