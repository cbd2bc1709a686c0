"""Console, logging and disk helpers."""
