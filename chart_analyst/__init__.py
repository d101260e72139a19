"""NSE chart analyst: market-condition classification and confluence scoring."""

__version__ = "0.1.0"
