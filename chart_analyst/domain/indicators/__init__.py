"""Technical indicators module."""

from .sources import (
    HistoricalSeries,
    IndicatorSource,
    SnapshotProxy,
    compute_indicators,
    select_indicator_source,
)

__all__ = [
    'HistoricalSeries',
    'IndicatorSource',
    'SnapshotProxy',
    'compute_indicators',
    'select_indicator_source',
]
