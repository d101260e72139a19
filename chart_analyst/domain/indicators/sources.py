"""
Indicator sources.

An IndicatorSource computes the indicator readings for one analysis call.
SnapshotProxy (default) derives everything from a single bar; HistoricalSeries
uses the textbook formulas over a caller-supplied bar window. The source is
picked once per call by select_indicator_source(), so one IndicatorSet never
mixes proxy and historical readings.
"""
import logging
from typing import Callable, Dict, Iterable, Optional, Protocol, Sequence

from chart_analyst.domain.indicators import series, snapshot_proxy
from chart_analyst.domain.indicators.snapshot_proxy import safe_div
from chart_analyst.domain.models import (
    AtrReading,
    BollingerBands,
    FibonacciLevels,
    IndicatorSet,
    MacdReading,
    MarketSnapshot,
    PriceBar,
    StochasticReading,
    VolumeAnalysis,
)

logger = logging.getLogger(__name__)


class IndicatorSource(Protocol):
    name: str

    def rsi(self) -> float:
        ...

    def bollinger_bands(self) -> BollingerBands:
        ...

    def fibonacci(self) -> FibonacciLevels:
        ...

    def volume(self) -> VolumeAnalysis:
        ...

    def macd(self) -> MacdReading:
        ...

    def atr(self) -> AtrReading:
        ...

    def stochastic(self) -> StochasticReading:
        ...


class SnapshotProxy:
    """Single-bar approximations; the default source."""

    name = "snapshot-proxy"

    def __init__(self, snapshot: MarketSnapshot):
        self.snapshot = snapshot
        self._fibonacci: Optional[FibonacciLevels] = None

    def rsi(self) -> float:
        return snapshot_proxy.rsi(self.snapshot)

    def bollinger_bands(self) -> BollingerBands:
        return snapshot_proxy.bollinger_bands(self.snapshot)

    def fibonacci(self) -> FibonacciLevels:
        if self._fibonacci is None:
            self._fibonacci = snapshot_proxy.fibonacci(self.snapshot)
        return self._fibonacci

    def volume(self) -> VolumeAnalysis:
        return snapshot_proxy.volume_analysis(self.snapshot)

    def macd(self) -> MacdReading:
        return snapshot_proxy.macd(self.snapshot)

    def atr(self) -> AtrReading:
        return snapshot_proxy.atr(self.snapshot)

    def stochastic(self) -> StochasticReading:
        return snapshot_proxy.stochastic(self.snapshot)


class HistoricalSeries:
    """
    Textbook indicators over an OHLCV window (oldest bar first).

    The last bar is treated as the current bar. The MACD trend is classified
    on the histogram expressed as a percentage of the last close so the
    proxy's +/-0.5 thresholds stay scale-free.
    """

    name = "historical-series"

    RSI_PERIOD = 14
    BOLLINGER_PERIOD = 20
    MACD_FAST, MACD_SLOW, MACD_SIGNAL = 12, 26, 9
    ATR_PERIOD = 14
    STOCH_PERIOD, STOCH_SMOOTH = 14, 3
    VOLUME_WINDOW = 20

    # Enough bars for every indicator above, so none falls back mid-call
    REQUIRED_BARS = MACD_SLOW + MACD_SIGNAL

    def __init__(self, bars: Sequence[PriceBar]):
        if len(bars) < self.REQUIRED_BARS:
            raise ValueError(
                f"HistoricalSeries needs at least {self.REQUIRED_BARS} bars, got {len(bars)}"
            )
        self.bars = list(bars)
        self.closes = [b.close for b in self.bars]
        self.highs = [b.high for b in self.bars]
        self.lows = [b.low for b in self.bars]
        self.volumes = [b.volume for b in self.bars]
        self._fibonacci: Optional[FibonacciLevels] = None

    @property
    def last_close(self) -> float:
        return self.closes[-1]

    def rsi(self) -> float:
        return series.rsi(self.closes, self.RSI_PERIOD)

    def bollinger_bands(self) -> BollingerBands:
        lower, middle, upper = series.bollinger_bands(self.closes, self.BOLLINGER_PERIOD)
        return BollingerBands(
            upper=round(upper, 2),
            middle=round(middle, 2),
            lower=round(lower, 2),
            percent_b=round(safe_div(self.last_close - lower, upper - lower, default=0.5), 3),
            bandwidth=round(safe_div(upper - lower, middle), 3),
        )

    def fibonacci(self) -> FibonacciLevels:
        if self._fibonacci is None:
            self._fibonacci = snapshot_proxy.fibonacci_levels(min(self.lows), max(self.highs))
        return self._fibonacci

    def volume(self) -> VolumeAnalysis:
        current = self.volumes[-1]
        average = series.sma(self.volumes[:-1], self.VOLUME_WINDOW)
        ratio = safe_div(current, average)
        return VolumeAnalysis(
            current=current,
            average=average,
            ratio=round(ratio, 2),
            trend=snapshot_proxy.classify_volume(ratio),
        )

    def macd(self) -> MacdReading:
        value, signal, histogram = series.macd(
            self.closes, self.MACD_FAST, self.MACD_SLOW, self.MACD_SIGNAL
        )
        histogram_pct = safe_div(histogram, self.last_close) * 100
        return MacdReading(
            value=round(value, 3),
            signal=round(signal, 3),
            histogram=round(histogram, 3),
            trend=snapshot_proxy.classify_macd(histogram_pct),
        )

    def atr(self) -> AtrReading:
        value = series.atr(self.highs, self.lows, self.closes, self.ATR_PERIOD)
        atr_pct = safe_div(value, self.last_close) * 100
        return AtrReading(
            value=round(atr_pct, 2),
            volatility=snapshot_proxy.classify_volatility(atr_pct).value,
        )

    def stochastic(self) -> StochasticReading:
        k, d = series.stochastic(
            self.highs, self.lows, self.closes, self.STOCH_PERIOD, self.STOCH_SMOOTH
        )
        return StochasticReading(
            k=round(k, 1),
            d=round(d, 1),
            signal=snapshot_proxy.classify_stochastic(k),
        )


_CALCULATORS: Dict[str, Callable[[IndicatorSource], object]] = {
    "rsi": lambda source: source.rsi(),
    "bollinger_bands": lambda source: source.bollinger_bands(),
    "fibonacci": lambda source: source.fibonacci(),
    "volume": lambda source: source.volume(),
    "macd": lambda source: source.macd(),
    "atr": lambda source: source.atr(),
    "stochastic": lambda source: source.stochastic(),
}


def select_indicator_source(
    snapshot: MarketSnapshot,
    history: Optional[Sequence[PriceBar]] = None,
    min_bars: int = HistoricalSeries.REQUIRED_BARS,
) -> IndicatorSource:
    """
    Pick the source for one call: history when enough bars are supplied,
    otherwise the snapshot proxy.
    """
    required = max(min_bars, HistoricalSeries.REQUIRED_BARS)
    if history and len(history) >= required:
        return HistoricalSeries(history)
    if history:
        logger.debug(
            f"{snapshot.symbol}: {len(history)} bars supplied, {required} required; using snapshot proxy"
        )
    return SnapshotProxy(snapshot)


def compute_indicators(source: IndicatorSource, chosen: Iterable[str]) -> IndicatorSet:
    """Compute only the chosen indicators; unknown names are ignored."""
    values = {}
    for name in chosen:
        calculator = _CALCULATORS.get(name)
        if calculator is None:
            logger.debug(f"Ignoring unknown indicator '{name}'")
            continue
        values[name] = calculator(source)
    return IndicatorSet(**values)
