"""Market quotes for the dashboard ticker.

A thin passthrough to Yahoo Finance via ``yfinance``. When the library is
not installed the ticker still renders: every symbol comes back with null
prices. Any provider error yields an empty list.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any, Dict, List, Optional, Sequence, Tuple

from informed360.logging_setup import get_logger

logger = get_logger("markets")

DEFAULT_SYMBOLS: Tuple[Tuple[str, str], ...] = (
    ("^BSESN", "BSE Sensex"),
    ("^NSEI", "NSE Nifty"),
    ("GC=F", "Gold"),
    ("CL=F", "Crude Oil"),
    ("USDINR=X", "USD/INR"),
)


@dataclass(frozen=True)
class Quote:
    """Last price and day change for one symbol."""

    symbol: str
    pretty: str
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "pretty": self.pretty,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
        }


def _load_yfinance() -> Optional[ModuleType]:
    """Import yfinance if available."""
    try:
        import yfinance

        return yfinance
    except ImportError:
        logger.debug("yfinance not available, returning placeholder quotes")
        return None


def _as_float(value: Any) -> Optional[float]:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if result == result else None  # NaN


def _quote_from_info(symbol: str, pretty: str, info: Any) -> Quote:
    price = _as_float(getattr(info, "last_price", None))
    previous = _as_float(getattr(info, "previous_close", None))

    change = None
    change_percent = None
    if price is not None and previous:
        change = price - previous
        change_percent = change / previous * 100.0

    return Quote(
        symbol=symbol,
        pretty=pretty,
        price=price,
        change=change,
        change_percent=change_percent,
    )


def fetch_quotes(symbols: Sequence[Tuple[str, str]] = DEFAULT_SYMBOLS) -> List[Quote]:
    """Fetch quotes for ``(symbol, display name)`` pairs. Never raises."""
    yf = _load_yfinance()
    if yf is None:
        return [Quote(symbol=s, pretty=p) for s, p in symbols]

    try:
        tickers = yf.Tickers(" ".join(s for s, _ in symbols))
        quotes = [
            _quote_from_info(s, p, tickers.tickers[s].fast_info) for s, p in symbols
        ]
    except Exception as e:
        logger.warning("Quote provider error: %s", e)
        return []

    logger.info("Fetched %d market quotes", len(quotes))
    return quotes
