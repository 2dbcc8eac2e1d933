"""Tests for market quotes."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from informed360.markets import DEFAULT_SYMBOLS, Quote, fetch_quotes


def _fake_yfinance(infos):
    tickers = {symbol: SimpleNamespace(fast_info=info) for symbol, info in infos.items()}
    module = MagicMock()
    module.Tickers.return_value = SimpleNamespace(tickers=tickers)
    return module


class TestFetchQuotes:
    """Tests for the quote passthrough."""

    def test_placeholders_without_provider(self):
        with patch("informed360.markets._load_yfinance", return_value=None):
            quotes = fetch_quotes()

        assert [q.pretty for q in quotes] == [p for _, p in DEFAULT_SYMBOLS]
        assert all(q.price is None and q.change_percent is None for q in quotes)

    def test_prices_and_change(self):
        symbols = (("^NSEI", "NSE Nifty"),)
        fake = _fake_yfinance({"^NSEI": SimpleNamespace(last_price=22100.0, previous_close=22000.0)})

        with patch("informed360.markets._load_yfinance", return_value=fake):
            quotes = fetch_quotes(symbols)

        fake.Tickers.assert_called_once_with("^NSEI")
        quote = quotes[0]
        assert quote.price == 22100.0
        assert quote.change == pytest.approx(100.0)
        assert quote.change_percent == pytest.approx(100.0 / 22000.0 * 100.0)

    def test_missing_previous_close(self):
        symbols = (("GC=F", "Gold"),)
        fake = _fake_yfinance({"GC=F": SimpleNamespace(last_price=float("nan"), previous_close=None)})

        with patch("informed360.markets._load_yfinance", return_value=fake):
            quote = fetch_quotes(symbols)[0]

        assert quote == Quote(symbol="GC=F", pretty="Gold")

    def test_provider_error_returns_empty(self):
        fake = MagicMock()
        fake.Tickers.side_effect = RuntimeError("rate limited")

        with patch("informed360.markets._load_yfinance", return_value=fake):
            assert fetch_quotes() == []

    def test_to_dict(self):
        data = Quote(symbol="^BSESN", pretty="BSE Sensex", price=1.0).to_dict()

        assert data == {
            "symbol": "^BSESN",
            "pretty": "BSE Sensex",
            "price": 1.0,
            "change": None,
            "changePercent": None,
        }
