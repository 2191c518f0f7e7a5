# src/data/feeds/__init__.py
"""
Proveedores de velas históricas.

- BinanceKlinesProvider: API pública de Binance (python-binance, async).
- CsvCandleProvider: CSV local (pandas).
- InMemoryCandleProvider: lista de velas en memoria (tests / notebooks).
"""

from data.feeds.base import HistoricalDataError, HistoricalDataProvider, filter_range
from data.feeds.binance_klines import BinanceKlinesProvider, parse_kline
from data.feeds.csv_feed import CsvCandleProvider, candles_from_frame, load_candles_csv
from data.feeds.memory import InMemoryCandleProvider

__all__ = [
    "HistoricalDataError",
    "HistoricalDataProvider",
    "filter_range",
    "BinanceKlinesProvider",
    "parse_kline",
    "CsvCandleProvider",
    "candles_from_frame",
    "load_candles_csv",
    "InMemoryCandleProvider",
]
