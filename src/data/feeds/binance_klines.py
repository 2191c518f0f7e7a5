# src/data/feeds/binance_klines.py
"""
Velas históricas desde la API pública de Binance Spot (python-binance, AsyncClient).

- No necesita API keys: /api/v3/klines es público.
- El timeout (opcional) aplica SOLO a la descarga, nunca al loop de simulación.
- Formato de kline de Binance:
    [open_time, open, high, low, close, volume, close_time, quote_volume, n_trades, ...]
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from binance import AsyncClient
from binance.exceptions import BinanceAPIException, BinanceRequestException
from loguru import logger

from core.portfolio import normalize_pair
from core.types import Candle, datetime_to_ms
from data.feeds.base import HistoricalDataError

VALID_INTERVALS: frozenset[str] = frozenset(
    {
        "1s",
        "1m",
        "3m",
        "5m",
        "15m",
        "30m",
        "1h",
        "2h",
        "4h",
        "6h",
        "8h",
        "12h",
        "1d",
        "3d",
        "1w",
        "1M",
    }
)


def parse_kline(row: Sequence[Any]) -> Candle:
    """Mapea una fila de kline de Binance → Candle."""
    if len(row) < 6:
        raise HistoricalDataError(f"kline con formato inesperado: {row!r}")
    try:
        return Candle(
            time=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
        )
    except (TypeError, ValueError) as e:
        raise HistoricalDataError(f"kline no numérica: {row!r}") from e


class BinanceKlinesProvider:
    """
    Proveedor de velas vía python-binance.

    Uso:
        provider = BinanceKlinesProvider(timeout_s=30)
        candles = await provider.fetch("BTCUSDT", "1h", start, end)
    """

    def __init__(self, *, testnet: bool = False, timeout_s: float | None = None) -> None:
        self.testnet = bool(testnet)
        self.timeout_s = timeout_s

    async def _download(self, symbol: str, interval: str, start_ms: int, end_ms: int) -> list:
        client = await AsyncClient.create(testnet=self.testnet)
        try:
            return await client.get_historical_klines(
                symbol, interval, start_str=start_ms, end_str=end_ms
            )
        finally:
            await client.close_connection()

    async def fetch(
        self, pair: str, timeframe: str, start: datetime, end: datetime
    ) -> list[Candle]:
        if timeframe not in VALID_INTERVALS:
            raise HistoricalDataError(f"timeframe no soportado por Binance: {timeframe!r}")

        symbol = normalize_pair(pair)
        start_ms, end_ms = datetime_to_ms(start), datetime_to_ms(end)
        logger.info(
            "Descargando klines {} {} [{} → {}] (testnet={})",
            symbol,
            timeframe,
            start.isoformat(),
            end.isoformat(),
            self.testnet,
        )

        try:
            download = self._download(symbol, timeframe, start_ms, end_ms)
            if self.timeout_s is not None:
                rows = await asyncio.wait_for(download, timeout=self.timeout_s)
            else:
                rows = await download
        except asyncio.TimeoutError as e:
            raise HistoricalDataError(
                f"timeout ({self.timeout_s}s) descargando klines de {symbol}"
            ) from e
        except (BinanceAPIException, BinanceRequestException, OSError) as e:
            raise HistoricalDataError(f"error descargando klines de {symbol}: {e}") from e

        candles = [parse_kline(row) for row in rows]
        logger.debug("Recibidas {} velas de {}", len(candles), symbol)
        return candles
