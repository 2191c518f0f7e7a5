# src/data/feeds/memory.py
"""Proveedor en memoria: útil para tests y para re-simular sin red."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from core.types import Candle
from data.feeds.base import filter_range


class InMemoryCandleProvider:
    def __init__(self, candles: Sequence[Candle], *, apply_range: bool = False) -> None:
        self._candles = list(candles)
        self._apply_range = apply_range
        self.calls: list[tuple[str, str, datetime, datetime]] = []

    async def fetch(
        self, pair: str, timeframe: str, start: datetime, end: datetime
    ) -> list[Candle]:
        self.calls.append((pair, timeframe, start, end))
        if self._apply_range:
            return filter_range(self._candles, start, end)
        return list(self._candles)
