# src/data/feeds/base.py
"""
Contrato del proveedor de datos históricos.

    fetch(pair, timeframe, start, end) -> list[Candle]   (awaitable)

- Devuelve velas ordenadas cronológicamente; puede devolver lista vacía.
- El simulador NO valida orden ni rellena huecos: es responsabilidad del proveedor.
- Los fallos de E/S se envuelven en HistoricalDataError.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable

from core.types import Candle, datetime_to_ms


class HistoricalDataError(RuntimeError):
    """Fallo al obtener velas (red, fichero ilegible, formato inesperado)."""


@runtime_checkable
class HistoricalDataProvider(Protocol):
    async def fetch(
        self, pair: str, timeframe: str, start: datetime, end: datetime
    ) -> list[Candle]: ...


def filter_range(candles: Iterable[Candle], start: datetime, end: datetime) -> list[Candle]:
    """Velas con start <= time <= end (extremos incluidos)."""
    start_ms = datetime_to_ms(start)
    end_ms = datetime_to_ms(end)
    return [c for c in candles if start_ms <= c.time <= end_ms]
