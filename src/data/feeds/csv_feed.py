"""
Carga de velas OHLCV desde CSV (pandas) para simular sin red.

Columnas:
- tiempo: una de `time`, `t`, `timestamp`, `open_time`, `ts` (ms/seg epoch o ISO8601)
- precio: `open`, `high`, `low`, `close` (obligatorias)
- `volume` opcional (0.0 si falta)
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from loguru import logger
import pandas as pd

from core.portfolio import normalize_pair
from core.types import Candle
from data.feeds.base import HistoricalDataError, filter_range

_TS_CANDS: tuple[str, ...] = ("time", "t", "timestamp", "open_time", "ts")
_REQUIRED: tuple[str, ...] = ("open", "high", "low", "close")


def _detect_ts_col(cols) -> str | None:
    for k in _TS_CANDS:
        if k in cols:
            return k
    return None


def _to_epoch_ms(series: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(series, errors="coerce")
    if numeric.notna().all():
        # Valores pequeños → segundos
        if numeric.lt(10_000_000_000).all():
            numeric = numeric * 1000
        return numeric.astype("int64")
    parsed = pd.to_datetime(series, utc=True, errors="coerce")
    if parsed.isna().any():
        raise HistoricalDataError("columna de tiempo con valores no interpretables")
    epoch = pd.Timestamp("1970-01-01", tz="UTC")
    return ((parsed - epoch) // pd.Timedelta(milliseconds=1)).astype("int64")


def candles_from_frame(df: pd.DataFrame) -> list[Candle]:
    """DataFrame OHLCV → lista de Candle (mismo orden que el DataFrame)."""
    ts_col = _detect_ts_col(df.columns)
    if ts_col is None:
        raise HistoricalDataError(
            f"No encuentro columna de tiempo entre {_TS_CANDS}; header={list(df.columns)}"
        )
    missing = [c for c in _REQUIRED if c not in df.columns]
    if missing:
        raise HistoricalDataError(f"Faltan columnas OHLC: {missing}")

    times = _to_epoch_ms(df[ts_col])
    volume = df["volume"] if "volume" in df.columns else pd.Series(0.0, index=df.index)
    return [
        Candle(
            time=int(t),
            open=float(o),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=float(v),
        )
        for t, o, h, lo, c, v in zip(
            times, df["open"], df["high"], df["low"], df["close"], volume, strict=True
        )
    ]


def load_candles_csv(path: str | Path) -> list[Candle]:
    p = Path(path).expanduser()
    try:
        df = pd.read_csv(p)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise HistoricalDataError(f"No se pudo leer {p}: {e}") from e
    return candles_from_frame(df)


class CsvCandleProvider:
    """
    Busca `<data_dir>/<PAIR>_<timeframe>.csv` (p.ej. data/candles/BTCUSDT_1h.csv)
    o usa `path` fijo si se pasa.
    """

    def __init__(self, data_dir: str | Path = "data/candles", *, path: str | Path | None = None):
        self.data_dir = Path(data_dir)
        self.path = Path(path) if path is not None else None

    def resolve_path(self, pair: str, timeframe: str) -> Path:
        if self.path is not None:
            return self.path
        return self.data_dir / f"{normalize_pair(pair)}_{timeframe}.csv"

    async def fetch(
        self, pair: str, timeframe: str, start: datetime, end: datetime
    ) -> list[Candle]:
        path = self.resolve_path(pair, timeframe)
        if not path.exists():
            raise HistoricalDataError(f"No existe el CSV de velas: {path}")
        candles = filter_range(load_candles_csv(path), start, end)
        logger.debug("CSV {}: {} velas en rango", path, len(candles))
        return candles
