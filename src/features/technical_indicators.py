# src/features/technical_indicators.py
"""
Cálculo de indicadores técnicos en modo *batch* (serie completa).

Indicadores implementados:
- Medias móviles: SMA, EMA
- Momentum: RSI, MACD, Stochastic
- Volatilidad: ATR, Bollinger Bands
- Niveles: breakout (resistencia/soporte previos), soporte/resistencia por máximos/mínimos

Diseño:
- Funciones puras: misma entrada → misma salida, sin estado oculto.
- Cada salida tiene la MISMA longitud que la entrada; las posiciones sin
  historia suficiente (warm-up) valen NaN.
- out[i] depende solo de data[0..i] (sin look-ahead).
- EMA se siembra con la SMA de los `period` primeros valores del array
  recibido (índice 0 del array, no de la serie "lógica"). Por eso una EMA
  calculada sobre un sub-array no es intercambiable con la de la serie
  completa. La señal del MACD depende de esta siembra.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

FloatArray = np.ndarray


# ==================== HELPERS ====================


def _as_array(data: Sequence[float] | np.ndarray | pd.Series) -> FloatArray:
    return np.asarray(data, dtype=float)


def _check_period(period: int, name: str = "period") -> None:
    if int(period) <= 0:
        raise ValueError(f"{name} debe ser > 0 (recibido {period})")


def _nan_array(n: int) -> FloatArray:
    return np.full(n, np.nan, dtype=float)


def ohlc_arrays(candles: Any) -> tuple[FloatArray, FloatArray, FloatArray]:
    """
    Extrae (highs, lows, closes) de una lista de velas (objetos con
    atributos high/low/close) o de un DataFrame con esas columnas.
    """
    if isinstance(candles, pd.DataFrame):
        return (
            candles["high"].to_numpy(dtype=float),
            candles["low"].to_numpy(dtype=float),
            candles["close"].to_numpy(dtype=float),
        )
    highs = np.fromiter((c.high for c in candles), dtype=float)
    lows = np.fromiter((c.low for c in candles), dtype=float)
    closes = np.fromiter((c.close for c in candles), dtype=float)
    return highs, lows, closes


# ==================== RESULTADOS COMPUESTOS ====================


@dataclass(frozen=True)
class MACDResult:
    macd: FloatArray
    signal: FloatArray
    histogram: FloatArray


@dataclass(frozen=True)
class BollingerBands:
    upper: FloatArray
    middle: FloatArray
    lower: FloatArray


@dataclass(frozen=True)
class StochasticResult:
    k: FloatArray
    d: FloatArray


@dataclass(frozen=True)
class BreakoutResult:
    breakouts: np.ndarray  # bool
    resistance: FloatArray
    support: FloatArray


@dataclass(frozen=True)
class SupportResistance:
    support: FloatArray
    resistance: FloatArray


# ==================== MEDIAS ====================


def sma(data: Sequence[float] | np.ndarray, period: int) -> FloatArray:
    """Simple Moving Average: media de los `period` valores que terminan en i."""
    _check_period(period)
    arr = _as_array(data)
    out = _nan_array(len(arr))
    for i in range(period - 1, len(arr)):
        out[i] = arr[i - period + 1 : i + 1].sum() / period
    return out


def ema(data: Sequence[float] | np.ndarray, period: int) -> FloatArray:
    """
    Exponential Moving Average.

    Semilla en el índice period-1 = SMA(data[0:period]); después
    ema[i] = ema[i-1] + (data[i] - ema[i-1]) * 2/(period+1).
    """
    _check_period(period)
    arr = _as_array(data)
    out = _nan_array(len(arr))
    if len(arr) < period:
        return out

    multiplier = 2.0 / (period + 1)
    prev = arr[:period].sum() / period
    out[period - 1] = prev
    for i in range(period, len(arr)):
        prev = (arr[i] - prev) * multiplier + prev
        out[i] = prev
    return out


# ==================== MOMENTUM ====================


def rsi(data: Sequence[float] | np.ndarray, period: int = 14) -> FloatArray:
    """
    Relative Strength Index con medias simples de ganancias/pérdidas
    sobre ventanas de `period` deltas. RSI = 100 si la pérdida media es 0.
    Primer valor válido en el índice `period` (un NaN extra por el diferenciado).
    """
    _check_period(period)
    arr = _as_array(data)
    out = _nan_array(len(arr))
    if len(arr) < 2:
        return out

    changes = np.diff(arr)
    for j in range(period - 1, len(changes)):
        window = changes[j - period + 1 : j + 1]
        gains = window[window > 0].sum()
        losses = -window[window < 0].sum()
        avg_gain = gains / period
        avg_loss = losses / period
        if avg_loss == 0:
            out[j + 1] = 100.0
        else:
            rs = avg_gain / avg_loss
            out[j + 1] = 100.0 - (100.0 / (1.0 + rs))
    return out


def macd(
    data: Sequence[float] | np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    MACD = EMA(fast) - EMA(slow), válido desde el índice slow-1.
    Señal = EMA(signal) calculada sobre los valores válidos del MACD
    (sembrada con sus `signal_period` primeros valores) y re-alineada.
    """
    _check_period(fast_period, "fast_period")
    _check_period(slow_period, "slow_period")
    _check_period(signal_period, "signal_period")
    if fast_period >= slow_period:
        raise ValueError("fast_period debe ser menor que slow_period")

    arr = _as_array(data)
    n = len(arr)
    macd_line = ema(arr, fast_period) - ema(arr, slow_period)

    signal_line = _nan_array(n)
    first_valid = slow_period - 1
    if n > first_valid:
        signal_line[first_valid:] = ema(macd_line[first_valid:], signal_period)

    histogram = macd_line - signal_line
    return MACDResult(macd=macd_line, signal=signal_line, histogram=histogram)


def stochastic(candles: Any, k_period: int = 14, d_period: int = 3) -> StochasticResult:
    """
    %K = (close - mínimo) / (máximo - mínimo) * 100 sobre `k_period` velas
    (50 si el rango es 0). %D = SMA(%K, d_period).
    """
    _check_period(k_period, "k_period")
    _check_period(d_period, "d_period")
    highs, lows, closes = ohlc_arrays(candles)
    n = len(closes)

    k = _nan_array(n)
    for i in range(k_period - 1, n):
        highest = highs[i - k_period + 1 : i + 1].max()
        lowest = lows[i - k_period + 1 : i + 1].min()
        if highest == lowest:
            k[i] = 50.0
        else:
            k[i] = (closes[i] - lowest) / (highest - lowest) * 100.0

    d = _nan_array(n)
    if n >= k_period:
        d[k_period - 1 :] = sma(k[k_period - 1 :], d_period)
    return StochasticResult(k=k, d=d)


# ==================== VOLATILIDAD ====================


def bollinger_bands(
    data: Sequence[float] | np.ndarray, period: int = 20, std_dev: float = 2.0
) -> BollingerBands:
    """Bandas = SMA ± std_dev * desviación típica poblacional de la ventana."""
    middle = sma(data, period)
    arr = _as_array(data)
    upper = _nan_array(len(arr))
    lower = _nan_array(len(arr))

    for i in range(period - 1, len(arr)):
        window = arr[i - period + 1 : i + 1]
        mean = middle[i]
        variance = ((window - mean) ** 2).sum() / period
        width = std_dev * np.sqrt(variance)
        upper[i] = mean + width
        lower[i] = mean - width

    return BollingerBands(upper=upper, middle=middle, lower=lower)


def atr(candles: Any, period: int = 14) -> FloatArray:
    """Average True Range (media simple de los true ranges)."""
    _check_period(period)
    highs, lows, closes = ohlc_arrays(candles)
    n = len(closes)
    if n == 0:
        return _nan_array(0)

    true_ranges = np.empty(n, dtype=float)
    true_ranges[0] = highs[0] - lows[0]
    for i in range(1, n):
        prev_close = closes[i - 1]
        true_ranges[i] = max(
            highs[i] - lows[i],
            abs(highs[i] - prev_close),
            abs(lows[i] - prev_close),
        )
    return sma(true_ranges, period)


# ==================== NIVELES ====================


def detect_breakout(
    prices: Sequence[float] | np.ndarray, period: int = 20, threshold: float = 0.02
) -> BreakoutResult:
    """
    Resistencia/soporte = máx/mín de las `period` velas ANTERIORES (sin la actual).
    breakout[i] = precio > resistencia*(1+threshold) o precio < soporte*(1-threshold).
    Ambas direcciones van en el mismo flag: el llamador compara precio vs niveles.
    """
    _check_period(period)
    arr = _as_array(prices)
    n = len(arr)
    breakouts = np.zeros(n, dtype=bool)
    resistance = _nan_array(n)
    support = _nan_array(n)

    for i in range(period, n):
        window = arr[i - period : i]
        max_price = window.max()
        min_price = window.min()
        resistance[i] = max_price
        support[i] = min_price

        breakout_up = arr[i] > max_price * (1 + threshold)
        breakout_down = arr[i] < min_price * (1 - threshold)
        breakouts[i] = bool(breakout_up or breakout_down)

    return BreakoutResult(breakouts=breakouts, resistance=resistance, support=support)


def support_resistance(candles: Any, period: int = 20) -> SupportResistance:
    """Soporte = mínimo de lows, resistencia = máximo de highs de las `period` velas previas."""
    _check_period(period)
    highs, lows, _closes = ohlc_arrays(candles)
    n = len(highs)
    support = _nan_array(n)
    resistance = _nan_array(n)

    for i in range(period, n):
        support[i] = lows[i - period : i].min()
        resistance[i] = highs[i - period : i].max()

    return SupportResistance(support=support, resistance=resistance)


__all__ = [
    "MACDResult",
    "BollingerBands",
    "StochasticResult",
    "BreakoutResult",
    "SupportResistance",
    "ohlc_arrays",
    "sma",
    "ema",
    "rsi",
    "macd",
    "stochastic",
    "bollinger_bands",
    "atr",
    "detect_breakout",
    "support_resistance",
]
