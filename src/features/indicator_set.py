# src/features/indicator_set.py
"""
IndicatorSet: todos los indicadores que consumen las estrategias,
calculados UNA vez por simulación sobre la serie completa de velas.

Todos los arrays están alineados 1:1 con las velas (NaN en warm-up).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from core.types import Candle
from features.technical_indicators import (
    BollingerBands,
    BreakoutResult,
    MACDResult,
    StochasticResult,
    SupportResistance,
    atr,
    bollinger_bands,
    detect_breakout,
    ema,
    macd,
    rsi,
    sma,
    stochastic,
    support_resistance,
)


@dataclass(frozen=True)
class IndicatorSet:
    closes: np.ndarray
    rsi: np.ndarray
    macd: MACDResult
    sma20: np.ndarray
    sma50: np.ndarray
    ema20: np.ndarray
    bollinger: BollingerBands
    stochastic: StochasticResult
    breakout: BreakoutResult
    levels: SupportResistance
    atr: np.ndarray

    def __len__(self) -> int:
        return len(self.closes)


def compute_indicators(
    candles: Sequence[Candle],
    *,
    rsi_period: int = 14,
    bollinger_period: int = 20,
) -> IndicatorSet:
    """Calcula el IndicatorSet completo. No modifica las velas."""
    closes = np.fromiter((c.close for c in candles), dtype=float)
    return IndicatorSet(
        closes=closes,
        rsi=rsi(closes, rsi_period),
        macd=macd(closes),
        sma20=sma(closes, 20),
        sma50=sma(closes, 50),
        ema20=ema(closes, 20),
        bollinger=bollinger_bands(closes, bollinger_period),
        stochastic=stochastic(candles),
        breakout=detect_breakout(closes),
        levels=support_resistance(candles),
        atr=atr(candles),
    )
