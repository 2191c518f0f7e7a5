# src/features/__init__.py
"""
Indicadores técnicos para las estrategias simuladas.

Módulos:
- technical_indicators: funciones puras (SMA, EMA, RSI, MACD, Bollinger, ATR, ...)
- indicator_set: cálculo batch de todos los indicadores de una simulación
"""

from .indicator_set import IndicatorSet, compute_indicators
from .technical_indicators import (
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

__all__ = [
    "IndicatorSet",
    "compute_indicators",
    "sma",
    "ema",
    "rsi",
    "macd",
    "bollinger_bands",
    "atr",
    "stochastic",
    "detect_breakout",
    "support_resistance",
]
