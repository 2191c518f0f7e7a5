"""MACD / signal line crossover."""

from __future__ import annotations

from strategies.base import StrategyType, register_signal
from strategies.signals.types import Signal, SignalContext, is_valid


@register_signal(StrategyType.MACD_CROSSOVER)
def macd_crossover_signal(ctx: SignalContext) -> Signal:
    i = ctx.index
    if i < 1:
        return Signal.hold()

    macd_line = ctx.indicators.macd.macd
    signal_line = ctx.indicators.macd.signal
    macd, signal = macd_line[i], signal_line[i]
    prev_macd, prev_signal = macd_line[i - 1], signal_line[i - 1]
    if not is_valid(macd, signal, prev_macd, prev_signal):
        return Signal.hold()

    # Bullish: MACD crosses above signal
    if not ctx.has_position and prev_macd <= prev_signal and macd > signal:
        return Signal.buy_signal("MACD bullish crossover")

    # Bearish: MACD crosses below signal
    if ctx.has_position and prev_macd >= prev_signal and macd < signal:
        return Signal.sell_signal("MACD bearish crossover")

    return Signal.hold()
