"""Trend following: SMA20 / SMA50 golden and death crosses."""

from __future__ import annotations

from strategies.base import StrategyType, register_signal
from strategies.signals.types import Signal, SignalContext, is_valid


@register_signal(StrategyType.TREND_FOLLOWING)
def trend_following_signal(ctx: SignalContext) -> Signal:
    i = ctx.index
    if i < 1:
        return Signal.hold()

    sma20, sma50 = ctx.indicators.sma20, ctx.indicators.sma50
    fast, slow = sma20[i], sma50[i]
    prev_fast, prev_slow = sma20[i - 1], sma50[i - 1]
    if not is_valid(fast, slow, prev_fast, prev_slow):
        return Signal.hold()

    if not ctx.has_position and prev_fast <= prev_slow and fast > slow:
        return Signal.buy_signal("Golden cross (SMA20 > SMA50)")

    if ctx.has_position and prev_fast >= prev_slow and fast < slow:
        return Signal.sell_signal("Death cross (SMA20 < SMA50)")

    return Signal.hold()
