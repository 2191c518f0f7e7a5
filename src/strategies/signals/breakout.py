"""Breakout above resistance / breakdown below support."""

from __future__ import annotations

from strategies.base import StrategyType, register_signal
from strategies.signals.types import Signal, SignalContext, is_valid


@register_signal(StrategyType.BREAKOUT)
def breakout_signal(ctx: SignalContext) -> Signal:
    # The breakout flag is direction-agnostic; direction comes from price vs levels.
    result = ctx.indicators.breakout
    i = ctx.index
    resistance = result.resistance[i]
    support = result.support[i]
    if not bool(result.breakouts[i]) or not is_valid(resistance, support):
        return Signal.hold()

    price = ctx.price
    if not ctx.has_position and price > resistance:
        return Signal.buy_signal("Breakout above resistance")

    if ctx.has_position and price < support:
        return Signal.sell_signal("Breakdown below support")

    return Signal.hold()
