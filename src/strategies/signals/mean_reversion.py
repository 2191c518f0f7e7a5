"""Mean reversion on Bollinger Bands."""

from __future__ import annotations

from strategies.base import StrategyType, register_signal
from strategies.signals.types import Signal, SignalContext, is_valid


@register_signal(StrategyType.MEAN_REVERSION)
def mean_reversion_signal(ctx: SignalContext) -> Signal:
    """BUY at/below the lower band when flat, SELL at/above the upper band when holding."""
    bands = ctx.indicators.bollinger
    upper = bands.upper[ctx.index]
    lower = bands.lower[ctx.index]
    if not is_valid(upper, lower):
        return Signal.hold()

    price = ctx.price
    if not ctx.has_position and price <= lower:
        return Signal.buy_signal("Price at lower Bollinger Band")

    if ctx.has_position and price >= upper:
        return Signal.sell_signal("Price at upper Bollinger Band")

    return Signal.hold()
