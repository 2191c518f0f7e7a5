"""RSI oversold/overbought signal."""

from __future__ import annotations

from strategies.base import RsiParams, StrategyType, register_signal
from strategies.signals.types import Signal, SignalContext, is_valid


@register_signal(StrategyType.RSI_OVERSOLD)
def rsi_oversold_signal(ctx: SignalContext) -> Signal:
    """
    BUY when flat and RSI < buy_threshold.
    SELL when holding and RSI > sell_threshold.
    """
    params = ctx.params.type_params
    assert isinstance(params, RsiParams)
    value = ctx.indicators.rsi[ctx.index]
    if not is_valid(value):
        return Signal.hold()

    if not ctx.has_position and value < params.buy_threshold:
        return Signal.buy_signal(f"RSI oversold ({value:.2f})")

    if ctx.has_position and value > params.sell_threshold:
        return Signal.sell_signal(f"RSI overbought ({value:.2f})")

    return Signal.hold()
