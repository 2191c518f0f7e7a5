"""Grid trading around a fixed base price."""

from __future__ import annotations

from strategies.base import GridParams, StrategyType, register_signal
from strategies.signals.types import Signal, SignalContext


@register_signal(StrategyType.GRID_TRADING)
def grid_trading_signal(ctx: SignalContext) -> Signal:
    """
    BUY when price is at least `grid_size` below the base price (flat),
    SELL when at least `grid_size` above it (holding).
    Base price defaults to the first candle's close.
    """
    params = ctx.params.type_params
    assert isinstance(params, GridParams)
    base_price = params.base_price if params.base_price is not None else ctx.candles[0].close
    if base_price <= 0:
        return Signal.hold()

    change = (ctx.price - base_price) / base_price

    if not ctx.has_position and change <= -params.grid_size:
        return Signal.buy_signal(f"Grid buy at {change * 100:.2f}%")

    if ctx.has_position and change >= params.grid_size:
        return Signal.sell_signal(f"Grid sell at {change * 100:.2f}%")

    return Signal.hold()
