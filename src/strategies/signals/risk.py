"""Stop loss / take profit override, evaluated before any strategy logic."""

from __future__ import annotations

from strategies.signals.types import Signal, SignalContext


def check_exit_levels(ctx: SignalContext) -> Signal | None:
    """
    Forced SELL when holding and the move from the average entry price
    reaches -|stopLoss| or +takeProfit (both in %). None if neither applies.
    """
    if not ctx.has_position:
        return None

    risk = ctx.params.risk
    if risk.stop_loss is None and risk.take_profit is None:
        return None

    entry = ctx.position.average_price
    if entry <= 0:
        return None
    price_change = (ctx.price - entry) / entry * 100.0

    if risk.stop_loss is not None and price_change <= -abs(risk.stop_loss):
        return Signal.sell_signal(f"Stop loss hit ({price_change:.2f}%)")

    if risk.take_profit is not None and price_change >= risk.take_profit:
        return Signal.sell_signal(f"Take profit hit ({price_change:.2f}%)")

    return None
