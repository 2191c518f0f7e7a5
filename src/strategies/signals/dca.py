"""Dollar cost averaging: unconditional buy every N bars."""

from __future__ import annotations

from strategies.base import DcaParams, StrategyType, register_signal
from strategies.signals.types import Signal, SignalContext


@register_signal(StrategyType.DCA)
def dca_signal(ctx: SignalContext) -> Signal:
    # No position check: DCA keeps accumulating.
    params = ctx.params.type_params
    assert isinstance(params, DcaParams)
    if ctx.index % params.interval == 0:
        return Signal.buy_signal(f"DCA buy (interval: {params.interval})")
    return Signal.hold()
