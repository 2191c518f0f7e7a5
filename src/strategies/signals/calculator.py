"""Main signal dispatcher: risk override first, then the per-type handler."""

from __future__ import annotations

from strategies.base import StrategyType, get_signal_handler, list_signal_handlers
from strategies.signals import (  # noqa: F401  (registration side effects)
    breakout,
    dca,
    grid_trading,
    macd_crossover,
    mean_reversion,
    rsi_oversold,
    trend_following,
)
from strategies.signals.risk import check_exit_levels
from strategies.signals.types import Signal, SignalContext

DEFAULT_WARMUP_BARS = 50


def _check_exhaustive() -> None:
    missing = set(StrategyType) - set(list_signal_handlers())
    if missing:
        names = ", ".join(sorted(t.value for t in missing))
        raise RuntimeError(f"strategy types without a signal handler: {names}")


_check_exhaustive()


def generate_signal(
    ctx: SignalContext,
    strategy_type: StrategyType | str,
    warmup_bars: int = DEFAULT_WARMUP_BARS,
) -> Signal:
    """
    Signal for bar `ctx.index`.

    - Bars before `warmup_bars` never signal.
    - Stop loss / take profit take priority over the strategy.
    - Unknown strategy types hold on every bar (no error).
    """
    if ctx.index < warmup_bars:
        return Signal.hold()

    forced = check_exit_levels(ctx)
    if forced is not None:
        return forced

    handler = get_signal_handler(strategy_type)
    if handler is None:
        return Signal.hold("Unknown strategy type")
    return handler(ctx)
