"""Common types for signal calculations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

from core.types import AssetPosition, Candle
from features.indicator_set import IndicatorSet
from strategies.base import StrategyParams


@dataclass(frozen=True)
class Signal:
    """Decision for one bar. At most one of buy/sell is set."""

    buy: bool = False
    sell: bool = False
    reason: str = ""

    def __post_init__(self) -> None:
        if self.buy and self.sell:
            raise ValueError("a signal cannot be both BUY and SELL")

    @property
    def is_hold(self) -> bool:
        return not (self.buy or self.sell)

    @classmethod
    def hold(cls, reason: str = "") -> Signal:
        return cls(reason=reason)

    @classmethod
    def buy_signal(cls, reason: str) -> Signal:
        return cls(buy=True, reason=reason)

    @classmethod
    def sell_signal(cls, reason: str) -> Signal:
        return cls(sell=True, reason=reason)


@dataclass(frozen=True)
class SignalContext:
    """Everything a signal handler may read for bar `index`."""

    index: int
    candles: Sequence[Candle]
    indicators: IndicatorSet
    position: AssetPosition
    params: StrategyParams

    @property
    def price(self) -> float:
        return self.candles[self.index].close

    @property
    def has_position(self) -> bool:
        return self.position.amount > 0.0


def is_valid(*values: float) -> bool:
    """False if any value is NaN (indicator still in warm-up)."""
    return not any(math.isnan(float(v)) for v in values)
