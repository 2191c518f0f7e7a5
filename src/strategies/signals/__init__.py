"""Signal generation per strategy type."""

from strategies.signals.calculator import DEFAULT_WARMUP_BARS, generate_signal
from strategies.signals.types import Signal, SignalContext

__all__ = ["DEFAULT_WARMUP_BARS", "Signal", "SignalContext", "generate_signal"]
