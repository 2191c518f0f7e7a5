import math
import sys
from pathlib import Path

import pytest

# Ensure the `src` folder is on sys.path when running pytest so imports like
# `from core import ...` or `from strategies import ...` work without needing
# to install the package. The project root goes too, so `import main` works.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from core.types import Candle  # noqa: E402

HOUR_MS = 3_600_000
START_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z


def build_candles(closes, *, spread=0.5, start_ms=START_MS, step_ms=HOUR_MS):
    """Velas sintéticas: open = close anterior, high/low = close ± spread."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        candles.append(
            Candle(
                time=start_ms + i * step_ms,
                open=float(prev),
                high=float(max(prev, close) + spread),
                low=float(min(prev, close) - spread),
                close=float(close),
                volume=1.0,
            )
        )
        prev = close
    return candles


@pytest.fixture
def make_candles():
    return build_candles


@pytest.fixture
def rsi_dip_closes():
    # Sube 45 velas y luego cae: el RSI(14) baja de 30 por primera vez en la vela 55.
    return [100.0 + i for i in range(46)] + [145.0 - (i - 45) for i in range(46, 60)]


@pytest.fixture
def wavy_closes():
    return [100.0 + 10.0 * math.sin(i / 5.0) + 0.1 * i for i in range(120)]
