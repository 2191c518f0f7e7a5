from __future__ import annotations

import pytest

from core.types import AssetPosition
from features.indicator_set import compute_indicators
from strategies.base import StrategyDefinition, StrategyType, list_signal_handlers, parse_parameters
from strategies.signals import DEFAULT_WARMUP_BARS, Signal, SignalContext, generate_signal


def _signal(make_candles, closes, stype, index, *, position=None, warmup=0, **params):
    definition = StrategyDefinition(pair="BTCUSDT", strategy_type=stype, parameters=params)
    parsed = parse_parameters(definition)
    candles = make_candles(closes)
    indicators = compute_indicators(
        candles,
        rsi_period=parsed.indicators.rsi_period,
        bollinger_period=parsed.indicators.bollinger_period,
    )
    ctx = SignalContext(
        index=index,
        candles=candles,
        indicators=indicators,
        position=position or AssetPosition(),
        params=parsed,
    )
    return generate_signal(ctx, definition.strategy_type, warmup), indicators


def _holding(price=100.0):
    return AssetPosition(amount=1.0, average_price=price)


# ------------------------------ Signal ------------------------------


def test_signal_cannot_be_buy_and_sell():
    with pytest.raises(ValueError):
        Signal(buy=True, sell=True)
    assert Signal.hold().is_hold
    assert Signal.buy_signal("x").buy


def test_every_strategy_type_has_a_handler():
    assert set(list_signal_handlers()) == set(StrategyType)


def test_default_warmup_is_50():
    assert DEFAULT_WARMUP_BARS == 50


# ------------------------------ dispatch ------------------------------


def test_warmup_suppresses_signals(make_candles, rsi_dip_closes):
    sig, _ = _signal(make_candles, rsi_dip_closes, "rsi_oversold", 55, warmup=56)
    assert sig.is_hold


def test_unknown_type_holds(make_candles, rsi_dip_closes):
    sig, _ = _signal(make_candles, rsi_dip_closes, "martingale", 55)
    assert sig.is_hold
    assert sig.reason == "Unknown strategy type"


def test_stop_loss_overrides_strategy(make_candles):
    closes = [100.0] * 60 + [94.0]
    sig, _ = _signal(make_candles, closes, "dca", 60, position=_holding(), interval=1, stopLoss=5)
    assert sig.sell
    assert sig.reason == "Stop loss hit (-6.00%)"


def test_take_profit(make_candles):
    closes = [100.0] * 60 + [111.0]
    sig, _ = _signal(make_candles, closes, "grid_trading", 60, position=_holding(), takeProfit=10)
    assert sig.sell
    assert sig.reason == "Take profit hit (11.00%)"


def test_risk_levels_ignored_when_flat(make_candles):
    closes = [100.0] * 60 + [94.0]
    sig, _ = _signal(make_candles, closes, "mean_reversion", 60, stopLoss=5)
    assert not sig.sell


# ------------------------------ handlers ------------------------------


def test_rsi_oversold_buy(make_candles, rsi_dip_closes):
    sig, _ = _signal(make_candles, rsi_dip_closes, "rsi_oversold", 55, buyThreshold=30)
    assert sig.buy
    assert sig.reason == "RSI oversold (28.57)"


def test_rsi_overbought_sell(make_candles):
    closes = [100.0 + i for i in range(30)]
    sig, _ = _signal(make_candles, closes, "rsi_oversold", 20, position=_holding(50.0))
    assert sig.sell
    assert sig.reason == "RSI overbought (100.00)"


def test_rsi_no_buy_when_holding(make_candles, rsi_dip_closes):
    sig, _ = _signal(make_candles, rsi_dip_closes, "rsi_oversold", 55, position=_holding(130.0))
    assert sig.is_hold


def test_macd_bullish_crossover(make_candles, wavy_closes):
    _, ind = _signal(make_candles, wavy_closes, "macd_crossover", 0)
    m, s = ind.macd.macd, ind.macd.signal
    idx = next(i for i in range(34, len(m)) if m[i - 1] <= s[i - 1] and m[i] > s[i])

    sig, _ = _signal(make_candles, wavy_closes, "macd_crossover", idx)
    assert sig.buy
    assert sig.reason == "MACD bullish crossover"

    sig, _ = _signal(make_candles, wavy_closes, "macd_crossover", idx, position=_holding())
    assert sig.is_hold


def test_macd_bearish_crossover(make_candles, wavy_closes):
    _, ind = _signal(make_candles, wavy_closes, "macd_crossover", 0)
    m, s = ind.macd.macd, ind.macd.signal
    idx = next(i for i in range(34, len(m)) if m[i - 1] >= s[i - 1] and m[i] < s[i])

    sig, _ = _signal(make_candles, wavy_closes, "macd_crossover", idx, position=_holding())
    assert sig.sell
    assert sig.reason == "MACD bearish crossover"


def test_trend_following_golden_and_death_cross(make_candles):
    closes = [200.0 - i for i in range(60)] + [140.0 + 3 * i for i in range(40)]
    closes += [closes[-1] - 4 * i for i in range(1, 41)]
    _, ind = _signal(make_candles, closes, "trend_following", 0)
    fast, slow = ind.sma20, ind.sma50
    golden = next(i for i in range(50, len(closes)) if fast[i - 1] <= slow[i - 1] and fast[i] > slow[i])
    death = next(i for i in range(golden + 1, len(closes)) if fast[i - 1] >= slow[i - 1] and fast[i] < slow[i])

    sig, _ = _signal(make_candles, closes, "trend_following", golden)
    assert sig.reason == "Golden cross (SMA20 > SMA50)"
    assert sig.buy

    sig, _ = _signal(make_candles, closes, "trend_following", death, position=_holding(50.0))
    assert sig.reason == "Death cross (SMA20 < SMA50)"
    assert sig.sell


def test_mean_reversion_bands(make_candles):
    sig, _ = _signal(make_candles, [100.0] * 30 + [90.0], "mean_reversion", 30)
    assert sig.buy
    assert sig.reason == "Price at lower Bollinger Band"

    sig, _ = _signal(make_candles, [100.0] * 30 + [110.0], "mean_reversion", 30, position=_holding())
    assert sig.sell
    assert sig.reason == "Price at upper Bollinger Band"

    sig, _ = _signal(make_candles, [100.0] * 30 + [100.5], "mean_reversion", 30)
    assert sig.is_hold


def test_breakout_directions(make_candles):
    sig, _ = _signal(make_candles, [100.0] * 30 + [110.0], "breakout", 30)
    assert sig.buy
    assert sig.reason == "Breakout above resistance"

    sig, _ = _signal(make_candles, [100.0] * 30 + [90.0], "breakout", 30, position=_holding())
    assert sig.sell
    assert sig.reason == "Breakdown below support"

    # ruptura bajista sin posición: nada
    sig, _ = _signal(make_candles, [100.0] * 30 + [90.0], "breakout", 30)
    assert sig.is_hold


def test_grid_trading_default_base_price(make_candles):
    sig, _ = _signal(make_candles, [100.0] * 10 + [97.0], "grid_trading", 10)
    assert sig.buy
    assert sig.reason == "Grid buy at -3.00%"

    sig, _ = _signal(make_candles, [100.0] * 10 + [103.0], "grid_trading", 10, position=_holding())
    assert sig.sell
    assert sig.reason == "Grid sell at 3.00%"

    sig, _ = _signal(make_candles, [100.0] * 10 + [101.0], "grid_trading", 10)
    assert sig.is_hold


def test_grid_trading_explicit_base_price(make_candles):
    sig, _ = _signal(
        make_candles, [100.0] * 10 + [180.0], "grid_trading", 10, basePrice=200, gridSize=0.05
    )
    assert sig.buy
    assert sig.reason == "Grid buy at -10.00%"


def test_dca_every_interval_regardless_of_position(make_candles):
    closes = [100.0] * 60
    sig, _ = _signal(make_candles, closes, "dca", 56, interval=7)
    assert sig.buy
    assert sig.reason == "DCA buy (interval: 7)"

    sig, _ = _signal(make_candles, closes, "dca", 56, position=_holding(), interval=7)
    assert sig.buy

    sig, _ = _signal(make_candles, closes, "dca", 57, interval=7)
    assert sig.is_hold


# ------------------------------ sin look-ahead ------------------------------


def _signals_up_to(candles, stype, cut, position, **params):
    definition = StrategyDefinition(pair="BTCUSDT", strategy_type=stype, parameters=params)
    parsed = parse_parameters(definition)
    indicators = compute_indicators(candles)
    return [
        generate_signal(
            SignalContext(
                index=i, candles=candles, indicators=indicators, position=position, params=parsed
            ),
            definition.strategy_type,
            DEFAULT_WARMUP_BARS,
        )
        for i in range(cut + 1)
    ]


@pytest.mark.parametrize(
    "stype, params",
    [
        ("grid_trading", {"gridSize": 0.01}),
        ("breakout", {}),
        ("macd_crossover", {}),
        ("rsi_oversold", {"stopLoss": 3, "takeProfit": 4}),
        ("trend_following", {}),
        ("mean_reversion", {}),
        ("dca", {"interval": 3}),
    ],
)
@pytest.mark.parametrize("position", [AssetPosition(), AssetPosition(1.0, 100.0)])
def test_signals_ignore_future_candles(make_candles, wavy_closes, stype, params, position):
    cut = 90
    base = make_candles(wavy_closes)
    altered = make_candles(wavy_closes[: cut + 1] + [c * 0.5 for c in wavy_closes[cut + 1 :]])

    expected = _signals_up_to(base, stype, cut, position, **params)
    actual = _signals_up_to(altered, stype, cut, position, **params)
    assert actual == expected
    # el cambio posterior sí es visible para el motor
    assert altered[cut + 1].close != base[cut + 1].close
