# src/core/sim_engine.py

"""
SimulationEngine: orquestador del backtest de una estrategia
(proveedor de velas → indicadores → señales → ledger → resultado).

✅ Principios:
- La única E/S es la descarga de velas (un `await` por ejecución).
- Indicadores calculados UNA vez sobre la serie completa; el loop es síncrono.
- Cada ejecución crea su propio Portfolio: sin estado compartido entre simulaciones.
- Sin reintentos: si no hay velas la ejecución falla.

Estados: idle → fetching → ready → running → complete.

Por cada vela:
  1) valor de cartera (antes de operar) → balance_history
  2) pico y max drawdown (aunque no haya trade)
  3) señal → como mucho UN trade (BUY o SELL)

📦 Uso típico:
    from core.sim_engine import SimulationEngine

    engine = SimulationEngine(definition, initial_balance=10_000)
    result = await engine.run(provider, start, end)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from loguru import logger

from core.config_loader import SimulationSettings
from core.portfolio import Portfolio
from core.types import BalancePoint, Candle, SimulatedTrade, SimulationResult, ms_to_datetime
from data.feeds.base import HistoricalDataProvider
from features.indicator_set import compute_indicators
from strategies.base import StrategyDefinition, parse_parameters
from strategies.signals import SignalContext, generate_signal

NO_DATA_MESSAGE = "No historical data available for simulation"


class NoHistoricalDataError(RuntimeError):
    """El proveedor no devolvió velas para el rango pedido."""

    def __init__(self, message: str = NO_DATA_MESSAGE) -> None:
        super().__init__(message)


class SimulationCancelled(RuntimeError):
    """La ejecución se detuvo entre velas por petición del llamador."""


class EngineState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    RUNNING = "running"
    COMPLETE = "complete"


# ----------------------------- #
#  Métricas internas
# ----------------------------- #


@dataclass
class DrawdownTracker:
    """Pico de valor y drawdown máximo (en %)."""

    peak: float
    max_drawdown: float = 0.0

    def update(self, value: float) -> None:
        if value > self.peak:
            self.peak = value
        if self.peak > 0.0:
            drawdown = (self.peak - value) / self.peak * 100.0
            if drawdown > self.max_drawdown:
                self.max_drawdown = drawdown


# ----------------------------- #
#  Engine principal
# ----------------------------- #


class SimulationEngine:
    """Motor de simulación de una estrategia sobre velas históricas."""

    def __init__(
        self,
        definition: StrategyDefinition,
        initial_balance: float,
        settings: SimulationSettings | None = None,
    ) -> None:
        if initial_balance <= 0:
            raise ValueError(f"initial_balance debe ser > 0 (recibido {initial_balance})")
        self.definition = definition
        self.initial_balance = float(initial_balance)
        self.settings = settings or SimulationSettings()
        self.params = parse_parameters(definition)
        self.state = EngineState.IDLE

    # API asíncrona (con descarga)
    async def run(
        self,
        provider: HistoricalDataProvider,
        start: datetime,
        end: datetime,
        *,
        should_stop: Callable[[], bool] | None = None,
    ) -> SimulationResult:
        """Descarga las velas y ejecuta la simulación completa."""
        d = self.definition
        logger.info(
            "Simulación '{}' {} {} ({}) desde {} hasta {}",
            d.name or d.pair,
            d.pair,
            getattr(d.strategy_type, "value", d.strategy_type),
            d.timeframe,
            start.isoformat(),
            end.isoformat(),
        )

        self.state = EngineState.FETCHING
        try:
            candles = await provider.fetch(d.pair, d.timeframe, start, end)
        except Exception:
            self.state = EngineState.IDLE
            raise
        if not candles:
            self.state = EngineState.IDLE
            raise NoHistoricalDataError()

        logger.info("Recibidas {} velas para la simulación", len(candles))
        return self.simulate(candles, should_stop=should_stop)

    # Núcleo síncrono (sin E/S)
    def simulate(
        self,
        candles: Sequence[Candle],
        *,
        should_stop: Callable[[], bool] | None = None,
    ) -> SimulationResult:
        """Recorre `candles` en orden y devuelve el resultado. No modifica las velas."""
        if not candles:
            raise NoHistoricalDataError()

        d = self.definition
        indicators = compute_indicators(
            candles,
            rsi_period=self.params.indicators.rsi_period,
            bollinger_period=self.params.indicators.bollinger_period,
        )
        portfolio = Portfolio(
            d.pair,
            self.initial_balance,
            d.risk_per_trade,
            fee_rate=self.settings.trading_fee_rate,
            min_trade_size=self.settings.min_trade_size,
        )
        trades: list[SimulatedTrade] = []
        history: list[BalancePoint] = []
        tracker = DrawdownTracker(peak=self.initial_balance)
        self.state = EngineState.READY

        self.state = EngineState.RUNNING
        for i, candle in enumerate(candles):
            if should_stop is not None and should_stop():
                self.state = EngineState.IDLE
                raise SimulationCancelled(f"simulación cancelada en la vela {i}")

            executed_at = ms_to_datetime(candle.time)
            value = portfolio.value(candle.close)
            history.append(BalancePoint(timestamp=executed_at, balance=value))
            tracker.update(value)

            ctx = SignalContext(
                index=i,
                candles=candles,
                indicators=indicators,
                position=portfolio.base_position,
                params=self.params,
            )
            signal = generate_signal(ctx, d.strategy_type, self.settings.warmup_bars)

            trade: SimulatedTrade | None = None
            if signal.buy:
                trade = portfolio.buy(candle.close, executed_at, signal.reason)
            elif signal.sell:
                trade = portfolio.sell(candle.close, executed_at, signal.reason)
            if trade is not None:
                trades.append(trade)

        final_balance = portfolio.value(candles[-1].close)
        total_profit_loss = final_balance - self.initial_balance
        result = SimulationResult(
            trades=trades,
            final_balance=final_balance,
            total_profit_loss=total_profit_loss,
            winning_trades=sum(1 for t in trades if t.profit_loss > 0),
            losing_trades=sum(1 for t in trades if t.profit_loss < 0),
            max_drawdown=tracker.max_drawdown,
            return_percentage=total_profit_loss / self.initial_balance * 100.0,
            balance_history=history,
            portfolio=portfolio.snapshot(),
        )
        self.state = EngineState.COMPLETE

        logger.info(
            "Simulación completada: {} trades, balance final {:.2f} ({:+.2f}%), max DD {:.2f}%",
            len(trades),
            result.final_balance,
            result.return_percentage,
            result.max_drawdown,
        )
        return result


async def run_simulation(
    definition: StrategyDefinition,
    initial_balance: float,
    start: datetime,
    end: datetime,
    provider: HistoricalDataProvider,
    *,
    settings: SimulationSettings | None = None,
) -> SimulationResult:
    """Atajo: crea un SimulationEngine y lo ejecuta."""
    engine = SimulationEngine(definition, initial_balance, settings)
    return await engine.run(provider, start, end)
