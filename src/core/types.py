# src/core/types.py
"""
Tipos y estructuras comunes del simulador de estrategias.

- `Candle`: vela OHLCV inmutable (time en ms epoch UTC).
- `AssetPosition`: saldo + precio medio por activo.
- `SimulatedTrade`: registro append-only de cada ejecución simulada.
- `BalancePoint` / `SimulationResult`: salida final de una ejecución.

Las filas `TradeRow` / `BalanceRow` son la forma "plana" que usan
los reportes (CSV / DataFrame).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, TypedDict

# ------------------------------ Literales ---------------------------------

TradeSide = Literal["BUY", "SELL"]


# ------------------------------ Helpers -----------------------------------


def ms_to_datetime(ts_ms: int | float) -> datetime:
    """Convierte epoch en milisegundos a datetime UTC."""
    return datetime.fromtimestamp(float(ts_ms) / 1000.0, tz=timezone.utc)


def datetime_to_ms(dt: datetime) -> int:
    """datetime → epoch ms. Si no trae tz se asume UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


# ------------------------------ Dataclasses -------------------------------


@dataclass(frozen=True)
class Candle:
    """Vela OHLCV. `time` = apertura de la vela en ms epoch."""

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def dt(self) -> datetime:
        return ms_to_datetime(self.time)


@dataclass
class AssetPosition:
    amount: float = 0.0
    average_price: float = 0.0  # solo tiene sentido si amount > 0

    @property
    def is_open(self) -> bool:
        return self.amount > 0.0

    def copy(self) -> AssetPosition:
        return AssetPosition(amount=self.amount, average_price=self.average_price)


@dataclass(frozen=True)
class SimulatedTrade:
    type: TradeSide
    pair: str
    price: float
    amount: float  # cantidad de activo base
    fee: float  # en activo quote
    total: float  # BUY: gasto + fee; SELL: neto tras fee
    balance_after: float  # valor de cartera tras ejecutar
    profit_loss: float  # 0 en BUY; neto - coste en SELL
    reason: str
    executed_at: datetime


@dataclass(frozen=True)
class BalancePoint:
    timestamp: datetime
    balance: float


@dataclass(frozen=True)
class SimulationResult:
    trades: list[SimulatedTrade]
    final_balance: float
    total_profit_loss: float
    winning_trades: int
    losing_trades: int
    max_drawdown: float  # en %
    return_percentage: float
    balance_history: list[BalancePoint]
    portfolio: dict[str, AssetPosition] = field(default_factory=dict)

    @property
    def total_fees(self) -> float:
        return sum(t.fee for t in self.trades)


# ------------------------------ TypedDicts --------------------------------


class TradeRow(TypedDict):
    executed_at: str
    type: str
    pair: str
    price: float
    amount: float
    fee: float
    total: float
    balance_after: float
    profit_loss: float
    reason: str


class BalanceRow(TypedDict):
    timestamp: str
    balance: float


__all__ = [
    "TradeSide",
    "Candle",
    "AssetPosition",
    "SimulatedTrade",
    "BalancePoint",
    "SimulationResult",
    "TradeRow",
    "BalanceRow",
    "ms_to_datetime",
    "datetime_to_ms",
]
