# src/report/simulation_report.py

"""
Reporte de una simulación: DataFrames, resumen y escritura a disco.

API:
- trades_frame(result) -> pd.DataFrame
- balance_frame(result) -> pd.DataFrame
- summary(result) -> dict
- replay_final_balance(result) -> float
- write_report(result, out_dir) -> dict[str, Path]
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from loguru import logger
import pandas as pd

from core.types import BalanceRow, SimulationResult, TradeRow
from report.performance import balance_returns, profit_factor, sharpe_ratio, win_rate

TRADE_COLUMNS = list(TradeRow.__annotations__)
BALANCE_COLUMNS = list(BalanceRow.__annotations__)


def trade_rows(result: SimulationResult) -> list[TradeRow]:
    return [
        TradeRow(
            executed_at=t.executed_at.isoformat(),
            type=t.type,
            pair=t.pair,
            price=t.price,
            amount=t.amount,
            fee=t.fee,
            total=t.total,
            balance_after=t.balance_after,
            profit_loss=t.profit_loss,
            reason=t.reason,
        )
        for t in result.trades
    ]


def trades_frame(result: SimulationResult) -> pd.DataFrame:
    return pd.DataFrame(trade_rows(result), columns=TRADE_COLUMNS)


def balance_frame(result: SimulationResult) -> pd.DataFrame:
    rows = [
        BalanceRow(timestamp=p.timestamp.isoformat(), balance=p.balance)
        for p in result.balance_history
    ]
    return pd.DataFrame(rows, columns=BALANCE_COLUMNS)


def replay_final_balance(result: SimulationResult) -> float:
    """Balance en el último timestamp registrado (0.0 si no hay historial)."""
    if not result.balance_history:
        return 0.0
    last = max(result.balance_history, key=lambda p: p.timestamp)
    return last.balance


def summary(result: SimulationResult) -> dict[str, Any]:
    closed = [t.profit_loss for t in result.trades if t.type == "SELL"]
    balances = [p.balance for p in result.balance_history]
    pf = profit_factor(closed)
    return {
        "trades": len(result.trades),
        "buys": sum(1 for t in result.trades if t.type == "BUY"),
        "sells": len(closed),
        "winning_trades": result.winning_trades,
        "losing_trades": result.losing_trades,
        "win_rate": win_rate(closed),
        "profit_factor": None if math.isinf(pf) else pf,
        "final_balance": result.final_balance,
        "total_profit_loss": result.total_profit_loss,
        "return_percentage": result.return_percentage,
        "max_drawdown": result.max_drawdown,
        "total_fees": result.total_fees,
        "sharpe_ratio": sharpe_ratio(balance_returns(balances)),
        "portfolio": {
            asset: {"amount": pos.amount, "average_price": pos.average_price}
            for asset, pos in result.portfolio.items()
        },
    }


def write_report(result: SimulationResult, out_dir: str | Path) -> dict[str, Path]:
    """Escribe trades.csv, balance.csv y summary.json en `out_dir`."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    paths = {
        "trades": out / "trades.csv",
        "balance": out / "balance.csv",
        "summary": out / "summary.json",
    }
    trades_frame(result).to_csv(paths["trades"], index=False)
    balance_frame(result).to_csv(paths["balance"], index=False)
    paths["summary"].write_text(json.dumps(summary(result), indent=2), encoding="utf-8")

    logger.info("Reporte escrito en {}", out)
    return paths
