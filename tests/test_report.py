from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json

import pandas as pd
import pytest

from core.types import AssetPosition, BalancePoint, SimulatedTrade, SimulationResult
from report import balance_frame, replay_final_balance, summary, trades_frame, write_report
from report.performance import balance_returns, profit_factor, sharpe_ratio, win_rate

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _trade(side, pnl, hours, fee=1.0):
    return SimulatedTrade(
        type=side,
        pair="BTCUSDT",
        price=100.0,
        amount=10.0,
        fee=fee,
        total=1000.0,
        balance_after=10_000.0 + pnl,
        profit_loss=pnl,
        reason=f"{side} test",
        executed_at=T0 + timedelta(hours=hours),
    )


@pytest.fixture
def result():
    trades = [
        _trade("BUY", 0.0, 1),
        _trade("SELL", 50.0, 2),
        _trade("BUY", 0.0, 3),
        _trade("SELL", -20.0, 4),
    ]
    balances = [10_000.0, 9_999.0, 10_049.0, 10_048.0, 10_028.0]
    history = [BalancePoint(T0 + timedelta(hours=i), b) for i, b in enumerate(balances)]
    return SimulationResult(
        trades=trades,
        final_balance=10_028.0,
        total_profit_loss=28.0,
        winning_trades=1,
        losing_trades=1,
        max_drawdown=0.2,
        return_percentage=0.28,
        balance_history=history,
        portfolio={"USDT": AssetPosition(10_028.0, 1.0), "BTC": AssetPosition()},
    )


def test_performance_helpers():
    assert balance_returns([100.0, 110.0, 99.0]) == pytest.approx([0.1, -0.1])
    assert balance_returns([100.0]) == []
    assert sharpe_ratio([0.01, 0.01]) == 0.0
    assert sharpe_ratio([0.02, 0.0]) == pytest.approx(0.01 / (0.02**2 / 2) ** 0.5)
    assert profit_factor([50.0, -20.0]) == pytest.approx(2.5)
    assert profit_factor([5.0]) == float("inf")
    assert profit_factor([]) == 0.0
    assert win_rate([50.0, -20.0, 0.0, 1.0]) == 0.5
    assert win_rate([]) == 0.0


def test_trades_frame(result):
    df = trades_frame(result)
    assert list(df["type"]) == ["BUY", "SELL", "BUY", "SELL"]
    assert df["fee"].sum() == pytest.approx(4.0)
    assert df.loc[1, "executed_at"] == "2024-01-01T02:00:00+00:00"


def test_empty_frames_keep_columns():
    empty = SimulationResult([], 1.0, 0.0, 0, 0, 0.0, 0.0, [])
    assert trades_frame(empty).empty
    assert "reason" in trades_frame(empty).columns
    assert list(balance_frame(empty).columns) == ["timestamp", "balance"]
    assert replay_final_balance(empty) == 0.0


def test_summary(result):
    s = summary(result)
    assert s["trades"] == 4
    assert s["buys"] == 2
    assert s["sells"] == 2
    assert s["win_rate"] == 0.5
    assert s["profit_factor"] == pytest.approx(2.5)
    assert s["total_fees"] == pytest.approx(4.0)
    assert s["final_balance"] == 10_028.0
    assert s["portfolio"]["USDT"] == {"amount": 10_028.0, "average_price": 1.0}
    assert isinstance(s["sharpe_ratio"], float)


def test_replay_final_balance(result):
    assert replay_final_balance(result) == result.final_balance


def test_write_report(result, tmp_path):
    paths = write_report(result, tmp_path / "out")

    assert set(paths) == {"trades", "balance", "summary"}
    trades = pd.read_csv(paths["trades"])
    balance = pd.read_csv(paths["balance"])
    data = json.loads(paths["summary"].read_text(encoding="utf-8"))

    assert len(trades) == 4
    assert balance["balance"].iloc[-1] == 10_028.0
    assert data["sells"] == 2
    assert data["max_drawdown"] == 0.2
