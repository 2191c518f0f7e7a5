# src/report/performance.py
from __future__ import annotations

# -----------------------------------------------------------------------------
# Métricas de performance sobre el resultado de una simulación
# (curva de balance por vela + P/L de las ventas).
# -----------------------------------------------------------------------------


def balance_returns(balances: list[float]) -> list[float]:
    """Retornos simples vela a vela de la curva de balance."""
    if len(balances) < 2:
        return []
    out: list[float] = []
    for prev, cur in zip(balances[:-1], balances[1:]):
        out.append(0.0 if prev == 0 else (cur - prev) / prev)
    return out


def sharpe_ratio(returns: list[float], risk_free_rate: float = 0.0) -> float:
    """
    Sharpe (sin anualizar) = (retorno medio - RF) / desviación típica muestral.
    0.0 si no hay al menos dos retornos o la desviación es 0.
    """
    if len(returns) < 2:
        return 0.0
    mean_return = sum(returns) / len(returns)
    variance = sum((r - mean_return) ** 2 for r in returns) / (len(returns) - 1)
    std_return = variance**0.5
    if std_return == 0:
        return 0.0
    return (mean_return - risk_free_rate) / std_return


def profit_factor(closed_pnl: list[float]) -> float:
    """Beneficio bruto / pérdida bruta de las operaciones cerradas."""
    gross_profit = sum(p for p in closed_pnl if p > 0)
    gross_loss = abs(sum(p for p in closed_pnl if p < 0))
    if gross_loss == 0:
        return float("inf") if gross_profit > 0 else 0.0
    return gross_profit / gross_loss


def win_rate(closed_pnl: list[float]) -> float:
    """Ganadoras / operaciones cerradas (en [0, 1])."""
    if not closed_pnl:
        return 0.0
    return sum(1 for p in closed_pnl if p > 0) / len(closed_pnl)
