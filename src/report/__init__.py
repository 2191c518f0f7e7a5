"""Reportes y métricas de simulaciones."""

from report.simulation_report import (
    balance_frame,
    replay_final_balance,
    summary,
    trades_frame,
    write_report,
)

__all__ = [
    "balance_frame",
    "replay_final_balance",
    "summary",
    "trades_frame",
    "write_report",
]
