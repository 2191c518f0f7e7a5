# src/core/costs.py
from __future__ import annotations

"""
Cálculo de costes de ejecución (comisiones).

Responsabilidad
---------------
- Comisiones como proporción (rate) o en bps sobre un notional.
- Helpers puros: sin efectos secundarios, sin logs, sin disco.

API pública
-----------
- fee_amount(notional, fee_rate=..., fee_bps=...) -> float
- apply_fees(notional, ...) -> (neto, fee)
- gross_with_fee(notional, ...) -> (total_debitado, fee)

Notas
-----
- La comisión por defecto del simulador es 0.001 (10 bps, taker Binance spot).
"""

DEFAULT_FEE_RATE = 0.001


# ==============================
# Helpers
# ==============================
def _rate_from_bps_or_rate(*, bps: float | None, rate: float | None) -> float:
    """Devuelve un ratio (0.0–1.0) a partir de 'bps' o 'rate'. 'rate' tiene prioridad."""
    if rate is not None:
        if rate < 0:
            raise ValueError("rate no puede ser negativo.")
        return rate
    if bps is not None:
        if bps < 0:
            raise ValueError("bps no puede ser negativo.")
        return bps / 10_000.0
    return DEFAULT_FEE_RATE


def _ensure_non_negative(value: float, name: str) -> None:
    if value < 0:
        raise ValueError(f"{name} no puede ser negativo.")


# ==============================
# API pública
# ==============================
def fee_amount(
    notional: float,
    *,
    fee_rate: float | None = None,
    fee_bps: float | None = None,
) -> float:
    """Comisión en divisa quote para un notional dado."""
    _ensure_non_negative(notional, "notional")
    return notional * _rate_from_bps_or_rate(bps=fee_bps, rate=fee_rate)


def apply_fees(
    notional: float,
    *,
    fee_rate: float | None = None,
    fee_bps: float | None = None,
) -> tuple[float, float]:
    """
    Aplica comisiones a un notional de VENTA y devuelve (neto, fee).
    """
    fee = fee_amount(notional, fee_rate=fee_rate, fee_bps=fee_bps)
    return notional - fee, fee


def gross_with_fee(
    notional: float,
    *,
    fee_rate: float | None = None,
    fee_bps: float | None = None,
) -> tuple[float, float]:
    """
    Para COMPRAS: la fee se suma al gasto. Devuelve (total_debitado, fee).
    """
    fee = fee_amount(notional, fee_rate=fee_rate, fee_bps=fee_bps)
    return notional + fee, fee
