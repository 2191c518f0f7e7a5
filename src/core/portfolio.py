# ============================================================
# src/core/portfolio.py — Ledger de cartera para la simulación
# ------------------------------------------------------------
# - Un activo quote (p.ej. USDT) y un activo base (p.ej. BTC)
#   derivados del par por sufijo.
# - BUY: tamaño = min(riskPerTrade% * balance inicial, quote disponible)
#   y se rechaza (no-op) por debajo del tamaño mínimo.
# - SELL: siempre liquida la posición base completa.
# - Fees en divisa quote (por defecto 10 bps).
# - Valoración mark-to-market: quote + base * precio.
# - Cada simulación tiene su propio Portfolio (sin estado compartido).
# ============================================================

from __future__ import annotations

from datetime import datetime

from loguru import logger

from core.costs import DEFAULT_FEE_RATE, apply_fees, gross_with_fee
from core.types import AssetPosition, SimulatedTrade

# Orden fijo: el primer sufijo que encaje gana.
QUOTE_ASSETS: tuple[str, ...] = ("USDT", "BUSD", "USDC", "BTC", "ETH", "BNB")
DEFAULT_QUOTE = "USDT"
DEFAULT_MIN_TRADE_SIZE = 10.0


# -----------------------------
# Derivación de activos del par
# -----------------------------
def normalize_pair(pair: str) -> str:
    """'btc/usdt' → 'BTCUSDT'."""
    return pair.strip().upper().replace("/", "").replace("-", "")


def quote_asset(pair: str) -> str:
    p = normalize_pair(pair)
    for asset in QUOTE_ASSETS:
        if p.endswith(asset):
            return asset
    return DEFAULT_QUOTE


def base_asset(pair: str) -> str:
    p = normalize_pair(pair)
    for asset in QUOTE_ASSETS:
        if p.endswith(asset):
            return p[: -len(asset)]
    return p


def split_pair(pair: str) -> tuple[str, str]:
    """Devuelve (base, quote). Ej.: 'BTCUSDT' → ('BTC', 'USDT'), 'BTCETH' → ('BTC', 'ETH')."""
    return base_asset(pair), quote_asset(pair)


# -----------------------------
# Clase principal Portfolio
# -----------------------------
class Portfolio:
    """
    Ledger spot largo-only para una única simulación.

    Reglas:
      - Inicializa {quote: (initial_balance, 1.0)}.
      - Solo buy() y sell() mutan los saldos.
      - No hay ventas parciales ni cortos.
    """

    def __init__(
        self,
        pair: str,
        initial_balance: float,
        risk_per_trade: float,
        *,
        fee_rate: float = DEFAULT_FEE_RATE,
        min_trade_size: float = DEFAULT_MIN_TRADE_SIZE,
    ) -> None:
        self.pair: str = pair
        self.base_asset, self.quote_asset = split_pair(pair)
        self.initial_balance: float = float(initial_balance)
        self.risk_per_trade: float = float(risk_per_trade)
        self.fee_rate: float = float(fee_rate)
        self.min_trade_size: float = float(min_trade_size)

        self.positions: dict[str, AssetPosition] = {
            self.quote_asset: AssetPosition(amount=self.initial_balance, average_price=1.0)
        }

        logger.debug(
            "Portfolio creado: pair={} base={} quote={} balance={:.2f} risk={}%",
            self.pair,
            self.base_asset,
            self.quote_asset,
            self.initial_balance,
            self.risk_per_trade,
        )

    # -------- Lectura --------
    def _get_pos(self, asset: str) -> AssetPosition:
        if asset not in self.positions:
            self.positions[asset] = AssetPosition()
        return self.positions[asset]

    @property
    def quote_balance(self) -> float:
        return self._get_pos(self.quote_asset).amount

    @property
    def base_position(self) -> AssetPosition:
        return self._get_pos(self.base_asset)

    @property
    def has_position(self) -> bool:
        return self.base_position.amount > 0.0

    def value(self, price: float) -> float:
        """Valor total en divisa quote marcando la posición base a `price`."""
        return self.quote_balance + self.base_position.amount * price

    def position_size(self) -> float:
        """Importe a gastar en la próxima compra (antes de fees)."""
        risk_amount = self.initial_balance * self.risk_per_trade / 100.0
        return min(risk_amount, self.quote_balance)

    # -------- Ejecución --------
    def buy(self, price: float, executed_at: datetime, reason: str) -> SimulatedTrade | None:
        """
        Compra a `price`. Devuelve el trade o None si se rechaza
        (sin saldo, tamaño < mínimo o precio no válido).
        """
        quote_balance = self.quote_balance
        if quote_balance <= 0.0:
            return None
        if price <= 0.0:
            logger.warning("BUY ignorado: precio no válido ({})", price)
            return None

        spend = self.position_size()
        if spend < self.min_trade_size:
            logger.debug(
                "BUY rechazado: tamaño {:.4f} < mínimo {:.2f}", spend, self.min_trade_size
            )
            return None

        amount = spend / price
        total, fee = gross_with_fee(spend, fee_rate=self.fee_rate)

        # La fee se suma al gasto: con spend == saldo el quote puede quedar ligeramente negativo.
        self.positions[self.quote_asset] = AssetPosition(
            amount=quote_balance - total, average_price=1.0
        )

        current = self.base_position
        new_amount = current.amount + amount
        new_avg = (current.amount * current.average_price + amount * price) / new_amount
        self.positions[self.base_asset] = AssetPosition(amount=new_amount, average_price=new_avg)

        trade = SimulatedTrade(
            type="BUY",
            pair=self.pair,
            price=price,
            amount=amount,
            fee=fee,
            total=total,
            balance_after=self.value(price),
            profit_loss=0.0,
            reason=reason,
            executed_at=executed_at,
        )
        logger.debug(
            "FILL BUY {:.8f} {} @ {:.2f} (spend={:.2f}, fee={:.6f}) | quote={:.2f}",
            amount,
            self.base_asset,
            price,
            spend,
            fee,
            self.quote_balance,
        )
        return trade

    def sell(self, price: float, executed_at: datetime, reason: str) -> SimulatedTrade | None:
        """Liquida toda la posición base. None si no hay posición."""
        position = self.base_position
        if position.amount <= 0.0:
            return None

        amount = position.amount
        proceeds = amount * price
        net, fee = apply_fees(proceeds, fee_rate=self.fee_rate)
        cost_basis = position.average_price * amount
        profit_loss = net - cost_basis

        self.positions[self.base_asset] = AssetPosition()
        self.positions[self.quote_asset] = AssetPosition(
            amount=self.quote_balance + net, average_price=1.0
        )

        trade = SimulatedTrade(
            type="SELL",
            pair=self.pair,
            price=price,
            amount=amount,
            fee=fee,
            total=net,
            balance_after=self.value(price),
            profit_loss=profit_loss,
            reason=reason,
            executed_at=executed_at,
        )
        logger.debug(
            "FILL SELL {:.8f} {} @ {:.2f} (net={:.2f}, fee={:.6f}, pnl={:.2f}) | quote={:.2f}",
            amount,
            self.base_asset,
            price,
            net,
            fee,
            profit_loss,
            self.quote_balance,
        )
        return trade

    def snapshot(self) -> dict[str, AssetPosition]:
        """Copia independiente de las posiciones (para el resultado final)."""
        return {asset: pos.copy() for asset, pos in self.positions.items()}
