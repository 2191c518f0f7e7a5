# src/strategies/base.py
"""
Tipos base para estrategias simuladas.

Incluye:
- `StrategyType`: etiqueta de estrategia (enum).
- `StrategyDefinition`: definición de estrategia tal y como la guarda el usuario
  (par, tipo, timeframe, bolsa de parámetros, riesgo por operación).
- Configuración tipada por tipo de estrategia (`RsiParams`, `GridParams`, ...)
  con sus defaults declarados UNA sola vez, y `parse_parameters()` que
  mapea la bolsa de parámetros a esas estructuras.
- Registro de generadores de señal: register_signal / get_signal_handler / list_signal_handlers.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
import math
from typing import TYPE_CHECKING, Any

from core.portfolio import normalize_pair, split_pair

if TYPE_CHECKING:
    from strategies.signals.types import Signal, SignalContext


class StrategyConfigError(ValueError):
    """Definición de estrategia inválida (par vacío, riesgo fuera de rango, parámetros no numéricos...)."""


# ------------------------------- Tipos -------------------------------------


class StrategyType(str, Enum):
    RSI_OVERSOLD = "rsi_oversold"
    MACD_CROSSOVER = "macd_crossover"
    TREND_FOLLOWING = "trend_following"
    MEAN_REVERSION = "mean_reversion"
    BREAKOUT = "breakout"
    GRID_TRADING = "grid_trading"
    DCA = "dca"

    @classmethod
    def parse(cls, value: StrategyType | str) -> StrategyType | str:
        """Devuelve el enum si la etiqueta es conocida; si no, la cadena tal cual."""
        if isinstance(value, StrategyType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return str(value)


# ------------------------- Parámetros tipados ------------------------------


@dataclass(frozen=True)
class RiskParams:
    """Stop loss / take profit en %. None = desactivado."""

    stop_loss: float | None = None
    take_profit: float | None = None


@dataclass(frozen=True)
class IndicatorParams:
    rsi_period: int = 14
    bollinger_period: int = 20


@dataclass(frozen=True)
class NoParams:
    """Estrategias sin parámetros propios (MACD, tendencia, Bollinger, breakout)."""


@dataclass(frozen=True)
class RsiParams:
    buy_threshold: float = 30.0
    sell_threshold: float = 70.0


@dataclass(frozen=True)
class GridParams:
    grid_size: float = 0.02  # fracción (0.02 = 2%)
    base_price: float | None = None  # None → close de la primera vela


@dataclass(frozen=True)
class DcaParams:
    interval: int = 7  # compra cada N velas


TypeParams = NoParams | RsiParams | GridParams | DcaParams


@dataclass(frozen=True)
class StrategyParams:
    risk: RiskParams = field(default_factory=RiskParams)
    indicators: IndicatorParams = field(default_factory=IndicatorParams)
    type_params: TypeParams = field(default_factory=NoParams)


# ----------------------------- Definición ----------------------------------


@dataclass(frozen=True)
class StrategyDefinition:
    pair: str
    strategy_type: StrategyType | str
    timeframe: str = "1h"
    parameters: Mapping[str, Any] = field(default_factory=dict)
    risk_per_trade: float = 10.0  # % del balance inicial por compra
    name: str = ""

    def __post_init__(self) -> None:
        if not self.pair or not normalize_pair(self.pair):
            raise StrategyConfigError("pair no puede estar vacío")
        base, _quote = split_pair(self.pair)
        if not base:
            raise StrategyConfigError(f"pair sin activo base: {self.pair!r}")
        object.__setattr__(self, "strategy_type", StrategyType.parse(self.strategy_type))
        try:
            risk = float(self.risk_per_trade)
        except (TypeError, ValueError) as e:
            raise StrategyConfigError(f"riskPerTrade no numérico: {self.risk_per_trade!r}") from e
        if not 0.0 <= risk <= 100.0:
            raise StrategyConfigError(f"riskPerTrade debe estar en [0, 100] (recibido {risk})")
        object.__setattr__(self, "risk_per_trade", risk)
        object.__setattr__(self, "parameters", dict(self.parameters or {}))

    @property
    def base_asset(self) -> str:
        return split_pair(self.pair)[0]

    @property
    def quote_asset(self) -> str:
        return split_pair(self.pair)[1]

    @property
    def is_known_type(self) -> bool:
        return isinstance(self.strategy_type, StrategyType)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StrategyDefinition:
        """Acepta claves camelCase (API/JSON) o snake_case (YAML)."""

        def _get(*keys: str, default: Any = None) -> Any:
            for k in keys:
                if k in data and data[k] is not None:
                    return data[k]
            return default

        strategy_type = _get("strategy_type", "strategyType", "type")
        if strategy_type is None:
            raise StrategyConfigError("falta strategyType")
        return cls(
            pair=str(_get("pair", default="")),
            strategy_type=strategy_type,
            timeframe=str(_get("timeframe", default="1h")),
            parameters=_get("parameters", default={}) or {},
            risk_per_trade=_get("risk_per_trade", "riskPerTrade", default=10.0),
            name=str(_get("name", default="")),
        )


# ------------------------ Mapeo de parámetros ------------------------------


def _number(raw: Mapping[str, Any], *keys: str) -> float | None:
    """
    Primer valor numérico "verdadero" entre `keys`. 0 / None / ausente → None,
    de modo que el llamador aplique el default.
    """
    for key in keys:
        if key not in raw or raw[key] is None or raw[key] == "":
            continue
        value = raw[key]
        if isinstance(value, bool):
            raise StrategyConfigError(f"parámetro {key!r} no numérico: {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise StrategyConfigError(f"parámetro {key!r} no numérico: {value!r}") from e
        if math.isnan(number):
            raise StrategyConfigError(f"parámetro {key!r} es NaN")
        if number == 0.0:
            continue
        return number
    return None


def _period(raw: Mapping[str, Any], default: int, *keys: str) -> int:
    value = _number(raw, *keys)
    if value is None:
        return default
    if value < 1:
        raise StrategyConfigError(f"periodo inválido en {keys}: {value}")
    return int(value)


def parse_parameters(definition: StrategyDefinition) -> StrategyParams:
    """Convierte la bolsa de parámetros en configuración tipada para su tipo."""
    raw = definition.parameters

    risk = RiskParams(
        stop_loss=_number(raw, "stopLoss", "stop_loss"),
        take_profit=_number(raw, "takeProfit", "take_profit"),
    )
    indicators = IndicatorParams(
        rsi_period=_period(raw, 14, "indicatorPeriod", "indicator_period", "rsiPeriod", "rsi_period"),
        bollinger_period=_period(
            raw, 20, "indicatorPeriod", "indicator_period", "maPeriod", "ma_period"
        ),
    )

    type_params: TypeParams
    stype = definition.strategy_type
    if stype is StrategyType.RSI_OVERSOLD:
        defaults = RsiParams()
        buy = _number(raw, "buyThreshold", "buy_threshold")
        sell = _number(raw, "sellThreshold", "sell_threshold")
        type_params = RsiParams(
            buy_threshold=defaults.buy_threshold if buy is None else buy,
            sell_threshold=defaults.sell_threshold if sell is None else sell,
        )
    elif stype is StrategyType.GRID_TRADING:
        grid = _number(raw, "gridSize", "grid_size")
        if grid is not None and grid < 0:
            raise StrategyConfigError(f"gridSize no puede ser negativo: {grid}")
        type_params = GridParams(
            grid_size=GridParams().grid_size if grid is None else grid,
            base_price=_number(raw, "basePrice", "base_price"),
        )
    elif stype is StrategyType.DCA:
        type_params = DcaParams(interval=_period(raw, DcaParams().interval, "interval"))
    else:
        type_params = NoParams()

    return StrategyParams(risk=risk, indicators=indicators, type_params=type_params)


# ------------------------------- Registro ---------------------------------

SignalHandler = Callable[["SignalContext"], "Signal"]

_REGISTRY: dict[StrategyType, SignalHandler] = {}


def register_signal(strategy_type: StrategyType) -> Callable[[SignalHandler], SignalHandler]:
    """
    Registra el generador de señales de un tipo de estrategia.

    Uso:
        @register_signal(StrategyType.RSI_OVERSOLD)
        def rsi_signal(ctx: SignalContext) -> Signal: ...
    """

    def _decorator(fn: SignalHandler) -> SignalHandler:
        if strategy_type in _REGISTRY:
            raise ValueError(f"Generador ya registrado para {strategy_type.value}")
        _REGISTRY[strategy_type] = fn
        return fn

    return _decorator


def get_signal_handler(strategy_type: StrategyType | str) -> SignalHandler | None:
    if isinstance(strategy_type, StrategyType):
        return _REGISTRY.get(strategy_type)
    return None


def list_signal_handlers() -> dict[StrategyType, SignalHandler]:
    return dict(_REGISTRY)


__all__ = [
    "StrategyConfigError",
    "StrategyType",
    "RiskParams",
    "IndicatorParams",
    "NoParams",
    "RsiParams",
    "GridParams",
    "DcaParams",
    "TypeParams",
    "StrategyParams",
    "StrategyDefinition",
    "parse_parameters",
    "register_signal",
    "get_signal_handler",
    "list_signal_handlers",
]
