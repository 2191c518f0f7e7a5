# src/strategies/__init__.py
"""
Estrategias simuladas: definición, parámetros tipados y generadores de señal.

Importar `strategies.signals` registra todos los generadores
(`@register_signal(...)`) y verifica que cada `StrategyType` tenga el suyo.
"""

from __future__ import annotations

from strategies.base import (
    StrategyConfigError,
    StrategyDefinition,
    StrategyParams,
    StrategyType,
    parse_parameters,
)

__all__ = [
    "StrategyConfigError",
    "StrategyDefinition",
    "StrategyParams",
    "StrategyType",
    "parse_parameters",
]
