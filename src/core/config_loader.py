# ============================================================
# src/core/config_loader.py — Cargador de configuración
# ------------------------------------------------------------
# OBJETIVO:
#   Leer la configuración del simulador desde YAML
#   (src/config/config.yaml) y aplicar "overrides" desde
#   variables de entorno (.env).
#
# CARACTERÍSTICAS:
#   - Sin cache global: quien llama a load_config() es dueño del dict.
#   - Overrides vía .env (LOG_LEVEL, TRADING_FEE_RATE, DATA_SOURCE, ...).
#   - Validación mínima del esquema (claves imprescindibles).
#   - SimulationSettings: parámetros tipados del ledger / driver.
#
# USO BÁSICO:
#   from core.config_loader import load_config, SimulationSettings
#   cfg = load_config()
#   settings = SimulationSettings.from_config(cfg)
# ============================================================

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, MutableMapping, Optional

from dotenv import load_dotenv
import yaml

# ------------------------------------------------------------
# Constantes
# ------------------------------------------------------------
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "config.yaml"


# ------------------------------------------------------------
# Utilidades internas de tipos / paths
# ------------------------------------------------------------
def _to_bool(value: Any, default: bool = False) -> bool:
    """
    Convierte una cadena/valor a booleano de forma robusta.
    Acepta: "true"/"false", "1"/"0", True/False, etc.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    return s in {"1", "true", "t", "yes", "y", "on"}


def _to_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any, default: int) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _ensure_file_exists(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"No se encontró el archivo de configuración: {path.resolve()}")


def _deep_set(d: MutableMapping[str, Any], keys: Iterable[str], value: Any) -> None:
    """
    Asigna value en un diccionario anidado siguiendo la lista de 'keys'.
    Crea los nodos intermedios si no existen.
    """
    keys = list(keys)
    current = d
    for k in keys[:-1]:
        if k not in current or not isinstance(current[k], dict):
            current[k] = {}
        current = current[k]
    current[keys[-1]] = value


# ------------------------------------------------------------
# Carga YAML + overrides desde .env
# ------------------------------------------------------------
def _load_yaml_config(path: Path) -> Dict[str, Any]:
    _ensure_file_exists(path)
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"El YAML debe mapear a dict en la raíz. Archivo: {path}")
    return data


# Mapeo: ENV_VAR -> (ruta en config.yaml, conversor)
_ENV_TO_CFG: Dict[str, tuple[tuple[str, ...], str]] = {
    "LOG_LEVEL": (("environment", "log_level"), "str"),
    "TRADING_FEE_RATE": (("simulation", "trading_fee_rate"), "float"),
    "MIN_TRADE_SIZE": (("simulation", "min_trade_size"), "float"),
    "WARMUP_BARS": (("simulation", "warmup_bars"), "int"),
    "DATA_SOURCE": (("data", "source"), "str"),
    "DATA_DIR": (("data", "dir"), "str"),
    "BINANCE_TESTNET": (("data", "testnet"), "bool"),
}


def get_nested(cfg: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    Acceso seguro a valores anidados: get_nested(cfg, "data", "source")
    Devuelve `default` si no existe la ruta.
    """
    node: Any = cfg
    for k in keys:
        if not isinstance(node, dict) or k not in node:
            return default
        node = node[k]
    return node


def _apply_env_overrides(cfg: Dict[str, Any]) -> None:
    """Aplica overrides de variables de entorno (.env) sobre `cfg`."""
    load_dotenv(override=False)

    for env_var, (path_keys, kind) in _ENV_TO_CFG.items():
        if env_var not in os.environ:
            continue
        raw = os.getenv(env_var)
        current = get_nested(cfg, *path_keys)

        value: Any
        if kind == "float":
            value = _to_float(raw, default=_to_float(current, 0.0))
        elif kind == "int":
            value = _to_int(raw, default=_to_int(current, 0))
        elif kind == "bool":
            value = _to_bool(raw, default=_to_bool(current))
        else:
            value = raw

        _deep_set(cfg, path_keys, value)


# ------------------------------------------------------------
# Validación mínima del esquema (imprescindibles)
# ------------------------------------------------------------
_REQUIRED_PATHS: List[tuple[str, ...]] = [
    ("environment", "log_level"),
    ("simulation", "trading_fee_rate"),
    ("simulation", "min_trade_size"),
    ("simulation", "warmup_bars"),
    ("data", "source"),
]


def _validate_schema(cfg: Dict[str, Any]) -> None:
    """Lanza ValueError listando las claves que falten."""
    missing: List[str] = []
    for path_keys in _REQUIRED_PATHS:
        node: Any = cfg
        for k in path_keys:
            if not isinstance(node, dict) or k not in node:
                missing.append(".".join(path_keys))
                break
            node = node[k]

    if missing:
        raise ValueError(
            "Faltan claves imprescindibles en config.yaml (o tras overrides): " + ", ".join(missing)
        )


# ------------------------------------------------------------
# API pública
# ------------------------------------------------------------
def load_config(path: Optional[Path | str] = None) -> Dict[str, Any]:
    """
    Lee el YAML (por defecto src/config/config.yaml), aplica overrides
    del entorno y valida el esquema. Cada llamada relee el archivo.
    """
    cfg_path = Path(path) if path else DEFAULT_CONFIG_PATH
    cfg = _load_yaml_config(cfg_path)
    _apply_env_overrides(cfg)
    _validate_schema(cfg)
    return cfg


@dataclass(frozen=True)
class SimulationSettings:
    """Reglas del ledger/driver: fee 10 bps, tamaño mínimo 10 (quote), warm-up 50 velas."""

    trading_fee_rate: float = 0.001
    min_trade_size: float = 10.0
    warmup_bars: int = 50

    def __post_init__(self) -> None:
        if self.trading_fee_rate < 0:
            raise ValueError("trading_fee_rate no puede ser negativo")
        if self.min_trade_size < 0:
            raise ValueError("min_trade_size no puede ser negativo")
        if self.warmup_bars < 0:
            raise ValueError("warmup_bars no puede ser negativo")

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> SimulationSettings:
        defaults = cls()
        return cls(
            trading_fee_rate=_to_float(
                get_nested(cfg, "simulation", "trading_fee_rate"), defaults.trading_fee_rate
            ),
            min_trade_size=_to_float(
                get_nested(cfg, "simulation", "min_trade_size"), defaults.min_trade_size
            ),
            warmup_bars=_to_int(get_nested(cfg, "simulation", "warmup_bars"), defaults.warmup_bars),
        )
