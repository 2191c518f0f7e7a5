# ============================================================
# main.py — Punto de entrada del simulador de estrategias
# ------------------------------------------------------------
# Añade /src al sys.path ANTES de importar "core.*", carga .env,
# inicializa el logger y lanza UNA simulación con la estrategia
# definida en config.yaml (sobrescribible por CLI).
#
# Ejemplos:
#   python main.py --start 2024-01-01 --end 2024-03-01
#   python main.py --source csv --pair ETHUSDT --type mean_reversion --out reports/eth
# ============================================================

import argparse
import asyncio
from datetime import datetime, timezone
import json
from pathlib import Path
import sys

# --- 1) AÑADIR ./src AL sys.path ANTES DE NADA ----------------
PROJECT_ROOT = Path(__file__).parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

# --- 2) CARGAR .env -------------------------------------------
from dotenv import load_dotenv  # noqa: E402

load_dotenv()

# --- 3) IMPORTS DEL PAQUETE -----------------------------------
from loguru import logger  # noqa: E402

from core.config_loader import SimulationSettings, get_nested, load_config  # noqa: E402
from core.logger_config import init_logger  # noqa: E402
from core.sim_engine import SimulationEngine  # noqa: E402
from data.feeds import BinanceKlinesProvider, CsvCandleProvider  # noqa: E402
from data.feeds.base import HistoricalDataProvider  # noqa: E402
from report import summary, write_report  # noqa: E402
from strategies.base import StrategyDefinition  # noqa: E402


def _parse_date(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Simulador/backtest de estrategias cripto")
    p.add_argument("--config", type=str, default=None, help="Ruta a config.yaml")
    p.add_argument("--start", type=_parse_date, required=True, help="Fecha inicio (ISO, UTC)")
    p.add_argument("--end", type=_parse_date, required=True, help="Fecha fin (ISO, UTC)")
    p.add_argument("--pair", type=str, default=None)
    p.add_argument("--type", dest="strategy_type", type=str, default=None)
    p.add_argument("--timeframe", type=str, default=None)
    p.add_argument("--risk", type=float, default=None, help="riskPerTrade en %")
    p.add_argument("--balance", type=float, default=None, help="Balance inicial (quote)")
    p.add_argument(
        "--params",
        type=str,
        default=None,
        help='JSON con parámetros, p.ej. \'{"buyThreshold": 25}\' (se fusiona con config)',
    )
    p.add_argument("--source", choices=["binance", "csv"], default=None)
    p.add_argument("--csv", type=str, default=None, help="CSV concreto (implica --source csv)")
    p.add_argument("--out", type=str, default=None, help="Carpeta de salida de reportes")
    p.add_argument("--log-level", type=str, default=None)
    return p


def build_definition(cfg: dict, args: argparse.Namespace) -> StrategyDefinition:
    raw = dict(get_nested(cfg, "strategy", default={}) or {})
    params = dict(raw.get("parameters") or {})
    if args.params:
        params.update(json.loads(args.params))
    raw["parameters"] = params

    overrides = {
        "pair": args.pair,
        "strategy_type": args.strategy_type,
        "timeframe": args.timeframe,
        "risk_per_trade": args.risk,
    }
    raw.update({k: v for k, v in overrides.items() if v is not None})
    return StrategyDefinition.from_dict(raw)


def build_provider(cfg: dict, args: argparse.Namespace) -> HistoricalDataProvider:
    source = "csv" if args.csv else (args.source or get_nested(cfg, "data", "source", default="binance"))
    if source == "csv":
        return CsvCandleProvider(get_nested(cfg, "data", "dir", default="data/candles"), path=args.csv)
    if source == "binance":
        return BinanceKlinesProvider(
            testnet=bool(get_nested(cfg, "data", "testnet", default=False)),
            timeout_s=get_nested(cfg, "data", "timeout_s"),
        )
    raise ValueError(f"data.source desconocido: {source!r}")


def resolve_initial_balance(cfg: dict, args: argparse.Namespace) -> float:
    """--balance manda sobre config (incluido 0: lo rechaza el engine)."""
    if args.balance is not None:
        return args.balance
    return float(get_nested(cfg, "simulation", "initial_balance", default=10_000.0))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config)
    init_logger(
        level=args.log_level or get_nested(cfg, "environment", "log_level"),
        log_dir=get_nested(cfg, "environment", "log_dir"),
    )

    definition = build_definition(cfg, args)
    settings = SimulationSettings.from_config(cfg)
    balance = resolve_initial_balance(cfg, args)

    engine = SimulationEngine(definition, balance, settings)
    result = asyncio.run(engine.run(build_provider(cfg, args), args.start, args.end))

    print(json.dumps(summary(result), indent=2))
    if args.out:
        paths = write_report(result, args.out)
        logger.info("Archivos: {}", ", ".join(str(p) for p in paths.values()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
