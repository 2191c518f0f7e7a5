# ============================================================
# src/core/logger_config.py — Configuración central del logger
# ------------------------------------------------------------
# init_logger() configura el logger global de Loguru:
#   - Consola (colorizada, nivel configurable)
#   - Archivo de logs opcional (rotación diaria)
#
# Los módulos de librería NO llaman a init_logger(); solo usan
# `from loguru import logger`. Lo llama el punto de entrada (main.py).
# ============================================================

from __future__ import annotations

import os
from pathlib import Path
import sys

from dotenv import load_dotenv
from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def init_logger(level: str | None = None, log_dir: str | Path | None = None) -> None:
    """
    Inicializa el logger global.

    - level: nivel explícito; si es None se usa LOG_LEVEL del entorno (.env) o INFO.
    - log_dir: si se pasa, añade un sink a `<log_dir>/simulator.log`
      con rotación diaria y retención de 7 días.
    """
    load_dotenv()
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    # --- Eliminar configuración previa ---
    logger.remove()

    logger.add(sink=sys.stderr, level=log_level, colorize=True, format=LOG_FORMAT)

    if log_dir is not None:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        log_file_path = path / "simulator.log"
        logger.add(
            sink=log_file_path,
            level=log_level,
            rotation="1 day",
            retention="7 days",
            enqueue=True,
            backtrace=True,
            diagnose=False,
            format=LOG_FORMAT,
        )
        logger.debug(f"Logs guardados en: {log_file_path}")

    logger.info(f"Logger inicializado (nivel {log_level})")
