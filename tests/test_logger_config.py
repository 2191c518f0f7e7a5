from __future__ import annotations

from loguru import logger

from core.logger_config import init_logger


def test_init_logger_with_file_sink(tmp_path):
    log_dir = tmp_path / "logs"
    try:
        init_logger(level="debug", log_dir=log_dir)
        logger.info("hola")
        logger.complete()
        assert (log_dir / "simulator.log").exists()
    finally:
        logger.remove()


def test_init_logger_level_from_env(monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    try:
        init_logger()
        logger.info("oculto")
        logger.warning("visible")
    finally:
        logger.remove()
    err = capsys.readouterr().err
    assert "visible" in err
    assert "oculto" not in err
