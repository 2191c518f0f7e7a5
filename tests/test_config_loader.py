from __future__ import annotations

import pytest

from core.config_loader import SimulationSettings, get_nested, load_config

ENV_KEYS = (
    "LOG_LEVEL",
    "TRADING_FEE_RATE",
    "MIN_TRADE_SIZE",
    "WARMUP_BARS",
    "DATA_SOURCE",
    "DATA_DIR",
    "BINANCE_TESTNET",
)

MINIMAL_YAML = """
environment:
  log_level: DEBUG
simulation:
  trading_fee_rate: 0.001
  min_trade_size: 10
  warmup_bars: 50
data:
  source: csv
  dir: data/candles
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cfg_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(MINIMAL_YAML, encoding="utf-8")
    return path


def test_default_config_loads():
    cfg = load_config()
    assert get_nested(cfg, "strategy", "pair") == "BTCUSDT"
    assert get_nested(cfg, "simulation", "warmup_bars") == 50
    assert SimulationSettings.from_config(cfg) == SimulationSettings()


def test_load_from_path(cfg_file):
    cfg = load_config(cfg_file)
    assert cfg["environment"]["log_level"] == "DEBUG"
    assert get_nested(cfg, "data", "source") == "csv"
    assert get_nested(cfg, "data", "missing", default="x") == "x"


def test_env_overrides(cfg_file, monkeypatch):
    monkeypatch.setenv("TRADING_FEE_RATE", "0.002")
    monkeypatch.setenv("WARMUP_BARS", "20")
    monkeypatch.setenv("BINANCE_TESTNET", "true")
    monkeypatch.setenv("DATA_SOURCE", "binance")

    cfg = load_config(cfg_file)
    settings = SimulationSettings.from_config(cfg)
    assert settings.trading_fee_rate == 0.002
    assert settings.warmup_bars == 20
    assert settings.min_trade_size == 10.0
    assert cfg["data"]["testnet"] is True
    assert cfg["data"]["source"] == "binance"


def test_invalid_env_number_keeps_yaml_value(cfg_file, monkeypatch):
    monkeypatch.setenv("MIN_TRADE_SIZE", "lots")
    cfg = load_config(cfg_file)
    assert cfg["simulation"]["min_trade_size"] == 10.0


def test_each_call_rereads_file(cfg_file):
    first = load_config(cfg_file)
    first["simulation"]["warmup_bars"] = 999
    assert load_config(cfg_file)["simulation"]["warmup_bars"] == 50


def test_missing_keys_reported(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("environment:\n  log_level: INFO\n", encoding="utf-8")
    with pytest.raises(ValueError, match="simulation.trading_fee_rate"):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_non_mapping_root(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_settings_validation():
    with pytest.raises(ValueError):
        SimulationSettings(trading_fee_rate=-0.1)
    with pytest.raises(ValueError):
        SimulationSettings(warmup_bars=-1)
