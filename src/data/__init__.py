"""Fuentes de datos históricos (velas OHLCV) para la simulación."""
