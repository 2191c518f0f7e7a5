"""Núcleo del simulador: tipos, costes, ledger, configuración, logging y engine."""
