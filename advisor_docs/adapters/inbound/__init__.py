"""Inbound adapters (API, CLI)."""
