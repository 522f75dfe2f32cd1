"""Adapters connecting the core to parsers, storage and callers."""
