"""Core domain: models, ports and services."""
