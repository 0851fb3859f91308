"""Observability helpers shared across the order store."""
