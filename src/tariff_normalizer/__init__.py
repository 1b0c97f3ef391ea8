"""Normalize electricity tariff sources into canonical price records."""

__version__ = "0.1.0"
