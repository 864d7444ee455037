"""Waybinder backend: GPS track ingestion for journey logging."""

__version__ = "0.1.0"
