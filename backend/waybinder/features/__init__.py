"""
Feature modules.

Each feature is a self-contained module:
- gps: GPS track ingestion (parsing, geometry, statistics, simplification)
"""
