"""Public package exports for the :mod:`dawa` library."""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = [
    "awstime",
    "cli",
    "clients",
    "config",
    "constants",
    "core",
    "errors",
    "geojson",
    "importers",
    "logging_setup",
    "models",
    "query",
]
