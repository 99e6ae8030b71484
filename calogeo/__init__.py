"""Sampling-calorimeter geometry, configuration, hit bookkeeping and SQLite export."""

__version__ = "0.1.0"
__all__ = [
    "builder",
    "config",
    "fibres",
    "geometry",
    "gun",
    "hits",
    "make_db",
    "materials",
    "runconfig",
    "world",
]