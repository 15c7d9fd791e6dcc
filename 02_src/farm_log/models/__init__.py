"""Core data models for farm-log."""

from .assets import Asset
from .logs import Log
from .query import LogQueryCriteria
from .text import TextLong

__all__ = [
    # Entities
    "Asset",
    "Log",
    # Field values
    "TextLong",
    # Queries
    "LogQueryCriteria",
]
