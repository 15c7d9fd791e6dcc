"""Log query module."""

from .log_query import ILogQueryFactory, LogQueryFactory

__all__ = ["ILogQueryFactory", "LogQueryFactory"]
