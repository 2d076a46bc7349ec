# src/synclock/models/__init__.py
"""SQLAlchemy models for the synclock service."""

from .visitor_counter import COUNTER_ROW_ID, VisitorCounter

__all__ = ["COUNTER_ROW_ID", "VisitorCounter"]
