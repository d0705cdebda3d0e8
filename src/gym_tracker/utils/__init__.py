"""Utility functions for gym-tracker."""

from .dates import format_date, parse_date, parse_timestamp, utcnow

__all__ = [
    "format_date",
    "parse_date",
    "parse_timestamp",
    "utcnow",
]
