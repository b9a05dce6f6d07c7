"""Bulk award import: CSV / xlsx uploads validated against employees and persisted row by row."""

__version__ = "0.1.0"
