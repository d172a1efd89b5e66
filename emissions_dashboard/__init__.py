"""Emissions disclosure dashboard: browse, audit and re-extract ESG data points."""

__version__ = "1.0.0"
