"""Engage Dashboard - social media management dashboard core."""

__version__ = "0.1.0"
