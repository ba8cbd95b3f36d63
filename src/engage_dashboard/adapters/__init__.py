"""Adapters for external services."""

from engage_dashboard.adapters.ai.base import AIProvider

__all__ = [
    "AIProvider",
]
