"""REST API client."""

from engage_dashboard.client.api import DashboardClient

__all__ = ["DashboardClient"]
