"""
Use Cases Layer
Orchestrates several service queries into one application response.
"""
from .get_dashboard_overview import GetDashboardOverviewUseCase

__all__ = ["GetDashboardOverviewUseCase"]
