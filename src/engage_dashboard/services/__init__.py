"""Application services."""

from engage_dashboard.services.calendar import CalendarMonth, CalendarView, build_month_view
from engage_dashboard.services.storage import MemoryStore, build_store, seed_demo_data
from engage_dashboard.services.training import (
    TrainingFlow,
    TrainingReadiness,
    TrainingViewState,
    check_training_readiness,
)

__all__ = [
    "CalendarMonth",
    "CalendarView",
    "MemoryStore",
    "TrainingFlow",
    "TrainingReadiness",
    "TrainingViewState",
    "build_month_view",
    "build_store",
    "check_training_readiness",
    "seed_demo_data",
]
