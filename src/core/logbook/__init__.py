"""
Workout log domain: logged entries and calendar helpers.
"""

from .models import WorkoutEntry, month_bounds, to_date_key

__all__ = [
    "WorkoutEntry",
    "month_bounds",
    "to_date_key",
]
