"""Payment cycle schedule package."""

from supertracker.schedule.generator import (
    CYCLE_STEPS,
    cycle_day_keys,
    generate_cycle_dates,
    is_cycle_day,
)

__all__ = ["CYCLE_STEPS", "cycle_day_keys", "generate_cycle_dates", "is_cycle_day"]
