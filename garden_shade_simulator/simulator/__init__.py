"""Day-sweep simulation module."""

from .time_range import simulate_day, DaySimulationResult, ShadeInterval, TimeStepResult

__all__ = [
    "simulate_day",
    "DaySimulationResult",
    "ShadeInterval",
    "TimeStepResult",
]
