"""Day-sweep simulation for running shade detection across a day.

This module steps the time of day from sunrise to sunset for one latitude
and month, runs shade detection at each step, and condenses the results
into per-plant shaded intervals.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..core.models import GardenConfig, SunPosition
from ..core.shade_detection import find_shade_causes
from ..core.structures import plants_for_shadow, structures_for_config
from ..core.sun_position import calculate_sun_position, format_time_of_day, get_daylight_hours

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 49  # every quarter of a nominal 12-hour day


@dataclass
class TimeStepResult:
    """Result for a single time-of-day sample.

    Attributes:
        time_of_day: Fraction of the daylight period (0 = sunrise).
        sun: Sun position at this sample.
        shaded_ids: IDs of shaded plants.
        causes: Caster ID responsible for each shaded plant.
    """

    time_of_day: float
    sun: SunPosition
    shaded_ids: set[str]
    causes: dict[str, str] = field(default_factory=dict)


@dataclass
class ShadeInterval:
    """A continuous run of samples where a plant is shaded.

    Attributes:
        plant_id: The shaded plant.
        start_time_of_day: First shaded sample.
        end_time_of_day: Last shaded sample.
        n_samples: Number of samples in this interval.
    """

    plant_id: str
    start_time_of_day: float
    end_time_of_day: float
    n_samples: int

    def to_dict(self) -> dict:
        return {
            "plant_id": self.plant_id,
            "start": round(self.start_time_of_day, 4),
            "end": round(self.end_time_of_day, 4),
            "start_label": format_time_of_day(self.start_time_of_day),
            "end_label": format_time_of_day(self.end_time_of_day),
            "n_samples": self.n_samples,
        }


@dataclass
class DaySimulationResult:
    """Result of a day sweep.

    Attributes:
        latitude: Latitude simulated.
        month: Continuous month simulated.
        total_samples: Number of time-of-day samples.
        daylight_hours: Length of the simulated day.
        shaded_counts: Number of shaded samples per plant ID.
        intervals: Consolidated shaded intervals, grouped by plant.
        results: Per-sample results (optional, for detailed analysis).
    """

    latitude: float
    month: float
    total_samples: int
    daylight_hours: float
    shaded_counts: dict[str, int]
    intervals: list[ShadeInterval]
    results: list[TimeStepResult] = field(default_factory=list)

    def shaded_fraction(self, plant_id: str) -> float:
        """Fraction of samples where the plant is shaded."""
        if self.total_samples == 0:
            return 0.0
        return self.shaded_counts.get(plant_id, 0) / self.total_samples

    def shaded_hours(self, plant_id: str) -> float:
        """Approximate hours of shade, scaled from the sample fraction."""
        return self.shaded_fraction(plant_id) * self.daylight_hours

    def to_dict(self, include_details: bool = False) -> dict:
        """Convert to dictionary."""
        result = {
            "latitude": self.latitude,
            "month": self.month,
            "total_samples": self.total_samples,
            "daylight_hours": round(self.daylight_hours, 2),
            "plants": {
                plant_id: {
                    "shaded_samples": count,
                    "shaded_hours": round(self.shaded_hours(plant_id), 2),
                }
                for plant_id, count in self.shaded_counts.items()
            },
            "intervals": [i.to_dict() for i in self.intervals],
        }
        if include_details:
            result["results"] = [
                {
                    "time_of_day": round(r.time_of_day, 4),
                    "altitude": round(r.sun.altitude, 2),
                    "azimuth": round(r.sun.azimuth, 2),
                    "is_night": r.sun.is_night,
                    "shaded": sorted(r.shaded_ids),
                    "causes": r.causes,
                }
                for r in self.results
            ]
        return result


def sample_times(n_steps: int = DEFAULT_STEPS) -> list[float]:
    """Evenly spaced time-of-day samples from sunrise (0) to sunset (1)."""
    if n_steps < 2:
        return [0.5]
    return [i / (n_steps - 1) for i in range(n_steps)]


def consolidate_to_intervals(
    plant_ids: list[str],
    results: list[TimeStepResult],
) -> list[ShadeInterval]:
    """Convert per-sample results into continuous shaded intervals.

    Args:
        plant_ids: Plants to report, in output order.
        results: TimeStepResult objects in chronological order.

    Returns:
        ShadeInterval objects grouped by plant, each plant's in time order.
    """
    intervals = []

    for plant_id in plant_ids:
        start: Optional[TimeStepResult] = None
        previous: Optional[TimeStepResult] = None
        count = 0

        for result in results:
            if plant_id in result.shaded_ids:
                if start is None:
                    start = result
                    count = 1
                else:
                    count += 1
            elif start is not None:
                intervals.append(
                    ShadeInterval(
                        plant_id=plant_id,
                        start_time_of_day=start.time_of_day,
                        end_time_of_day=previous.time_of_day,
                        n_samples=count,
                    )
                )
                start = None
                count = 0
            previous = result

        # Interval still open at sunset
        if start is not None:
            intervals.append(
                ShadeInterval(
                    plant_id=plant_id,
                    start_time_of_day=start.time_of_day,
                    end_time_of_day=results[-1].time_of_day,
                    n_samples=count,
                )
            )

    return intervals


def simulate_day(
    config: GardenConfig,
    latitude: Optional[float] = None,
    month: Optional[float] = None,
    n_steps: int = DEFAULT_STEPS,
    keep_details: bool = True,
) -> DaySimulationResult:
    """Run shade detection across one simulated day.

    Args:
        config: Garden layout and thresholds.
        latitude: Latitude to simulate; defaults to ``config.sun.latitude``.
        month: Continuous month to simulate; defaults to ``config.sun.month``.
        n_steps: Number of time-of-day samples from sunrise to sunset.
        keep_details: Whether to keep per-sample results.

    Returns:
        DaySimulationResult with per-plant counts and shaded intervals.
    """
    latitude = config.sun.latitude if latitude is None else latitude
    month = config.sun.month if month is None else month

    plants = plants_for_shadow(config)
    structures = structures_for_config(config)

    results = []
    for t in sample_times(n_steps):
        sun = calculate_sun_position(latitude, month, t)
        causes = find_shade_causes(plants, sun, structures, config.settings)
        results.append(
            TimeStepResult(
                time_of_day=t,
                sun=sun,
                shaded_ids=set(causes),
                causes={pid: c.cause_id for pid, c in causes.items()},
            )
        )

    plant_ids = [p.id for p in plants]
    shaded_counts = {pid: sum(1 for r in results if pid in r.shaded_ids) for pid in plant_ids}
    intervals = consolidate_to_intervals(plant_ids, results)

    logger.debug(
        "Simulated %d samples at lat=%.2f month=%.2f: %d shaded intervals",
        len(results), latitude, month, len(intervals),
    )

    return DaySimulationResult(
        latitude=latitude,
        month=month,
        total_samples=len(results),
        daylight_hours=get_daylight_hours(latitude, month),
        shaded_counts=shaded_counts,
        intervals=intervals,
        results=results if keep_details else [],
    )


def save_simulation_result(
    result: DaySimulationResult,
    path: str | Path,
    include_details: bool = False,
) -> None:
    """Save simulation result to a JSON file."""
    with open(path, "w") as f:
        json.dump(result.to_dict(include_details), f, indent=2)
    logger.debug("Saved day simulation to %s", path)
