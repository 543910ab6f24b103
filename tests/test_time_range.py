"""Tests for the day-sweep simulation."""

import json

import numpy as np
import pytest

from garden_shade_simulator.core.models import Fence, GardenConfig, PlacedPlant, SunPosition
from garden_shade_simulator.simulator.time_range import (
    DEFAULT_STEPS,
    TimeStepResult,
    consolidate_to_intervals,
    sample_times,
    save_simulation_result,
    simulate_day,
)


@pytest.fixture
def fence_garden() -> GardenConfig:
    """6 ft fence running East-West with a seedling just north of it."""
    return GardenConfig(
        fences=[
            Fence(
                id="fence_1",
                vertices=[np.array([0.0, 100.0]), np.array([200.0, 100.0])],
                height_feet=6.0,
            )
        ],
        plants=[
            PlacedPlant(id="seedling", x=100.0, y=90.0, height_max=1.0),
            PlacedPlant(id="open_ground", x=100.0, y=400.0, height_max=1.0),
        ],
    )


def _step(t, shaded) -> TimeStepResult:
    return TimeStepResult(
        time_of_day=t,
        sun=SunPosition(altitude=45.0, azimuth=180.0, is_night=False),
        shaded_ids=set(shaded),
    )


class TestSampleTimes:
    """Tests for sample_times function."""

    def test_even_spacing(self):
        assert sample_times(5) == [0.0, 0.25, 0.5, 0.75, 1.0]

    def test_default_includes_noon(self):
        times = sample_times()
        assert len(times) == DEFAULT_STEPS
        assert times[DEFAULT_STEPS // 2] == pytest.approx(0.5)

    def test_single_sample_is_noon(self):
        assert sample_times(1) == [0.5]


class TestConsolidateToIntervals:
    """Tests for consolidate_to_intervals function."""

    def test_split_and_open_intervals(self):
        results = [
            _step(0.0, []),
            _step(0.25, ["a"]),
            _step(0.5, ["a", "b"]),
            _step(0.75, []),
            _step(1.0, ["a"]),
        ]
        intervals = consolidate_to_intervals(["a", "b"], results)

        assert [(i.plant_id, i.start_time_of_day, i.end_time_of_day, i.n_samples) for i in intervals] == [
            ("a", 0.25, 0.5, 2),
            ("a", 1.0, 1.0, 1),
            ("b", 0.5, 0.5, 1),
        ]

    def test_never_shaded(self):
        results = [_step(0.0, []), _step(1.0, [])]
        assert consolidate_to_intervals(["a"], results) == []

    def test_interval_labels(self):
        interval = consolidate_to_intervals(["a"], [_step(0.5, ["a"])])[0]
        data = interval.to_dict()
        assert data["start_label"] == "12:00 PM"
        assert data["n_samples"] == 1


class TestSimulateDay:
    """Tests for simulate_day function."""

    def test_fence_shades_seedling_at_noon(self, fence_garden):
        result = simulate_day(fence_garden, latitude=40.0, month=6.0)

        assert result.total_samples == DEFAULT_STEPS
        noon = result.results[DEFAULT_STEPS // 2]
        assert noon.time_of_day == pytest.approx(0.5)
        assert noon.shaded_ids == {"seedling"}
        assert noon.causes == {"seedling": "fence_1"}

    def test_not_shaded_at_sunrise_or_sunset(self, fence_garden):
        result = simulate_day(fence_garden, latitude=40.0, month=6.0)
        assert result.results[0].shaded_ids == set()
        assert result.results[-1].shaded_ids == set()

    def test_single_midday_interval(self, fence_garden):
        result = simulate_day(fence_garden, latitude=40.0, month=6.0)
        intervals = [i for i in result.intervals if i.plant_id == "seedling"]

        assert len(intervals) == 1
        assert 0.0 < intervals[0].start_time_of_day < 0.5 < intervals[0].end_time_of_day < 1.0
        assert intervals[0].n_samples == result.shaded_counts["seedling"]

    def test_shaded_hours(self, fence_garden):
        result = simulate_day(fence_garden, latitude=40.0, month=6.0)
        assert result.daylight_hours == pytest.approx(14.79, abs=0.05)
        assert 0 < result.shaded_hours("seedling") < result.daylight_hours
        assert result.shaded_hours("open_ground") == 0.0
        assert result.shaded_fraction("unknown") == 0.0

    def test_defaults_to_config_sun(self, fence_garden):
        fence_garden.sun.latitude = -35.0
        result = simulate_day(fence_garden, n_steps=5)
        assert result.latitude == -35.0
        assert result.month == fence_garden.sun.month
        assert result.total_samples == 5

    def test_polar_night_nothing_shaded(self, fence_garden):
        result = simulate_day(fence_garden, latitude=80.0, month=0.0, n_steps=9)
        assert result.daylight_hours == 0.0
        assert all(r.sun.is_night for r in result.results)
        assert result.intervals == []

    def test_without_details(self, fence_garden):
        result = simulate_day(fence_garden, latitude=40.0, month=6.0, keep_details=False)
        assert result.results == []
        assert result.shaded_counts["seedling"] > 0


class TestSaveSimulationResult:
    """Tests for JSON export of a day sweep."""

    def test_writes_json(self, fence_garden, tmp_path):
        result = simulate_day(fence_garden, latitude=40.0, month=6.0, n_steps=9)
        path = tmp_path / "day.json"
        save_simulation_result(result, path, include_details=True)

        data = json.loads(path.read_text())
        assert data["total_samples"] == 9
        assert set(data["plants"]) == {"seedling", "open_ground"}
        assert len(data["results"]) == 9
        assert data["results"][4]["shaded"] == ["seedling"]

    def test_summary_only(self, fence_garden):
        result = simulate_day(fence_garden, latitude=40.0, month=6.0, n_steps=9)
        assert "results" not in result.to_dict()
