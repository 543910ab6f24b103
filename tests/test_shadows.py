"""Tests for shadow projection."""

import math

import numpy as np
import pytest

from garden_shade_simulator.core.models import (
    Bed,
    Fence,
    PlantForShadow,
    Segment,
    ShadeSettings,
    StructureForShading,
    SunPosition,
)
from garden_shade_simulator.core.geometry import polygonize_circle, closed_polygon_segments
from garden_shade_simulator.core.shadows import (
    calculate_all_shadows,
    calculate_bed_shadows,
    calculate_fence_shadows,
    calculate_shadow,
    calculate_shadow_length,
    calculate_structure_shadows,
    casting_segments,
    get_shadow_opacity,
    is_shadow_visible,
)
from garden_shade_simulator.core.sun_position import calculate_sun_position, solar_declination

SOUTHERN_SUN = SunPosition(altitude=45.0, azimuth=180.0, is_night=False)


def make_fence(*vertices, height_feet=6.0) -> Fence:
    return Fence(
        id="fence_1",
        vertices=[np.array(v, dtype=float) for v in vertices],
        height_feet=height_feet,
    )


def square_bed(wall_feet=2.0) -> Bed:
    return Bed(
        id="bed_1",
        shape="rectangle",
        x=0.0,
        y=0.0,
        width_feet=4.0,
        height_feet=4.0,
        raised_wall_height_feet=wall_feet,
    )


class TestCalculateShadowLength:
    """Tests for calculate_shadow_length function."""

    def test_forty_five_degrees(self):
        assert calculate_shadow_length(48.0, 45.0) == pytest.approx(48.0)

    def test_high_sun_short_shadow(self):
        assert calculate_shadow_length(48.0, 60.0) == pytest.approx(48.0 / math.tan(math.radians(60)))

    def test_low_sun_capped(self):
        assert calculate_shadow_length(96.0, 5.0) == pytest.approx(300.0)
        assert calculate_shadow_length(96.0, 5.0, max_length=120.0) == pytest.approx(120.0)

    def test_sun_below_horizon_returns_cap(self):
        assert calculate_shadow_length(10.0, 0.0) == pytest.approx(300.0)
        assert calculate_shadow_length(10.0, -5.0) == pytest.approx(300.0)

    def test_zero_height(self):
        assert calculate_shadow_length(0.0, 45.0) == 0.0

    def test_monotonic_in_altitude(self):
        lengths = [calculate_shadow_length(60.0, alt) for alt in range(5, 90, 5)]
        assert all(a >= b for a, b in zip(lengths, lengths[1:]))

    def test_overhead_sun(self):
        assert calculate_shadow_length(60.0, 90.0) == pytest.approx(0.0, abs=1e-9)


class TestShadowOpacity:
    """Tests for get_shadow_opacity function."""

    @pytest.mark.parametrize(
        "altitude,expected",
        [(-5.0, 0.0), (5.0, 0.0), (10.0, 0.0), (17.5, 0.5), (25.0, 1.0), (70.0, 1.0)],
    )
    def test_fade_in(self, altitude, expected):
        assert get_shadow_opacity(altitude) == pytest.approx(expected)

    def test_custom_thresholds(self):
        settings = ShadeSettings(min_shadow_render_altitude=0.0, full_shadow_altitude=10.0)
        assert get_shadow_opacity(5.0, settings) == pytest.approx(0.5)


class TestIsShadowVisible:
    """Tests for is_shadow_visible function."""

    def test_visible(self):
        assert is_shadow_visible(SOUTHERN_SUN)

    def test_night(self):
        assert not is_shadow_visible(SunPosition(altitude=30.0, azimuth=180.0, is_night=True))

    def test_too_low(self):
        assert not is_shadow_visible(SunPosition(altitude=9.9, azimuth=90.0, is_night=False))
        assert is_shadow_visible(SunPosition(altitude=10.0, azimuth=90.0, is_night=False))


class TestPlantShadows:
    """Tests for single-plant shadows."""

    def test_shadow_points_away_from_sun(self):
        """Sun in the South throws shadows North, toward -Y."""
        plant = PlantForShadow(id="p1", x=100.0, y=100.0, height_max=48.0)
        shadow = calculate_shadow(plant, SOUTHERN_SUN)

        assert shadow.plant_id == "p1"
        assert shadow.shadow_length == pytest.approx(48.0)
        assert shadow.shadow_angle == pytest.approx(0.0)
        assert shadow.end_x == pytest.approx(100.0)
        assert shadow.end_y == pytest.approx(52.0)

    def test_eastern_sun_shadow_to_west(self):
        plant = PlantForShadow(id="p1", x=100.0, y=100.0, height_max=48.0)
        shadow = calculate_shadow(plant, SunPosition(altitude=45.0, azimuth=90.0, is_night=False))
        assert shadow.end_x == pytest.approx(52.0)
        assert shadow.end_y == pytest.approx(100.0)

    def test_no_shadow_at_night(self):
        plant = PlantForShadow(id="p1", x=0.0, y=0.0, height_max=48.0)
        assert calculate_shadow(plant, SunPosition(-10.0, 0.0, True)) is None

    def test_all_shadows(self):
        plants = [
            PlantForShadow(id="a", x=0.0, y=0.0, height_max=10.0),
            PlantForShadow(id="b", x=50.0, y=0.0, height_max=20.0),
        ]
        shadows = calculate_all_shadows(plants, SOUTHERN_SUN)
        assert [s.plant_id for s in shadows] == ["a", "b"]
        assert calculate_all_shadows(plants, SunPosition(5.0, 90.0, False)) == []

    def test_to_dict(self):
        plant = PlantForShadow(id="p1", x=1.0, y=2.0, height_max=3.0)
        data = calculate_shadow(plant, SOUTHERN_SUN).to_dict()
        assert data["plant_id"] == "p1"
        assert set(data) == {
            "plant_id", "origin_x", "origin_y", "shadow_length",
            "shadow_angle", "end_x", "end_y", "height_max",
        }


class TestFenceShadows:
    """Tests for fence shadow quadrilaterals."""

    def test_one_quad_per_segment(self):
        fence = make_fence((0, 100), (200, 100), (200, 200))
        shadows = calculate_fence_shadows([fence], SOUTHERN_SUN)
        assert [s.segment_index for s in shadows] == [0, 1]
        assert all(s.caster_id == "fence_1" for s in shadows)

    def test_quadrilateral_corners(self):
        fence = make_fence((0, 100), (200, 100))
        shadow = calculate_fence_shadows([fence], SOUTHERN_SUN)[0]
        quad = shadow.quadrilateral

        assert shadow.shadow_length == pytest.approx(72.0)
        np.testing.assert_array_almost_equal(quad.p1, [0, 100])
        np.testing.assert_array_almost_equal(quad.p2, [200, 100])
        np.testing.assert_array_almost_equal(quad.p3, [200, 28])
        np.testing.assert_array_almost_equal(quad.p4, [0, 28])

    def test_fence_casts_both_ways(self):
        """A fence has no inside: it casts whichever side the sun is on."""
        fence = make_fence((0, 100), (200, 100))
        northern_sun = SunPosition(altitude=45.0, azimuth=0.0, is_night=False)
        quad = calculate_fence_shadows([fence], northern_sun)[0].quadrilateral
        np.testing.assert_array_almost_equal(quad.p3, [200, 172])

    def test_zero_length_segment_skipped(self):
        fence = make_fence((0, 0), (0, 0), (100, 0))
        shadows = calculate_fence_shadows([fence], SOUTHERN_SUN)
        assert [s.segment_index for s in shadows] == [1]

    def test_collinear_vertices_overhead_sun(self):
        """Sun straight overhead: degenerate quads but no crash."""
        month = 5.5
        sun = calculate_sun_position(solar_declination(month), month, 0.5)
        assert sun.altitude == pytest.approx(90.0)

        fence = make_fence((0, 0), (50, 0), (100, 0))
        shadows = calculate_fence_shadows([fence], sun)
        assert len(shadows) == 2
        for shadow in shadows:
            assert shadow.shadow_length == pytest.approx(0.0, abs=1e-6)
            assert all(np.all(np.isfinite(c)) for c in shadow.quadrilateral.corners)

    def test_no_shadows_when_sun_low(self):
        fence = make_fence((0, 0), (100, 0))
        assert calculate_fence_shadows([fence], SunPosition(9.0, 180.0, False)) == []


class TestBedShadows:
    """Tests for raised-bed wall shadows."""

    def test_southern_sun_only_north_wall(self):
        shadows = calculate_bed_shadows([square_bed()], SOUTHERN_SUN)
        assert len(shadows) == 1
        assert shadows[0].segment_index == 0
        assert shadows[0].caster_id == "bed_1"
        assert shadows[0].shadow_length == pytest.approx(24.0)
        # Shadow falls north of the bed
        assert shadows[0].quadrilateral.p3[1] == pytest.approx(-24.0)

    @pytest.mark.parametrize("azimuth,wall", [(0.0, 2), (90.0, 3), (180.0, 0), (270.0, 1)])
    def test_cardinal_sun_one_wall(self, azimuth, wall):
        sun = SunPosition(altitude=45.0, azimuth=azimuth, is_night=False)
        shadows = calculate_bed_shadows([square_bed()], sun)
        assert [s.segment_index for s in shadows] == [wall]

    def test_south_east_sun_north_and_west_walls(self):
        sun = SunPosition(altitude=45.0, azimuth=135.0, is_night=False)
        shadows = calculate_bed_shadows([square_bed()], sun)
        assert sorted(s.segment_index for s in shadows) == [0, 3]

    def test_in_ground_bed(self):
        assert calculate_bed_shadows([square_bed(wall_feet=0)], SOUTHERN_SUN) == []

    def test_circular_bed_half_of_edges(self):
        center = np.array([50.0, 50.0])
        structure = StructureForShading(
            type="bed",
            id="round",
            segments=closed_polygon_segments(polygonize_circle(center, 24.0)),
            height_inches=12.0,
        )
        sun = SunPosition(altitude=40.0, azimuth=100.0, is_night=False)
        assert len(calculate_structure_shadows([structure], sun)) == 12

    def test_rotated_bed_matches_rotated_sun(self):
        """Turning the bed and the sun together casts from the same walls."""
        bed = square_bed()
        turned = Bed(**{**bed.__dict__, "rotation": 30.0})
        plain = calculate_bed_shadows([bed], SunPosition(45.0, 200.0, False))
        rotated = calculate_bed_shadows([turned], SunPosition(45.0, 230.0, False))
        assert [s.segment_index for s in plain] == [s.segment_index for s in rotated]

    def test_casting_segments_keep_indices(self):
        structure = StructureForShading(
            type="bed",
            id="bed_1",
            segments=closed_polygon_segments([
                np.array([0.0, 0.0]),
                np.array([48.0, 0.0]),
                np.array([48.0, 48.0]),
                np.array([0.0, 48.0]),
            ]),
            height_inches=24.0,
        )
        casting = casting_segments(structure, 315.0)
        assert [index for index, _ in casting] == [1, 2]

    def test_open_structure_of_type_fence_skips_facing_test(self):
        structure = StructureForShading(
            type="fence",
            id="wall",
            segments=[
                Segment.from_points([0, 0], [10, 0]),
                Segment.from_points([10, 0], [10, 10]),
            ],
            height_inches=24.0,
        )
        assert len(calculate_structure_shadows([structure], SOUTHERN_SUN)) == 2
