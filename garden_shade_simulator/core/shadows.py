"""Shadow projection for plants, fences and raised beds.

Shadows are 2D footprints on flat ground. A caster of height ``h`` under a
sun at altitude ``alt`` throws a shadow ``h / tan(alt)`` long (capped), in
the direction opposite the sun's azimuth.
"""

import math
from typing import Optional

import numpy as np

from .geometry import azimuth_to_direction_2d, is_segment_sun_facing, shadow_quadrilateral
from .models import (
    Bed,
    Fence,
    FenceShadowData,
    PlantForShadow,
    Segment,
    ShadeSettings,
    ShadowData,
    StructureForShading,
    SunPosition,
)
from .structures import beds_to_structures, fences_to_structures

DEFAULT_SETTINGS = ShadeSettings()


def calculate_shadow_length(
    height: float,
    altitude_deg: float,
    max_length: float = DEFAULT_SETTINGS.max_shadow_length,
) -> float:
    """Length of the shadow cast by a vertical caster.

    Args:
        height: Caster height in inches.
        altitude_deg: Sun altitude in degrees.
        max_length: Cap applied to long low-sun shadows.

    Returns:
        ``min(height / tan(altitude), max_length)``; 0 for non-positive
        heights and the cap for a sun at or below the horizon.
    """
    if height <= 0:
        return 0.0
    if altitude_deg <= 0:
        return max_length
    return min(height / math.tan(math.radians(altitude_deg)), max_length)


def shadow_offset(shadow_length: float, shadow_angle: float) -> np.ndarray:
    """Vector from a caster's base to its shadow tip."""
    return azimuth_to_direction_2d(shadow_angle) * shadow_length


def is_shadow_visible(sun: SunPosition, settings: ShadeSettings = DEFAULT_SETTINGS) -> bool:
    """Whether the sun is high enough for any shadow geometry."""
    return not sun.is_night and sun.altitude >= settings.min_shadow_render_altitude


def get_shadow_opacity(altitude: float, settings: ShadeSettings = DEFAULT_SETTINGS) -> float:
    """Shadow opacity for fade-in as the sun rises.

    0 below ``min_shadow_render_altitude``, 1 at or above
    ``full_shadow_altitude``, linear in between.
    """
    low = settings.min_shadow_render_altitude
    high = settings.full_shadow_altitude
    if altitude < low:
        return 0.0
    if altitude >= high:
        return 1.0
    return (altitude - low) / (high - low)


def calculate_shadow(
    plant: PlantForShadow,
    sun: SunPosition,
    settings: ShadeSettings = DEFAULT_SETTINGS,
) -> Optional[ShadowData]:
    """Calculate the shadow of a single plant.

    Args:
        plant: Plant with absolute position and height.
        sun: Current sun position.
        settings: Thresholds.

    Returns:
        ShadowData, or None when the sun is too low for a shadow.
    """
    if not is_shadow_visible(sun, settings):
        return None

    shadow_angle = sun.shadow_angle
    length = calculate_shadow_length(plant.height_max, sun.altitude, settings.max_shadow_length)
    end_x, end_y = plant.position + shadow_offset(length, shadow_angle)

    return ShadowData(
        plant_id=plant.id,
        origin_x=plant.x,
        origin_y=plant.y,
        shadow_length=length,
        shadow_angle=shadow_angle,
        end_x=float(end_x),
        end_y=float(end_y),
        height_max=plant.height_max,
    )


def calculate_all_shadows(
    plants: list[PlantForShadow],
    sun: SunPosition,
    settings: ShadeSettings = DEFAULT_SETTINGS,
) -> list[ShadowData]:
    """Calculate shadows for all plants."""
    if not is_shadow_visible(sun, settings):
        return []
    return [s for s in (calculate_shadow(p, sun, settings) for p in plants) if s is not None]


def casting_segments(
    structure: StructureForShading,
    sun_azimuth: float,
) -> list[tuple[int, Segment]]:
    """Segments of a structure that throw a shadow, with their indices.

    Fences are thin two-sided walls, so every segment casts a shadow. Bed
    walls form a closed outline and only edges passing
    ``is_segment_sun_facing`` cast one. Zero-length segments never do.
    """
    interior = structure.interior_point if structure.type == "bed" else None
    casting = []
    for index, segment in enumerate(structure.segments):
        if segment.length == 0:
            continue
        if interior is not None and not is_segment_sun_facing(
            segment.start, segment.end, sun_azimuth, interior
        ):
            continue
        casting.append((index, segment))
    return casting


def calculate_structure_shadows(
    structures: list[StructureForShading],
    sun: SunPosition,
    settings: ShadeSettings = DEFAULT_SETTINGS,
) -> list[FenceShadowData]:
    """Shadow quadrilaterals for fences and raised-bed walls.

    One quadrilateral per segment returned by ``casting_segments``;
    ``segment_index`` is the segment's position in its structure.
    """
    if not is_shadow_visible(sun, settings):
        return []

    shadow_angle = sun.shadow_angle
    shadows = []

    for structure in structures:
        length = calculate_shadow_length(
            structure.height_inches, sun.altitude, settings.max_shadow_length
        )
        offset = shadow_offset(length, shadow_angle)

        for index, segment in casting_segments(structure, sun.azimuth):
            shadows.append(
                FenceShadowData(
                    caster_id=structure.id,
                    segment_index=index,
                    quadrilateral=shadow_quadrilateral(segment, offset),
                    shadow_length=length,
                    shadow_angle=shadow_angle,
                )
            )

    return shadows


def calculate_fence_shadows(
    fences: list[Fence],
    sun: SunPosition,
    settings: ShadeSettings = DEFAULT_SETTINGS,
) -> list[FenceShadowData]:
    """Calculate shadows for all fence segments."""
    return calculate_structure_shadows(fences_to_structures(fences), sun, settings)


def calculate_bed_shadows(
    beds: list[Bed],
    sun: SunPosition,
    settings: ShadeSettings = DEFAULT_SETTINGS,
) -> list[FenceShadowData]:
    """Calculate shadows for the walls of raised beds."""
    return calculate_structure_shadows(
        beds_to_structures(beds, settings.circle_segments), sun, settings
    )
