"""Shade detection for plants under other plants, fences and raised beds.

This module contains the algorithm that decides which plants sit inside a
shadow at the current sun position. Plant casters use a shadow cone; fences
and bed walls use their shadow quadrilaterals. In both cases the shadow is
treated as a sloped plane falling from the caster's full height at its base
to zero at the shadow tip, and a plant is only shaded when it is shorter
than that plane where it stands.

Structures are tested against exactly the quadrilaterals the projector
draws, so a bed only shades ground beyond its shadow-side walls.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .geometry import (
    azimuth_to_direction_2d,
    is_point_in_quadrilateral,
    point_to_segment_distance,
    shadow_quadrilateral,
)
from .models import PlantForShadow, ShadeSettings, StructureForShading, SunPosition
from .shadows import DEFAULT_SETTINGS, calculate_shadow_length, casting_segments, shadow_offset


@dataclass
class ShadeCause:
    """What shades a plant.

    Attributes:
        cause_type: ``"plant"``, ``"fence"`` or ``"bed"``.
        cause_id: Identifier of the caster.
        plane_height: Height of the shadow plane at the plant, inches.
    """

    cause_type: str
    cause_id: str
    plane_height: float


def shadow_plane_height(caster_height: float, distance: float, shadow_length: float) -> float:
    """Height of a shadow's upper boundary at a distance from its caster.

    Falls linearly from the caster height at distance 0 to zero at the tip.
    """
    if shadow_length <= 0:
        return 0.0
    return caster_height * (1 - distance / shadow_length)


def is_shade_detectable(sun: SunPosition, settings: ShadeSettings = DEFAULT_SETTINGS) -> bool:
    """Whether the sun is high enough for shade to matter to plants."""
    return not sun.is_night and sun.altitude >= settings.min_shade_detection_altitude


def _plant_shade_cause(
    target: PlantForShadow,
    plants: list[PlantForShadow],
    sun: SunPosition,
    shadow_dir: np.ndarray,
    settings: ShadeSettings,
) -> Optional[ShadeCause]:
    for caster in plants:
        if caster.id == target.id or caster.height_max <= target.height_max:
            continue

        length = calculate_shadow_length(caster.height_max, sun.altitude, settings.max_shadow_length)

        delta = target.position - caster.position
        distance = float(np.linalg.norm(delta))

        if distance > length:
            continue
        # Co-located plants are effectively the same clump. The zero check
        # only matters for min_separation=0; the cone test divides by distance.
        if distance < settings.min_separation or distance == 0:
            continue

        cosine = float(np.dot(delta / distance, shadow_dir))
        if cosine <= settings.cone_cosine:
            continue

        plane = shadow_plane_height(caster.height_max, distance, length)
        if target.height_max < plane:
            return ShadeCause(cause_type="plant", cause_id=caster.id, plane_height=plane)

    return None


def _structure_shade_cause(
    target: PlantForShadow,
    structures: list[StructureForShading],
    sun: SunPosition,
    settings: ShadeSettings,
) -> Optional[ShadeCause]:
    point = target.position

    for structure in structures:
        length = calculate_shadow_length(
            structure.height_inches, sun.altitude, settings.max_shadow_length
        )
        if length <= 0:
            continue
        offset = shadow_offset(length, sun.shadow_angle)

        for _, segment in casting_segments(structure, sun.azimuth):
            if not is_point_in_quadrilateral(point, shadow_quadrilateral(segment, offset)):
                continue

            distance = point_to_segment_distance(point, segment.start, segment.end)
            plane = shadow_plane_height(structure.height_inches, distance, length)
            if target.height_max < plane:
                return ShadeCause(cause_type=structure.type, cause_id=structure.id, plane_height=plane)

    return None


def find_shade_causes(
    plants: list[PlantForShadow],
    sun: SunPosition,
    structures: Optional[list[StructureForShading]] = None,
    settings: ShadeSettings = DEFAULT_SETTINGS,
) -> dict[str, ShadeCause]:
    """Map each shaded plant ID to the first thing found shading it.

    Plant casters are checked before structures; the first cause wins.
    """
    causes: dict[str, ShadeCause] = {}

    if not is_shade_detectable(sun, settings):
        return causes

    shadow_dir = azimuth_to_direction_2d(sun.shadow_angle)

    for target in plants:
        cause = _plant_shade_cause(target, plants, sun, shadow_dir, settings)
        if cause is not None:
            causes[target.id] = cause

    if structures:
        for target in plants:
            if target.id in causes:
                continue
            cause = _structure_shade_cause(target, structures, sun, settings)
            if cause is not None:
                causes[target.id] = cause

    return causes


def detect_shaded_plants(
    plants: list[PlantForShadow],
    sun: SunPosition,
    structures: Optional[list[StructureForShading]] = None,
    settings: ShadeSettings = DEFAULT_SETTINGS,
) -> set[str]:
    """Detect which plants are shaded by taller plants and by structures.

    Args:
        plants: All plants with absolute positions and heights.
        sun: Current sun position.
        structures: Optional fences and raised-bed walls.
        settings: Thresholds.

    Returns:
        Set of shaded plant IDs; empty at night or when the sun is below
        ``min_shade_detection_altitude``.
    """
    return set(find_shade_causes(plants, sun, structures, settings))


def get_detailed_shade_info(
    plants: list[PlantForShadow],
    sun: SunPosition,
    structures: Optional[list[StructureForShading]] = None,
    settings: ShadeSettings = DEFAULT_SETTINGS,
) -> dict:
    """Get per-plant shade information.

    Useful for debugging and reporting. Agrees exactly with
    ``detect_shaded_plants`` for the same inputs.

    Returns:
        Dictionary with the sun position, an optional ``reason`` when the
        sun is too low, and one entry per plant naming its shade cause.
    """
    reason = None
    if sun.is_night:
        reason = "sun_below_horizon"
    elif sun.altitude < settings.min_shade_detection_altitude:
        reason = "sun_too_low"

    causes = find_shade_causes(plants, sun, structures, settings)

    plant_details = []
    for plant in plants:
        cause = causes.get(plant.id)
        plant_details.append({
            "plant_id": plant.id,
            "height_max": plant.height_max,
            "is_shaded": cause is not None,
            "cause_type": cause.cause_type if cause else None,
            "cause_id": cause.cause_id if cause else None,
            "plane_height": round(cause.plane_height, 2) if cause else None,
        })

    return {
        "is_shaded_any": bool(causes),
        "reason": reason,
        "sun_altitude": round(sun.altitude, 2),
        "sun_azimuth": round(sun.azimuth, 2),
        "n_plants": len(plants),
        "n_shaded": len(causes),
        "plants": plant_details,
    }
