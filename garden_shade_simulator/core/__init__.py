"""Core sun, shadow and shade-detection components."""

from .models import (
    Bed,
    Fence,
    FenceShadowData,
    GardenConfig,
    PlacedPlant,
    PlantForShadow,
    ShadeSettings,
    ShadowData,
    StructureForShading,
    SunParameters,
    SunPosition,
)
from .sun_position import calculate_sun_position, get_daylight_hours
from .geometry import is_segment_sun_facing, polygonize_circle
from .shadows import (
    casting_segments,
    calculate_all_shadows,
    calculate_bed_shadows,
    calculate_fence_shadows,
    calculate_shadow,
    calculate_structure_shadows,
    get_shadow_opacity,
)
from .shade_detection import detect_shaded_plants, get_detailed_shade_info
from .structures import (
    beds_to_structures,
    fences_to_structures,
    plants_for_shadow,
    structures_for_config,
)

__all__ = [
    "Bed",
    "Fence",
    "FenceShadowData",
    "GardenConfig",
    "PlacedPlant",
    "PlantForShadow",
    "ShadeSettings",
    "ShadowData",
    "StructureForShading",
    "SunParameters",
    "SunPosition",
    "calculate_sun_position",
    "get_daylight_hours",
    "is_segment_sun_facing",
    "polygonize_circle",
    "casting_segments",
    "calculate_all_shadows",
    "calculate_bed_shadows",
    "calculate_fence_shadows",
    "calculate_shadow",
    "calculate_structure_shadows",
    "get_shadow_opacity",
    "detect_shaded_plants",
    "get_detailed_shade_info",
    "beds_to_structures",
    "fences_to_structures",
    "plants_for_shadow",
    "structures_for_config",
]
