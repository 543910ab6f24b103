"""Conversion of layout entities into shadow-engine inputs.

Fences and raised-bed walls are both reduced to a ``StructureForShading``
(a list of wall segments plus a height) so projection and shade detection
share one code path. All lengths leave this module in inches.
"""

import logging
from typing import Optional

import numpy as np

from .geometry import closed_polygon_segments, polygonize_circle, rotate_point
from .models import (
    CIRCLE_SEGMENTS,
    Bed,
    Fence,
    GardenConfig,
    PlacedPlant,
    PlantForShadow,
    Segment,
    StructureForShading,
)

logger = logging.getLogger(__name__)


def bed_outline(bed: Bed, n_circle_segments: int = CIRCLE_SEGMENTS) -> list[np.ndarray]:
    """Outline vertices of a bed in field inches.

    Rectangles yield four corners in the order NW, NE, SE, SW (before
    rotation), rotated about the bed center. Circles yield the polygonized
    circle; rotation has no visible effect on a circle and is ignored.
    """
    center = bed.center

    if bed.shape == "circle":
        return polygonize_circle(center, bed.width_inches / 2, n_circle_segments)

    width = bed.width_inches
    depth = bed.depth_inches
    if width <= 0 or depth <= 0:
        return []

    corners = [
        np.array([bed.x, bed.y]),
        np.array([bed.x + width, bed.y]),
        np.array([bed.x + width, bed.y + depth]),
        np.array([bed.x, bed.y + depth]),
    ]
    if bed.rotation:
        corners = [rotate_point(c, center, bed.rotation) for c in corners]
    return corners


def bed_to_structure(
    bed: Bed,
    n_circle_segments: int = CIRCLE_SEGMENTS,
) -> Optional[StructureForShading]:
    """Convert a raised bed to a closed wall structure.

    Returns None for in-ground beds (no wall height) and degenerate beds.
    """
    if bed.raised_wall_height_feet <= 0:
        return None

    outline = bed_outline(bed, n_circle_segments)
    if not outline:
        logger.warning("Skipping bed %s with degenerate footprint", bed.id)
        return None

    return StructureForShading(
        type="bed",
        id=bed.id,
        segments=closed_polygon_segments(outline),
        height_inches=bed.wall_height_inches,
    )


def fence_to_structure(fence: Fence) -> StructureForShading:
    """Convert a fence polyline to an open wall structure.

    One segment per consecutive vertex pair; zero-length segments are kept
    here (their index stays stable) and skipped by the projector.
    """
    segments = [
        Segment.from_points(fence.vertices[i], fence.vertices[i + 1])
        for i in range(len(fence.vertices) - 1)
    ]
    return StructureForShading(
        type="fence",
        id=fence.id,
        segments=segments,
        height_inches=fence.height_inches,
    )


def beds_to_structures(
    beds: list[Bed],
    n_circle_segments: int = CIRCLE_SEGMENTS,
) -> list[StructureForShading]:
    """Convert beds to structures, dropping beds without raised walls."""
    structures = []
    for bed in beds:
        structure = bed_to_structure(bed, n_circle_segments)
        if structure is not None:
            structures.append(structure)
    return structures


def fences_to_structures(fences: list[Fence]) -> list[StructureForShading]:
    """Convert fences to structures."""
    return [fence_to_structure(f) for f in fences]


def plant_for_shadow(plant: PlacedPlant, bed: Optional[Bed] = None) -> PlantForShadow:
    """Resolve a placed plant to absolute field inches.

    Bed-local positions are offset by the bed's corner and turned with the
    bed's rotation about its center.
    """
    if bed is None:
        return PlantForShadow(id=plant.id, x=plant.x, y=plant.y, height_max=plant.height_max)

    position = np.array([bed.x + plant.x, bed.y + plant.y])
    if bed.rotation:
        position = rotate_point(position, bed.center, bed.rotation)
    return PlantForShadow(
        id=plant.id,
        x=float(position[0]),
        y=float(position[1]),
        height_max=plant.height_max,
    )


def plants_for_shadow(config: GardenConfig) -> list[PlantForShadow]:
    """All plants of a garden in absolute field inches."""
    return [
        plant_for_shadow(p, config.bed_by_id(p.bed_id) if p.bed_id is not None else None)
        for p in config.plants
    ]


def structures_for_config(config: GardenConfig) -> list[StructureForShading]:
    """All shadow-casting structures of a garden: fences first, then beds."""
    return fences_to_structures(config.fences) + beds_to_structures(
        config.beds, config.settings.circle_segments
    )
