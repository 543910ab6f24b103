"""Plotly top-down visualization for the garden shade simulation.

This module draws beds, fences, plants, their shadows and the set of shaded
plants on a 2D plan. Field Y grows southward, so the Y axis is reversed to
keep North at the top.
"""

import logging
from typing import Optional

import numpy as np
import plotly.graph_objects as go

from ..core.geometry import azimuth_to_direction_2d
from ..core.models import (
    Bed,
    Fence,
    FenceShadowData,
    GardenConfig,
    PlantForShadow,
    ShadeSettings,
    ShadowData,
    SunPosition,
)
from ..core.shade_detection import detect_shaded_plants
from ..core.shadows import calculate_all_shadows, calculate_structure_shadows, get_shadow_opacity
from ..core.structures import bed_outline, plants_for_shadow, structures_for_config
from ..core.sun_position import calculate_sun_position, get_sun_description

logger = logging.getLogger(__name__)

SUNLIT_COLOR = "forestgreen"
SHADED_COLOR = "slateblue"


def create_bed_outline(bed: Bed, settings: ShadeSettings, color: str = "saddlebrown") -> go.Scatter:
    """Create a filled outline for a bed.

    Args:
        bed: The bed to draw.
        settings: Thresholds (circle resolution).
        color: Outline color.

    Returns:
        Plotly Scatter trace.
    """
    outline = bed_outline(bed, settings.circle_segments)
    if outline:
        # Close the outline by repeating the first vertex
        outline.append(outline[0])

    width = 3 if bed.raised_wall_height_feet > 0 else 1
    return go.Scatter(
        x=[v[0] for v in outline],
        y=[v[1] for v in outline],
        mode="lines",
        fill="toself",
        fillcolor="rgba(139, 90, 43, 0.15)",
        line=dict(color=color, width=width),
        name=f"Bed {bed.id}",
        showlegend=False,
    )


def create_fence_line(fence: Fence, color: str = "dimgray") -> go.Scatter:
    """Create a polyline trace for a fence."""
    return go.Scatter(
        x=[v[0] for v in fence.vertices],
        y=[v[1] for v in fence.vertices],
        mode="lines",
        line=dict(color=color, width=4),
        name=f"Fence {fence.id}",
        showlegend=False,
    )


def create_structure_shadow_trace(
    shadows: list[FenceShadowData],
    opacity: float = 1.0,
) -> go.Scatter:
    """Create one filled trace holding every structure shadow quadrilateral.

    Quadrilaterals are separated by ``None`` so Plotly fills each one on
    its own while the trace count stays fixed.
    """
    x: list[Optional[float]] = []
    y: list[Optional[float]] = []
    for shadow in shadows:
        corners = shadow.quadrilateral.corners + [shadow.quadrilateral.p1]
        x.extend(float(c[0]) for c in corners)
        y.extend(float(c[1]) for c in corners)
        x.append(None)
        y.append(None)

    return go.Scatter(
        x=x,
        y=y,
        mode="lines",
        fill="toself",
        fillcolor=f"rgba(40, 40, 60, {0.35 * opacity:.3f})",
        line=dict(width=0),
        name="Structure shadows",
        hoverinfo="skip",
    )


def create_plant_shadow_trace(shadows: list[ShadowData], opacity: float = 1.0) -> go.Scatter:
    """Create one line trace for all plant shadows (base to tip)."""
    x: list[Optional[float]] = []
    y: list[Optional[float]] = []
    for shadow in shadows:
        x.extend([shadow.origin_x, shadow.end_x, None])
        y.extend([shadow.origin_y, shadow.end_y, None])

    return go.Scatter(
        x=x,
        y=y,
        mode="lines",
        line=dict(color=f"rgba(40, 40, 60, {0.5 * opacity:.3f})", width=6),
        name="Plant shadows",
        hoverinfo="skip",
    )


def create_plant_markers(plants: list[PlantForShadow], shaded_ids: set[str]) -> go.Scatter:
    """Create markers for plants, colored by whether they are shaded."""
    colors = [SHADED_COLOR if p.id in shaded_ids else SUNLIT_COLOR for p in plants]
    sizes = [max(6.0, min(24.0, p.height_max / 3)) for p in plants]
    text = [
        f"{p.id} ({p.height_max:.0f} in){' - shaded' if p.id in shaded_ids else ''}"
        for p in plants
    ]

    return go.Scatter(
        x=[p.x for p in plants],
        y=[p.y for p in plants],
        mode="markers",
        marker=dict(size=sizes, color=colors, line=dict(color="black", width=1)),
        text=text,
        hoverinfo="text",
        name="Plants",
    )


def create_sun_indicator(
    sun: Optional[SunPosition],
    center: np.ndarray,
    distance: float,
    size: int = 18,
) -> go.Scatter:
    """Create a marker on the sun's side of the garden."""
    if sun is None or sun.is_night:
        return go.Scatter(x=[], y=[], mode="markers", name="Sun")

    position = center + distance * azimuth_to_direction_2d(sun.azimuth)
    return go.Scatter(
        x=[position[0]],
        y=[position[1]],
        mode="markers",
        marker=dict(size=size, color="gold", line=dict(color="orange", width=2)),
        name=f"Sun (az={sun.azimuth:.0f}°, alt={sun.altitude:.0f}°)",
    )


def garden_extent(config: GardenConfig, plants: list[PlantForShadow]) -> tuple[np.ndarray, float]:
    points = [p.position for p in plants]
    for bed in config.beds:
        points.extend(bed_outline(bed, config.settings.circle_segments))
    for fence in config.fences:
        points.extend(fence.vertices)
    if not points:
        return np.zeros(2), 120.0

    stacked = np.array(points)
    low = stacked.min(axis=0)
    high = stacked.max(axis=0)
    return (low + high) / 2, max(60.0, float(np.linalg.norm(high - low)) / 2 + 24.0)


def dynamic_traces(
    config: GardenConfig,
    plants: list[PlantForShadow],
    sun: Optional[SunPosition],
    center: np.ndarray,
    distance: float,
) -> list[go.Scatter]:
    """Traces that change with the sun: shadows, plant markers and sun."""
    settings = config.settings
    if sun is None:
        return [
            create_structure_shadow_trace([]),
            create_plant_shadow_trace([]),
            create_plant_markers(plants, set()),
            create_sun_indicator(None, center, distance),
        ]

    structures = structures_for_config(config)
    opacity = get_shadow_opacity(sun.altitude, settings)
    shaded = detect_shaded_plants(plants, sun, structures, settings)

    return [
        create_structure_shadow_trace(calculate_structure_shadows(structures, sun, settings), opacity),
        create_plant_shadow_trace(calculate_all_shadows(plants, sun, settings), opacity),
        create_plant_markers(plants, shaded),
        create_sun_indicator(sun, center, distance),
    ]


def build_scene(
    config: GardenConfig,
    sun: Optional[SunPosition] = None,
    title: str = "Garden Shade Visualization",
) -> go.Figure:
    """Build a complete top-down Plotly scene of the garden.

    Args:
        config: Garden layout.
        sun: Sun position; defaults to the one described by ``config.sun``
            (None when the sun simulation is disabled).
        title: Plot title.

    Returns:
        Plotly Figure object.
    """
    if sun is None:
        sun = config.sun.sun_position()

    plants = plants_for_shadow(config)
    center, distance = garden_extent(config, plants)

    fig = go.Figure()
    for bed in config.beds:
        fig.add_trace(create_bed_outline(bed, config.settings))
    for fence in config.fences:
        fig.add_trace(create_fence_line(fence))
    for trace in dynamic_traces(config, plants, sun, center, distance):
        fig.add_trace(trace)

    apply_layout(fig, title)
    logger.debug("Built scene with %d traces", len(fig.data))
    return fig


def visualize_shade_test(
    config: GardenConfig,
    latitude: float,
    month: float,
    time_of_day: float,
) -> go.Figure:
    """Convenience function to visualize one sun setting.

    Args:
        config: Garden layout.
        latitude: Latitude in degrees.
        month: Continuous month.
        time_of_day: 0 = sunrise, 1 = sunset.

    Returns:
        Plotly Figure with shadows and shaded plants.
    """
    sun = calculate_sun_position(latitude, month, time_of_day)
    title = f"Garden Shade: {get_sun_description(sun)}"
    return build_scene(config=config, sun=sun, title=title)


def apply_layout(fig: go.Figure, title: str) -> None:
    fig.update_layout(
        title=dict(text=title, x=0.5),
        xaxis=dict(title="East (in)", scaleanchor="y", scaleratio=1),
        yaxis=dict(title="South (in)", autorange="reversed"),
        plot_bgcolor="rgb(236, 245, 228)",
        legend=dict(
            yanchor="top",
            y=0.99,
            xanchor="left",
            x=0.01,
        ),
        margin=dict(l=40, r=20, t=50, b=40),
    )
