"""Interactive visualization with a time-of-day slider.

Builds a Plotly figure with one animation frame per time-of-day sample, so
the shadows and shaded plants can be scrubbed from sunrise to sunset.
"""

import logging
from typing import Optional

import plotly.graph_objects as go

from ..core.models import GardenConfig
from ..core.structures import plants_for_shadow
from ..core.sun_position import (
    calculate_sun_position,
    format_time_of_day,
    get_daylight_hours,
    get_month_name,
)
from ..simulator.time_range import DEFAULT_STEPS, sample_times
from .scene_builder import apply_layout, garden_extent, build_scene, dynamic_traces

logger = logging.getLogger(__name__)


def create_time_slider_visualization(
    config: GardenConfig,
    latitude: Optional[float] = None,
    month: Optional[float] = None,
    n_steps: int = DEFAULT_STEPS,
    output_path: Optional[str] = None,
) -> go.Figure:
    """Create a figure with a sunrise-to-sunset time slider.

    Args:
        config: Garden layout.
        latitude: Latitude; defaults to ``config.sun.latitude``.
        month: Continuous month; defaults to ``config.sun.month``.
        n_steps: Number of slider positions.
        output_path: If given, the figure is also written there as HTML.

    Returns:
        Plotly Figure with frames and a slider.
    """
    latitude = config.sun.latitude if latitude is None else latitude
    month = config.sun.month if month is None else month

    times = sample_times(n_steps)
    plants = plants_for_shadow(config)
    center, distance = garden_extent(config, plants)

    fig = build_scene(config, sun=calculate_sun_position(latitude, month, times[0]))
    n_static = len(config.beds) + len(config.fences)
    dynamic_indices = list(range(n_static, n_static + 4))

    frames = []
    steps = []
    for t in times:
        name = f"{t:.4f}"
        sun = calculate_sun_position(latitude, month, t)
        frames.append(
            go.Frame(
                name=name,
                data=dynamic_traces(config, plants, sun, center, distance),
                traces=dynamic_indices,
            )
        )
        steps.append(
            dict(
                method="animate",
                label=format_time_of_day(t),
                args=[[name], dict(mode="immediate", frame=dict(duration=0, redraw=True))],
            )
        )

    fig.frames = frames

    title = (
        f"Garden Shade - {get_month_name(month)}, latitude {latitude:.1f}° "
        f"({get_daylight_hours(latitude, month):.1f} h daylight)"
    )
    apply_layout(fig, title)
    fig.update_layout(
        sliders=[
            dict(
                active=0,
                currentvalue=dict(prefix="Time: "),
                pad=dict(t=40),
                steps=steps,
            )
        ],
    )

    if output_path:
        fig.write_html(output_path, include_plotlyjs="cdn")
        logger.info("Wrote time slider visualization to %s", output_path)

    return fig
