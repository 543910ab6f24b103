"""Plotly 2D visualization module."""

from .scene_builder import build_scene, create_bed_outline, create_plant_markers, visualize_shade_test
from .interactive import create_time_slider_visualization

__all__ = [
    "build_scene",
    "create_bed_outline",
    "create_plant_markers",
    "visualize_shade_test",
    "create_time_slider_visualization",
]
