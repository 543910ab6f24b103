"""Planar geometry for shadow projection and shade detection.

Coordinate System (field inches, as drawn on the canvas):
    - x = East (positive toward East)
    - y = South (positive downward on screen, so North is -Y)

Azimuth Convention:
    - 0° = North (-Y)
    - 90° = East (+X)
    - 180° = South (+Y)
    - 270° = West (-X)
    - Clockwise from North
"""

import math
from typing import Optional

import numpy as np

from .models import CIRCLE_SEGMENTS, Quadrilateral, Segment

EPSILON = 1e-10


def azimuth_to_direction_2d(azimuth_deg: float) -> np.ndarray:
    """Convert a compass azimuth to a unit vector in field coordinates.

    Args:
        azimuth_deg: Azimuth in degrees, clockwise from North.

    Returns:
        2D unit vector [x_east, y_south].

    Examples:
        >>> azimuth_to_direction_2d(0)  # North
        array([ 0., -1.])
    """
    az_rad = math.radians(azimuth_deg)
    return np.array([math.sin(az_rad), -math.cos(az_rad)])


def normalize(v: np.ndarray) -> np.ndarray:
    """Normalize a vector to unit length.

    Raises:
        ValueError: If the vector has zero length.
    """
    length = np.linalg.norm(v)
    if length < EPSILON:
        raise ValueError("Cannot normalize zero-length vector")
    return v / length


def rotate_point(point: np.ndarray, center: np.ndarray, rotation_deg: float) -> np.ndarray:
    """Rotate a point about a center, clockwise on screen for positive angles.

    Because +Y points South, this turns bearings the same way compass
    azimuths increase: rotating by θ maps azimuth ``a`` onto ``a + θ``.
    """
    if rotation_deg == 0:
        return np.array(point, dtype=float)
    rad = math.radians(rotation_deg)
    cos_r = math.cos(rad)
    sin_r = math.sin(rad)
    dx, dy = np.asarray(point, dtype=float) - center
    return np.array([
        center[0] + dx * cos_r - dy * sin_r,
        center[1] + dx * sin_r + dy * cos_r,
    ])


def polygonize_circle(
    center: np.ndarray,
    radius: float,
    n_segments: int = CIRCLE_SEGMENTS,
) -> list[np.ndarray]:
    """Approximate a circle with an evenly spaced polygon.

    Vertices are ordered by increasing angle (counter-clockwise in the x/y
    plane), so the edge ``(v[i], v[(i + 1) % n])`` always has the circle
    center on the same side.

    Args:
        center: Circle center [x, y].
        radius: Circle radius; non-positive radii produce no vertices.
        n_segments: Number of vertices (and edges).

    Returns:
        List of ``n_segments`` vertices, or an empty list for a degenerate circle.
    """
    if radius <= 0 or n_segments < 3:
        return []
    cx, cy = float(center[0]), float(center[1])
    return [
        np.array([
            cx + radius * math.cos(2 * math.pi * i / n_segments),
            cy + radius * math.sin(2 * math.pi * i / n_segments),
        ])
        for i in range(n_segments)
    ]


def closed_polygon_segments(vertices: list[np.ndarray]) -> list[Segment]:
    """Edges of a closed polygon, including the closing edge."""
    n = len(vertices)
    if n < 2:
        return []
    return [Segment(start=vertices[i], end=vertices[(i + 1) % n]) for i in range(n)]


def outward_normal(start: np.ndarray, end: np.ndarray, interior_point: np.ndarray) -> Optional[np.ndarray]:
    """Unit normal of a segment pointing away from an interior point.

    Returns None for a zero-length segment.
    """
    direction = np.asarray(end, dtype=float) - np.asarray(start, dtype=float)
    if np.linalg.norm(direction) < EPSILON:
        return None

    normal = normalize(np.array([direction[1], -direction[0]]))
    midpoint = (np.asarray(start, dtype=float) + np.asarray(end, dtype=float)) / 2
    if np.dot(normal, midpoint - interior_point) < 0:
        normal = -normal
    return normal


def is_segment_sun_facing(
    start: np.ndarray,
    end: np.ndarray,
    sun_azimuth: float,
    interior_point: np.ndarray,
) -> bool:
    """Decide whether a closed-outline edge projects a shadow outward.

    The edge casts its shadow away from the outline when its outward face
    points away from the sun, i.e. the dot product of the outward normal and
    the direction toward the sun is negative. An edge exactly edge-on to the
    sun casts nothing.

    Args:
        start: Segment start [x, y].
        end: Segment end [x, y].
        sun_azimuth: Sun azimuth in degrees, clockwise from North.
        interior_point: Any point inside the outline.

    Returns:
        True if the edge casts a shadow; never True for a zero-length edge.
    """
    normal = outward_normal(start, end, np.asarray(interior_point, dtype=float))
    if normal is None:
        return False
    # Trig rounding leaves edge-on walls at about 1e-16 instead of 0
    return float(np.dot(normal, azimuth_to_direction_2d(sun_azimuth))) < -EPSILON


def shadow_quadrilateral(segment: Segment, offset: np.ndarray) -> Quadrilateral:
    """Footprint swept by a segment translated along a shadow offset."""
    return Quadrilateral(
        p1=segment.start.copy(),
        p2=segment.end.copy(),
        p3=segment.end + offset,
        p4=segment.start + offset,
    )


def is_point_in_quadrilateral(point: np.ndarray, quad: Quadrilateral) -> bool:
    """Test whether a point lies inside a convex quadrilateral.

    Uses the cross product of each edge with the vector to the point; the
    point is inside when all four have the same sign. Works for either
    winding order. A zero cross product counts as positive, so points
    exactly on an edge are only inside for counter-clockwise corners.
    """
    px, py = float(point[0]), float(point[1])
    corners = quad.corners
    sign = None

    for i in range(4):
        ax, ay = corners[i]
        bx, by = corners[(i + 1) % 4]
        cross = (bx - ax) * (py - ay) - (by - ay) * (px - ax)
        current = 1 if cross >= 0 else -1
        if sign is None:
            sign = current
        elif current != sign:
            return False

    return True


def point_to_segment_distance(point: np.ndarray, start: np.ndarray, end: np.ndarray) -> float:
    """Distance from a point to the closest point of a segment.

    The projection is clamped onto the segment; a zero-length segment
    measures the distance to its single point.
    """
    p = np.asarray(point, dtype=float)
    a = np.asarray(start, dtype=float)
    d = np.asarray(end, dtype=float) - a
    length_sq = float(np.dot(d, d))

    if length_sq == 0:
        return float(np.linalg.norm(p - a))

    t = max(0.0, min(1.0, float(np.dot(p - a, d)) / length_sq))
    return float(np.linalg.norm(p - (a + t * d)))
