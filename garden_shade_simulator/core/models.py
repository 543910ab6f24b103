"""Data models for the garden shade simulation."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

INCHES_PER_FOOT = 12.0

# Default thresholds, all in inches or degrees.
MAX_SHADOW_LENGTH = 300.0  # 25 feet
MIN_SHADOW_RENDER_ALTITUDE = 10.0  # shadows start appearing (faintly)
FULL_SHADOW_ALTITUDE = 25.0  # shadows at full opacity
# Below 20° sunlight is heavily scattered and PAR (photosynthetically active
# radiation) is minimal, so shade stops mattering to plants.
MIN_SHADE_DETECTION_ALTITUDE = 20.0
SHADOW_CONE_COSINE = 0.94  # cos(20°)
MIN_PLANT_SEPARATION = 6.0
CIRCLE_SEGMENTS = 24


@dataclass(frozen=True)
class ShadeSettings:
    """Tunable thresholds for shadow projection and shade detection.

    Attributes:
        max_shadow_length: Cap on any shadow length in inches.
        min_shadow_render_altitude: Sun altitude (degrees) below which no
            shadow geometry is produced.
        full_shadow_altitude: Sun altitude (degrees) at which shadows reach
            full opacity.
        min_shade_detection_altitude: Sun altitude (degrees) below which no
            plant is reported as shaded.
        cone_cosine: Cosine of the half-angle of the plant shadow cone.
        min_separation: Plants closer than this (inches) never shade each other.
        circle_segments: Number of polygon sides used for circular beds.
    """

    max_shadow_length: float = MAX_SHADOW_LENGTH
    min_shadow_render_altitude: float = MIN_SHADOW_RENDER_ALTITUDE
    full_shadow_altitude: float = FULL_SHADOW_ALTITUDE
    min_shade_detection_altitude: float = MIN_SHADE_DETECTION_ALTITUDE
    cone_cosine: float = SHADOW_CONE_COSINE
    min_separation: float = MIN_PLANT_SEPARATION
    circle_segments: int = CIRCLE_SEGMENTS

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> ShadeSettings:
        """Create settings, overriding only the keys present in ``data``."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown shade settings: {', '.join(sorted(unknown))}")
        values = {k: float(v) for k, v in data.items() if k != "circle_segments"}
        if "circle_segments" in data:
            segments = data["circle_segments"]
            if isinstance(segments, bool) or float(segments) != int(segments) or int(segments) < 3:
                raise ValueError(
                    f"circle_segments must be a whole number of at least 3, got {segments!r}"
                )
            values["circle_segments"] = int(segments)
        return cls(**values)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class SunPosition:
    """Sun position for one (latitude, month, time-of-day) combination.

    Attributes:
        altitude: Angle above the horizon in degrees (negative below).
        azimuth: Compass bearing in degrees, clockwise from North [0, 360).
        is_night: Authoritative night flag. True when the sun is at or below
            the horizon or the latitude/season has no sunrise at all.
    """

    altitude: float
    azimuth: float
    is_night: bool

    @property
    def shadow_angle(self) -> float:
        """Direction shadows point, degrees from North (opposite the sun)."""
        return (self.azimuth + 180.0) % 360.0


@dataclass
class Segment:
    """A straight wall segment between two field points (inches)."""

    start: np.ndarray
    end: np.ndarray

    @classmethod
    def from_points(cls, start, end) -> Segment:
        return cls(
            start=np.asarray(start, dtype=float),
            end=np.asarray(end, dtype=float),
        )

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    @property
    def midpoint(self) -> np.ndarray:
        return (self.start + self.end) / 2


@dataclass
class Quadrilateral:
    """Shadow footprint of one wall segment.

    ``p1``/``p2`` are the base segment endpoints; ``p3``/``p4`` are the end and
    start points translated by the shadow offset, so the corners wind
    p1 -> p2 -> p3 -> p4 without crossing.
    """

    p1: np.ndarray
    p2: np.ndarray
    p3: np.ndarray
    p4: np.ndarray

    @property
    def corners(self) -> list[np.ndarray]:
        return [self.p1, self.p2, self.p3, self.p4]

    def to_dict(self) -> dict:
        return {
            "p1": self.p1.tolist(),
            "p2": self.p2.tolist(),
            "p3": self.p3.tolist(),
            "p4": self.p4.tolist(),
        }


@dataclass
class PlantForShadow:
    """A plant reduced to what the shadow engine needs.

    Attributes:
        id: Plant identifier.
        x: Absolute field X in inches (East is +X).
        y: Absolute field Y in inches (South is +Y, North is -Y).
        height_max: Mature height in inches.
    """

    id: str
    x: float
    y: float
    height_max: float

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y])


@dataclass
class StructureForShading:
    """A fence or raised-bed wall reduced to a list of wall segments.

    Attributes:
        type: ``"fence"`` or ``"bed"``.
        id: Identifier of the source fence or bed.
        segments: Ordered wall segments.
        height_inches: Wall height in inches.
    """

    type: str
    id: str
    segments: list[Segment]
    height_inches: float

    @property
    def interior_point(self) -> Optional[np.ndarray]:
        """Reference point inside a closed outline (vertex centroid)."""
        if not self.segments:
            return None
        return np.mean([s.start for s in self.segments], axis=0)


@dataclass
class ShadowData:
    """Shadow cast by a single plant (a point caster)."""

    plant_id: str
    origin_x: float
    origin_y: float
    shadow_length: float
    shadow_angle: float
    end_x: float
    end_y: float
    height_max: float

    def to_dict(self) -> dict:
        return {
            "plant_id": self.plant_id,
            "origin_x": self.origin_x,
            "origin_y": self.origin_y,
            "shadow_length": self.shadow_length,
            "shadow_angle": self.shadow_angle,
            "end_x": self.end_x,
            "end_y": self.end_y,
            "height_max": self.height_max,
        }


@dataclass
class FenceShadowData:
    """Shadow cast by one segment of a fence or bed wall."""

    caster_id: str
    segment_index: int
    quadrilateral: Quadrilateral
    shadow_length: float
    shadow_angle: float

    def to_dict(self) -> dict:
        return {
            "caster_id": self.caster_id,
            "segment_index": self.segment_index,
            "quadrilateral": self.quadrilateral.to_dict(),
            "shadow_length": self.shadow_length,
            "shadow_angle": self.shadow_angle,
        }


@dataclass
class Bed:
    """A garden bed as laid out on the canvas.

    Attributes:
        id: Bed identifier.
        shape: ``"rectangle"`` or ``"circle"``.
        x: Left edge of the bounding box in field inches.
        y: Top (north) edge of the bounding box in field inches.
        width_feet: Width, or diameter for circular beds.
        height_feet: North-south depth of rectangular beds (ignored for circles).
        rotation: Degrees clockwise from North, about the bed center.
        raised_wall_height_feet: Height of the raised wall, 0 for in-ground beds.
    """

    id: str
    shape: str
    x: float
    y: float
    width_feet: float
    height_feet: Optional[float] = None
    rotation: float = 0.0
    raised_wall_height_feet: float = 0.0

    @property
    def width_inches(self) -> float:
        return self.width_feet * INCHES_PER_FOOT

    @property
    def depth_inches(self) -> float:
        if self.shape == "circle" or self.height_feet is None:
            return self.width_inches
        return self.height_feet * INCHES_PER_FOOT

    @property
    def center(self) -> np.ndarray:
        return np.array([self.x + self.width_inches / 2, self.y + self.depth_inches / 2])

    @property
    def wall_height_inches(self) -> float:
        return self.raised_wall_height_feet * INCHES_PER_FOOT


@dataclass
class Fence:
    """An open polyline fence."""

    id: str
    vertices: list[np.ndarray]
    height_feet: float

    @property
    def height_inches(self) -> float:
        return self.height_feet * INCHES_PER_FOOT


@dataclass
class PlacedPlant:
    """A plant as stored in a layout.

    When ``bed_id`` is set, ``x``/``y`` are inches relative to the bed's
    bounding-box corner; otherwise they are absolute field inches.
    """

    id: str
    x: float
    y: float
    height_max: float
    bed_id: Optional[str] = None
    name: Optional[str] = None


@dataclass
class SunParameters:
    """Sun controls as supplied by the UI.

    Attributes:
        enabled: Whether the sun simulation is switched on.
        latitude: Degrees, positive North [-90, 90].
        month: Continuous month [0, 12), 0 = start of January.
        time_of_day: 0 = sunrise, 0.5 = solar noon, 1 = sunset.
    """

    enabled: bool = True
    latitude: float = 40.0
    month: float = 5.5
    time_of_day: float = 0.5

    @classmethod
    def from_dict(cls, data: dict) -> SunParameters:
        return cls(
            enabled=bool(data.get("enabled", True)),
            latitude=float(data.get("latitude", 40.0)),
            month=float(data.get("month", 5.5)),
            time_of_day=float(data.get("time_of_day", 0.5)),
        )

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "latitude": self.latitude,
            "month": self.month,
            "time_of_day": self.time_of_day,
        }

    def sun_position(self) -> Optional[SunPosition]:
        """Compute the sun position, or None when the simulation is off."""
        if not self.enabled:
            return None
        from .sun_position import calculate_sun_position

        return calculate_sun_position(self.latitude, self.month, self.time_of_day)


@dataclass
class GardenConfig:
    """Complete garden scene for the shade simulation.

    Attributes:
        beds: Garden beds.
        fences: Fences.
        plants: Placed plants.
        sun: Sun control parameters.
        settings: Shadow/shade thresholds.
        units: Linear unit of positions (always "inches").
    """

    beds: list[Bed] = field(default_factory=list)
    fences: list[Fence] = field(default_factory=list)
    plants: list[PlacedPlant] = field(default_factory=list)
    sun: SunParameters = field(default_factory=SunParameters)
    settings: ShadeSettings = field(default_factory=ShadeSettings)
    units: str = "inches"

    @classmethod
    def from_json_file(cls, path: str | Path) -> GardenConfig:
        """Load configuration from a JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        logger.debug("Loaded garden config from %s", path)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> GardenConfig:
        """Create configuration from a dictionary."""
        beds = []
        for b in data.get("beds", []):
            bed_id = b.get("id", "<unknown>")
            for key in ("id", "x", "y", "width_feet"):
                if key not in b:
                    raise ValueError(f"Bed {bed_id} missing {key}")

            shape = b.get("shape", "rectangle")
            if shape not in {"rectangle", "circle"}:
                raise ValueError(f"Bed {bed_id} has unknown shape {shape!r}")

            height_feet = b.get("height_feet")
            if shape == "rectangle" and height_feet is None:
                raise ValueError(f"Rectangular bed {bed_id} missing height_feet")

            beds.append(
                Bed(
                    id=str(b["id"]),
                    shape=shape,
                    x=float(b["x"]),
                    y=float(b["y"]),
                    width_feet=float(b["width_feet"]),
                    height_feet=float(height_feet) if height_feet is not None else None,
                    rotation=float(b.get("rotation", 0.0) or 0.0),
                    raised_wall_height_feet=float(b.get("raised_wall_height_feet", 0.0) or 0.0),
                )
            )

        fences = []
        for fd in data.get("fences", []):
            fence_id = fd.get("id", "<unknown>")
            if "id" not in fd or "vertices" not in fd or "height_feet" not in fd:
                raise ValueError(f"Fence {fence_id} must define id, vertices and height_feet")
            vertices = [np.array(v, dtype=float) for v in fd["vertices"]]
            if any(v.shape != (2,) for v in vertices):
                raise ValueError(f"Fence {fence_id} vertices must be [x, y] pairs")
            fences.append(
                Fence(id=str(fd["id"]), vertices=vertices, height_feet=float(fd["height_feet"]))
            )

        bed_ids = {b.id for b in beds}
        plants = []
        for p in data.get("plants", []):
            plant_id = p.get("id", "<unknown>")
            for key in ("id", "x", "y", "height_max"):
                if key not in p:
                    raise ValueError(f"Plant {plant_id} missing {key}")
            bed_id = p.get("bed_id")
            if bed_id is not None and str(bed_id) not in bed_ids:
                raise ValueError(f"Plant {plant_id} references unknown bed {bed_id}")
            plants.append(
                PlacedPlant(
                    id=str(p["id"]),
                    x=float(p["x"]),
                    y=float(p["y"]),
                    height_max=float(p["height_max"]),
                    bed_id=str(bed_id) if bed_id is not None else None,
                    name=p.get("name"),
                )
            )

        config = cls(
            beds=beds,
            fences=fences,
            plants=plants,
            sun=SunParameters.from_dict(data.get("sun", {})),
            settings=ShadeSettings.from_dict(data.get("settings")),
            units=data.get("units", "inches"),
        )
        logger.debug(
            "Garden config: %d beds, %d fences, %d plants",
            len(beds), len(fences), len(plants),
        )
        return config

    def bed_by_id(self, bed_id: str) -> Optional[Bed]:
        return next((b for b in self.beds if b.id == bed_id), None)

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return {
            "units": self.units,
            "sun": self.sun.to_dict(),
            "settings": self.settings.to_dict(),
            "beds": [self._bed_to_dict(b) for b in self.beds],
            "fences": [
                {
                    "id": f.id,
                    "vertices": [v.tolist() for v in f.vertices],
                    "height_feet": f.height_feet,
                }
                for f in self.fences
            ],
            "plants": [self._plant_to_dict(p) for p in self.plants],
        }

    @staticmethod
    def _bed_to_dict(bed: Bed) -> dict:
        data = {
            "id": bed.id,
            "shape": bed.shape,
            "x": bed.x,
            "y": bed.y,
            "width_feet": bed.width_feet,
            "raised_wall_height_feet": bed.raised_wall_height_feet,
        }
        if bed.height_feet is not None:
            data["height_feet"] = bed.height_feet
        if not math.isclose(bed.rotation, 0.0):
            data["rotation"] = bed.rotation
        return data

    @staticmethod
    def _plant_to_dict(plant: PlacedPlant) -> dict:
        data = {
            "id": plant.id,
            "x": plant.x,
            "y": plant.y,
            "height_max": plant.height_max,
        }
        if plant.bed_id is not None:
            data["bed_id"] = plant.bed_id
        if plant.name is not None:
            data["name"] = plant.name
        return data
