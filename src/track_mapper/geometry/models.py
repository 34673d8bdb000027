"""Geometry value types.

Every structure here is frozen: derived data (centerline parameters, track
limits, query results) is rebuilt from its inputs instead of being edited in
place.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


@dataclass(frozen=True)
class Point2:
    """A 2D point with finite coordinates.

    The subclasses below tag the frame a point lives in.  Points from
    different frames never compare equal, so a pixel point cannot silently
    stand in for a normalized one.
    """

    x: float
    """Horizontal coordinate (grows to the right)."""

    y: float
    """Vertical coordinate (grows downwards, image convention)."""

    def __post_init__(self) -> None:
        x = float(self.x)
        y = float(self.y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Point coordinates must be finite, got ({self.x}, {self.y})")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    @classmethod
    def of(cls, xy) -> Point2:
        """Build a point from any ``[x, y]`` pair."""
        x, y = xy
        return cls(x, y)

    def as_list(self) -> list[float]:
        """Return ``[x, y]`` (the export document's point encoding)."""
        return [self.x, self.y]


@dataclass(frozen=True)
class PixelPoint(Point2):
    """Point in raster pixel space."""


@dataclass(frozen=True)
class NormPoint(Point2):
    """Point in the normalized unit square ``[0, 1]²``."""


@dataclass(frozen=True)
class MetricPoint(Point2):
    """Point in metres on the physical track."""


@dataclass(frozen=True)
class Quad:
    """A validated quad in canonical ``TL, TR, BR, BL`` order (pixel space).

    Only produced by :func:`track_mapper.geometry.quad.finalize_quad`.
    """

    tl: Point2
    tr: Point2
    br: Point2
    bl: Point2

    def corners(self) -> list[Point2]:
        return [self.tl, self.tr, self.br, self.bl]


@dataclass(frozen=True)
class CenterlineParams:
    """Arc-length parameterization of a closed centerline.

    ``total_length`` is ``arc_lengths[-1]`` and therefore excludes the closing
    segment (last vertex back to the first), while ``headings`` and
    ``curvatures`` treat the polyline as a closed loop.
    """

    points: tuple[Point2, ...]
    arc_lengths: tuple[float, ...]
    """Cumulative arc-length at each vertex; ``arc_lengths[0] == 0``."""

    headings: tuple[float, ...]
    """Direction (radians) from vertex i to vertex (i + 1) mod n."""

    curvatures: tuple[float, ...]
    """Finite-difference heading change per unit arc-length at each vertex."""

    total_length: float

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class CenterlinePose:
    """Interpolated state on the centerline at some arc-length."""

    position: Point2
    heading: float
    curvature: float


@dataclass(frozen=True)
class ArcLengthProjection:
    """Closest point on the centerline to a query point."""

    s: float
    """Arc-length of the projection."""

    distance: float
    """Euclidean distance from the query point to the projection."""

    d: float
    """Signed lateral offset; positive on the right-hand normal side."""


@dataclass(frozen=True)
class FrenetPose:
    """Pose expressed relative to the centerline."""

    s: float
    d: float
    heading: float
    """Vehicle heading in the world frame (radians)."""

    heading_error: float
    """Vehicle heading minus centerline heading, wrapped to [-π, π]."""


@dataclass(frozen=True)
class WorldPose:
    x: float
    y: float
    heading: float


@dataclass(frozen=True)
class KinematicState:
    """State of the single-vehicle kinematic follower."""

    s: float
    d: float
    psi: float
    """World heading (radians)."""

    v: float
    """Forward speed."""


class ZoneType(str, Enum):
    """Kinds of annotated track feature."""

    JUMP = "jump"
    WALLRIDE = "wallride"


@dataclass(frozen=True)
class Zone:
    """A polygon annotation in normalized coordinates.

    Zones are independent of each other; overlapping zones are allowed.
    ``params`` is copied into a read-only mapping and left out of the hash.
    """

    id: str
    type: ZoneType
    poly: tuple[Point2, ...]
    params: Mapping[str, float] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ZoneType(self.type))
        object.__setattr__(self, "poly", tuple(self.poly))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


@dataclass(frozen=True)
class ZoneHit:
    zone: Zone
    distance: float


@dataclass(frozen=True)
class ZoneQueryResult:
    """Zones containing a point plus the single nearest zone.

    ``containing`` keeps input order; ``nearest`` is ``None`` when there are no
    usable zones or the nearest one is beyond the requested distance.
    """

    containing: tuple[Zone, ...]
    nearest: ZoneHit | None


@dataclass(frozen=True)
class TrackLimits:
    """Lateral bounds sampled uniformly over ``[0, total_length]``.

    ``left_bounds[i]`` and ``right_bounds[i]`` belong to the same sample.
    """

    left_bounds: tuple[float, ...]
    right_bounds: tuple[float, ...]
    samples: int
    total_length: float
