"""Containment and distance queries over zone polygons."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from track_mapper.geometry.models import Point2, Zone, ZoneHit, ZoneQueryResult, ZoneType

# ---------------------------------------------------------------------------
# Polygon primitives
# ---------------------------------------------------------------------------

def point_in_polygon(point: Point2, poly: Sequence[Point2]) -> bool:
    """Even-odd ray casting test.

    Each edge is half-open in y, so a ray through a shared vertex or along a
    horizontal edge is counted once.
    """
    inside = False
    n = len(poly)
    j = n - 1
    for i in range(n):
        xi, yi = poly[i].x, poly[i].y
        xj, yj = poly[j].x, poly[j].y
        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside


def point_segment_distance(point: Point2, a: Point2, b: Point2) -> float:
    """Shortest distance from *point* to segment ``a-b``."""
    dx = b.x - a.x
    dy = b.y - a.y
    len_sq = dx * dx + dy * dy
    if len_sq == 0:
        return math.hypot(point.x - a.x, point.y - a.y)
    t = ((point.x - a.x) * dx + (point.y - a.y) * dy) / len_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point.x - (a.x + t * dx), point.y - (a.y + t * dy))


def polygon_distance(point: Point2, poly: Sequence[Point2]) -> float:
    """Minimum distance from *point* to any edge of *poly* (closed)."""
    n = len(poly)
    return min(point_segment_distance(point, poly[i], poly[(i + 1) % n]) for i in range(n))


def signed_polygon_distance(point: Point2, poly: Sequence[Point2]) -> float:
    """Edge distance, negated when *point* lies inside *poly*."""
    dist = polygon_distance(point, poly)
    return -dist if point_in_polygon(point, poly) else dist


def usable(zone: Zone) -> bool:
    """Zones need at least 3 vertices to take part in queries."""
    return len(zone.poly) >= 3


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def query_zones_at_point(
    point: Point2,
    zones: Iterable[Zone],
    max_distance: float | None = None,
) -> ZoneQueryResult:
    """Return the zones containing *point* and the nearest zone.

    Args:
        point: Query point (normalized).
        zones: Zones to test; those with fewer than 3 vertices are skipped.
        max_distance: If given and the nearest zone is farther than this,
            ``nearest`` is ``None``.

    Returns:
        :class:`ZoneQueryResult`.  Overlapping zones may all appear in
        ``containing`` (input order).  A containing zone has distance 0;
        ties for nearest keep the first zone seen.
    """
    containing: list[Zone] = []
    nearest: ZoneHit | None = None

    for zone in zones:
        if not usable(zone):
            continue
        inside = point_in_polygon(point, zone.poly)
        if inside:
            containing.append(zone)
        distance = 0.0 if inside else polygon_distance(point, zone.poly)
        if nearest is None or distance < nearest.distance:
            nearest = ZoneHit(zone=zone, distance=distance)

    if max_distance is not None and nearest is not None and nearest.distance > max_distance:
        nearest = None

    return ZoneQueryResult(containing=tuple(containing), nearest=nearest)


def count_zones_by_type(zones: Iterable[Zone], zone_type: ZoneType | str) -> int:
    wanted = ZoneType(zone_type)
    return sum(1 for z in zones if z.type is wanted)


def polygon_centroid(poly: Sequence[Point2]) -> Point2:
    """Vertex average of *poly* (not the area centroid)."""
    n = len(poly)
    return Point2(sum(p.x for p in poly) / n, sum(p.y for p in poly) / n)
