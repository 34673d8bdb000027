"""Arc-length, heading and curvature parameterization of a centerline.

The centerline is an ordered polyline treated as a closed loop for headings
and curvature.  Its ``total_length`` deliberately stops at the last vertex and
leaves out the closing segment; :func:`nearest_arc_length` still scans the
closing segment, so it can report ``s`` values past ``total_length``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from track_mapper.geometry.errors import TooFewPoints
from track_mapper.geometry.models import (
    ArcLengthProjection,
    CenterlineParams,
    CenterlinePose,
    Point2,
)

_logger = logging.getLogger(__name__)

_MIN_CURVATURE_DS = 0.1
_MIN_SEGMENT_LEN_SQ = 1e-6


def parameterize(points: Sequence[Point2]) -> CenterlineParams:
    """Build :class:`CenterlineParams` from an ordered point sequence.

    Args:
        points: Centerline vertices in travel order (normalized or pixels).

    Returns:
        Parameters with one arc-length, heading and curvature per vertex.

    Raises:
        TooFewPoints: If fewer than 2 points are given.
    """
    n = len(points)
    if n < 2:
        raise TooFewPoints(f"Need at least 2 points for centerline, got {n}")

    arc_lengths: list[float] = [0.0]
    headings: list[float] = []
    for i in range(n):
        p = points[i]
        p_next = points[(i + 1) % n]
        dx = p_next.x - p.x
        dy = p_next.y - p.y
        headings.append(math.atan2(dy, dx))
        if i < n - 1:
            arc_lengths.append(arc_lengths[i] + math.hypot(dx, dy))

    # Central difference of heading over the neighbouring vertices.
    curvatures: list[float] = []
    flat = 0
    for i in range(n):
        prev = n - 1 if i == 0 else i - 1
        d_heading = headings[(i + 1) % n] - headings[prev]
        d_s = arc_lengths[(i + 1) % n] - arc_lengths[prev]
        if abs(d_s) > _MIN_CURVATURE_DS:
            curvatures.append(d_heading / d_s)
        else:
            curvatures.append(0.0)
            flat += 1
    if flat:
        _logger.debug("Curvature zeroed at %d/%d vertices (|dS| <= %s)", flat, n, _MIN_CURVATURE_DS)

    return CenterlineParams(
        points=tuple(points),
        arc_lengths=tuple(arc_lengths),
        headings=tuple(headings),
        curvatures=tuple(curvatures),
        total_length=arc_lengths[-1],
    )


def wrap_arc_length(params: CenterlineParams, s: float) -> float:
    """Wrap *s* into ``[0, total_length)``; 0 for a zero-length centerline."""
    total = params.total_length
    if total <= 0:
        return 0.0
    # second modulo folds the rare ``-tiny % total == total`` case back to 0
    return ((s % total) + total) % total


def pose_at_arc_length(params: CenterlineParams, s: float) -> CenterlinePose:
    """Interpolate position, heading and curvature at arc-length *s*.

    *s* is wrapped into ``[0, total_length)`` first, so negative values and
    values past the end are accepted.  Heading is interpolated linearly
    without angle unwrapping.
    """
    points = params.points
    arc = params.arc_lengths
    s_wrapped = wrap_arc_length(params, s)

    idx = 0
    for i in range(len(arc)):
        if arc[i] <= s_wrapped:
            idx = i
        else:
            break
    idx = max(0, min(idx, len(points) - 2))

    s0 = arc[idx]
    s1 = arc[idx + 1]
    t = (s_wrapped - s0) / (s1 - s0) if s1 > s0 else 0.0

    p0 = points[idx]
    p1 = points[idx + 1]
    h0, h1 = params.headings[idx], params.headings[idx + 1]
    k0, k1 = params.curvatures[idx], params.curvatures[idx + 1]

    return CenterlinePose(
        position=Point2(p0.x + t * (p1.x - p0.x), p0.y + t * (p1.y - p0.y)),
        heading=h0 + t * (h1 - h0),
        curvature=k0 + t * (k1 - k0),
    )


def nearest_arc_length(params: CenterlineParams, point: Point2) -> ArcLengthProjection:
    """Project *point* onto the closest centerline segment.

    Brute force over all n segments including the closing one, whose
    arc-length runs from ``arc_lengths[-1]`` to ``arc_lengths[0] +
    total_length``.  The lateral offset ``d`` uses the segment normal
    ``(-dy, dx) / len``.
    """
    points = params.points
    arc = params.arc_lengths
    n = len(points)

    best_dist = math.inf
    best_s = 0.0
    best_d = 0.0
    for i in range(n):
        p0 = points[i]
        p1 = points[(i + 1) % n]
        s0 = arc[i]
        s1 = arc[i + 1] if i < n - 1 else arc[0] + params.total_length

        dx = p1.x - p0.x
        dy = p1.y - p0.y
        len_sq = dx * dx + dy * dy
        t = 0.0
        if len_sq > _MIN_SEGMENT_LEN_SQ:
            t = ((point.x - p0.x) * dx + (point.y - p0.y) * dy) / len_sq
            t = max(0.0, min(1.0, t))

        cx = p0.x + t * dx
        cy = p0.y + t * dy
        dist = math.hypot(point.x - cx, point.y - cy)
        if dist < best_dist:
            best_dist = dist
            best_s = s0 + t * (s1 - s0)
            if len_sq > 0:
                length = math.sqrt(len_sq)
                best_d = ((point.x - cx) * -dy + (point.y - cy) * dx) / length
            else:
                best_d = 0.0

    return ArcLengthProjection(s=best_s, distance=best_dist, d=best_d)
