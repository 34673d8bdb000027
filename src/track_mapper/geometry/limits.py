"""Lateral track limits derived from zone geometry.

For each uniformly spaced arc-length sample the signed distance from the
centerline position to every zone is measured (negative inside a zone) and
the one with the smallest magnitude becomes the bound.

By default the same distance feeds both sides: ``left = -dist`` and
``right = +dist``, regardless of which side of the centerline the zone is
on.  ``classify_sides=True`` assigns each zone to the side its centroid lies
on instead.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from track_mapper.geometry.centerline import pose_at_arc_length
from track_mapper.geometry.models import CenterlineParams, Point2, TrackLimits, Zone
from track_mapper.geometry.zones import polygon_centroid, signed_polygon_distance, usable

DEFAULT_LATERAL_BOUND = 0.5


def _closer(best: float | None, candidate: float) -> float:
    if best is None or abs(candidate) < abs(best):
        return candidate
    return best


def _lateral_side(position: Point2, heading: float, target: Point2) -> float:
    """Offset of *target* along the right-hand normal ``(-sin ψ, cos ψ)``."""
    return (target.x - position.x) * -math.sin(heading) + (target.y - position.y) * math.cos(heading)


def extract_track_limits(
    params: CenterlineParams,
    zones: Sequence[Zone],
    num_samples: int = 100,
    default_lateral: float = DEFAULT_LATERAL_BOUND,
    classify_sides: bool = False,
) -> TrackLimits:
    """Sample lateral bounds along the centerline.

    Args:
        params: Parameterized centerline.
        zones: Zone polygons; zones with fewer than 3 vertices are ignored.
        num_samples: Number of samples over ``[0, total_length]``.
        default_lateral: Bound magnitude used where no zone applies.
        classify_sides: Split zones into left/right by the lateral offset of
            their centroid instead of using one distance for both sides.

    Returns:
        :class:`TrackLimits` with *num_samples* entries per side.

    Raises:
        ValueError: If *num_samples* < 1.
    """
    if num_samples < 1:
        raise ValueError("num_samples must be >= 1")

    active = [z for z in zones if usable(z)]
    ds = params.total_length / max(1, num_samples - 1)
    left: list[float] = []
    right: list[float] = []

    for i in range(num_samples):
        pose = pose_at_arc_length(params, i * ds)
        pos = pose.position
        best_left: float | None = None
        best_right: float | None = None

        for zone in active:
            dist = signed_polygon_distance(pos, zone.poly)
            if not classify_sides:
                best_left = best_right = _closer(best_left, dist)
            elif _lateral_side(pos, pose.heading, polygon_centroid(zone.poly)) >= 0:
                best_right = _closer(best_right, dist)
            else:
                best_left = _closer(best_left, dist)

        left.append(-best_left if best_left is not None else -default_lateral)
        right.append(best_right if best_right is not None else default_lateral)

    return TrackLimits(
        left_bounds=tuple(left),
        right_bounds=tuple(right),
        samples=num_samples,
        total_length=params.total_length,
    )
