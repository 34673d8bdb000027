"""Quad ordering and validation prior to perspective rectification.

The user picks four corners on the source photo in any order.  Before the
quad is handed to the rectifier it is put into canonical ``TL, TR, BR, BL``
order and checked for shapes that would produce a degenerate homography.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from track_mapper.geometry.errors import InvalidPointCount
from track_mapper.geometry.models import Point2, Quad


class QuadIssue(str, Enum):
    """Reasons a quad is rejected, in the order they are checked."""

    INVALID_POINT_COUNT = "InvalidPointCount"
    OUT_OF_BOUNDS = "OutOfBounds"
    POINTS_TOO_CLOSE = "PointsTooClose"
    NON_CONVEX_OR_SELF_INTERSECTING = "NonConvexOrSelfIntersecting"
    AREA_TOO_SMALL = "AreaTooSmall"


_MESSAGES = {
    QuadIssue.INVALID_POINT_COUNT: "Need exactly 4 points",
    QuadIssue.OUT_OF_BOUNDS: "A point is outside the image bounds",
    QuadIssue.POINTS_TOO_CLOSE: "Two points are too close together",
    QuadIssue.NON_CONVEX_OR_SELF_INTERSECTING: "Quad is self-intersecting or non-convex (bow-tie)",
    QuadIssue.AREA_TOO_SMALL: "Quad area is too small / nearly degenerate",
}


@dataclass(frozen=True)
class QuadOptions:
    """Thresholds for :func:`validate_quad`.

    Args:
        min_separation: Minimum distance in pixels between any two corners.
        min_area: Minimum enclosed area in square pixels.
    """

    min_separation: float = 20.0
    min_area: float = 5000.0


@dataclass(frozen=True)
class QuadValidation:
    """Outcome of :func:`validate_quad` / :func:`finalize_quad`.

    ``quad`` is only set by :func:`finalize_quad` on success.
    """

    ok: bool
    issue: QuadIssue | None = None
    quad: Quad | None = None

    @property
    def message(self) -> str:
        """Human-readable reason, empty when the quad is valid."""
        return _MESSAGES[self.issue] if self.issue is not None else ""

    @classmethod
    def fail(cls, issue: QuadIssue) -> QuadValidation:
        return cls(ok=False, issue=issue)


# ---------------------------------------------------------------------------
# Geometry primitives
# ---------------------------------------------------------------------------

def cross(p: Point2, q: Point2, r: Point2) -> float:
    """z-component of ``(q - p) x (r - p)``."""
    return (q.x - p.x) * (r.y - p.y) - (q.y - p.y) * (r.x - p.x)


def quad_area(points: Sequence[Point2]) -> float:
    """Shoelace area of a 4-vertex polygon (absolute value)."""
    a = 0.0
    for i in range(4):
        j = (i + 1) % 4
        a += points[i].x * points[j].y - points[j].x * points[i].y
    return abs(a) / 2.0


def is_convex_quad(points: Sequence[Point2]) -> bool:
    """True if all four vertex triples turn the same way (no zero turns)."""
    signs = [
        math.copysign(1.0, c) if c != 0 else 0.0
        for c in (
            cross(points[0], points[1], points[2]),
            cross(points[1], points[2], points[3]),
            cross(points[2], points[3], points[0]),
            cross(points[3], points[0], points[1]),
        )
    ]
    return signs[0] != 0 and all(s == signs[0] for s in signs)


def in_bounds(p: Point2, width: float, height: float) -> bool:
    return 0 <= p.x <= width and 0 <= p.y <= height


def _dist2(a: Point2, b: Point2) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def order_quad(points: Sequence[Point2], legacy: bool = False) -> list[Point2]:
    """Reorder four arbitrary points into ``TL, TR, BR, BL``.

    Points are sorted by polar angle around their centroid, rotated so the
    top-most (then left-most) point comes first, and the winding is flipped
    if the second point sits below the fourth.  Re-ordering an ordered quad
    returns it unchanged.

    Args:
        points: Four pixel-space points in any order.
        legacy: Use the old x+y / x-y extremes method.  It breaks on rotated
            quads and only exists so historical exports re-validate
            identically.

    Raises:
        InvalidPointCount: If *points* does not hold exactly four points.
    """
    if len(points) != 4:
        raise InvalidPointCount(f"Need exactly 4 points, got {len(points)}")
    if legacy:
        return _order_quad_legacy(points)

    cx = sum(p.x for p in points) / 4.0
    cy = sum(p.y for p in points) / 4.0
    by_angle = sorted(points, key=lambda p: math.atan2(p.y - cy, p.x - cx))

    tl_idx = 0
    for i in range(1, 4):
        a = by_angle[i]
        b = by_angle[tl_idx]
        if a.y < b.y or (a.y == b.y and a.x < b.x):
            tl_idx = i
    ordered = [by_angle[(tl_idx + i) % 4] for i in range(4)]

    # second point must be on the top edge, not the left edge
    if ordered[1].y > ordered[3].y:
        ordered = [ordered[0], ordered[3], ordered[2], ordered[1]]
    return ordered


def _order_quad_legacy(points: Sequence[Point2]) -> list[Point2]:
    tl = min(points, key=lambda p: p.x + p.y)
    br = max(points, key=lambda p: p.x + p.y)
    tr = max(points, key=lambda p: p.x - p.y)
    bl = min(points, key=lambda p: p.x - p.y)
    return [tl, tr, br, bl]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_quad(
    points: Sequence[Point2],
    image_width: float,
    image_height: float,
    options: QuadOptions | None = None,
) -> QuadValidation:
    """Check an ordered quad before it is used for a homography.

    Checks run in a fixed order and stop at the first failure: point count,
    image bounds, pairwise separation, convexity, area.  Lowering either
    threshold in *options* never turns a valid quad invalid.

    Returns:
        :class:`QuadValidation`; never raises for bad geometry.
    """
    opts = options or QuadOptions()
    if len(points) != 4:
        return QuadValidation.fail(QuadIssue.INVALID_POINT_COUNT)

    if not all(in_bounds(p, image_width, image_height) for p in points):
        return QuadValidation.fail(QuadIssue.OUT_OF_BOUNDS)

    min_sep2 = opts.min_separation * opts.min_separation
    for i in range(4):
        for j in range(i + 1, 4):
            if _dist2(points[i], points[j]) < min_sep2:
                return QuadValidation.fail(QuadIssue.POINTS_TOO_CLOSE)

    if not is_convex_quad(points):
        return QuadValidation.fail(QuadIssue.NON_CONVEX_OR_SELF_INTERSECTING)

    if quad_area(points) < opts.min_area:
        return QuadValidation.fail(QuadIssue.AREA_TOO_SMALL)

    return QuadValidation(ok=True)


def finalize_quad(
    points: Sequence[Point2],
    image_width: float,
    image_height: float,
    options: QuadOptions | None = None,
) -> QuadValidation:
    """Order and validate a freshly picked quad.

    On success the returned result carries an immutable :class:`Quad`.
    """
    if len(points) != 4:
        return QuadValidation.fail(QuadIssue.INVALID_POINT_COUNT)
    ordered = order_quad(points)
    result = validate_quad(ordered, image_width, image_height, options)
    if not result.ok:
        return result
    return QuadValidation(ok=True, quad=Quad(*ordered))


def rect_polygon(a: Point2, b: Point2) -> list[Point2]:
    """Axis-aligned rectangle ``[TL, TR, BR, BL]`` spanned by two corners.

    The returned points keep the frame (class) of *a*.
    """
    cls = type(a)
    x1, x2 = min(a.x, b.x), max(a.x, b.x)
    y1, y2 = min(a.y, b.y), max(a.y, b.y)
    return [cls(x1, y1), cls(x2, y1), cls(x2, y2), cls(x1, y2)]
