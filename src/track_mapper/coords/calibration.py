"""Scale calibration from a two-point measurement on the top-down raster."""

from __future__ import annotations

import math

from track_mapper.coords.normalizer import SizeMeters, SizePx, pixels_per_meter
from track_mapper.geometry.models import Point2


def measure_pixels_per_meter(p1: Point2, p2: Point2, real_distance_m: float) -> float | None:
    """Pixels per metre from two picked points a known distance apart.

    Returns ``None`` if the points coincide or *real_distance_m* is not
    positive.
    """
    px_dist = math.hypot(p2.x - p1.x, p2.y - p1.y)
    if px_dist == 0 or real_distance_m <= 0:
        return None
    return px_dist / real_distance_m


def track_size_from_scale(raster: SizePx, ppm: float) -> SizeMeters:
    """Physical track size implied by a uniform pixels-per-metre scale."""
    if ppm <= 0:
        raise ValueError("ppm must be > 0")
    return SizeMeters(raster.w / ppm, raster.h / ppm)


def mean_pixels_per_meter(raster: SizePx, track: SizeMeters) -> float:
    """Average of the x and y scales (used when re-importing a document)."""
    ppm_x, ppm_y = pixels_per_meter(raster, track)
    return (ppm_x + ppm_y) / 2.0
