"""Affine conversions between pixel, normalized and metric frames.

All conversions are per-axis scales (no shear, rotation or offset):

    pixel  = norm * raster size
    metres = norm * track size
"""

from __future__ import annotations

from dataclasses import dataclass

from track_mapper.geometry.models import MetricPoint, NormPoint, PixelPoint, Point2


@dataclass(frozen=True)
class SizePx:
    """Raster size in pixels."""

    w: float
    h: float

    def __post_init__(self) -> None:
        if not (self.w > 0 and self.h > 0):
            raise ValueError(f"Pixel size must be positive, got {self.w}x{self.h}")


@dataclass(frozen=True)
class SizeMeters:
    """Physical track size in metres."""

    w: float
    h: float

    def __post_init__(self) -> None:
        if not (self.w > 0 and self.h > 0):
            raise ValueError(f"Track size must be positive, got {self.w}x{self.h}")


def px_to_norm(p: Point2, px: SizePx) -> NormPoint:
    return NormPoint(p.x / px.w, p.y / px.h)


def norm_to_px(p: Point2, px: SizePx) -> PixelPoint:
    return PixelPoint(p.x * px.w, p.y * px.h)


def norm_to_meters(p: Point2, meters: SizeMeters) -> MetricPoint:
    return MetricPoint(p.x * meters.w, p.y * meters.h)


def meters_to_norm(p: Point2, meters: SizeMeters) -> NormPoint:
    return NormPoint(p.x / meters.w, p.y / meters.h)


def px_to_meters(p: Point2, px: SizePx, meters: SizeMeters) -> MetricPoint:
    """Pixel → normalized → metres."""
    return norm_to_meters(px_to_norm(p, px), meters)


def meters_to_px(p: Point2, px: SizePx, meters: SizeMeters) -> PixelPoint:
    """Metres → normalized → pixel."""
    return norm_to_px(meters_to_norm(p, meters), px)


def pixels_per_meter(px: SizePx, meters: SizeMeters) -> tuple[float, float]:
    """Pixels per metre along x and y."""
    return px.w / meters.w, px.h / meters.h


class CoordinateNormalizer:
    """Frame conversions bound to one raster size and one track size.

    Args:
        raster: Size of the rectified top-down raster in pixels.
        track: Physical size of the track area in metres.
    """

    def __init__(self, raster: SizePx, track: SizeMeters) -> None:
        self.raster = raster
        self.track = track

    @property
    def pixels_per_meter(self) -> tuple[float, float]:
        return pixels_per_meter(self.raster, self.track)

    def to_norm(self, p: PixelPoint) -> NormPoint:
        return px_to_norm(p, self.raster)

    def to_px(self, p: NormPoint) -> PixelPoint:
        return norm_to_px(p, self.raster)

    def norm_to_meters(self, p: NormPoint) -> MetricPoint:
        return norm_to_meters(p, self.track)

    def meters_to_norm(self, p: MetricPoint) -> NormPoint:
        return meters_to_norm(p, self.track)

    def px_to_meters(self, p: PixelPoint) -> MetricPoint:
        return px_to_meters(p, self.raster, self.track)

    def meters_to_px(self, p: MetricPoint) -> PixelPoint:
        return meters_to_px(p, self.raster, self.track)

    def polygon_to_norm(self, poly: list[PixelPoint]) -> list[NormPoint]:
        """Normalize a polygon drawn in raster pixels."""
        return [self.to_norm(p) for p in poly]
