"""Coordinate frames and scale calibration."""

from track_mapper.coords.calibration import (
    mean_pixels_per_meter,
    measure_pixels_per_meter,
    track_size_from_scale,
)
from track_mapper.coords.normalizer import (
    CoordinateNormalizer,
    SizeMeters,
    SizePx,
    meters_to_norm,
    meters_to_px,
    norm_to_meters,
    norm_to_px,
    pixels_per_meter,
    px_to_meters,
    px_to_norm,
)

__all__ = [
    "CoordinateNormalizer",
    "SizeMeters",
    "SizePx",
    "mean_pixels_per_meter",
    "measure_pixels_per_meter",
    "meters_to_norm",
    "meters_to_px",
    "norm_to_meters",
    "norm_to_px",
    "pixels_per_meter",
    "px_to_meters",
    "px_to_norm",
    "track_size_from_scale",
]
