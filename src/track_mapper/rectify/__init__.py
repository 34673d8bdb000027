"""Quad preparation for the external rectifier and blank-output fallback."""

from track_mapper.rectify.pipeline import (
    RectificationResult,
    Rectifier,
    destination_corners,
    is_mostly_blank,
    rectify_from_settings,
    rectify_quad,
)

__all__ = [
    "RectificationResult",
    "Rectifier",
    "destination_corners",
    "is_mostly_blank",
    "rectify_from_settings",
    "rectify_quad",
]
