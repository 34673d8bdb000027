"""Hand-off to the external perspective rectifier.

The warp itself is done by a collaborator (OpenCV or similar).  This module
prepares the quad it is fed, and decides when its output is unusable so the
caller's fallback raster is used instead:

* the rectifier raised, or
* the raster is "mostly blank": after nearest-neighbour sampling onto a
  32x32 grid, fewer than ``non_black_ratio_min`` of the samples are
  non-black (alpha > 0 when present, and ``r + g + b > 15``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from track_mapper.config import TrackMapperSettings
from track_mapper.coords.normalizer import SizePx
from track_mapper.geometry.models import PixelPoint, Point2, Quad
from track_mapper.geometry.quad import QuadOptions, QuadValidation, finalize_quad

_logger = logging.getLogger(__name__)

_SAMPLE_GRID = 32
_NON_BLACK_SUM = 15


class Rectifier(Protocol):
    """Warps the image region inside *quad* onto an *output_size* raster.

    Returns an ``(h, w)``, ``(h, w, 3)`` or ``(h, w, 4)`` array.
    """

    def __call__(self, quad: Quad, output_size: SizePx) -> np.ndarray: ...


Fallback = Callable[[SizePx], np.ndarray]


@dataclass(frozen=True)
class RectificationResult:
    """What :func:`rectify_quad` produced.

    ``raster`` is ``None`` only when the quad failed validation, in which
    case the rectifier was never called.
    """

    validation: QuadValidation
    raster: np.ndarray | None = None
    used_fallback: bool = False
    fallback_reason: str | None = None
    """``"failed"`` or ``"blank"`` when the fallback was used."""

    @property
    def quad(self) -> Quad | None:
        return self.validation.quad


def destination_corners(output_size: SizePx) -> list[PixelPoint]:
    """Output rectangle corners matching a ``TL, TR, BR, BL`` quad."""
    w, h = output_size.w, output_size.h
    return [PixelPoint(0, 0), PixelPoint(w, 0), PixelPoint(w, h), PixelPoint(0, h)]


def is_mostly_blank(
    raster: np.ndarray,
    non_black_ratio_min: float = 0.01,
    sample: int = _SAMPLE_GRID,
) -> bool:
    """Return True if too few sampled pixels of *raster* are non-black."""
    arr = np.asarray(raster)
    if arr.ndim < 2 or arr.shape[0] == 0 or arr.shape[1] == 0:
        return True

    h, w = arr.shape[:2]
    rows = (np.arange(sample) * h) // sample
    cols = (np.arange(sample) * w) // sample
    grid = arr[rows[:, None], cols[None, :]].astype(np.int64)

    if grid.ndim == 2:
        non_black = grid * 3 > _NON_BLACK_SUM
    else:
        non_black = grid[..., :3].sum(axis=-1) > _NON_BLACK_SUM
        if grid.shape[-1] >= 4:
            non_black &= grid[..., 3] > 0

    ratio = float(non_black.mean())
    return ratio < non_black_ratio_min


def rectify_quad(
    raw_points: Sequence[Point2],
    image_size: SizePx,
    output_size: SizePx,
    rectifier: Rectifier,
    fallback: Fallback,
    options: QuadOptions | None = None,
    non_black_ratio_min: float = 0.01,
) -> RectificationResult:
    """Order and validate a picked quad, then run the rectifier.

    Args:
        raw_points: Four corners picked on the source image, any order.
        image_size: Source image size; corners must lie inside it.
        output_size: Desired rectified raster size.
        rectifier: External warp.
        fallback: Builds a substitute raster (typically the source image
            scaled to *output_size*) when the warp fails or comes back blank.
        options: Quad validation thresholds.
        non_black_ratio_min: Blank-detection threshold.
    """
    validation = finalize_quad(raw_points, image_size.w, image_size.h, options)
    if not validation.ok:
        _logger.info("Quad rejected before rectification: %s", validation.message)
        return RectificationResult(validation=validation)

    try:
        raster = rectifier(validation.quad, output_size)
    except Exception as exc:  # the rectifier is third-party code
        _logger.warning("Rectifier failed, using fallback raster: %s", exc, exc_info=True)
        return RectificationResult(
            validation=validation,
            raster=fallback(output_size),
            used_fallback=True,
            fallback_reason="failed",
        )

    if raster is None or is_mostly_blank(raster, non_black_ratio_min):
        _logger.warning("Rectified raster is mostly blank, using fallback raster")
        return RectificationResult(
            validation=validation,
            raster=fallback(output_size),
            used_fallback=True,
            fallback_reason="blank",
        )

    return RectificationResult(validation=validation, raster=raster)


def rectify_from_settings(
    raw_points: Sequence[Point2],
    image_size: SizePx,
    rectifier: Rectifier,
    fallback: Fallback,
    settings: TrackMapperSettings,
) -> RectificationResult:
    """:func:`rectify_quad` with output size and thresholds taken from *settings*."""
    return rectify_quad(
        raw_points,
        image_size,
        settings.topdown_size(),
        rectifier,
        fallback,
        options=settings.quad_options(),
        non_black_ratio_min=settings.non_black_ratio_min,
    )
