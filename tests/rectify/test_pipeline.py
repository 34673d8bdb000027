"""Tests for the rectification hand-off and blank-raster fallback."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import numpy as np

from track_mapper.config import TrackMapperSettings
from track_mapper.coords.normalizer import SizePx
from track_mapper.geometry.models import PixelPoint, Quad
from track_mapper.geometry.quad import QuadIssue
from track_mapper.rectify.pipeline import (
    destination_corners,
    is_mostly_blank,
    rectify_from_settings,
    rectify_quad,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

IMAGE = SizePx(1000, 800)
OUTPUT = SizePx(160, 90)

# Picked BR, BL, TL, TR.
PICKED = [PixelPoint(700, 600), PixelPoint(100, 600), PixelPoint(100, 100), PixelPoint(700, 100)]


def _rgb(value: int, h: int = 90, w: int = 160) -> np.ndarray:
    return np.full((h, w, 3), value, dtype=np.uint8)


def _fallback() -> MagicMock:
    return MagicMock(side_effect=lambda size: _rgb(128, int(size.h), int(size.w)))


# ---------------------------------------------------------------------------
# is_mostly_blank
# ---------------------------------------------------------------------------

class TestIsMostlyBlank:
    def test_black_rgb_is_blank(self):
        assert is_mostly_blank(_rgb(0))

    def test_dark_noise_below_threshold_is_blank(self):
        """r + g + b must exceed 15 to count."""
        assert is_mostly_blank(_rgb(5))

    def test_grey_rgb_is_not_blank(self):
        assert not is_mostly_blank(_rgb(40))

    def test_transparent_rgba_is_blank(self):
        raster = np.zeros((50, 50, 4), dtype=np.uint8)
        raster[..., :3] = 255
        assert is_mostly_blank(raster)

    def test_opaque_rgba_is_not_blank(self):
        raster = np.full((50, 50, 4), 255, dtype=np.uint8)
        assert not is_mostly_blank(raster)

    def test_grayscale(self):
        assert is_mostly_blank(np.zeros((20, 20), dtype=np.uint8))
        assert not is_mostly_blank(np.full((20, 20), 200, dtype=np.uint8))

    def test_small_bright_patch_passes_default_threshold(self):
        raster = _rgb(0, 320, 320)
        raster[:40, :40] = 255  # 4x4 of the 32x32 samples
        assert not is_mostly_blank(raster)
        assert is_mostly_blank(raster, non_black_ratio_min=0.05)

    def test_empty_raster_is_blank(self):
        assert is_mostly_blank(np.zeros((0, 0, 3), dtype=np.uint8))


def test_destination_corners_match_quad_order():
    assert destination_corners(OUTPUT) == [
        PixelPoint(0, 0), PixelPoint(160, 0), PixelPoint(160, 90), PixelPoint(0, 90),
    ]


# ---------------------------------------------------------------------------
# rectify_quad
# ---------------------------------------------------------------------------

class TestRectifyQuad:
    def test_valid_quad_is_ordered_before_rectifier(self):
        rectifier = MagicMock(return_value=_rgb(200))
        fallback = _fallback()
        result = rectify_quad(PICKED, IMAGE, OUTPUT, rectifier, fallback)

        assert result.validation.ok
        assert result.used_fallback is False
        assert result.fallback_reason is None
        quad, size = rectifier.call_args.args
        assert isinstance(quad, Quad)
        assert quad.corners() == [
            PixelPoint(100, 100), PixelPoint(700, 100), PixelPoint(700, 600), PixelPoint(100, 600),
        ]
        assert size == OUTPUT
        assert result.quad == quad
        fallback.assert_not_called()

    def test_invalid_quad_skips_rectifier(self):
        rectifier = MagicMock()
        fallback = _fallback()
        out_of_bounds = PICKED[:3] + [PixelPoint(1200, 100)]
        result = rectify_quad(out_of_bounds, IMAGE, OUTPUT, rectifier, fallback)

        assert result.validation.issue is QuadIssue.OUT_OF_BOUNDS
        assert result.raster is None
        assert result.quad is None
        rectifier.assert_not_called()
        fallback.assert_not_called()

    def test_wrong_point_count(self):
        rectifier = MagicMock()
        result = rectify_quad(PICKED[:3], IMAGE, OUTPUT, rectifier, _fallback())
        assert result.validation.issue is QuadIssue.INVALID_POINT_COUNT
        rectifier.assert_not_called()

    def test_rectifier_exception_uses_fallback(self, caplog):
        rectifier = MagicMock(side_effect=RuntimeError("warp exploded"))
        fallback = _fallback()
        with caplog.at_level(logging.WARNING, logger="track_mapper.rectify.pipeline"):
            result = rectify_quad(PICKED, IMAGE, OUTPUT, rectifier, fallback)

        assert result.used_fallback is True
        assert result.fallback_reason == "failed"
        assert result.raster.shape == (90, 160, 3)
        fallback.assert_called_once_with(OUTPUT)
        assert any("warp exploded" in r.getMessage() for r in caplog.records)

    def test_blank_output_uses_fallback(self):
        rectifier = MagicMock(return_value=_rgb(0))
        fallback = _fallback()
        result = rectify_quad(PICKED, IMAGE, OUTPUT, rectifier, fallback)

        assert result.used_fallback is True
        assert result.fallback_reason == "blank"
        assert int(result.raster[0, 0, 0]) == 128

    def test_none_output_uses_fallback(self):
        result = rectify_quad(PICKED, IMAGE, OUTPUT, MagicMock(return_value=None), _fallback())
        assert result.fallback_reason == "blank"


class TestRectifyFromSettings:
    def test_uses_configured_size_and_blank_threshold(self):
        """A quarter-bright raster passes the default threshold but not a stricter one."""
        raster = _rgb(0)
        raster[:45, :80] = 255
        assert not is_mostly_blank(raster)

        settings = TrackMapperSettings(topdown_w=320, topdown_h=180, non_black_ratio_min=0.5)
        rectifier = MagicMock(return_value=raster)
        fallback = _fallback()
        result = rectify_from_settings(PICKED, IMAGE, rectifier, fallback, settings)

        assert rectifier.call_args.args[1] == SizePx(320, 180)
        assert result.fallback_reason == "blank"
        fallback.assert_called_once_with(SizePx(320, 180))

    def test_uses_configured_quad_thresholds(self):
        settings = TrackMapperSettings(min_area_px2=1_000_000.0)
        rectifier = MagicMock()
        result = rectify_from_settings(PICKED, IMAGE, rectifier, _fallback(), settings)
        assert result.validation.issue is QuadIssue.AREA_TOO_SMALL
        rectifier.assert_not_called()
