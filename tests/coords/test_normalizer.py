"""Tests for pixel / normalized / metric conversions."""

from __future__ import annotations

import random

import pytest

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
from track_mapper.geometry.models import MetricPoint, NormPoint, PixelPoint

RASTER = SizePx(1600, 900)
TRACK = SizeMeters(80.0, 45.0)


class TestFreeFunctions:
    def test_px_to_norm(self):
        p = px_to_norm(PixelPoint(800, 450), RASTER)
        assert p == NormPoint(0.5, 0.5)

    def test_norm_to_px(self):
        assert norm_to_px(NormPoint(0.25, 1.0), RASTER) == PixelPoint(400, 900)

    def test_norm_to_meters(self):
        p = norm_to_meters(NormPoint(0.5, 0.2), TRACK)
        assert (p.x, p.y) == pytest.approx((40.0, 9.0))
        assert isinstance(p, MetricPoint)

    def test_meters_to_norm(self):
        p = meters_to_norm(MetricPoint(20.0, 45.0), TRACK)
        assert (p.x, p.y) == pytest.approx((0.25, 1.0))
        assert isinstance(p, NormPoint)

    def test_px_to_meters_goes_through_norm(self):
        p = px_to_meters(PixelPoint(1600, 0), RASTER, TRACK)
        assert p == MetricPoint(80.0, 0.0)

    def test_meters_to_px(self):
        p = meters_to_px(MetricPoint(40.0, 22.5), RASTER, TRACK)
        assert (p.x, p.y) == pytest.approx((800.0, 450.0))
        assert isinstance(p, PixelPoint)

    def test_pixels_per_meter(self):
        assert pixels_per_meter(RASTER, TRACK) == pytest.approx((20.0, 20.0))

    def test_round_trips(self):
        rng = random.Random(12)
        for _ in range(100):
            raster = SizePx(rng.randint(100, 4000), rng.randint(100, 4000))
            track = SizeMeters(rng.uniform(1, 500), rng.uniform(1, 500))
            n = NormPoint(rng.random(), rng.random())
            back = px_to_norm(norm_to_px(n, raster), raster)
            assert (back.x, back.y) == pytest.approx((n.x, n.y))
            back = meters_to_norm(norm_to_meters(n, track), track)
            assert (back.x, back.y) == pytest.approx((n.x, n.y))

    def test_pixel_round_trip_is_tight(self):
        """pixel -> norm -> pixel and norm -> metres -> norm hold to 1e-9 relative."""
        rng = random.Random(13)
        for _ in range(200):
            raster = SizePx(rng.uniform(10, 8000), rng.uniform(10, 8000))
            track = SizeMeters(rng.uniform(0.5, 2000), rng.uniform(0.5, 2000))
            p = PixelPoint(rng.uniform(0, raster.w), rng.uniform(0, raster.h))
            back = norm_to_px(px_to_norm(p, raster), raster)
            assert back.x == pytest.approx(p.x, rel=1e-9, abs=1e-12)
            assert back.y == pytest.approx(p.y, rel=1e-9, abs=1e-12)
            n = NormPoint(rng.random(), rng.random())
            again = meters_to_norm(norm_to_meters(n, track), track)
            assert again.x == pytest.approx(n.x, rel=1e-9, abs=1e-12)
            assert again.y == pytest.approx(n.y, rel=1e-9, abs=1e-12)


class TestFrames:
    def test_frames_never_compare_equal(self):
        assert NormPoint(0.5, 0.5) != PixelPoint(0.5, 0.5)
        assert MetricPoint(1, 1) != NormPoint(1, 1)

    def test_coordinates_are_floats(self):
        p = PixelPoint(3, 4)
        assert isinstance(p.x, float)
        assert p.as_list() == [3.0, 4.0]

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError):
            NormPoint(float("nan"), 0.0)


class TestSizes:
    @pytest.mark.parametrize(("w", "h"), [(0, 100), (100, 0), (-1, 5)])
    def test_pixel_size_must_be_positive(self, w, h):
        with pytest.raises(ValueError):
            SizePx(w, h)

    def test_track_size_must_be_positive(self):
        with pytest.raises(ValueError):
            SizeMeters(10.0, 0.0)


class TestCoordinateNormalizer:
    def test_bound_conversions(self):
        norm = CoordinateNormalizer(RASTER, TRACK)
        assert norm.pixels_per_meter == pytest.approx((20.0, 20.0))
        assert norm.to_norm(PixelPoint(400, 450)) == NormPoint(0.25, 0.5)
        assert norm.to_px(NormPoint(0.25, 0.5)) == PixelPoint(400, 450)
        assert norm.px_to_meters(PixelPoint(400, 450)) == MetricPoint(20.0, 22.5)

    def test_polygon_to_norm(self):
        norm = CoordinateNormalizer(RASTER, TRACK)
        poly = norm.polygon_to_norm([PixelPoint(0, 0), PixelPoint(1600, 0), PixelPoint(1600, 900)])
        assert poly == [NormPoint(0, 0), NormPoint(1, 0), NormPoint(1, 1)]
