"""Inspect an exported track.json: geometry summary and zone lookup.

Usage:
  python scripts/inspect_track.py track.json
  python scripts/inspect_track.py track.json --samples 50 --query 0.2 0.2

Thresholds default to ``TRACK_MAPPER_*`` environment variables / ``.env``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from track_mapper.config import load_settings
from track_mapper.coords.normalizer import CoordinateNormalizer
from track_mapper.geometry.models import NormPoint
from track_mapper.geometry.quad import order_quad, validate_quad
from track_mapper.geometry.zones import query_zones_at_point
from track_mapper.schema.document import TrackDocument, export_errors
from track_mapper.session import recompute_geometry


def main() -> None:
    ap = argparse.ArgumentParser(description="Summarize a track.json document")
    ap.add_argument("path", help="Path to track.json")
    ap.add_argument("--samples", type=int, default=None, help="Track-limit samples")
    ap.add_argument(
        "--query",
        nargs=2,
        type=float,
        metavar=("X", "Y"),
        help="Normalized point to look up in the zones",
    )
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    num_samples = args.samples or settings.num_samples

    try:
        doc = TrackDocument.from_json(Path(args.path).read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        print(f"  [!] Cannot load {args.path}: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Track     : {doc.name} ({doc.id})")
    print(f"Size      : {doc.width_meters:g} m x {doc.height_meters:g} m")
    print(f"Raster    : {doc.topdown_px.w} x {doc.topdown_px.h} px")
    if doc.raster_size() != settings.topdown_size():
        default = settings.topdown_size()
        print(f"  [i] differs from configured top-down size {default.w} x {default.h}")
    print(f"Zones     : {len(doc.zones)}")

    errors = export_errors(doc)
    for err in errors:
        print(f"  [!] {err}")

    src_quad = doc.source_quad()
    if len(src_quad) == 4:
        qv = validate_quad(order_quad(src_quad), float("inf"), float("inf"), settings.quad_options())
        print(f"Quad      : {'ok' if qv.ok else qv.message}")

    if not errors:
        normalizer = CoordinateNormalizer(doc.raster_size(), doc.track_size())
        ppm_x, ppm_y = normalizer.pixels_per_meter
        print(f"Scale     : {ppm_x:.2f} x {ppm_y:.2f} px/m")

    centerline = doc.centerline_points()
    zones = doc.geometry_zones()
    if len(centerline) >= 2:
        geometry = recompute_geometry(
            centerline, zones, num_samples, default_lateral=settings.default_lateral_bound
        )
        limits = geometry.limits
        print(f"Centerline: {len(centerline)} points, length {geometry.params.total_length:.4f}")
        print(
            f"Limits    : left [{min(limits.left_bounds):.4f}, {max(limits.left_bounds):.4f}]"
            f"  right [{min(limits.right_bounds):.4f}, {max(limits.right_bounds):.4f}]"
        )
    else:
        print("Centerline: (none)")

    if args.query:
        result = query_zones_at_point(
            NormPoint(*args.query), zones, max_distance=settings.max_zone_distance
        )
        inside = ", ".join(z.id for z in result.containing) or "-"
        print(f"Inside    : {inside}")
        if result.nearest is not None:
            print(f"Nearest   : {result.nearest.zone.id} ({result.nearest.distance:.4f})")
        else:
            print("Nearest   : -")


if __name__ == "__main__":
    main()
