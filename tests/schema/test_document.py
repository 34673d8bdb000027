"""Tests for the track.json document schema."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from track_mapper.coords.normalizer import SizeMeters, SizePx
from track_mapper.geometry.models import NormPoint, PixelPoint, Quad, Zone, ZoneType
from track_mapper.schema.document import (
    TrackDocument,
    build_track_document,
    export_errors,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

QUAD = Quad(PixelPoint(10, 20), PixelPoint(900, 25), PixelPoint(880, 700), PixelPoint(15, 690))
ZONE = Zone(
    id="jump-1",
    type=ZoneType.JUMP,
    poly=[NormPoint(0.1, 0.1), NormPoint(0.4, 0.1), NormPoint(0.4, 0.4)],
    params={"height": 1.5},
)


def _make_doc(**overrides) -> TrackDocument:
    kwargs = dict(
        name="  Backyard Loop ",
        track=SizeMeters(40.0, 22.5),
        raster=SizePx(1600, 900),
        zones=[ZONE],
        quad=QUAD,
        src_image_name="photo.jpg",
        centerline=[NormPoint(0.1, 0.5), NormPoint(0.9, 0.5)],
        doc_id="track-123",
    )
    kwargs.update(overrides)
    return build_track_document(**kwargs)


def _raw(doc: TrackDocument) -> dict:
    return json.loads(doc.to_json())


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

class TestSerialization:
    def test_uses_camel_case_keys(self):
        raw = _raw(_make_doc())
        assert set(raw) == {
            "id", "name", "widthMeters", "heightMeters", "topdownPx", "zones", "centerline", "import",
        }
        assert raw["import"]["srcImageName"] == "photo.jpg"
        assert raw["import"]["srcQuadPx"][0] == {"x": 10.0, "y": 20.0}
        assert raw["topdownPx"] == {"w": 1600, "h": 900}

    def test_points_are_pairs(self):
        raw = _raw(_make_doc())
        assert raw["zones"][0]["poly"][0] == [0.1, 0.1]
        assert raw["zones"][0]["type"] == "jump"
        assert raw["centerline"] == [[0.1, 0.5], [0.9, 0.5]]

    def test_optional_fields_omitted(self):
        bare = Zone(id="w", type="wallride", poly=ZONE.poly)
        raw = _raw(_make_doc(centerline=None, zones=[bare]))
        assert "centerline" not in raw
        assert "params" not in raw["zones"][0]

    def test_name_is_stripped(self):
        assert _make_doc().name == "Backyard Loop"

    def test_generated_id(self):
        a = _make_doc(doc_id=None)
        b = _make_doc(doc_id=None)
        assert a.id and b.id and a.id != b.id

    def test_json_round_trip(self):
        doc = _make_doc()
        again = TrackDocument.from_json(doc.to_json())
        assert again == doc

    def test_parses_camel_case_document(self):
        text = json.dumps(
            {
                "id": "t",
                "name": "Loop",
                "widthMeters": 10,
                "heightMeters": 5,
                "topdownPx": {"w": 200, "h": 100},
                "zones": [{"id": "z", "type": "wallride", "poly": [[0, 0], [1, 0], [1, 1]]}],
                "import": {"srcImageName": "a.png", "srcQuadPx": []},
            }
        )
        doc = TrackDocument.from_json(text)
        assert doc.width_meters == 10
        assert doc.centerline is None
        assert doc.import_.src_image_name == "a.png"

    def test_unknown_zone_type_rejected(self):
        raw = _raw(_make_doc())
        raw["zones"][0]["type"] = "ramp"
        with pytest.raises(ValidationError):
            TrackDocument.from_json(json.dumps(raw))

    def test_non_positive_raster_rejected(self):
        raw = _raw(_make_doc())
        raw["topdownPx"]["w"] = 0
        with pytest.raises(ValidationError):
            TrackDocument.from_json(json.dumps(raw))


# ---------------------------------------------------------------------------
# Conversion back to engine types
# ---------------------------------------------------------------------------

class TestEngineConversion:
    def test_geometry_zones(self):
        zones = _make_doc().geometry_zones()
        assert zones[0].id == "jump-1"
        assert zones[0].type is ZoneType.JUMP
        assert zones[0].poly[1] == NormPoint(0.4, 0.1)
        assert dict(zones[0].params) == {"height": 1.5}

    def test_centerline_points(self):
        assert _make_doc().centerline_points() == [NormPoint(0.1, 0.5), NormPoint(0.9, 0.5)]
        assert _make_doc(centerline=None).centerline_points() == []

    def test_sizes(self):
        doc = _make_doc()
        assert doc.raster_size() == SizePx(1600, 900)
        assert doc.track_size() == SizeMeters(40.0, 22.5)

    def test_source_quad(self):
        assert _make_doc().source_quad() == QUAD.corners()


# ---------------------------------------------------------------------------
# export_errors
# ---------------------------------------------------------------------------

class TestExportErrors:
    def test_complete_document_has_no_errors(self):
        assert export_errors(_make_doc()) == []

    def test_missing_name(self):
        assert export_errors(_make_doc(name="   ")) == ["Track name is required."]

    def test_non_positive_dimensions(self):
        doc = _make_doc().model_copy(update={"width_meters": 0.0})
        assert export_errors(doc) == ["Track dimensions must be greater than 0."]

    def test_no_zones(self):
        assert export_errors(_make_doc(zones=[])) == ["At least one zone is required."]

    def test_zone_with_too_few_points(self):
        thin = Zone(id="w1", type="wallride", poly=[NormPoint(0, 0), NormPoint(1, 1)])
        assert export_errors(_make_doc(zones=[ZONE, thin])) == [
            "Zone w1 (wallride) must have at least 3 points."
        ]

    def test_zone_outside_unit_square(self):
        doc = _make_doc()
        doc.zones[0].poly[0] = (1.2, 0.1)
        assert export_errors(doc) == ["Zone jump-1 (jump) has coordinates outside [0, 1]."]

    def test_centerline_outside_unit_square(self):
        doc = _make_doc()
        doc.centerline[0] = (-0.1, 0.5)
        assert export_errors(doc) == ["Centerline has coordinates outside [0, 1]."]

    def test_errors_accumulate(self):
        errors = export_errors(_make_doc(name="", zones=[]))
        assert errors == ["Track name is required.", "At least one zone is required."]
