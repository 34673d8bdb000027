"""Pydantic schema for the exported ``track.json`` document.

Field names follow the document's camelCase keys through aliases; Python code
uses the snake_case attribute names.  All zone and centerline coordinates are
normalized to ``[0, 1]``.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from track_mapper.coords.normalizer import SizeMeters, SizePx
from track_mapper.geometry.models import NormPoint, PixelPoint, Point2, Quad, Zone, ZoneType


class PointPx(BaseModel):
    x: float
    y: float


class TopdownPx(BaseModel):
    w: int = Field(..., gt=0)
    h: int = Field(..., gt=0)


class ZoneModel(BaseModel):
    id: str
    type: Literal["jump", "wallride"]
    poly: list[tuple[float, float]]
    params: Optional[dict[str, float]] = None

    def to_zone(self) -> Zone:
        return Zone(
            id=self.id,
            type=ZoneType(self.type),
            poly=tuple(NormPoint(x, y) for x, y in self.poly),
            params=dict(self.params or {}),
        )

    @classmethod
    def from_zone(cls, zone: Zone) -> ZoneModel:
        return cls(
            id=zone.id,
            type=zone.type.value,
            poly=[(p.x, p.y) for p in zone.poly],
            params=dict(zone.params) if zone.params else None,
        )


class ImportInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    src_image_name: str = Field(..., alias="srcImageName")
    src_quad_px: list[PointPx] = Field(..., alias="srcQuadPx")


class TrackDocument(BaseModel):
    """The persisted track definition."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    width_meters: float = Field(..., alias="widthMeters")
    height_meters: float = Field(..., alias="heightMeters")
    topdown_px: TopdownPx = Field(..., alias="topdownPx")
    zones: list[ZoneModel] = Field(default_factory=list)
    centerline: Optional[list[tuple[float, float]]] = None
    import_: ImportInfo = Field(..., alias="import")

    @classmethod
    def from_json(cls, text: str | bytes) -> TrackDocument:
        return cls.model_validate_json(text)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    # ------------------------------------------------------------------
    # Conversion to engine types
    # ------------------------------------------------------------------

    def geometry_zones(self) -> list[Zone]:
        return [z.to_zone() for z in self.zones]

    def centerline_points(self) -> list[NormPoint]:
        return [NormPoint(x, y) for x, y in (self.centerline or [])]

    def raster_size(self) -> SizePx:
        return SizePx(self.topdown_px.w, self.topdown_px.h)

    def track_size(self) -> SizeMeters:
        """Physical size; raises ``ValueError`` for non-positive dimensions."""
        return SizeMeters(self.width_meters, self.height_meters)

    def source_quad(self) -> list[PixelPoint]:
        return [PixelPoint(p.x, p.y) for p in self.import_.src_quad_px]


def build_track_document(
    name: str,
    track: SizeMeters,
    raster: SizePx,
    zones: Sequence[Zone],
    quad: Quad,
    src_image_name: str = "track.png",
    centerline: Sequence[Point2] | None = None,
    doc_id: str | None = None,
) -> TrackDocument:
    """Assemble a :class:`TrackDocument` from engine value types.

    A fresh UUID4 is used when *doc_id* is not given.
    """
    return TrackDocument(
        id=doc_id or str(uuid.uuid4()),
        name=name.strip(),
        width_meters=track.w,
        height_meters=track.h,
        topdown_px=TopdownPx(w=int(raster.w), h=int(raster.h)),
        zones=[ZoneModel.from_zone(z) for z in zones],
        centerline=[(p.x, p.y) for p in centerline] if centerline is not None else None,
        import_=ImportInfo(
            src_image_name=src_image_name,
            src_quad_px=[PointPx(x=p.x, y=p.y) for p in quad.corners()],
        ),
    )


def _out_of_unit_square(coords: Sequence[tuple[float, float]]) -> bool:
    return any(not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0) for x, y in coords)


def export_errors(doc: TrackDocument) -> list[str]:
    """Return the reasons *doc* is not ready for export (empty if it is)."""
    errors: list[str] = []
    if not doc.name.strip():
        errors.append("Track name is required.")
    if doc.width_meters <= 0 or doc.height_meters <= 0:
        errors.append("Track dimensions must be greater than 0.")

    if not doc.zones:
        errors.append("At least one zone is required.")
    for z in doc.zones:
        if len(z.poly) < 3:
            errors.append(f"Zone {z.id} ({z.type}) must have at least 3 points.")
        if _out_of_unit_square(z.poly):
            errors.append(f"Zone {z.id} ({z.type}) has coordinates outside [0, 1].")

    if doc.centerline and _out_of_unit_square(doc.centerline):
        errors.append("Centerline has coordinates outside [0, 1].")
    return errors
