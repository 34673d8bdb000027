"""Export document schema (``track.json``)."""

from track_mapper.schema.document import (
    ImportInfo,
    PointPx,
    TopdownPx,
    TrackDocument,
    ZoneModel,
    build_track_document,
    export_errors,
)

__all__ = [
    "ImportInfo",
    "PointPx",
    "TopdownPx",
    "TrackDocument",
    "ZoneModel",
    "build_track_document",
    "export_errors",
]
