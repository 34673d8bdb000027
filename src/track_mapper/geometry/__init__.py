"""Quad validation, centerline parameterization, Frenet frames and zone queries."""

from track_mapper.geometry.centerline import (
    nearest_arc_length,
    parameterize,
    pose_at_arc_length,
    wrap_arc_length,
)
from track_mapper.geometry.errors import GeometryError, InvalidPointCount, TooFewPoints
from track_mapper.geometry.frenet import (
    arc_length_rate,
    frenet_to_world,
    normalize_angle,
    step_kinematics,
    world_to_frenet,
)
from track_mapper.geometry.limits import extract_track_limits
from track_mapper.geometry.models import (
    ArcLengthProjection,
    CenterlineParams,
    CenterlinePose,
    FrenetPose,
    KinematicState,
    MetricPoint,
    NormPoint,
    PixelPoint,
    Point2,
    Quad,
    TrackLimits,
    WorldPose,
    Zone,
    ZoneHit,
    ZoneQueryResult,
    ZoneType,
)
from track_mapper.geometry.quad import (
    QuadIssue,
    QuadOptions,
    QuadValidation,
    finalize_quad,
    order_quad,
    rect_polygon,
    validate_quad,
)
from track_mapper.geometry.zones import count_zones_by_type, query_zones_at_point

__all__ = [
    "ArcLengthProjection",
    "CenterlineParams",
    "CenterlinePose",
    "FrenetPose",
    "GeometryError",
    "InvalidPointCount",
    "KinematicState",
    "MetricPoint",
    "NormPoint",
    "PixelPoint",
    "Point2",
    "Quad",
    "QuadIssue",
    "QuadOptions",
    "QuadValidation",
    "TooFewPoints",
    "TrackLimits",
    "WorldPose",
    "Zone",
    "ZoneHit",
    "ZoneQueryResult",
    "ZoneType",
    "arc_length_rate",
    "count_zones_by_type",
    "extract_track_limits",
    "finalize_quad",
    "frenet_to_world",
    "nearest_arc_length",
    "normalize_angle",
    "order_quad",
    "parameterize",
    "pose_at_arc_length",
    "query_zones_at_point",
    "rect_polygon",
    "step_kinematics",
    "validate_quad",
    "world_to_frenet",
]
