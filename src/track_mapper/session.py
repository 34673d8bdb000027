"""Explicit recompute of derived track geometry, with an optional cache.

Derived data is never updated incrementally: after every edit to the
centerline or zones the caller asks for the geometry again.  A
:class:`GeometryCache` can sit in front of :func:`recompute_geometry` to skip
work when the inputs have not changed; it is keyed by a content hash and
owned by the caller (there is no module-level cache).
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass

from track_mapper.config import TrackMapperSettings
from track_mapper.geometry.centerline import parameterize
from track_mapper.geometry.limits import DEFAULT_LATERAL_BOUND, extract_track_limits
from track_mapper.geometry.models import CenterlineParams, Point2, TrackLimits, Zone

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackGeometry:
    """Everything derived from one (centerline, zones) snapshot."""

    key: str
    """Content hash of the inputs."""

    params: CenterlineParams
    limits: TrackLimits


def content_hash(
    centerline: Sequence[Point2],
    zones: Sequence[Zone],
    num_samples: int,
    default_lateral: float = DEFAULT_LATERAL_BOUND,
) -> str:
    """SHA-256 of a canonical JSON encoding of the inputs."""
    payload = {
        "centerline": [[p.x, p.y] for p in centerline],
        "zones": [
            {
                "id": z.id,
                "type": z.type.value,
                "poly": [[p.x, p.y] for p in z.poly],
                "params": dict(z.params),
            }
            for z in zones
        ],
        "num_samples": num_samples,
        "default_lateral": default_lateral,
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def recompute_geometry(
    centerline: Sequence[Point2],
    zones: Sequence[Zone],
    num_samples: int = 100,
    default_lateral: float = DEFAULT_LATERAL_BOUND,
) -> TrackGeometry:
    """Parameterize *centerline* and extract track limits against *zones*.

    Raises:
        TooFewPoints: If the centerline has fewer than 2 points.
    """
    params = parameterize(centerline)
    limits = extract_track_limits(params, zones, num_samples, default_lateral)
    return TrackGeometry(
        key=content_hash(centerline, zones, num_samples, default_lateral),
        params=params,
        limits=limits,
    )


class GeometryCache:
    """Bounded LRU cache in front of :func:`recompute_geometry`.

    Args:
        max_entries: Number of snapshots kept; the least recently used one is
            evicted first.
    """

    def __init__(self, max_entries: int = 32) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[str, TrackGeometry] = OrderedDict()

    @classmethod
    def from_settings(cls, settings: TrackMapperSettings) -> GeometryCache:
        return cls(max_entries=settings.cache_size)

    def __len__(self) -> int:
        return len(self._entries)

    def get(
        self,
        centerline: Sequence[Point2],
        zones: Sequence[Zone],
        num_samples: int = 100,
        default_lateral: float = DEFAULT_LATERAL_BOUND,
    ) -> TrackGeometry:
        """Return cached geometry for these inputs, computing it on a miss."""
        key = content_hash(centerline, zones, num_samples, default_lateral)
        cached = self._entries.get(key)
        if cached is not None:
            self._entries.move_to_end(key)
            self.hits += 1
            _logger.debug("Geometry cache hit %s", key[:12])
            return cached

        self.misses += 1
        _logger.debug("Geometry cache miss %s", key[:12])
        geometry = recompute_geometry(centerline, zones, num_samples, default_lateral)
        self._entries[key] = geometry
        if len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return geometry

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
