"""Runtime settings.

Defaults live on :class:`TrackMapperSettings`.  :func:`load_settings` reads a
``.env`` file (if present) and overrides from ``TRACK_MAPPER_*`` environment
variables, e.g. ``TRACK_MAPPER_MIN_SEPARATION_PX=30``.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from track_mapper.coords.normalizer import SizePx
from track_mapper.geometry.quad import QuadOptions

_logger = logging.getLogger(__name__)

ENV_PREFIX = "TRACK_MAPPER_"


@dataclass(frozen=True)
class TrackMapperSettings:
    """Numeric configuration consumed by the engine's callers."""

    min_separation_px: float = 20.0
    """Minimum distance between quad corners."""

    min_area_px2: float = 5000.0
    """Minimum quad area."""

    num_samples: int = 100
    """Track-limit samples along the centerline."""

    max_zone_distance: float | None = None
    """Cut-off for the nearest-zone query (normalized units); None = no limit."""

    default_lateral_bound: float = 0.5
    """Track-limit magnitude used where no zone applies."""

    topdown_w: int = 1600
    topdown_h: int = 900

    non_black_ratio_min: float = 0.01
    """Below this share of non-black pixels a rectified raster counts as blank."""

    cache_size: int = 32
    """Entries kept by :class:`~track_mapper.session.GeometryCache`."""

    def __post_init__(self) -> None:
        if self.num_samples < 1:
            raise ValueError("num_samples must be >= 1")
        if self.cache_size < 1:
            raise ValueError("cache_size must be >= 1")
        if self.topdown_w <= 0 or self.topdown_h <= 0:
            raise ValueError("topdown size must be positive")

    def quad_options(self) -> QuadOptions:
        return QuadOptions(min_separation=self.min_separation_px, min_area=self.min_area_px2)

    def topdown_size(self) -> SizePx:
        """Default size of the rectified top-down raster."""
        return SizePx(self.topdown_w, self.topdown_h)


def _coerce(name: str, raw: str, default):
    env_name = ENV_PREFIX + name.upper()
    if name == "max_zone_distance":
        if raw.strip().lower() in ("", "none"):
            return None
        target = float
    else:
        target = type(default)
    try:
        return target(raw)
    except ValueError as exc:
        raise ValueError(f"{env_name}={raw!r} is not a valid {target.__name__}") from exc


def load_settings(env_file: str | os.PathLike | None = None) -> TrackMapperSettings:
    """Build settings from defaults, a ``.env`` file and the environment.

    Args:
        env_file: Explicit dotenv path.  When omitted python-dotenv walks up
            the directory tree looking for ``.env``.  Variables already set
            in the environment win over the file.

    Raises:
        ValueError: If a variable cannot be converted or is out of range.
    """
    load_dotenv(env_file)
    defaults = TrackMapperSettings()
    overrides = {}
    for f in dataclasses.fields(TrackMapperSettings):
        raw = os.environ.get(ENV_PREFIX + f.name.upper())
        if raw is not None:
            overrides[f.name] = _coerce(f.name, raw, getattr(defaults, f.name))

    settings = dataclasses.replace(defaults, **overrides)
    if overrides:
        _logger.info("Settings overridden from environment: %s", ", ".join(sorted(overrides)))
    return settings
