"""Typed errors for malformed geometry input."""

from __future__ import annotations


class GeometryError(ValueError):
    """Base class for hard geometry failures.

    ``code`` carries the stable failure name so callers can branch on it
    without matching message text.
    """

    code = "GeometryError"


class InvalidPointCount(GeometryError):
    """A quad was given anything other than exactly four points."""

    code = "InvalidPointCount"


class TooFewPoints(GeometryError):
    """A centerline was given fewer than two points."""

    code = "TooFewPoints"
