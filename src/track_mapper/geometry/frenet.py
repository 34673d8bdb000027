"""Frenet-frame conversions and the kinematic arc-length rate.

``s`` is arc-length along the centerline, ``d`` the signed lateral offset
(positive on the right-hand normal side, see
:func:`~track_mapper.geometry.centerline.nearest_arc_length`).
"""

from __future__ import annotations

import logging
import math

from track_mapper.geometry.centerline import (
    nearest_arc_length,
    pose_at_arc_length,
    wrap_arc_length,
)
from track_mapper.geometry.models import (
    CenterlineParams,
    FrenetPose,
    KinematicState,
    Point2,
    WorldPose,
)

_logger = logging.getLogger(__name__)

_TWO_PI = 2.0 * math.pi
_RATE_EPS = 1e-6


def normalize_angle(angle: float) -> float:
    """Map *angle* (radians) into ``[-π, π]``.

    Raises:
        ValueError: If *angle* is NaN or infinite.
    """
    if not math.isfinite(angle):
        raise ValueError(f"Cannot normalize non-finite angle {angle!r}")
    a = math.fmod(angle, _TWO_PI)
    if a > math.pi:
        a -= _TWO_PI
    elif a < -math.pi:
        a += _TWO_PI
    return a


def world_to_frenet(params: CenterlineParams, x: float, y: float, heading: float) -> FrenetPose:
    """Convert a world pose ``(x, y, ψ)`` to ``(s, d, ψ, δ)``.

    The returned ``s`` is wrapped into ``[0, total_length)``.  A point next
    to the closing segment projects to ``s == total_length`` and comes back
    as ``s == 0``.
    """
    proj = nearest_arc_length(params, Point2(x, y))
    centerline_heading = pose_at_arc_length(params, proj.s).heading
    return FrenetPose(
        s=wrap_arc_length(params, proj.s),
        d=proj.d,
        heading=heading,
        heading_error=normalize_angle(heading - centerline_heading),
    )


def frenet_to_world(params: CenterlineParams, s: float, d: float, heading_error: float) -> WorldPose:
    """Convert ``(s, d, δ)`` back to a world pose.

    The point is offset by *d* along the centerline heading rotated by +π/2,
    which is the same right-hand normal :func:`world_to_frenet` measures.
    """
    pose = pose_at_arc_length(params, s)
    perp = pose.heading + math.pi / 2
    return WorldPose(
        x=pose.position.x + d * math.cos(perp),
        y=pose.position.y + d * math.sin(perp),
        heading=normalize_angle(pose.heading + heading_error),
    )


def arc_length_rate(
    params: CenterlineParams,
    s: float,
    d: float,
    heading_error: float,
    speed: float,
) -> float:
    """Rate of progress along the centerline, ``ds/dt``.

    ``speed * cos(δ) / (1 + κ(s) * d)``.  Returns 0 when the denominator
    is within ``1e-6`` of zero.
    """
    curvature = pose_at_arc_length(params, s).curvature
    denom = 1.0 + curvature * d
    if abs(denom) < _RATE_EPS:
        _logger.debug("arc_length_rate singular at s=%.4f (kappa=%.4f, d=%.4f)", s, curvature, d)
        return 0.0
    return speed * math.cos(heading_error) / denom


def step_kinematics(
    params: CenterlineParams,
    state: KinematicState,
    steering: float,
    speed: float,
    dt: float,
) -> KinematicState:
    """Advance the single-vehicle kinematic follower by *dt* seconds.

    Args:
        params: Centerline to follow.
        state: Current follower state.
        steering: Yaw error input δ in radians (used as heading error).
        speed: Forward speed for this step.
        dt: Time step in seconds.

    Returns:
        New state with ``s`` clamped to ``[0, total_length]``.
    """
    s_rate = arc_length_rate(params, state.s, state.d, steering, speed)
    new_s = max(0.0, min(state.s + s_rate * dt, params.total_length))
    new_d = state.d + speed * math.sin(steering) * dt

    pose = pose_at_arc_length(params, new_s)
    psi = pose.heading + pose.curvature * s_rate * dt
    return KinematicState(s=new_s, d=new_d, psi=psi, v=speed)
