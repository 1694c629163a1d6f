from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from liftdrag.params import ParameterSet

# Relative flow at or below this speed produces no force.
MIN_FLOW_SPEED = 0.01


def _normalized(vec: np.ndarray) -> np.ndarray:
    # Vectors too short to carry a direction are left as zero.
    norm = float(np.linalg.norm(vec))
    if norm <= 1e-6:
        return np.zeros(3)
    return vec / norm


def rotate_vector(quaternion: Sequence[float], vector: Sequence[float]) -> np.ndarray:
    """Rotate `vector` by the unit quaternion `(w, x, y, z)`."""
    w, x, y, z = (float(c) for c in quaternion)
    norm = math.sqrt(w * w + x * x + y * y + z * z)
    if norm <= 1e-12:
        raise ValueError("Quaternion must have non-zero length.")
    w, x, y, z = w / norm, x / norm, y / norm, z / norm

    rot = np.array(
        [
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)],
            [2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)],
            [2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)],
        ]
    )
    return rot @ np.asarray(vector, dtype=float)


@dataclass(frozen=True)
class Pose:
    """Body pose in the world frame; orientation is a quaternion (w, x, y, z)."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)

    @classmethod
    def identity(cls) -> "Pose":
        return cls()

    @classmethod
    def from_euler(
        cls,
        roll: float,
        pitch: float,
        yaw: float,
        position: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> "Pose":
        """Build a pose from extrinsic X-Y-Z (roll, pitch, yaw) angles in radians."""
        cr, sr = math.cos(roll / 2.0), math.sin(roll / 2.0)
        cp, sp = math.cos(pitch / 2.0), math.sin(pitch / 2.0)
        cy, sy = math.cos(yaw / 2.0), math.sin(yaw / 2.0)
        orientation = (
            cr * cp * cy + sr * sp * sy,
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
        )
        return cls(position=np.asarray(position, dtype=float), orientation=orientation)

    def rotate(self, vector: Sequence[float]) -> np.ndarray:
        return rotate_vector(self.orientation, vector)


@dataclass(frozen=True)
class FlowBasis:
    """Working basis of one evaluation, all vectors in the world frame."""

    span_unit: np.ndarray
    drag_unit: np.ndarray
    lift_unit: np.ndarray
    alpha: float
    sign_alpha: float
    cos_alpha: float
    speed_in_plane: float
    dynamic_pressure: float


def resolve_frame(
    relative_velocity: Sequence[float],
    orientation: Sequence[float],
    params: ParameterSet,
) -> FlowBasis | None:
    """Resolve the lift, drag and span directions for the current flow.

    Returns None when the relative flow is too slow to define a direction;
    callers treat that as zero lift and drag.
    """
    vel = np.asarray(relative_velocity, dtype=float)
    if float(np.linalg.norm(vel)) <= MIN_FLOW_SPEED:
        return None

    forward_world = rotate_vector(orientation, params.forward)
    upward_world = rotate_vector(orientation, params.upward)

    # Span is normal to the lift-drag plane.
    span_unit = _normalized(np.cross(forward_world, upward_world))

    vel_in_plane = vel - float(np.dot(vel, span_unit)) * span_unit
    drag_unit = _normalized(vel_in_plane)
    lift_unit = _normalized(np.cross(drag_unit, span_unit))

    cos_alpha = -float(np.dot(forward_world, drag_unit))
    alpha = math.acos(min(1.0, max(-1.0, cos_alpha)))
    sign_alpha = -1.0 if float(np.dot(forward_world, lift_unit)) < 0.0 else 1.0

    speed_in_plane = float(np.linalg.norm(vel_in_plane))
    dynamic_pressure = 0.5 * params.fluid_density * speed_in_plane * speed_in_plane

    return FlowBasis(
        span_unit=span_unit,
        drag_unit=drag_unit,
        lift_unit=lift_unit,
        alpha=alpha,
        sign_alpha=sign_alpha,
        cos_alpha=cos_alpha,
        speed_in_plane=speed_in_plane,
        dynamic_pressure=dynamic_pressure,
    )
