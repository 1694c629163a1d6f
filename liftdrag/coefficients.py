from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol

from liftdrag.params import ParameterSet

HALF_PI = 0.5 * math.pi


class LiftCurve(Protocol):
    def half_curve(self, alpha: float) -> float:
        ...

    def __call__(self, alpha: float) -> float:
        ...


def _mirror(half_curve, alpha: float) -> float:
    # Lift is antisymmetric about alpha = pi/2.
    if alpha < HALF_PI:
        return half_curve(alpha)
    return -half_curve(math.pi - alpha)


@dataclass(frozen=True)
class SharpLiftCurve:
    """Two straight segments meeting at the stall angle."""

    alpha0: float
    cla: float
    alpha_stall: float
    cla_stall: float

    def straight_lift(self, alpha: float) -> float:
        return self.cla * (alpha - self.alpha0)

    def straight_stall(self, alpha: float) -> float:
        return self.cla_stall * (alpha - self.alpha_stall) + self.straight_lift(self.alpha_stall)

    def half_curve(self, alpha: float) -> float:
        if alpha < self.alpha_stall:
            return self.straight_lift(alpha)
        return self.straight_stall(alpha)

    def __call__(self, alpha: float) -> float:
        return _mirror(self.half_curve, alpha)


@dataclass(frozen=True)
class SmoothedLiftCurve:
    """Sharp curve with its stall corner rounded by a tangent circular arc.

    The arc of radius `r_stall` lives in (alpha, cl) space and touches the
    pre-stall line at `max_straight_alpha` and the post-stall line at
    `min_straight_stall_alpha`, so value and slope are continuous across
    both joins.
    """

    alpha0: float
    cla: float
    alpha_stall: float
    cla_stall: float
    r_stall: float
    corner: SharpLiftCurve = field(init=False)
    center_alpha: float = field(init=False)
    center_cl: float = field(init=False)
    max_straight_alpha: float = field(init=False)
    min_straight_stall_alpha: float = field(init=False)

    def __post_init__(self) -> None:
        if self.r_stall <= 0.0:
            raise ValueError("SmoothedLiftCurve requires r_stall > 0")

        lift_slope_angle = math.atan2(self.cla, 1.0)
        stall_slope_angle = math.atan2(self.cla_stall, 1.0)

        corner = SharpLiftCurve(self.alpha0, self.cla, self.alpha_stall, self.cla_stall)

        # Angle enclosed by the two lines at the stall corner.
        corner_angle = stall_slope_angle + (math.pi - lift_slope_angle)
        corner_to_center = self.r_stall / math.sin(corner_angle / 2.0)
        center_bearing = corner_angle / 2.0 + lift_slope_angle

        corner_alpha = self.alpha_stall
        corner_cl = corner.straight_lift(self.alpha_stall)
        center_alpha = corner_alpha - corner_to_center * math.cos(center_bearing)
        center_cl = corner_cl - corner_to_center * math.sin(center_bearing)

        # frozen dataclass: derived geometry is set once here
        object.__setattr__(self, "corner", corner)
        object.__setattr__(self, "center_alpha", center_alpha)
        object.__setattr__(self, "center_cl", center_cl)
        object.__setattr__(self, "max_straight_alpha", center_alpha - self.r_stall * math.sin(lift_slope_angle))
        object.__setattr__(
            self, "min_straight_stall_alpha", center_alpha - self.r_stall * math.sin(stall_slope_angle)
        )

    def stall_arc(self, alpha: float) -> float:
        ratio = (self.center_alpha - alpha) / self.r_stall
        ratio = min(1.0, max(-1.0, ratio))
        return self.center_cl + math.sin(math.acos(ratio)) * self.r_stall

    def half_curve(self, alpha: float) -> float:
        if alpha <= self.max_straight_alpha:
            cl = self.corner.straight_lift(alpha)
        elif alpha >= self.min_straight_stall_alpha:
            cl = self.corner.straight_stall(alpha)
        else:
            cl = self.stall_arc(alpha)
        return max(cl, 0.0)

    def __call__(self, alpha: float) -> float:
        return _mirror(self.half_curve, alpha)


def build_lift_curve(params: ParameterSet) -> LiftCurve:
    if params.smoothed_stall:
        return SmoothedLiftCurve(
            alpha0=params.alpha0,
            cla=params.cla,
            alpha_stall=params.alpha_stall,
            cla_stall=params.cla_stall,
            r_stall=params.r_stall,
        )
    return SharpLiftCurve(
        alpha0=params.alpha0,
        cla=params.cla,
        alpha_stall=params.alpha_stall,
        cla_stall=params.cla_stall,
    )


def drag_coefficient(alpha: float, cda: float) -> float:
    """Drag grows linearly with alpha and is symmetric about pi/2."""
    if alpha < HALF_PI:
        return cda * alpha
    return cda * (math.pi - alpha)


class CoefficientCurve:
    """Lift and drag coefficients as functions of angle of attack in [0, pi]."""

    def __init__(self, params: ParameterSet) -> None:
        self.cda = params.cda
        self.lift_curve = build_lift_curve(params)

    def lift(self, alpha: float) -> float:
        return self.lift_curve(alpha)

    def drag(self, alpha: float) -> float:
        return drag_coefficient(alpha, self.cda)

    def coefficients(self, alpha_rad: float) -> tuple[float, float]:
        return self.lift(alpha_rad), self.drag(alpha_rad)
