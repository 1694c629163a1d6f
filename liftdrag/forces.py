from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

from liftdrag.coefficients import CoefficientCurve
from liftdrag.config import FoilConfig
from liftdrag.frame import Pose, resolve_frame
from liftdrag.params import ParameterSet, create_parameters

LOGGER = logging.getLogger(__name__)


@dataclass
class ForceResult:
    lift: np.ndarray
    drag: np.ndarray
    alpha: float
    speed_in_plane: float
    cl: float
    cd: float

    @property
    def total(self) -> np.ndarray:
        return self.lift + self.drag


class LiftDragModel:
    """Lift and drag on a radially symmetric foil in a relative flow.

    Evaluation reads only the immutable parameter set, so one model can be
    shared between threads.
    """

    def __init__(self, params: ParameterSet) -> None:
        self.params = params
        self.curve = CoefficientCurve(params)

    @classmethod
    def create(cls, configuration: Mapping[str, Any] | FoilConfig | None = None) -> "LiftDragModel":
        return cls(create_parameters(configuration))

    def compute(self, relative_velocity: Sequence[float], body_pose: Pose) -> tuple[np.ndarray, np.ndarray]:
        result = self.compute_with_diagnostics(relative_velocity, body_pose)
        return result.lift, result.drag

    def compute_with_diagnostics(self, relative_velocity: Sequence[float], body_pose: Pose) -> ForceResult:
        """Forces in the world frame plus alpha, in-plane speed, cl and cd.

        Core relations:
        - lift = cl * q * area along the lift direction
        - drag = (cd * q + cf * qf) * area along the in-plane flow
        - qf uses the chordwise component of the in-plane speed
        """
        params = self.params
        basis = resolve_frame(relative_velocity, body_pose.orientation, params)
        if basis is None:
            LOGGER.debug("Relative flow below threshold; returning zero forces")
            return ForceResult(lift=np.zeros(3), drag=np.zeros(3), alpha=0.0, speed_in_plane=0.0, cl=0.0, cd=0.0)

        cl = self.curve.lift(basis.alpha) * basis.sign_alpha
        cd = self.curve.drag(basis.alpha)
        q = basis.dynamic_pressure

        lift = cl * q * params.area * basis.lift_unit

        # Skin friction acts on the chordwise dynamic pressure.
        uf = basis.speed_in_plane * basis.cos_alpha
        qf = 0.5 * params.fluid_density * uf * uf
        drag = (cd * q + params.cf * qf) * params.area * basis.drag_unit

        return ForceResult(
            lift=lift,
            drag=drag,
            alpha=basis.alpha,
            speed_in_plane=basis.speed_in_plane,
            cl=float(cl),
            cd=float(cd),
        )
