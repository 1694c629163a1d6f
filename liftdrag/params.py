from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

import numpy as np

from liftdrag.config import ConfigurationError, FoilConfig, ModelConfig

LOGGER = logging.getLogger(__name__)

# Smallest non-zero stall radius; the arc construction divides by it.
MIN_STALL_RADIUS = 0.01

_SCALAR_FIELDS = ("fluid_density", "area", "a0", "cla", "alpha_stall", "cla_stall", "cda", "cf", "r_stall")


@dataclass(frozen=True)
class ParameterSet:
    """Validated, immutable description of one radially symmetric foil.

    `forward` and `upward` are body-frame unit vectors held in read-only
    arrays. Angles are in radians, slopes per radian.
    """

    fluid_density: float
    forward: np.ndarray
    upward: np.ndarray
    area: float
    alpha0: float
    cla: float
    alpha_stall: float
    cla_stall: float
    cda: float
    cf: float
    r_stall: float

    @property
    def smoothed_stall(self) -> bool:
        return self.r_stall > 0.0


def _reject(message: str) -> ConfigurationError:
    LOGGER.error(message)
    return ConfigurationError(message)


def _unit(raw: Any, name: str) -> np.ndarray:
    try:
        vec = np.asarray(raw, dtype=float).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise _reject(f"`{name}` must be a finite 3-vector.") from exc
    if vec.shape != (3,) or not np.all(np.isfinite(vec)):
        raise _reject(f"`{name}` must be a finite 3-vector.")
    norm = float(np.linalg.norm(vec))
    if norm <= 1e-9:
        raise _reject(f"`{name}` must have non-zero length.")
    unit = vec / norm
    unit.setflags(write=False)
    return unit


def _as_foil_config(configuration: Mapping[str, Any] | FoilConfig | None) -> FoilConfig:
    if configuration is None:
        return FoilConfig()
    if isinstance(configuration, FoilConfig):
        configuration = asdict(configuration)
    # Mappings and dataclasses get the same coercion as config files.
    allowed = {f.name for f in fields(FoilConfig)}
    unknown = sorted(set(configuration) - allowed)
    if unknown:
        LOGGER.debug("Ignoring unknown foil parameters: %s", unknown)
    try:
        return ModelConfig.from_dict({"foil": dict(configuration)}).foil
    except ConfigurationError as exc:
        LOGGER.error("%s", exc)
        raise


def create_parameters(configuration: Mapping[str, Any] | FoilConfig | None = None) -> ParameterSet:
    """Validate a foil configuration and freeze it into a ParameterSet.

    Raises ConfigurationError for asymmetric foils, for a stall radius that
    reaches `alpha_stall` or lies in (0, 0.01), and for non-physical
    densities, areas and reference directions, and for non-finite values.
    """
    cfg = _as_foil_config(configuration)

    for name in _SCALAR_FIELDS:
        if not math.isfinite(getattr(cfg, name)):
            raise _reject(f"`{name}` must be finite.")

    # Only radially symmetric lift-drag coefficients are modelled.
    if not cfg.radial_symmetry:
        raise _reject("Lift-drag model only supports radially symmetric foils.")
    if cfg.r_stall < 0.0:
        raise _reject("`r_stall` must be >= 0.")
    if cfg.r_stall >= cfg.alpha_stall:
        raise _reject("`r_stall` must be less than `alpha_stall`.")
    if 0.0 < cfg.r_stall < MIN_STALL_RADIUS:
        raise _reject(f"Non-zero `r_stall` must be >= {MIN_STALL_RADIUS}.")
    if cfg.fluid_density <= 0.0:
        raise _reject("`fluid_density` must be > 0.")
    if cfg.area <= 0.0:
        raise _reject("`area` must be > 0.")
    if cfg.cf < 0.0:
        raise _reject("`cf` must be >= 0.")

    forward = _unit(cfg.forward, "forward")
    upward = _unit(cfg.upward, "upward")
    if np.linalg.norm(np.cross(forward, upward)) <= 1e-9:
        raise _reject("`forward` and `upward` must not be parallel.")

    params = ParameterSet(
        fluid_density=float(cfg.fluid_density),
        forward=forward,
        upward=upward,
        area=float(cfg.area),
        alpha0=float(cfg.a0),
        cla=float(cfg.cla),
        alpha_stall=float(cfg.alpha_stall),
        cla_stall=float(cfg.cla_stall),
        cda=float(cfg.cda),
        cf=float(cfg.cf),
        r_stall=float(cfg.r_stall),
    )
    LOGGER.debug(
        "Created foil parameters: area=%.4g, alpha_stall=%.4g rad, r_stall=%.4g",
        params.area,
        params.alpha_stall,
        params.r_stall,
    )
    return params
