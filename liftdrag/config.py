from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml


class ConfigurationError(ValueError):
    """Raised when a foil parameter set or config file is rejected."""


@dataclass(frozen=True)
class FoilConfig:
    """Foil parameters as named in the host scene description."""

    fluid_density: float = 1.2
    radial_symmetry: bool = True
    forward: tuple[float, float, float] = (1.0, 0.0, 0.0)
    upward: tuple[float, float, float] = (0.0, 0.0, 1.0)
    area: float = 1.0
    a0: float = 0.0
    alpha_stall: float = 1.0 / (2.0 * math.pi)
    cla: float = 2.0 * math.pi
    cla_stall: float = -(2.0 * math.pi) / (math.pi * math.pi - 1.0)
    cda: float = 2.0 / math.pi
    cf: float = 0.0
    r_stall: float = 0.0


@dataclass(frozen=True)
class SweepConfig:
    alpha_start_deg: float = 0.0
    alpha_end_deg: float = 180.0
    alpha_step_deg: float = 0.5
    speed_ms: float = 10.0
    pitch_start_deg: float = -90.0
    pitch_end_deg: float = 90.0
    pitch_step_deg: float = 1.0


@dataclass(frozen=True)
class OutputConfig:
    directory: Path = Path("outputs")


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class ModelConfig:
    foil: FoilConfig = field(default_factory=FoilConfig)
    sweep: SweepConfig = field(default_factory=SweepConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ModelConfig":
        foil = _coerce_dataclass(FoilConfig, raw.get("foil"))
        sweep = _coerce_dataclass(SweepConfig, raw.get("sweep"))
        output = _coerce_dataclass(OutputConfig, raw.get("output"))
        log_cfg = _coerce_dataclass(LoggingConfig, raw.get("logging"))

        foil = FoilConfig(
            fluid_density=_to_float(foil.fluid_density, "foil.fluid_density"),
            radial_symmetry=_to_bool(foil.radial_symmetry, "foil.radial_symmetry"),
            forward=_to_vector3(foil.forward, "foil.forward"),
            upward=_to_vector3(foil.upward, "foil.upward"),
            area=_to_float(foil.area, "foil.area"),
            a0=_to_float(foil.a0, "foil.a0"),
            alpha_stall=_to_float(foil.alpha_stall, "foil.alpha_stall"),
            cla=_to_float(foil.cla, "foil.cla"),
            cla_stall=_to_float(foil.cla_stall, "foil.cla_stall"),
            cda=_to_float(foil.cda, "foil.cda"),
            cf=_to_float(foil.cf, "foil.cf"),
            r_stall=_to_float(foil.r_stall, "foil.r_stall"),
        )
        sweep = SweepConfig(
            **{f.name: _to_float(getattr(sweep, f.name), f"sweep.{f.name}") for f in fields(SweepConfig)}
        )

        if sweep.alpha_step_deg <= 0.0:
            raise ConfigurationError("`sweep.alpha_step_deg` must be > 0.")
        if sweep.alpha_end_deg <= sweep.alpha_start_deg:
            raise ConfigurationError("`sweep.alpha_end_deg` must be greater than `sweep.alpha_start_deg`.")
        if sweep.pitch_step_deg <= 0.0:
            raise ConfigurationError("`sweep.pitch_step_deg` must be > 0.")
        if sweep.pitch_end_deg <= sweep.pitch_start_deg:
            raise ConfigurationError("`sweep.pitch_end_deg` must be greater than `sweep.pitch_start_deg`.")
        if sweep.speed_ms < 0.0:
            raise ConfigurationError("`sweep.speed_ms` must be >= 0.")

        return cls(
            foil=foil,
            sweep=sweep,
            output=OutputConfig(directory=_to_path(output.directory, "output.directory")),
            logging=LoggingConfig(level=str(log_cfg.level)),
        )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "ModelConfig":
        return cls.from_dict(_load_mapping(Path(path)))


def _load_mapping(path: Path) -> Mapping[str, Any]:
    # safe_load also reads JSON.
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Config file must contain a mapping at top level: {path}")
    return data


def _coerce_dataclass(cls: type[Any], raw: Mapping[str, Any] | None) -> Any:
    if raw is None:
        return cls()
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Config section for {cls.__name__} must be a mapping.")
    allowed = {f.name for f in fields(cls)}
    kwargs = {key: value for key, value in raw.items() if key in allowed}
    return cls(**kwargs)


def _to_vector3(raw: Any, name: str) -> tuple[float, float, float]:
    if isinstance(raw, str):
        # Scene descriptions write vectors as "x y z".
        raw = raw.split()
    if not isinstance(raw, (list, tuple)) or len(raw) != 3:
        raise ConfigurationError(f"`{name}` must be a list of length 3.")
    return (
        _to_float(raw[0], f"{name}[0]"),
        _to_float(raw[1], f"{name}[1]"),
        _to_float(raw[2], f"{name}[2]"),
    )


def _to_float(raw: Any, name: str) -> float:
    if isinstance(raw, bool):
        raise ConfigurationError(f"`{name}` must be a number.")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"`{name}` must be a number.") from exc


def _to_path(raw: Any, name: str) -> Path:
    if not isinstance(raw, (str, Path)):
        raise ConfigurationError(f"`{name}` must be a path.")
    return Path(raw)


def _to_bool(raw: Any, name: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in ("true", "1"):
        return True
    if isinstance(raw, str) and raw.strip().lower() in ("false", "0"):
        return False
    if isinstance(raw, (int, float)) and raw in (0, 1):
        return bool(raw)
    raise ConfigurationError(f"`{name}` must be a boolean.")


def load_config(path: Path | str) -> ModelConfig:
    return ModelConfig.from_yaml(path)
