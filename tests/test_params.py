from __future__ import annotations

import math

import numpy as np
import pytest

from liftdrag.config import ConfigurationError, FoilConfig
from liftdrag.params import create_parameters


def test_defaults_match_thin_airfoil_foil() -> None:
    params = create_parameters()

    assert params.fluid_density == 1.2
    assert params.cla == pytest.approx(2.0 * math.pi)
    assert params.alpha_stall == pytest.approx(1.0 / (2.0 * math.pi))
    assert params.cda == pytest.approx(2.0 / math.pi)
    assert params.r_stall == 0.0
    assert not params.smoothed_stall


def test_reference_vectors_are_normalized_and_read_only() -> None:
    params = create_parameters({"forward": [3.0, 0.0, 0.0], "upward": "0 0 0.25"})

    assert np.allclose(params.forward, [1.0, 0.0, 0.0])
    assert np.allclose(params.upward, [0.0, 0.0, 1.0])
    with pytest.raises(ValueError):
        params.forward[0] = 2.0


def test_mapping_uses_scene_names() -> None:
    params = create_parameters({"a0": 0.05, "cla_stall": -3.0, "r_stall": 0.05, "alpha_stall": 0.3, "extra": 1})

    assert params.alpha0 == 0.05
    assert params.cla_stall == -3.0
    assert params.smoothed_stall


def test_accepts_foil_config_dataclass() -> None:
    params = create_parameters(FoilConfig(area=2.5, cf=0.01))

    assert params.area == 2.5
    assert params.cf == 0.01


@pytest.mark.parametrize(
    "overrides",
    [
        {"radial_symmetry": False},
        {"alpha_stall": 0.3, "r_stall": 0.3},
        {"alpha_stall": 0.3, "r_stall": 0.4},
        {"r_stall": 0.005},
        {"r_stall": -0.1},
        {"fluid_density": 0.0},
        {"area": -1.0},
        {"cf": -0.01},
        {"forward": [0.0, 0.0, 0.0]},
        {"forward": [0.0, 0.0, 2.0], "upward": [0.0, 0.0, 1.0]},
        {"upward": [1.0, 0.0]},
        {"fluid_density": float("nan")},
        {"alpha_stall": float("nan")},
        {"area": float("inf")},
        {"cla": float("-inf")},
        {"cf": float("nan")},
        {"r_stall": float("nan")},
        {"area": None},
        {"cla": "abc"},
        {"forward": ["a", 0.0, 0.0]},
    ],
)
def test_invalid_parameters_are_rejected(overrides) -> None:
    with pytest.raises(ConfigurationError):
        create_parameters(overrides)


def test_smallest_stall_radius_is_accepted() -> None:
    params = create_parameters({"alpha_stall": 0.3, "r_stall": 0.01})

    assert params.r_stall == 0.01


def test_foil_config_fields_are_coerced() -> None:
    with pytest.raises(ConfigurationError):
        create_parameters(FoilConfig(radial_symmetry="false"))  # type: ignore[arg-type]

    params = create_parameters(FoilConfig(forward="0 2 0", area="0.5"))  # type: ignore[arg-type]
    assert np.allclose(params.forward, [0.0, 1.0, 0.0])
    assert params.area == 0.5


def test_non_numeric_rejection_is_logged(caplog) -> None:
    with caplog.at_level("ERROR", logger="liftdrag.params"):
        with pytest.raises(ConfigurationError):
            create_parameters({"cla": "abc"})

    assert "`foil.cla` must be a number" in caplog.text


def test_rejection_is_logged(caplog) -> None:
    with caplog.at_level("ERROR", logger="liftdrag.params"):
        with pytest.raises(ConfigurationError):
            create_parameters({"radial_symmetry": "false"})

    assert "radially symmetric" in caplog.text
