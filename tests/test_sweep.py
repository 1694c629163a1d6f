from __future__ import annotations

import json
import math
from pathlib import Path

import numpy as np
import pytest

from liftdrag.cli import main
from liftdrag.config import SweepConfig
from liftdrag.forces import LiftDragModel
from liftdrag.sweep import plot_polar, run_sweeps, sweep_coefficients, sweep_pitch, write_csv


def _model() -> LiftDragModel:
    return LiftDragModel.create({"alpha_stall": 0.3, "cla_stall": -2.0, "r_stall": 0.05, "cf": 0.005})


def test_polar_sweep_covers_range() -> None:
    df = sweep_coefficients(_model().curve, 0.0, 180.0, 0.5)

    assert len(df) == 361
    assert df["alpha_deg"].iloc[0] == 0.0
    assert df["alpha_deg"].iloc[-1] == pytest.approx(180.0)
    assert np.isnan(df["cl_cd"].iloc[0])
    assert df["cd"].max() == pytest.approx(1.0)


def test_polar_peak_sits_in_stall_arc() -> None:
    model = _model()
    df = sweep_coefficients(model.curve, 0.0, 90.0, 0.05)
    peak_alpha = math.radians(float(df.loc[df["cl"].idxmax(), "alpha_deg"]))

    assert model.curve.lift_curve.max_straight_alpha < peak_alpha < model.curve.lift_curve.min_straight_stall_alpha


def test_pitch_sweep_is_antisymmetric_in_lift() -> None:
    df = sweep_pitch(_model(), speed_ms=10.0, pitch_start_deg=-20.0, pitch_end_deg=20.0, pitch_step_deg=1.0)

    assert len(df) == 41
    zero = df[df["pitch_deg"] == 0.0].iloc[0]
    assert zero["lift_n"] == pytest.approx(0.0, abs=1e-6)
    assert zero["alpha_deg"] == pytest.approx(0.0, abs=1e-5)

    nose_up = df[df["pitch_deg"] == -10.0].iloc[0]
    nose_down = df[df["pitch_deg"] == 10.0].iloc[0]
    assert nose_up["cl"] == pytest.approx(-nose_down["cl"])
    assert nose_up["lift_z"] > 0.0 > nose_down["lift_z"]
    assert nose_up["drag_n"] == pytest.approx(nose_down["drag_n"])
    # Lift and drag are perpendicular.
    assert np.allclose(df["total_n"], np.hypot(df["lift_n"], df["drag_n"]))


def test_outputs_are_written(tmp_path: Path) -> None:
    polar, forces = run_sweeps(_model(), SweepConfig(alpha_step_deg=5.0, pitch_step_deg=10.0))

    csv_path = write_csv(forces, tmp_path / "nested" / "force_sweep.csv")
    png_path = plot_polar(polar, tmp_path / "polar.png", alpha_stall=0.3)

    assert csv_path.exists()
    assert png_path.exists() and png_path.stat().st_size > 0
    assert csv_path.read_text(encoding="utf-8").splitlines()[0].startswith("pitch_deg,alpha_deg,cl,cd")


def test_cli_writes_artifacts(tmp_path: Path) -> None:
    cfg_path = tmp_path / "foil.yaml"
    cfg_path.write_text(
        "foil:\n  alpha_stall: 0.5236\n  cla_stall: -10\n  r_stall: 0.05\n"
        "sweep:\n  alpha_step_deg: 2.0\n  pitch_step_deg: 5.0\n",
        encoding="utf-8",
    )
    out_dir = tmp_path / "out"

    code = main(["--config", str(cfg_path), "--output-dir", str(out_dir), "--velocity", "-10", "0", "1"])

    assert code == 0
    for name in ("polar.csv", "force_sweep.csv", "polar.png", "summary.json"):
        assert (out_dir / name).exists()
    summary = json.loads((out_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["evaluation"]["alpha"] == pytest.approx(math.atan(0.1))
    assert summary["parameters"]["r_stall"] == 0.05


def test_cli_rejects_invalid_foil(tmp_path: Path) -> None:
    cfg_path = tmp_path / "bad.yaml"
    cfg_path.write_text("foil:\n  radial_symmetry: false\n", encoding="utf-8")

    assert main(["--config", str(cfg_path), "--output-dir", str(tmp_path / "out")]) == 2


@pytest.mark.parametrize("foil_line", ["cla: abc", "area: null", "forward: [a, 0, 0]", "fluid_density: .nan"])
def test_cli_rejects_malformed_foil_values(tmp_path: Path, foil_line: str) -> None:
    cfg_path = tmp_path / "bad.yaml"
    cfg_path.write_text(f"foil:\n  {foil_line}\n", encoding="utf-8")

    assert main(["--config", str(cfg_path), "--output-dir", str(tmp_path / "out")]) == 2
