from __future__ import annotations

import math
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from liftdrag.coefficients import CoefficientCurve
from liftdrag.config import SweepConfig
from liftdrag.forces import LiftDragModel
from liftdrag.frame import Pose


def _angle_grid(start_deg: float, end_deg: float, step_deg: float) -> np.ndarray:
    if step_deg <= 0.0:
        raise ValueError("step_deg must be > 0")
    n = int(math.floor((end_deg - start_deg) / step_deg + 1e-9)) + 1
    return start_deg + np.arange(max(n, 1)) * step_deg


def sweep_coefficients(
    curve: CoefficientCurve,
    alpha_start_deg: float = 0.0,
    alpha_end_deg: float = 180.0,
    alpha_step_deg: float = 0.5,
) -> pd.DataFrame:
    """Tabulate cl, cd and cl/cd over angle of attack."""
    rows = []
    for alpha_deg in _angle_grid(alpha_start_deg, alpha_end_deg, alpha_step_deg):
        alpha = math.radians(float(alpha_deg))
        cl, cd = curve.coefficients(alpha)
        rows.append(
            {
                "alpha_deg": float(alpha_deg),
                "alpha_rad": alpha,
                "cl": cl,
                "cd": cd,
                "cl_cd": cl / cd if cd > 1e-12 else float("nan"),
            }
        )
    return pd.DataFrame(rows)


def sweep_pitch(
    model: LiftDragModel,
    speed_ms: float,
    pitch_start_deg: float = -90.0,
    pitch_end_deg: float = 90.0,
    pitch_step_deg: float = 1.0,
) -> pd.DataFrame:
    """Forces on the foil pitched about the body y axis in a head-on flow.

    The flow approaches against the foil's `forward` direction, so zero pitch
    is zero angle of attack.
    """
    flow = -speed_ms * np.asarray(model.params.forward, dtype=float)
    rows = []
    for pitch_deg in _angle_grid(pitch_start_deg, pitch_end_deg, pitch_step_deg):
        pose = Pose.from_euler(0.0, math.radians(float(pitch_deg)), 0.0)
        result = model.compute_with_diagnostics(flow, pose)
        rows.append(
            {
                "pitch_deg": float(pitch_deg),
                "alpha_deg": math.degrees(result.alpha),
                "cl": result.cl,
                "cd": result.cd,
                "lift_x": float(result.lift[0]),
                "lift_y": float(result.lift[1]),
                "lift_z": float(result.lift[2]),
                "drag_x": float(result.drag[0]),
                "drag_y": float(result.drag[1]),
                "drag_z": float(result.drag[2]),
                "lift_n": float(np.linalg.norm(result.lift)),
                "drag_n": float(np.linalg.norm(result.drag)),
                "total_n": float(np.linalg.norm(result.total)),
            }
        )
    return pd.DataFrame(rows)


def run_sweeps(model: LiftDragModel, cfg: SweepConfig) -> tuple[pd.DataFrame, pd.DataFrame]:
    polar = sweep_coefficients(model.curve, cfg.alpha_start_deg, cfg.alpha_end_deg, cfg.alpha_step_deg)
    forces = sweep_pitch(model, cfg.speed_ms, cfg.pitch_start_deg, cfg.pitch_end_deg, cfg.pitch_step_deg)
    return polar, forces


def write_csv(df: pd.DataFrame, path: str | Path) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    return out_path


def plot_polar(df: pd.DataFrame, output_path: str | Path = "outputs/polar.png", alpha_stall: float | None = None) -> Path:
    """Plot cl and cd against angle of attack, marking the stall angle if given."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    plt.figure(figsize=(7, 4))
    plt.plot(df["alpha_deg"], df["cl"], "-", lw=1.4, color="tab:blue", label="Cl")
    plt.plot(df["alpha_deg"], df["cd"], "-", lw=1.4, color="tab:orange", label="Cd")
    if alpha_stall is not None:
        plt.axvline(math.degrees(alpha_stall), color="k", ls="--", lw=1.0, label="stall")
    plt.axhline(0.0, color="0.6", lw=0.8)
    plt.xlabel("Angle of attack (deg)")
    plt.ylabel("Coefficient")
    plt.title("Lift-Drag Polar")
    plt.grid(alpha=0.25)
    plt.legend()
    plt.tight_layout()
    plt.savefig(path, dpi=180)
    plt.close()
    return path
