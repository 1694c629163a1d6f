from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from liftdrag.config import ConfigurationError, ModelConfig, load_config
from liftdrag.forces import LiftDragModel
from liftdrag.frame import Pose
from liftdrag.sweep import plot_polar, run_sweeps, write_csv

LOGGER = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def run_model(cfg: ModelConfig, velocity: list[float] | None = None, output_dir: Path | None = None) -> dict[str, Path]:
    out_dir = Path(output_dir) if output_dir is not None else cfg.output.directory
    if not out_dir.is_absolute():
        out_dir = (Path.cwd() / out_dir).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)

    model = LiftDragModel.create(cfg.foil)
    params = model.params

    summary: dict[str, object] = {
        "parameters": {
            "fluid_density": params.fluid_density,
            "forward": params.forward.tolist(),
            "upward": params.upward.tolist(),
            "area": params.area,
            "a0": params.alpha0,
            "cla": params.cla,
            "alpha_stall": params.alpha_stall,
            "cla_stall": params.cla_stall,
            "cda": params.cda,
            "cf": params.cf,
            "r_stall": params.r_stall,
        },
    }

    if velocity is not None:
        result = model.compute_with_diagnostics(velocity, Pose.identity())
        LOGGER.info(
            "alpha=%.4f rad, u=%.4f m/s, cl=%.4f, cd=%.4f, lift=%s, drag=%s",
            result.alpha,
            result.speed_in_plane,
            result.cl,
            result.cd,
            result.lift.round(6).tolist(),
            result.drag.round(6).tolist(),
        )
        summary["evaluation"] = {
            "velocity": [float(v) for v in velocity],
            "alpha": result.alpha,
            "speed_in_plane": result.speed_in_plane,
            "cl": result.cl,
            "cd": result.cd,
            "lift": result.lift.tolist(),
            "drag": result.drag.tolist(),
        }

    LOGGER.info("Sweeping coefficients and pitch response")
    polar_df, force_df = run_sweeps(model, cfg.sweep)

    polar_csv = write_csv(polar_df, out_dir / "polar.csv")
    force_csv = write_csv(force_df, out_dir / "force_sweep.csv")
    polar_png = plot_polar(polar_df, out_dir / "polar.png", alpha_stall=params.alpha_stall)

    peak = polar_df.loc[polar_df["cl"].idxmax()]
    summary["polar"] = {
        "cl_max": float(peak["cl"]),
        "alpha_cl_max_deg": float(peak["alpha_deg"]),
        "samples": int(len(polar_df)),
    }

    summary_json = out_dir / "summary.json"
    summary_json.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    return {
        "polar_csv": polar_csv,
        "force_sweep_csv": force_csv,
        "polar_png": polar_png,
        "summary_json": summary_json,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Lift-drag foil model runner")
    parser.add_argument("--config", required=True, help="Path to config YAML/JSON file")
    parser.add_argument(
        "--velocity",
        nargs=3,
        type=float,
        metavar=("VX", "VY", "VZ"),
        help="Relative flow velocity (world frame) to evaluate at identity pose",
    )
    parser.add_argument("--output-dir", default=None, help="Override the configured output directory")
    args = parser.parse_args(argv)

    try:
        cfg = load_config(Path(args.config))
    except ConfigurationError as exc:
        _configure_logging("INFO")
        LOGGER.error("Invalid config %s: %s", args.config, exc)
        return 2
    _configure_logging(cfg.logging.level)

    try:
        outputs = run_model(
            cfg,
            velocity=args.velocity,
            output_dir=Path(args.output_dir) if args.output_dir else None,
        )
    except ConfigurationError as exc:
        LOGGER.error("Invalid foil parameters: %s", exc)
        return 2

    LOGGER.info("Generated artifacts: %s", {k: str(v) for k, v in outputs.items()})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
