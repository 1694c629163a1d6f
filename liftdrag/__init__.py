"""Lift and drag forces on radially symmetric foils."""

__all__ = [
    "cli",
    "coefficients",
    "config",
    "forces",
    "frame",
    "params",
    "sweep",
]
