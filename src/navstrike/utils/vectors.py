"""3-D vector helpers for kinematic bookkeeping."""

from __future__ import annotations

import math
from typing import Any

import numpy as np


def as_vec3(value: Any) -> np.ndarray:
    """Coerce a sequence, array or ``{x, y, z}`` mapping to a float [x, y, z].

    Raises:
        ValueError: If the value does not hold exactly three components.
    """
    if isinstance(value, dict):
        value = (value["x"], value["y"], value["z"])
    vec = np.asarray(value, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {vec.shape}")
    return vec


def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points."""
    d = np.asarray(b, dtype=float) - np.asarray(a, dtype=float)
    return math.sqrt(float(np.dot(d, d)))


def closing_speed(
    position: np.ndarray,
    velocity: np.ndarray,
    aim_point: np.ndarray,
    dist: float | None = None,
) -> float:
    """Component of *velocity* directed from *position* toward *aim_point*.

    Positive means the object is closing.  *dist* may be passed when the
    caller already has it; it must be non-zero.
    """
    los = np.asarray(aim_point, dtype=float) - np.asarray(position, dtype=float)
    if dist is None:
        dist = math.sqrt(float(np.dot(los, los)))
    return float(np.dot(np.asarray(velocity, dtype=float), los / dist))
