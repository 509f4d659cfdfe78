from __future__ import annotations

from typing import Tuple

import math
import numpy as np

# Poses are 3x3 isometries of the hyperboloid model x^2 + y^2 - z^2 = -1.

ORIGIN = np.array([0.0, 0.0, 1.0])

# direction d on a tile connects back through BACK[d] on the neighbour
BACK = (1, 0, 2)


def identity_pose() -> np.ndarray:
    return np.eye(3)


def compose(p: np.ndarray, q: np.ndarray) -> np.ndarray:
    return p @ q


def invert(p: np.ndarray) -> np.ndarray:
    return np.linalg.inv(p)


def spin(theta: float) -> np.ndarray:
    c, s = math.cos(theta), math.sin(theta)
    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def xpush(dist: float) -> np.ndarray:
    """Hyperbolic translation by `dist` along the x axis."""
    ch, sh = math.cosh(dist), math.sinh(dist)
    return np.array([
        [ch, 0.0, sh],
        [0.0, 1.0, 0.0],
        [sh, 0.0, ch],
    ])


def tile_edge_length(p: int = 3, q: int = 8) -> float:
    """Distance between centres of adjacent tiles of the {p,q} tiling (twice the inradius)."""
    return 2.0 * math.acosh(math.cos(math.pi / q) / math.sin(math.pi / p))


def direction_angle(d: int, sides: int = 3) -> float:
    return 2.0 * math.pi * int(d) / int(sides)


def step_delta(d: int, back: int, sides: int = 3, edge: float | None = None) -> np.ndarray:
    """Pose of the neighbour in direction d, seen from the current tile.

    The neighbour is rotated so that its own slot `back` points at the current tile.
    """
    L = tile_edge_length(sides, 8) if edge is None else float(edge)
    return spin(direction_angle(d, sides)) @ xpush(L) @ spin(math.pi) @ spin(-direction_angle(back, sides))


def poincare_project(pose: np.ndarray) -> Tuple[float, float]:
    """Image of the tile centre in the Poincaré disk."""
    h = pose @ ORIGIN
    return float(h[0] / (1.0 + h[2])), float(h[1] / (1.0 + h[2]))


def poincare_radius(pose: np.ndarray) -> float:
    x, y = poincare_project(pose)
    return math.hypot(x, y)
