from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import math
import numpy as np

from .elements import I, B, ElementStore


@dataclass
class PrecomputeResult:
    order: List[int]          # element handles in discovery (BFS) order
    level_sizes: List[int]    # number of elements discovered at each distance
    processed: int            # elements whose neighbours were expanded


def precompute(
    store: ElementStore,
    limit: int,
    ac: int,
    ca: int,
    progress_every: int = 0,
) -> PrecomputeResult:
    """Breadth-first discovery of the index-2 subgroup generated by b, ac, ca.

    Expands at most `limit` elements. Every newly discovered element gets its
    originating label ('b', 'A' for ac, 'C' for ca) and its distance from I, once.
    """
    order: List[int] = []
    level_sizes: List[int] = []

    def visit(x: int, label: Optional[str], d: int) -> None:
        if store.discover(x, label, d):
            order.append(x)
            while len(level_sizes) <= d:
                level_sizes.append(0)
            level_sizes[d] += 1

    visit(I, None, 0)
    i = 0
    length = 0
    while i < int(limit) and i < len(order):
        x = order[i]
        d = store[x].distance
        if d > length:
            length = d
            if progress_every and (length % int(progress_every) == 0):
                print(f"Level {length:4d}: processed={i} discovered={len(order)}")
        visit(store.mul(x, B), "b", d + 1)
        visit(store.mul(x, ac), "A", d + 1)
        visit(store.mul(x, ca), "C", d + 1)
        i += 1
    return PrecomputeResult(order=order, level_sizes=level_sizes, processed=i)


def growth_profile(level_sizes: Sequence[int]) -> List[int]:
    """Cumulative ball volumes V(r) = number of elements at distance <= r."""
    return [int(v) for v in np.cumsum(np.array(list(level_sizes), dtype=np.int64))]


def _r2(y: np.ndarray, yhat: np.ndarray) -> float:
    ss_res = float(np.sum((y - yhat) ** 2))
    ss_tot = float(np.sum((y - np.mean(y)) ** 2))
    return 1.0 - ss_res / max(1e-12, ss_tot)


def _fit(x: np.ndarray, y: np.ndarray) -> Tuple[float, float]:
    if len(x) < 3:
        return float("nan"), float("-inf")
    slope, b = np.polyfit(x, y, 1)
    return float(slope), _r2(y, slope * x + b)


def characterize_growth(volumes: Sequence[int], rmin: int = 2) -> Tuple[str, float, float, Optional[float]]:
    """Classify ball growth as polynomial vs exponential.

    Returns (model, r2_poly, r2_exp, degree). The last levels of a truncated
    precompute are incomplete, so callers should drop them before fitting.
    """
    r = np.arange(len(volumes), dtype=float)
    V = np.array(list(volumes), dtype=float)
    mask = (r >= float(rmin)) & (V > 0)
    d, r2_poly = _fit(np.log(r[mask]), np.log(V[mask]))
    _a, r2_exp = _fit(r[mask], np.log(V[mask]))
    degree = None if not math.isfinite(d) else float(d)

    if r2_poly > r2_exp + 0.05:
        return "polynomial", r2_poly, r2_exp, degree
    if r2_exp > r2_poly + 0.05:
        return "exponential", r2_poly, r2_exp, None
    return "unclear", r2_poly, r2_exp, degree
