from __future__ import annotations

"""Growth of balls in the Grigorchuk tiling.

The Grigorchuk group was the first known group of intermediate growth
(superpolynomial and subexponential). This script runs the breadth-first
precompute, prints level sizes, fits power-law vs exponential models to the ball
volumes, and optionally counts distinct elements per reduced word length using
only the word problem.

Outputs (in --out_dir):
- growth_levels.csv
- growth_summary.json
- growth_loglog.png
"""

import argparse
import json
import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..elements import A, C, ElementStore
from ..precompute import characterize_growth, growth_profile, precompute
from ..word_problem import distinct_words


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Ball growth of the Grigorchuk tiling.")
    p.add_argument("--limit", type=int, default=100000, help="Elements expanded by the precompute.")
    p.add_argument("--progress_every", type=int, default=0, help="Print a progress line every k levels (0 = off).")
    p.add_argument("--drop_last", type=int, default=1, help="Incomplete trailing levels excluded from the fit.")
    p.add_argument("--distinct_up_to", type=int, default=0, help="Count distinct elements per word length up to k.")
    p.add_argument("--out_dir", type=str, default="results")
    return p


def main() -> None:
    args = build_argparser().parse_args()
    if args.limit < 1:
        raise SystemExit("--limit must be >= 1")

    store = ElementStore()
    ac = store.mul(A, C)
    ca = store.mul(C, A)
    res = precompute(store, int(args.limit), ac, ca, progress_every=int(args.progress_every))
    vols = growth_profile(res.level_sizes)

    print("=== Grigorchuk ball growth ===")
    for r, (n, v) in enumerate(zip(res.level_sizes, vols)):
        print(f"r={r:3d}  sphere={n:7d}  ball={v:8d}")

    keep = max(0, len(vols) - int(args.drop_last))
    model, r2_poly, r2_exp, degree = characterize_growth(vols[:keep])
    print(f"Growth model: {model}  (r2_poly={r2_poly:.4f}, r2_exp={r2_exp:.4f}, degree={degree})")

    os.makedirs(args.out_dir, exist_ok=True)
    df = pd.DataFrame({
        "r": np.arange(len(vols)),
        "sphere": res.level_sizes,
        "ball": vols,
    })
    df.to_csv(os.path.join(args.out_dir, "growth_levels.csv"), index=False)

    distinct = {}
    for n in range(1, int(args.distinct_up_to) + 1):
        distinct[n] = len(distinct_words(n))
        print(f"Distinct elements with reduced word length {n}: {distinct[n]}")

    if keep >= 3:
        r = np.arange(1, keep)
        plt.figure(figsize=(7, 5))
        plt.loglog(r, np.array(vols[1:keep], dtype=float), marker="o", ms=3)
        plt.xlabel("radius r")
        plt.ylabel("ball volume V(r)")
        plt.title(f"Grigorchuk ball growth ({model})")
        plt.tight_layout()
        plt.savefig(os.path.join(args.out_dir, "growth_loglog.png"), dpi=200)
        plt.close()

    summary = {
        "limit": int(args.limit),
        "processed": int(res.processed),
        "discovered": len(res.order),
        "interned_elements": len(store),
        "levels": len(res.level_sizes),
        "growth_model": model,
        "r2_poly": float(r2_poly),
        "r2_exp": float(r2_exp),
        "degree": degree,
        "distinct_words": distinct,
    }
    with open(os.path.join(args.out_dir, "growth_summary.json"), "w") as f:
        json.dump(summary, f, indent=2)
    print(summary)


if __name__ == "__main__":
    main()
