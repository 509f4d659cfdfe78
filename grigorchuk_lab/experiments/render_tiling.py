from __future__ import annotations

"""Draw the Grigorchuk tiling in the Poincaré disk.

Tiles are the elements of the subgroup <b, ac, ca>; the neighbours of g are gb,
gac and gca. The magenta line splits each tile into the halves g and ga. With
--canvas, tiles are coloured by their distance from the neutral element.

Example:
    python -m grigorchuk_lab.experiments.render_tiling --limit 100000 --canvas --out_dir results
"""

import argparse
import json
import os

import matplotlib.pyplot as plt
import numpy as np

from ..graph_map import GrigorchukConfig, GrigorchukMap
from ..poses import poincare_project
from ..traversal import RecordingHost


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Render the lazy Grigorchuk tiling to a PNG.")
    p.add_argument("--limit", type=int, default=10000, help="Elements expanded by the startup precompute.")
    p.add_argument("--radius", type=float, default=0.97, help="Poincaré-disk radius beyond which tiles are culled.")
    p.add_argument("--max_nodes", type=int, default=2000, help="Upper bound on drawn tiles.")
    p.add_argument("--nolines", action="store_true", help="Do not draw the splitting lines.")
    p.add_argument("--nolabels", action="store_true", help="Do not draw the labels.")
    p.add_argument("--canvas", action="store_true", help="Colour tiles by distance from the neutral element.")
    p.add_argument("--out_dir", type=str, default="results")
    p.add_argument("--out_png", type=str, default="grigorchuk_tiling.png")
    return p


def _rgb(color: int) -> tuple:
    return ((color >> 16) & 0xFF) / 255.0, ((color >> 8) & 0xFF) / 255.0, (color & 0xFF) / 255.0


def main() -> None:
    args = build_argparser().parse_args()
    if not (0.0 < args.radius < 1.0):
        raise SystemExit("--radius must be in (0, 1)")

    cfg = GrigorchukConfig(
        precompute_limit=int(args.limit),
        view_lines=not args.nolines,
        view_labels=not args.nolabels,
        traversal_max_nodes=int(args.max_nodes),
    )
    gmap = GrigorchukMap(cfg)
    print(f"Precompute: expanded={gmap.precomputed.processed} discovered={len(gmap.precomputed.order)}")

    host = RecordingHost(radius=float(args.radius))
    result = gmap.draw(host)
    print(f"Drawn tiles: {len(result.order)}  pruned={result.pruned}  materialised={len(gmap)}")

    centers = {n: poincare_project(P) for n, P in result.poses.items()}

    fig, ax = plt.subplots(figsize=(9, 9))
    ax.add_patch(plt.Circle((0.0, 0.0), 1.0, fill=False, color="0.6", lw=0.8))

    for u, v in gmap.graph.edges():
        if u in centers and v in centers:
            (x0, y0), (x1, y1) = centers[u], centers[v]
            ax.plot([x0, x1], [y0, y1], color="0.75", lw=0.4, zorder=1)

    for start, end in ((s, e) for _n, s, e in host.lines):
        p0 = start[:2] / (1.0 + start[2])
        p1 = end[:2] / (1.0 + end[2])
        ax.plot([p0[0], p1[0]], [p0[1], p1[1]], color="#FF00FF", lw=0.7, zorder=2)

    nodes = list(result.order)
    xy = np.array([centers[n] for n in nodes])
    if args.canvas:
        colors = [_rgb(gmap.canvas_color(n)) for n in nodes]
    else:
        colors = ["#202020"] * len(nodes)
    ax.scatter(xy[:, 0], xy[:, 1], c=colors, s=10, zorder=3)

    for n, text in host.labels.items():
        x, y = centers[n]
        size = max(2.0, 9.0 * (1.0 - (x * x + y * y)))
        ax.text(x, y, text or "I", fontsize=size, ha="center", va="bottom", zorder=4)

    ax.set_xlim(-1.02, 1.02)
    ax.set_ylim(-1.02, 1.02)
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title("Grigorchuk group: tiles of <b, ac, ca>")

    os.makedirs(args.out_dir, exist_ok=True)
    out_png = os.path.join(args.out_dir, args.out_png)
    fig.tight_layout()
    fig.savefig(out_png, dpi=200)
    plt.close(fig)

    summary = {
        "precompute_limit": int(args.limit),
        "drawn": len(result.order),
        "pruned": int(result.pruned),
        "materialised_nodes": len(gmap),
        "interned_elements": len(gmap.store),
        "max_depth": max(result.depth.values()) if result.depth else 0,
        "png": out_png,
    }
    with open(os.path.join(args.out_dir, "grigorchuk_tiling_summary.json"), "w") as f:
        json.dump(summary, f, indent=2)
    print(summary)


if __name__ == "__main__":
    main()
