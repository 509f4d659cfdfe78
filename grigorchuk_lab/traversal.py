from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Deque, Dict, List, Optional, Set, Tuple

import numpy as np

from .poses import BACK, ORIGIN, direction_angle, poincare_radius, spin, step_delta, tile_edge_length, xpush

if TYPE_CHECKING:
    from .graph_map import TilingMap


class RenderHost:
    """Rendering collaborators supplied by the host."""

    def should_draw(self, node: int, pose: np.ndarray) -> bool:  # pragma: no cover
        raise NotImplementedError

    def draw_cell(self, node: int, pose: np.ndarray) -> None:  # pragma: no cover
        raise NotImplementedError

    def draw_line(self, node: int, start: np.ndarray, end: np.ndarray) -> None:
        return None

    def draw_label(self, node: int, pose: np.ndarray, text: str) -> None:
        return None


@dataclass
class RecordingHost(RenderHost):
    """Host that records every call; draws everything within a Poincaré-disk radius."""

    radius: float = 0.95
    cells: List[Tuple[int, np.ndarray]] = field(default_factory=list)
    lines: List[Tuple[int, np.ndarray, np.ndarray]] = field(default_factory=list)
    labels: Dict[int, str] = field(default_factory=dict)

    def should_draw(self, node: int, pose: np.ndarray) -> bool:
        return poincare_radius(pose) <= self.radius

    def draw_cell(self, node: int, pose: np.ndarray) -> None:
        self.cells.append((node, pose))

    def draw_line(self, node: int, start: np.ndarray, end: np.ndarray) -> None:
        self.lines.append((node, start, end))

    def draw_label(self, node: int, pose: np.ndarray, text: str) -> None:
        self.labels[node] = text


@dataclass
class TraversalResult:
    poses: Dict[int, np.ndarray]   # node -> pose, for drawn nodes only
    order: List[int]               # drawn nodes in FIFO order
    depth: Dict[int, int]          # node -> hops from the start node
    pruned: int                    # nodes rejected by the visibility predicate


def split_line(pose: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Endpoints of the line splitting a tile into the halves g and g*a.

    It runs along direction 2 from half an edge ahead to a full edge behind the centre.
    """
    L = tile_edge_length()
    R = pose @ spin(direction_angle(2))
    return R @ xpush(L / 2) @ ORIGIN, R @ xpush(-L) @ ORIGIN


def render_traversal(
    tiling_map: "TilingMap",
    host: RenderHost,
    start: int,
    pose: np.ndarray,
    max_nodes: Optional[int] = None,
    max_distance: Optional[int] = None,
    view_lines: bool = True,
    view_labels: bool = True,
) -> TraversalResult:
    """Breadth-first draw of the lazy graph from `start`.

    Each node is enqueued at most once per walk (the graph has merges). A node the
    host rejects is not expanded. Neighbours are materialised on demand.
    """
    deltas = [step_delta(d, BACK[d]) for d in range(3)]
    queue: Deque[Tuple[int, np.ndarray, int]] = deque([(start, pose, 0)])
    visited: Set[int] = {start}
    poses: Dict[int, np.ndarray] = {}
    depth: Dict[int, int] = {}
    order: List[int] = []
    pruned = 0

    while queue:
        node, V, k = queue.popleft()
        if not host.should_draw(node, V):
            pruned += 1
            continue

        poses[node] = V
        depth[node] = k
        order.append(node)
        if view_lines:
            host.draw_line(node, *split_line(V))
        if view_labels:
            host.draw_label(node, V, tiling_map.label_of(node))
        host.draw_cell(node, V)

        if max_nodes is not None and len(order) >= int(max_nodes):
            break
        if max_distance is not None and k >= int(max_distance):
            continue
        for d in range(3):
            nb = tiling_map.neighbor(node, d)
            if nb in visited:
                continue
            visited.add(nb)
            queue.append((nb, V @ deltas[d], k + 1))

    return TraversalResult(poses=poses, order=order, depth=depth, pruned=pruned)
