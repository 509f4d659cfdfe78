from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import networkx as nx
import numpy as np

from .elements import A, B, C, I, CacheExhaustedError, ElementStore
from .poses import BACK, compose, identity_pose, invert, step_delta
from .precompute import PrecomputeResult, precompute
from .traversal import RenderHost, TraversalResult, render_traversal

# discovery labels of the three edge directions: ac, ca, b
DIRECTION_LABELS = "ACb"


class TilingMap:
    """Map plugin contract consumed by the host."""

    def get_origin(self) -> int:  # pragma: no cover
        raise NotImplementedError

    def create_step(self, node: int, direction: int) -> int:  # pragma: no cover
        raise NotImplementedError

    def neighbor(self, node: int, direction: int) -> int:  # pragma: no cover
        raise NotImplementedError

    def label_of(self, node: int) -> str:
        return ""

    def draw(self, host: RenderHost, pose: Optional[np.ndarray] = None, center: Optional[int] = None) -> TraversalResult:  # pragma: no cover
        raise NotImplementedError

    def relative_transform(self, node_a: int, node_b: int) -> np.ndarray:  # pragma: no cover
        raise NotImplementedError


@dataclass
class GrigorchukConfig:
    # elements expanded by the startup precompute (canvas distances come from it)
    precompute_limit: int = 10000

    # display toggles
    view_lines: bool = True
    view_labels: bool = True

    # cache bounds; None means unbounded
    max_nodes: Optional[int] = None
    max_elements: Optional[int] = None
    mul_cache_limit: int = 200_000

    # per-draw traversal bounds
    traversal_max_nodes: Optional[int] = 500
    traversal_max_distance: Optional[int] = None

    progress_every: int = 0


@dataclass
class GraphNode:
    index: int
    element: int
    distance: int
    moves: List[Optional[int]] = field(default_factory=lambda: [None, None, None])
    spins: List[Optional[int]] = field(default_factory=lambda: [None, None, None])


class GrigorchukMap(TilingMap):
    """Lazy tiling whose tiles are the elements of the index-2 subgroup <b, ac, ca>.

    The neighbours of the tile g are g*ac (direction 0), g*ca (direction 1) and
    g*b (direction 2). Nodes are created on demand, one per canonical element, so
    two paths that multiply out to the same element meet at the same node.
    """

    def __init__(self, config: Optional[GrigorchukConfig] = None, store: Optional[ElementStore] = None):
        self.config = config if config is not None else GrigorchukConfig()
        cfg = self.config
        self.store = store if store is not None else ElementStore(
            max_elements=cfg.max_elements,
            mul_cache_limit=cfg.mul_cache_limit,
        )
        self.ac = self.store.mul(A, C)
        self.ca = self.store.mul(C, A)
        self.precomputed: PrecomputeResult = precompute(
            self.store, int(cfg.precompute_limit), self.ac, self.ca, progress_every=int(cfg.progress_every),
        )

        self.nodes: List[GraphNode] = []
        self._node_of: Dict[int, int] = {}
        self.graph = nx.Graph()
        self._last_poses: Dict[int, np.ndarray] = {}

        self.store.discover(I, None, 0)
        self.origin = self._new_node(I, 0)

    def __len__(self) -> int:
        return len(self.nodes)

    def get_origin(self) -> int:
        return self.origin

    def element_of(self, node: int) -> int:
        return self.nodes[node].element

    def node_of(self, element: int) -> Optional[int]:
        return self._node_of.get(element)

    def _new_node(self, element: int, distance: int) -> int:
        if self.config.max_nodes is not None and len(self.nodes) >= self.config.max_nodes:
            raise CacheExhaustedError(f"Tiling map reached max_nodes={self.config.max_nodes}")
        idx = len(self.nodes)
        self.nodes.append(GraphNode(index=idx, element=element, distance=int(distance)))
        self._node_of[element] = idx
        self.graph.add_node(idx, element=element, distance=int(distance))
        return idx

    def step_element(self, element: int, direction: int) -> int:
        mul = self.store.mul
        if direction == 0:
            return mul(mul(element, A), C)
        if direction == 1:
            return mul(mul(element, C), A)
        if direction == 2:
            return mul(element, B)
        raise ValueError(f"direction must be 0, 1 or 2, got {direction}")

    def _connect(self, a: int, da: int, b: int, db: int) -> None:
        na, nb = self.nodes[a], self.nodes[b]
        assert na.moves[da] in (None, b) and nb.moves[db] in (None, a), (
            f"adjacency clash: {a}[{da}]={na.moves[da]} vs {b}[{db}]={nb.moves[db]}"
        )
        na.moves[da], na.spins[da] = b, db
        nb.moves[db], nb.spins[db] = a, da
        self.graph.add_edge(a, b)

    def create_step(self, node: int, direction: int) -> int:
        """Materialise the neighbour of `node` in `direction`, reusing an existing node if any."""
        target = self.step_element(self.nodes[node].element, direction)
        p = self.nodes[node]
        h = self._node_of.get(target)
        if h is None:
            self.store.discover(target, DIRECTION_LABELS[direction], self.store[p.element].distance + 1)
            h = self._new_node(target, p.distance + 1)
        self._connect(h, BACK[direction], node, direction)
        return h

    def neighbor(self, node: int, direction: int) -> int:
        existing = self.nodes[node].moves[direction]
        if existing is not None:
            return existing
        return self.create_step(node, direction)

    def label_of(self, node: int) -> str:
        return self.store.deform(self.nodes[node].element)

    def structural_distance(self, node: int) -> int:
        return self.store[self.nodes[node].element].distance

    def canvas_color(self, node: int) -> int:
        """Canvas colour by distance from the neutral element (0 if never discovered)."""
        return (0x102008 * (1 + self.structural_distance(node))) & 0xFFFFFF

    def draw(
        self,
        host: RenderHost,
        pose: Optional[np.ndarray] = None,
        center: Optional[int] = None,
    ) -> TraversalResult:
        cfg = self.config
        result = render_traversal(
            self,
            host,
            self.origin if center is None else int(center),
            identity_pose() if pose is None else pose,
            max_nodes=cfg.traversal_max_nodes,
            max_distance=cfg.traversal_max_distance,
            view_lines=cfg.view_lines,
            view_labels=cfg.view_labels,
        )
        self._last_poses = result.poses
        return result

    def relative_transform(self, node_a: int, node_b: int) -> np.ndarray:
        """Pose of node_a in the frame of node_b.

        Uses the poses of the last draw when both nodes were drawn; otherwise walks a
        shortest path in the materialised graph. Unconnected nodes give the identity.
        """
        poses = self._last_poses
        if node_a in poses and node_b in poses:
            return compose(invert(poses[node_b]), poses[node_a])
        try:
            path = nx.shortest_path(self.graph, node_b, node_a)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return identity_pose()
        T = identity_pose()
        for u, v in zip(path[:-1], path[1:]):
            d = self.nodes[u].moves.index(v)
            T = compose(T, step_delta(d, self.nodes[u].spins[d]))
        return T
