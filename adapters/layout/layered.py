"""Layered (Sugiyama-style) layout for directed acyclic graphs.

The engine runs three phases, each exposed as a module-level function:

1. ``assign_ranks``: longest-path layering over a topological order.
2. ``order_ranks``: barycenter sweeps that reduce crossings between adjacent ranks.
3. ``assign_coordinates``: packs ranks along the primary axis and nodes along
   the secondary axis, returning top-left corners.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping, Sequence
from typing import Dict, List, Tuple

from domain.errors import CyclicGraphError, DanglingEdgeError
from domain.models import (
    AnchorSide,
    GraphEdge,
    GraphNode,
    LayoutDirection,
    LayoutOptions,
    NodePlacement,
    Point,
    Size,
)
from domain.ports.layout import LayoutEngine

logger = logging.getLogger(__name__)

DEFAULT_SWEEPS = 4


def assign_ranks(node_ids: Sequence[str], edges: Sequence[GraphEdge]) -> Dict[str, int]:
    indegree: Dict[str, int] = {node_id: 0 for node_id in node_ids}
    successors: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    for edge in edges:
        successors[edge.source].append(edge.target)
        indegree[edge.target] += 1

    ranks: Dict[str, int] = {node_id: 0 for node_id in node_ids}
    queue = deque(node_id for node_id in node_ids if indegree[node_id] == 0)
    processed = 0
    while queue:
        node_id = queue.popleft()
        processed += 1
        for target in successors[node_id]:
            ranks[target] = max(ranks[target], ranks[node_id] + 1)
            indegree[target] -= 1
            if indegree[target] == 0:
                queue.append(target)

    if processed < len(node_ids):
        raise CyclicGraphError([node_id for node_id in node_ids if indegree[node_id] > 0])
    return ranks


def _layer_positions(layers: Sequence[Sequence[str]]) -> Tuple[Dict[str, int], Dict[str, int]]:
    rank_of: Dict[str, int] = {}
    position_of: Dict[str, int] = {}
    for rank, layer in enumerate(layers):
        for position, node_id in enumerate(layer):
            rank_of[node_id] = rank
            position_of[node_id] = position
    return rank_of, position_of


def count_crossings(layers: Sequence[Sequence[str]], edges: Sequence[GraphEdge]) -> int:
    """Count crossings among edges that join adjacent ranks."""
    rank_of, position_of = _layer_positions(layers)
    segments_by_rank: Dict[int, List[Tuple[int, int]]] = {}
    for edge in edges:
        source_rank = rank_of[edge.source]
        if rank_of[edge.target] - source_rank != 1:
            continue
        segments_by_rank.setdefault(source_rank, []).append(
            (position_of[edge.source], position_of[edge.target])
        )

    crossings = 0
    for segments in segments_by_rank.values():
        for idx, (upper_a, lower_a) in enumerate(segments):
            for upper_b, lower_b in segments[idx + 1 :]:
                if (upper_a - upper_b) * (lower_a - lower_b) < 0:
                    crossings += 1
    return crossings


def _reorder_layer(
    layer: Sequence[str],
    fixed_layer: Sequence[str],
    neighbours: Mapping[str, Sequence[str]],
    insertion: Mapping[str, int],
) -> List[str]:
    fixed_positions = {node_id: idx for idx, node_id in enumerate(fixed_layer)}
    current_positions = {node_id: idx for idx, node_id in enumerate(layer)}

    def barycenter_key(node_id: str) -> Tuple[float, int, int]:
        anchors = [fixed_positions[other] for other in neighbours[node_id] if other in fixed_positions]
        current = current_positions[node_id]
        barycenter = sum(anchors) / len(anchors) if anchors else float(current)
        return (barycenter, current, insertion[node_id])

    return sorted(layer, key=barycenter_key)


def order_ranks(
    node_ids: Sequence[str],
    edges: Sequence[GraphEdge],
    ranks: Mapping[str, int],
    sweeps: int = DEFAULT_SWEEPS,
) -> List[List[str]]:
    rank_count = max(ranks.values(), default=-1) + 1
    layers: List[List[str]] = [[] for _ in range(rank_count)]
    for node_id in node_ids:
        layers[ranks[node_id]].append(node_id)

    insertion = {node_id: idx for idx, node_id in enumerate(node_ids)}
    predecessors: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    successors: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    for edge in edges:
        if ranks[edge.target] - ranks[edge.source] == 1:
            predecessors[edge.target].append(edge.source)
            successors[edge.source].append(edge.target)

    best = [list(layer) for layer in layers]
    best_crossings = count_crossings(best, edges)
    current = [list(layer) for layer in layers]
    for sweep in range(sweeps):
        if best_crossings == 0:
            break
        if sweep % 2 == 0:
            for rank in range(1, rank_count):
                current[rank] = _reorder_layer(
                    current[rank], current[rank - 1], predecessors, insertion
                )
        else:
            for rank in range(rank_count - 2, -1, -1):
                current[rank] = _reorder_layer(
                    current[rank], current[rank + 1], successors, insertion
                )
        crossings = count_crossings(current, edges)
        if crossings < best_crossings:
            best = [list(layer) for layer in current]
            best_crossings = crossings

    logger.debug("Ordered %d ranks with %d crossings", rank_count, best_crossings)
    return best


def assign_coordinates(
    layers: Sequence[Sequence[str]],
    sizes: Mapping[str, Size],
    options: LayoutOptions,
) -> Dict[str, Point]:
    vertical = options.direction == LayoutDirection.TOP_TO_BOTTOM

    def primary(size: Size) -> float:
        return size.height if vertical else size.width

    def secondary(size: Size) -> float:
        return size.width if vertical else size.height

    rank_extents = [max((primary(sizes[node_id]) for node_id in layer), default=0.0) for layer in layers]
    rank_spans = [
        sum(secondary(sizes[node_id]) for node_id in layer)
        + options.node_separation * max(len(layer) - 1, 0)
        for layer in layers
    ]
    widest_span = max(rank_spans, default=0.0)

    positions: Dict[str, Point] = {}
    rank_offset = 0.0
    for layer, extent, span in zip(layers, rank_extents, rank_spans):
        rank_centre = rank_offset + extent / 2
        cursor = (widest_span - span) / 2
        for node_id in layer:
            size = sizes[node_id]
            slot_centre = cursor + secondary(size) / 2
            along_rank = rank_centre - primary(size) / 2
            across_rank = slot_centre - secondary(size) / 2
            if vertical:
                positions[node_id] = Point(across_rank, along_rank)
            else:
                positions[node_id] = Point(along_rank, across_rank)
            cursor += secondary(size) + options.node_separation
        rank_offset += extent + options.rank_separation
    return positions


def anchor_sides(direction: LayoutDirection) -> Tuple[AnchorSide, AnchorSide]:
    """Return ``(incoming, outgoing)`` sides for the given flow direction."""
    if direction == LayoutDirection.LEFT_TO_RIGHT:
        return AnchorSide.LEFT, AnchorSide.RIGHT
    return AnchorSide.TOP, AnchorSide.BOTTOM


class LayeredLayoutEngine(LayoutEngine):
    def __init__(self, options: LayoutOptions | None = None, sweeps: int = DEFAULT_SWEEPS) -> None:
        self.options = options or LayoutOptions()
        self.sweeps = sweeps

    def layout(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        options: LayoutOptions | None = None,
    ) -> list[NodePlacement]:
        options = options or self.options
        sizes = self._index_sizes(nodes)
        self._ensure_edges_resolve(edges, sizes)

        node_ids = list(sizes)
        ranks = assign_ranks(node_ids, edges)
        layers = order_ranks(node_ids, edges, ranks, self.sweeps)
        positions = assign_coordinates(layers, sizes, options)
        incoming, outgoing = anchor_sides(options.direction)
        _, order_of = _layer_positions(layers)

        logger.debug(
            "Laid out %d nodes and %d edges across %d ranks (%s)",
            len(node_ids),
            len(edges),
            len(layers),
            options.direction.value,
        )
        return [
            NodePlacement(
                node_id=node.id,
                rank=ranks[node.id],
                order=order_of[node.id],
                position=positions[node.id],
                size=node.size,
                incoming_anchor_side=incoming,
                outgoing_anchor_side=outgoing,
            )
            for node in nodes
        ]

    def _index_sizes(self, nodes: Sequence[GraphNode]) -> Dict[str, Size]:
        sizes: Dict[str, Size] = {}
        for node in nodes:
            if node.id in sizes:
                msg = f"Duplicate node id found: {node.id}"
                raise ValueError(msg)
            sizes[node.id] = node.size
        return sizes

    def _ensure_edges_resolve(self, edges: Sequence[GraphEdge], sizes: Mapping[str, Size]) -> None:
        for edge in edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in sizes:
                    raise DanglingEdgeError(edge.source, edge.target, endpoint)
