from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import GraphEdge, GraphNode, LayoutOptions, NodePlacement


class LayoutEngine(Protocol):
    def layout(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        options: LayoutOptions | None = None,
    ) -> list[NodePlacement]:
        ...
