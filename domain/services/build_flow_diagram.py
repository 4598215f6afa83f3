from __future__ import annotations

from domain.models import (
    FlowDiagram,
    GraphEdge,
    GraphNode,
    LayoutOptions,
    LayoutStep,
    ProcessFlow,
    Size,
)
from domain.ports.layout import LayoutEngine

DEFAULT_NODE_SIZE = Size(240.0, 96.0)


class FlowDiagramBuilder:
    def __init__(self, layout_engine: LayoutEngine, node_size: Size | None = None) -> None:
        self._layout_engine = layout_engine
        self._node_size = node_size or DEFAULT_NODE_SIZE

    def build(self, flow: ProcessFlow, options: LayoutOptions | None = None) -> FlowDiagram:
        nodes = [GraphNode(id=step.id, size=self._node_size) for step in flow.steps]
        edges = [GraphEdge(source=link.source_id, target=link.target_id) for link in flow.links]
        placements = self._layout_engine.layout(nodes, edges, options)

        steps_by_id = {step.id: step for step in flow.steps}
        layout_steps = [
            LayoutStep(
                **steps_by_id[placement.node_id].model_dump(exclude={"stats"}),
                stats=steps_by_id[placement.node_id].stats,
                width=placement.size.width,
                height=placement.size.height,
                position=placement.position,
                incoming_anchor_side=placement.incoming_anchor_side,
                outgoing_anchor_side=placement.outgoing_anchor_side,
            )
            for placement in placements
        ]
        return FlowDiagram(nodes=layout_steps, links=list(flow.links))
