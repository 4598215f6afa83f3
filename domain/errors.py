from __future__ import annotations

SEED_REQUIRED_CODE = 4001
CYCLIC_GRAPH_CODE = 4101
DANGLING_EDGE_CODE = 4102


class ProcessFlowError(Exception):
    code: int = 4000

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidSeedError(ProcessFlowError):
    code = SEED_REQUIRED_CODE

    def __init__(self, message: str = "seed is required") -> None:
        super().__init__(message)


class CyclicGraphError(ProcessFlowError):
    code = CYCLIC_GRAPH_CODE

    def __init__(self, node_ids: list[str]) -> None:
        self.node_ids = list(node_ids)
        super().__init__(f"Graph contains a cycle through nodes: {', '.join(self.node_ids)}")


class DanglingEdgeError(ProcessFlowError):
    code = DANGLING_EDGE_CODE

    def __init__(self, source: str, target: str, missing_id: str) -> None:
        self.source = source
        self.target = target
        self.missing_id = missing_id
        super().__init__(f"Edge {source} -> {target} references unknown node: {missing_id}")
