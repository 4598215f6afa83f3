from __future__ import annotations

from pathlib import Path
from typing import Protocol

from domain.models import FlowDiagram, ProcessFlow


class ProcessFlowRepository(Protocol):
    def load(self, path: Path) -> ProcessFlow: ...

    def save_flow(self, flow: ProcessFlow, path: Path) -> None: ...

    def save_diagram(self, diagram: FlowDiagram, path: Path) -> None: ...
