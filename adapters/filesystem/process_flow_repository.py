from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from domain.models import FlowDiagram, ProcessFlow
from domain.ports.repositories import ProcessFlowRepository


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload))
    tmp_path.replace(path)


class FileSystemProcessFlowRepository(ProcessFlowRepository):
    def load(self, path: Path) -> ProcessFlow:
        content = orjson.loads(path.read_bytes())
        if isinstance(content, dict) and isinstance(content.get("data"), dict):
            # Accept the {code, message, data} response envelope as well.
            content = content["data"]
        return ProcessFlow.model_validate(content)

    def save_flow(self, flow: ProcessFlow, path: Path) -> None:
        write_json_atomic(path, flow.to_dict())

    def save_diagram(self, diagram: FlowDiagram, path: Path) -> None:
        write_json_atomic(path, diagram.to_dict())
