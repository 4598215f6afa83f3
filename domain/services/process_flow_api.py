from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel

from domain.errors import InvalidSeedError
from domain.models import DEFAULT_MAX_NODES, GeneratorConfig, ProcessFlow
from domain.services.generate_process_flow import generate_process_flow

logger = logging.getLogger(__name__)

SUCCESS_CODE = 0
SUCCESS_MESSAGE = "ok"


class ProcessFlowResponse(BaseModel):
    code: int
    message: str
    data: Optional[ProcessFlow] = None

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def handle_process_flow_request(payload: Mapping[str, Any] | None) -> ProcessFlowResponse:
    """Answer a ``{seed, maxNodes?}`` request with a ``{code, message, data}`` envelope."""
    body = payload or {}
    config = GeneratorConfig(
        seed=body.get("seed"),
        max_nodes=body.get("maxNodes", body.get("max_nodes", DEFAULT_MAX_NODES)),
    )
    try:
        flow = generate_process_flow(config)
    except InvalidSeedError as exc:
        logger.info("Rejected process flow request: %s", exc.message)
        return ProcessFlowResponse(code=exc.code, message=exc.message, data=None)
    return ProcessFlowResponse(code=SUCCESS_CODE, message=SUCCESS_MESSAGE, data=flow)
