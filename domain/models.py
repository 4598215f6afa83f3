from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

MIN_NODES = 3
MAX_NODES_LIMIT = 10
DEFAULT_MAX_NODES = 10


def coerce_seed_text(value: object) -> str:
    """Render a request seed as text the way a JSON client would."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def parse_max_nodes(value: object) -> int:
    """Parse a loosely typed node-count bound, falling back to the default.

    Non-numeric and non-finite input yields ``DEFAULT_MAX_NODES``; numbers are
    clamped into ``[MIN_NODES, MAX_NODES_LIMIT]`` and floored.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_MAX_NODES
    if isinstance(value, int):
        return min(max(value, MIN_NODES), MAX_NODES_LIMIT)
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return DEFAULT_MAX_NODES
    else:
        return DEFAULT_MAX_NODES
    if not math.isfinite(number):
        return DEFAULT_MAX_NODES
    return math.floor(min(max(number, MIN_NODES), MAX_NODES_LIMIT))


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class GeneratorConfig(_WireModel):
    seed: str = ""
    max_nodes: int = DEFAULT_MAX_NODES

    @field_validator("seed", mode="before")
    @classmethod
    def coerce_seed(cls, value: object) -> str:
        return coerce_seed_text(value)

    @field_validator("max_nodes", mode="before")
    @classmethod
    def clamp_max_nodes(cls, value: object) -> int:
        return parse_max_nodes(value)


class ThroughputMinutes(_WireModel):
    min: float
    median: float
    max: float

    @model_validator(mode="after")
    def ensure_ordered(self) -> ThroughputMinutes:
        if not self.min <= self.median <= self.max:
            msg = f"Throughput must satisfy min <= median <= max, got {self.min}/{self.median}/{self.max}"
            raise ValueError(msg)
        return self


class StepStats(_WireModel):
    case_count: int = Field(..., ge=0)
    execution_count: int = Field(..., ge=0)
    throughput: ThroughputMinutes = Field(..., alias="throughputMinutes")


class Step(_WireModel):
    id: str = Field(..., min_length=1)
    name: str
    order: int = Field(..., ge=1)
    duration_minutes: int
    stats: StepStats


class Link(_WireModel):
    id: str = Field(..., min_length=1)
    source_id: str
    target_id: str


class ProcessFlow(_WireModel):
    steps: List[Step] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)

    @field_validator("steps", mode="after")
    @classmethod
    def ensure_unique_ordered_steps(cls, steps: List[Step]) -> List[Step]:
        seen: Set[str] = set()
        for position, step in enumerate(steps, start=1):
            if step.id in seen:
                msg = f"Duplicate step id found: {step.id}"
                raise ValueError(msg)
            seen.add(step.id)
            if step.order != position:
                msg = f"Step {step.id} has order {step.order}, expected {position}"
                raise ValueError(msg)
        return steps

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class LayoutDirection(str, Enum):
    TOP_TO_BOTTOM = "TB"
    LEFT_TO_RIGHT = "LR"


class AnchorSide(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class GraphNode:
    id: str
    size: Size


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str


@dataclass(frozen=True)
class LayoutOptions:
    direction: LayoutDirection = LayoutDirection.TOP_TO_BOTTOM
    node_separation: float = 32.0
    rank_separation: float = 56.0

    def __post_init__(self) -> None:
        if self.node_separation < 0 or self.rank_separation < 0:
            msg = (
                "Layout separations must be non-negative, got "
                f"node_separation={self.node_separation}, rank_separation={self.rank_separation}"
            )
            raise ValueError(msg)


@dataclass(frozen=True)
class NodePlacement:
    node_id: str
    rank: int
    order: int
    position: Point
    size: Size
    incoming_anchor_side: AnchorSide
    outgoing_anchor_side: AnchorSide


class LayoutStep(Step):
    width: float
    height: float
    position: Point
    incoming_anchor_side: AnchorSide
    outgoing_anchor_side: AnchorSide


class FlowDiagram(_WireModel):
    nodes: List[LayoutStep] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FlowNodeThroughput(_WireModel):
    median: str
    max: str
    min: str


class FlowNodeStats(_WireModel):
    case_count: int
    execution_count: int
    throughput: FlowNodeThroughput


class FlowNodeData(_WireModel):
    title: str
    duration: str
    index: int
    stats: FlowNodeStats
