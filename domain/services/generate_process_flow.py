from __future__ import annotations

import logging
from typing import List

from domain.errors import InvalidSeedError
from domain.models import (
    MIN_NODES,
    GeneratorConfig,
    Link,
    ProcessFlow,
    Step,
    StepStats,
    ThroughputMinutes,
)
from domain.services.seeded_random import SeededRandom

logger = logging.getLogger(__name__)

TITLE_POOL: tuple[str, ...] = (
    "Application",
    "Review",
    "Approval",
    "Risk Check",
    "Investigation App",
    "Archive",
    "Verification",
    "Assessment",
    "Payment",
    "Closure",
)

CASE_COUNT_RANGE = (120, 1200)
MIN_MINUTES_RANGE = (5.0, 120.0)
MEDIAN_OFFSET_RANGE = (30.0, 360.0)
MAX_OFFSET_RANGE = (180.0, 1440.0)
DURATION_MINUTES_RANGE = (30, 6000)


def build_steps(rng: SeededRandom, max_nodes: int) -> List[Step]:
    count = rng.randint(MIN_NODES, max(MIN_NODES, max_nodes))
    steps: List[Step] = []
    # Draw order is part of the output contract: do not reorder.
    for index in range(count):
        case_count = rng.randint(*CASE_COUNT_RANGE)
        min_minutes = rng.uniform(*MIN_MINUTES_RANGE)
        median_minutes = min_minutes + rng.uniform(*MEDIAN_OFFSET_RANGE)
        max_minutes = median_minutes + rng.uniform(*MAX_OFFSET_RANGE)
        name = TITLE_POOL[rng.randint(0, len(TITLE_POOL) - 1)]
        duration_minutes = rng.randint(*DURATION_MINUTES_RANGE)
        steps.append(
            Step(
                id=f"step-{index + 1}",
                name=name,
                order=index + 1,
                duration_minutes=duration_minutes,
                stats=StepStats(
                    case_count=case_count,
                    execution_count=case_count,
                    throughput=ThroughputMinutes(
                        min=min_minutes,
                        median=median_minutes,
                        max=max_minutes,
                    ),
                ),
            )
        )
    return steps


def build_links(steps: List[Step]) -> List[Link]:
    return [
        Link(
            id=f"edge-{source.id}-{target.id}",
            source_id=source.id,
            target_id=target.id,
        )
        for source, target in zip(steps, steps[1:])
    ]


def generate_process_flow(config: GeneratorConfig) -> ProcessFlow:
    seed = config.seed.strip()
    if not seed:
        raise InvalidSeedError()

    rng = SeededRandom.from_string(seed)
    steps = build_steps(rng, config.max_nodes)
    links = build_links(steps)
    logger.debug(
        "Generated process flow: seed=%r max_nodes=%d steps=%d links=%d",
        seed,
        config.max_nodes,
        len(steps),
        len(links),
    )
    return ProcessFlow(steps=steps, links=links)
