from __future__ import annotations

from domain.models import FlowNodeData, FlowNodeStats, FlowNodeThroughput, Step

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR


def format_minutes(minutes: float) -> str:
    """Render a minute count as ``"2d 3h 5m"``, dropping empty units."""
    total = round(float(minutes), 1)
    days = int(total // MINUTES_PER_DAY)
    hours = int((total - days * MINUTES_PER_DAY) // MINUTES_PER_HOUR)
    rest = round(total - days * MINUTES_PER_DAY - hours * MINUTES_PER_HOUR, 1)

    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if rest or not parts:
        parts.append(f"{int(rest)}m" if rest == int(rest) else f"{rest}m")
    return " ".join(parts)


def to_flow_node_data(step: Step) -> FlowNodeData:
    throughput = step.stats.throughput
    return FlowNodeData(
        title=step.name,
        duration=format_minutes(step.duration_minutes),
        index=step.order,
        stats=FlowNodeStats(
            case_count=step.stats.case_count,
            execution_count=step.stats.execution_count,
            throughput=FlowNodeThroughput(
                median=format_minutes(throughput.median),
                max=format_minutes(throughput.max),
                min=format_minutes(throughput.min),
            ),
        ),
    )
