from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.process_flow_repository import (
    FileSystemProcessFlowRepository,
    dump_json_bytes,
    write_json_atomic,
)
from adapters.layout.layered import LayeredLayoutEngine
from app.config import AppSettings, load_settings, normalize_log_level
from domain.errors import ProcessFlowError
from domain.models import FlowDiagram, GeneratorConfig, LayoutDirection, ProcessFlow
from domain.services.build_flow_diagram import FlowDiagramBuilder
from domain.services.flow_node_data import to_flow_node_data
from domain.services.generate_process_flow import generate_process_flow

app = typer.Typer(no_args_is_help=True)
console = Console()

SEED_OPTION = typer.Option(..., "--seed", help="Seed string; the same seed always yields the same flow.")
MAX_NODES_OPTION = typer.Option(
    None, "--max-nodes", help="Upper bound for the step count, clamped to 3..10."
)
OUTPUT_OPTION = typer.Option(None, "--output", help="Write JSON to this file instead of stdout.")
DIRECTION_OPTION = typer.Option(
    None, "--direction", case_sensitive=False, help="Layout direction (TB or LR)."
)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level override."),
) -> None:
    try:
        settings = load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc
    except ValidationError as exc:
        console.print(f"[red]Invalid settings:[/] {exc}")
        raise typer.Exit(code=1) from exc
    try:
        level = normalize_log_level(log_level) if log_level else settings.log_level
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc
    configure_logging(level)
    ctx.obj = settings


def _generate(settings: AppSettings, seed: str, max_nodes: Optional[str]) -> ProcessFlow:
    config = GeneratorConfig(
        seed=seed,
        max_nodes=settings.generator.max_nodes if max_nodes is None else max_nodes,
    )
    try:
        return generate_process_flow(config)
    except ProcessFlowError as exc:
        console.print(f"[red]{exc.message}[/] (code {exc.code})")
        raise typer.Exit(code=1) from exc


def _build_diagram(
    settings: AppSettings, flow: ProcessFlow, direction: Optional[LayoutDirection]
) -> FlowDiagram:
    options = settings.layout.to_layout_options()
    if direction is not None:
        options = replace(options, direction=direction)
    builder = FlowDiagramBuilder(LayeredLayoutEngine(options), settings.layout.node_size())
    try:
        return builder.build(flow)
    except ProcessFlowError as exc:
        console.print(f"[red]Layout failed:[/] {exc.message} (code {exc.code})")
        raise typer.Exit(code=1) from exc


def _emit(payload: dict, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(dump_json_bytes(payload).decode("utf-8"))
        return
    write_json_atomic(output, payload)
    console.print(f"[green]Wrote[/] {output}")


@app.command("generate")
def generate(
    ctx: typer.Context,
    seed: str = SEED_OPTION,
    max_nodes: Optional[str] = MAX_NODES_OPTION,
    output: Optional[Path] = OUTPUT_OPTION,
) -> None:
    flow = _generate(ctx.obj, seed, max_nodes)
    _emit(flow.to_dict(), output)


@app.command("diagram")
def diagram(
    ctx: typer.Context,
    seed: str = SEED_OPTION,
    max_nodes: Optional[str] = MAX_NODES_OPTION,
    direction: Optional[LayoutDirection] = DIRECTION_OPTION,
    output: Optional[Path] = OUTPUT_OPTION,
) -> None:
    flow = _generate(ctx.obj, seed, max_nodes)
    _emit(_build_diagram(ctx.obj, flow, direction).to_dict(), output)


@app.command("layout")
def layout(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Process flow JSON file (steps and links)."),
    direction: Optional[LayoutDirection] = DIRECTION_OPTION,
    output: Optional[Path] = OUTPUT_OPTION,
) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        flow = FileSystemProcessFlowRepository().load(input_path)
    except (ValueError, ValidationError) as exc:
        console.print(f"[red]Invalid process flow:[/] {exc}")
        raise typer.Exit(code=1) from exc
    _emit(_build_diagram(ctx.obj, flow, direction).to_dict(), output)


@app.command("cards")
def cards(
    ctx: typer.Context,
    seed: str = SEED_OPTION,
    max_nodes: Optional[str] = MAX_NODES_OPTION,
) -> None:
    flow = _generate(ctx.obj, seed, max_nodes)
    table = Table(title=f"Process flow for seed {seed.strip()!r}")
    for column in ("#", "Step", "Duration", "Cases", "Executions", "Min", "Median", "Max"):
        table.add_column(column)
    for step in flow.steps:
        card = to_flow_node_data(step)
        table.add_row(
            str(card.index),
            card.title,
            card.duration,
            str(card.stats.case_count),
            str(card.stats.execution_count),
            card.stats.throughput.min,
            card.stats.throughput.median,
            card.stats.throughput.max,
        )
    console.print(table)


if __name__ == "__main__":
    app()
