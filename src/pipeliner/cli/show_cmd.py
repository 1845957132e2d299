"""pipeliner show and gc commands."""

from __future__ import annotations

import pathlib

import rich.table
import typer
from typing_extensions import Annotated

from pipeliner import markers
from pipeliner.cli import comms, params
from pipeliner.cli.app import app
from pipeliner.data.components import ProcessStatus

__all__ = ["collect_garbage", "show"]

STATUS_STYLES = {
    ProcessStatus.RUNNING: "yellow",
    ProcessStatus.SCHEDULED: "blue",
    ProcessStatus.FINISHED: "green",
    ProcessStatus.CANCELLED: "red",
}


@app.command()
def show(
    path: Annotated[
        pathlib.Path,
        typer.Argument(file_okay=False, dir_okay=True, parser=params.path_is_project),
    ],
) -> None:
    """List the jobs and nodes of the pipeline."""
    this = params.load_project(path)
    ucomm = comms.Communicator()
    pipeline = params.load_pipeline(this, ucomm)

    jobs = rich.table.Table(title=f"jobs in '{pipeline.name}'")
    for column in ("#", "name", "type", "status", "inputs", "outputs"):
        jobs.add_column(column)
    for pos, process in enumerate(pipeline.processes):
        jobs.add_row(
            str(pos),
            process.name,
            process.type.value,
            f"[{STATUS_STYLES[process.status]}]{process.status.value}[/]",
            "\n".join(pipeline.nodes[n].name for n in process.inputs),
            "\n".join(pipeline.nodes[n].name for n in process.outputs),
        )
    ucomm.console.print(jobs)

    nodes = rich.table.Table(title="nodes")
    for column in ("#", "name", "type", "produced by", "used by"):
        nodes.add_column(column)
    for pos, node in enumerate(pipeline.nodes):
        nodes.add_row(
            str(pos),
            node.name,
            node.type.value,
            "-"
            if node.produced_by is None
            else pipeline.processes[node.produced_by].name,
            "\n".join(pipeline.processes[p].name for p in node.consumed_by),
        )
    ucomm.console.print(nodes)


@app.command("gc")
def collect_garbage(
    path: Annotated[
        pathlib.Path,
        typer.Argument(file_okay=False, dir_okay=True, parser=params.path_is_project),
    ],
) -> None:
    """
    Drop orphaned nodes from the stored pipeline.

    A node is orphaned when no job produces or uses it and its file is gone.
    """
    this = params.load_project(path)
    ucomm = comms.Communicator()
    pipeline = params.load_pipeline(this, ucomm)

    orphans = [
        pos
        for pos, node in enumerate(pipeline.nodes)
        if node.produced_by is None
        and not node.consumed_by
        and not markers.node_path(node, this.path).exists()
    ]
    this.save_pipeline(pipeline, exclude_nodes=orphans)
    markers.remove_stale_markers(this.load_pipeline(), this.marker_dir)
    ucomm.report_success(f"dropped {len(orphans)} orphaned node(s)")
