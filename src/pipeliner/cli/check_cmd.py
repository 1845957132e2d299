"""pipeliner check and markers commands."""

from __future__ import annotations

import pathlib

import typer
from typing_extensions import Annotated

from pipeliner import completion, markers
from pipeliner.cli import comms, params
from pipeliner.cli.app import app
from pipeliner.data.components import ProcessStatus

__all__ = ["check", "rebuild_markers"]


@app.command()
def check(
    path: Annotated[
        pathlib.Path,
        typer.Argument(file_okay=False, dir_okay=True, parser=params.path_is_project),
    ],
) -> None:
    """Mark running jobs whose output files all exist as finished."""
    this = params.load_project(path)
    ucomm = comms.Communicator()
    pipeline = params.load_pipeline(this, ucomm)

    finished = completion.check_process_completion(
        pipeline, project_dir=this.path, marker_dir=this.marker_dir
    )
    if finished:
        this.save_pipeline(pipeline)
    markers.remove_stale_markers(pipeline, this.marker_dir)

    for handle in finished:
        ucomm.report_success(f"{pipeline.processes[handle].name} finished")
    still_running = [
        process.name for _, process in pipeline.iter_processes(ProcessStatus.RUNNING)
    ]
    if still_running:
        ucomm.console.print(f"{len(still_running)} job(s) still running")


@app.command("markers")
def rebuild_markers(
    path: Annotated[
        pathlib.Path,
        typer.Argument(file_okay=False, dir_okay=True, parser=params.path_is_project),
    ],
) -> None:
    """Rebuild the node marker directory from scratch."""
    this = params.load_project(path)
    ucomm = comms.Communicator()
    pipeline = params.load_pipeline(this, ucomm)
    written = markers.make_node_directory(pipeline, this.path, this.marker_dir)
    ucomm.report_success(f"wrote {written} marker(s) to {this.marker_dir.name}")
