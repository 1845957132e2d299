"""
pipeliner add-process and delete commands.

Both load the stored pipeline, change it and store it again. Nothing is
stored when a change fails half way.
"""

from __future__ import annotations

import pathlib
import typing

import typer
from typing_extensions import Annotated

from pipeliner import markers
from pipeliner.cli import comms, params
from pipeliner.cli.app import app
from pipeliner.data.components import Process, ProcessStatus, ProcessType
from pipeliner.errors import PipelineError

__all__ = ["add_process", "delete_process"]


@app.command("add-process")
def add_process(
    path: Annotated[
        pathlib.Path,
        typer.Argument(file_okay=False, dir_okay=True, parser=params.path_is_project),
    ],
    process_type: Annotated[ProcessType, typer.Option("--type")],
    status: Annotated[ProcessStatus, typer.Option()] = ProcessStatus.RUNNING,
    name: Annotated[
        typing.Optional[str],
        typer.Option(help="Job name, by default '<Type>/jobNNN/'."),
    ] = None,
    inputs: Annotated[
        typing.Optional[list[params.NodeSpec]],
        typer.Option("--input", parser=params.node_spec, help="NAME:TYPE"),
    ] = None,
    outputs: Annotated[
        typing.Optional[list[params.NodeSpec]],
        typer.Option("--output", parser=params.node_spec, help="NAME:TYPE"),
    ] = None,
    overwrite: Annotated[
        bool, typer.Option(help="Replace an existing job of the same name.")
    ] = False,
) -> None:
    """Register a job together with the nodes it reads and writes."""
    this = params.load_project(path)
    ucomm = comms.Communicator()
    pipeline = params.load_pipeline(this, ucomm)

    for spec in inputs or []:
        if not spec.type.usable_as_input:
            ucomm.report_fail(f"{spec.type.value} nodes can not be used as input")
            raise typer.Exit(code=2)

    job_name = name or pipeline.new_process_name(process_type)
    try:
        handle = pipeline.add_new_process(
            Process(name=job_name, type=process_type, status=status),
            overwrite=overwrite,
        )
        for spec in inputs or []:
            pipeline.add_new_input_edge(spec.to_node(), handle)
        for spec in outputs or []:
            pipeline.add_new_output_edge(handle, spec.to_node())
    except PipelineError as err:
        ucomm.report_error(err)
        raise typer.Exit(code=1) from err

    this.save_pipeline(pipeline)
    ucomm.report_success(f"added {job_name}")


@app.command("delete")
def delete_process(
    path: Annotated[
        pathlib.Path,
        typer.Argument(file_okay=False, dir_okay=True, parser=params.path_is_project),
    ],
    job: Annotated[str, typer.Argument(help="Name of the job to delete.")],
    cascade: Annotated[
        bool, typer.Option(help="Also delete every job depending on its outputs.")
    ] = False,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask.")] = False,
) -> None:
    """Delete a job and the nodes it produced."""
    this = params.load_project(path)
    ucomm = comms.Communicator()
    pipeline = params.load_pipeline(this, ucomm)

    handle = pipeline.find_process_by_name(job)
    if handle is None:
        ucomm.report_fail(f"job '{job}' not found, nothing deleted")
        raise typer.Exit(code=1)

    if cascade and not yes:
        doomed = [pipeline.processes[pos].name for pos in pipeline.dependants(handle)]
        ucomm.console.print("This will delete:")
        for doomed_name in doomed:
            ucomm.console.print(f" - {doomed_name}")
        typer.confirm("Continue?", abort=True)

    result = pipeline.delete_process(handle, cascade=cascade)
    this.save_pipeline(pipeline)
    markers.remove_stale_markers(pipeline, this.marker_dir)
    for removed in result.processes:
        ucomm.report_success(f"deleted {removed}")
    if result.nodes:
        ucomm.console.print(f"removed {len(result.nodes)} node(s)")
