"""The pipeliner init command."""

from __future__ import annotations

import pathlib

import typer
from typing_extensions import Annotated

from pipeliner import project
from pipeliner.cli import comms
from pipeliner.cli.app import app
from pipeliner.cli.params import path_is_not_project
from pipeliner.data.pipeline import PipeLine

__all__ = ["init"]


@app.command()
def init(
    path: Annotated[
        pathlib.Path,
        typer.Argument(
            file_okay=False, dir_okay=True, writable=True, parser=path_is_not_project
        ),
    ],
    name: Annotated[str, typer.Option(prompt=True)],
    pipeline_name: Annotated[
        str, typer.Option(help="Name of the pipeline file inside the project.")
    ] = "default",
) -> None:
    """Start tracking a new processing pipeline in PATH."""
    this = project.Project(path)
    ucomm = comms.Communicator()
    if not this.path.exists():
        this.path.mkdir(parents=True)

    this.config = project.Config(name=name, pipeline_name=pipeline_name)
    ucomm.report_success(f"created config for project '{name}'")

    this.save_pipeline(PipeLine(name=pipeline_name))
    ucomm.report_success(f"created empty pipeline {this.pipeline_file.name}")
    ucomm.next_step(
        f"""
        register jobs with

        ```bash
        pipeliner add-process {path} --type import --output movies.star:movie
        ```
        """
    )
