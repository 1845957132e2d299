"""CLI typer app."""

from __future__ import annotations

import typer
from typing_extensions import Annotated

from pipeliner import logs

__all__ = ["app", "state"]


app = typer.Typer(name="pipeliner", no_args_is_help=True)
state = {"verbose": False}


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug messages.")
    ] = False,
    log_file: Annotated[
        bool, typer.Option(help="Also append log messages to the user log file.")
    ] = False,
) -> None:
    """Track the jobs and data artifacts of a processing pipeline."""
    state["verbose"] = verbose
    logs.setup_logging("DEBUG" if verbose else "WARNING", log_file=log_file)
