"""Parameter types for the pipeliner commandline."""

from __future__ import annotations

import dataclasses
import pathlib

import rich.console
import typer

from pipeliner import logs, project
from pipeliner.cli import comms
from pipeliner.cli.app import state
from pipeliner.data.components import Node, NodeType
from pipeliner.data.pipeline import PipeLine
from pipeliner.errors import PipelineError

__all__ = [
    "NodeSpec",
    "load_pipeline",
    "load_project",
    "node_spec",
    "path_is_not_project",
    "path_is_project",
]


@dataclasses.dataclass
class NodeSpec:
    """A node as given on the commandline: ``NAME:TYPE``."""

    name: str
    type: NodeType

    def to_node(self) -> Node:
        return Node(name=self.name, type=self.type)


def node_spec(value: str | NodeSpec) -> NodeSpec:
    """Parse ``NAME:TYPE``, where TYPE is one of the node type values."""
    if isinstance(value, NodeSpec):
        return value
    name, sep, type_value = value.rpartition(":")
    if not sep or not name:
        msg = f"expected NAME:TYPE, got '{value}'"
        raise typer.BadParameter(msg)
    try:
        node_type = NodeType(type_value)
    except ValueError:
        choices = ", ".join(t.value for t in NodeType)
        msg = f"unknown node type '{type_value}', choose from: {choices}"
        raise typer.BadParameter(msg) from None
    return NodeSpec(name=name, type=node_type)


def path_is_not_project(param: pathlib.Path | str) -> pathlib.Path:
    """Validate the given path parameter is not already an initialized project."""
    console = rich.console.Console()
    this = project.Project(pathlib.Path(param))
    if this.is_initialized:
        console.print("Project is already initialized.", style="red")
        raise typer.Exit(code=2)
    return this.path


def path_is_project(path: pathlib.Path | str) -> pathlib.Path:
    """Check the path contains a project config file."""
    console = rich.console.Console()
    this = project.Project(pathlib.Path(path))
    if not this.is_initialized:
        console.print(f"{path} is not a pipeliner project.", style="red")
        console.print(f"initialize it with:\npipeliner init {path}", style="grey50")
        raise typer.Exit(code=2)
    return this.path


def load_project(path: pathlib.Path) -> project.Project:
    """Open a validated project and apply its log level."""
    this = project.Project(path)
    if not state["verbose"]:
        logs.set_level(this.log_level)
    return this


def load_pipeline(this: project.Project, ucomm: comms.Communicator) -> PipeLine:
    """Load the project's pipeline, exiting with a message if it is unreadable."""
    try:
        return this.load_pipeline()
    except PipelineError as err:
        ucomm.report_error(err)
        raise typer.Exit(code=1) from err
