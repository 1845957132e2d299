"""Errors raised by pipeline operations."""

from __future__ import annotations

import dataclasses
import pathlib

from typing_extensions import Self

__all__ = [
    "CorruptPipelineError",
    "CycleError",
    "DuplicateNameError",
    "NodeNotFoundError",
    "NotFoundError",
    "PipelineError",
    "ProcessNotFoundError",
    "ProducerConflictError",
]


class PipelineError(Exception):
    """Base class for everything that can go wrong with a pipeline."""


@dataclasses.dataclass(eq=False)
class NotFoundError(PipelineError, LookupError):
    """A node or process could not be found by name or handle."""

    key: str | int

    kind = "entry"

    def __str__(self: Self) -> str:
        """Format error message."""
        if isinstance(self.key, int):
            return f"no {self.kind} with handle {self.key} in the pipeline"
        return f"no {self.kind} named '{self.key}' in the pipeline"


class NodeNotFoundError(NotFoundError):
    """Node lookup failed."""

    kind = "node"


class ProcessNotFoundError(NotFoundError):
    """Process lookup failed."""

    kind = "process"


@dataclasses.dataclass(eq=False)
class DuplicateNameError(PipelineError):
    """A process with that name is already registered and overwriting is off."""

    name: str

    def __str__(self: Self) -> str:
        """Format error message."""
        return (
            f"process '{self.name}' already exists in the pipeline "
            "and overwriting was not allowed"
        )


@dataclasses.dataclass(eq=False)
class ProducerConflictError(PipelineError):
    """An output edge would give a node a second producer."""

    node: str
    producer: str
    requested: str

    def __str__(self: Self) -> str:
        """Format error message."""
        return (
            f"node '{self.node}' is already produced by '{self.producer}', "
            f"refusing to make '{self.requested}' its producer as well"
        )


@dataclasses.dataclass(eq=False)
class CorruptPipelineError(PipelineError):
    """A persisted pipeline violates the graph invariants or can not be parsed."""

    source: pathlib.Path | str
    problems: list[str] = dataclasses.field(default_factory=list)

    def __str__(self: Self) -> str:
        """Format error message."""
        details = "\n".join(f" - {problem}" for problem in self.problems)
        return f"corrupt pipeline file {self.source}:\n{details}"


@dataclasses.dataclass(eq=False)
class CycleError(PipelineError):
    """An edge would make a process depend on its own output."""

    node: str
    process: str

    def __str__(self: Self) -> str:
        """Format error message."""
        return (
            f"connecting node '{self.node}' and process '{self.process}' "
            "would create a cycle"
        )
