"""
Plain records describing a pipeline as it is stored on disk.

Only forward edges (process inputs and outputs) are recorded; producer and
consumer back-references are derived again on load.
"""

from __future__ import annotations

import dataclasses

from cattrs.preconf.pyyaml import make_converter
from typing_extensions import Self

from pipeliner.data.components import NodeType, ProcessStatus, ProcessType

__all__ = ["CONVERTER", "NodeRecord", "PipelineRecord", "ProcessRecord", "YamlableMixin"]

CONVERTER = make_converter()


class YamlableMixin:
    """
    Convert to and from YAML through the shared converter.

    Can be used to augment dataclasses or 'attrs' classes.
    """

    def as_dict(self: Self) -> dict[str, object]:
        """Convert to a dictionary of plain YAML types."""
        return CONVERTER.unstructure(self)

    @classmethod
    def from_dict(cls: type[Self], data: dict[str, object]) -> Self:
        """Reconstruct from a dictionary."""
        return CONVERTER.structure(data, cls)

    def dumps(self: Self) -> str:
        """Render as a YAML document, keeping field order."""
        return CONVERTER.dumps(self, sort_keys=False)


@dataclasses.dataclass
class NodeRecord(YamlableMixin):
    """One stored node."""

    name: str
    type: NodeType


@dataclasses.dataclass
class ProcessRecord(YamlableMixin):
    """One stored process, with handles into the stored node list."""

    name: str
    type: ProcessType
    status: ProcessStatus
    inputs: list[int] = dataclasses.field(default_factory=list)
    outputs: list[int] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class PipelineRecord(YamlableMixin):
    """A whole stored pipeline."""

    name: str = "default"
    job_counter: int = 0
    nodes: list[NodeRecord] = dataclasses.field(default_factory=list)
    processes: list[ProcessRecord] = dataclasses.field(default_factory=list)
