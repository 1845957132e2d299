"""Data types describing pipelines, their jobs and data artifacts."""

from . import compaction, components, pipeline, records
from .components import Node, NodeType, Process, ProcessStatus, ProcessType
from .pipeline import DeletionResult, PipeLine

__all__ = [
    "DeletionResult",
    "Node",
    "NodeType",
    "PipeLine",
    "Process",
    "ProcessStatus",
    "ProcessType",
    "compaction",
    "components",
    "pipeline",
    "records",
]
