"""Provenance and dependency tracking for multi-stage processing pipelines."""

from pipeliner import completion, data, errors, markers, project, storage
from pipeliner.data import Node, NodeType, PipeLine, Process, ProcessStatus, ProcessType

__all__ = [
    "Node",
    "NodeType",
    "PipeLine",
    "Process",
    "ProcessStatus",
    "ProcessType",
    "completion",
    "data",
    "errors",
    "markers",
    "project",
    "storage",
]
