"""
Write pipelines to and read them from YAML files.

Writing goes through the same compaction as deletion, so entries can be
left out of the file without touching the live pipeline; the handles in the
file are the positions the remaining entries will have once loaded.

Reading builds a brand new ``PipeLine`` and refuses files that break any
graph invariant, so a failed read never leaves a half-loaded pipeline.
"""

from __future__ import annotations

import logging
import pathlib
import typing

import yaml
from cattrs.errors import BaseValidationError

from pipeliner.data import compaction
from pipeliner.data.components import Node, Process
from pipeliner.data.pipeline import PipeLine
from pipeliner.data.records import NodeRecord, PipelineRecord, ProcessRecord
from pipeliner.errors import CorruptPipelineError

if typing.TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["dumps", "loads", "read", "reload", "to_record", "write"]

logger = logging.getLogger(__name__)


def to_record(
    pipeline: PipeLine,
    exclude_nodes: Iterable[int] = (),
    exclude_processes: Iterable[int] = (),
) -> PipelineRecord:
    """Snapshot a pipeline, leaving out the excluded entries."""
    compacted = compaction.compact(
        pipeline.nodes, pipeline.processes, exclude_nodes, exclude_processes
    )
    return PipelineRecord(
        name=pipeline.name,
        job_counter=pipeline.job_counter,
        nodes=[NodeRecord(name=node.name, type=node.type) for node in compacted.nodes],
        processes=[
            ProcessRecord(
                name=process.name,
                type=process.type,
                status=process.status,
                inputs=list(process.inputs),
                outputs=list(process.outputs),
            )
            for process in compacted.processes
        ],
    )


def from_record(record: PipelineRecord, source: pathlib.Path | str) -> PipeLine:
    """Rebuild a pipeline, deriving back-references from the forward edges."""
    problems: list[str] = []
    pipeline = PipeLine(name=record.name, job_counter=record.job_counter)
    pipeline.nodes = [Node(name=entry.name, type=entry.type) for entry in record.nodes]

    for pos, entry in enumerate(record.processes):
        process = Process(name=entry.name, type=entry.type, status=entry.status)
        pipeline.processes.append(process)
        for node_handle in entry.inputs:
            if not pipeline.has_node(node_handle):
                problems.append(f"process '{entry.name}' names missing input {node_handle}")
                continue
            if node_handle in process.inputs:
                problems.append(
                    f"process '{entry.name}' lists input {node_handle} more than once"
                )
                continue
            process.inputs.append(node_handle)
            pipeline.nodes[node_handle].consumed_by.append(pos)
        for node_handle in entry.outputs:
            if not pipeline.has_node(node_handle):
                problems.append(
                    f"process '{entry.name}' names missing output {node_handle}"
                )
                continue
            node = pipeline.nodes[node_handle]
            if node.produced_by is not None:
                problems.append(
                    f"node '{node.name}' is output of both "
                    f"'{pipeline.processes[node.produced_by].name}' and '{entry.name}'"
                )
                continue
            process.outputs.append(node_handle)
            node.produced_by = pos

    if not problems:
        problems = pipeline.problems()
    if problems:
        raise CorruptPipelineError(source, problems)

    if pipeline.job_counter < len(pipeline.processes):
        logger.warning(
            f"job counter {pipeline.job_counter} in {source} is behind the "
            f"{len(pipeline.processes)} stored processes, raising it"
        )
        pipeline.job_counter = len(pipeline.processes)
    return pipeline


def dumps(
    pipeline: PipeLine,
    exclude_nodes: Iterable[int] = (),
    exclude_processes: Iterable[int] = (),
) -> str:
    """Render a pipeline as YAML text."""
    return to_record(pipeline, exclude_nodes, exclude_processes).dumps()


def loads(text: str, source: pathlib.Path | str = "<string>") -> PipeLine:
    """Parse YAML text into a new pipeline."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise CorruptPipelineError(source, [f"not valid YAML: {err}"]) from err
    if not isinstance(data, dict):
        raise CorruptPipelineError(source, ["expected a mapping at the top level"])
    try:
        record = PipelineRecord.from_dict(data)
    except (BaseValidationError, ValueError, TypeError, KeyError) as err:
        raise CorruptPipelineError(source, [f"unexpected content: {err!r}"]) from err
    return from_record(record, source)


def write(
    pipeline: PipeLine,
    path: pathlib.Path | str,
    exclude_nodes: Iterable[int] = (),
    exclude_processes: Iterable[int] = (),
) -> None:
    """
    Store a pipeline, leaving out the excluded entries.

    The file is replaced in one step so readers never see a partial write.
    """
    path = pathlib.Path(path)
    text = dumps(pipeline, exclude_nodes, exclude_processes)
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(f".{path.name}.tmp")
    try:
        staging.write_text(text)
        staging.replace(path)
    except OSError:
        staging.unlink(missing_ok=True)
        raise
    logger.debug(f"wrote pipeline '{pipeline.name}' to {path}")


def read(path: pathlib.Path | str) -> PipeLine:
    """Load a pipeline from a file."""
    path = pathlib.Path(path)
    pipeline = loads(path.read_text(), source=path)
    logger.debug(
        f"read pipeline '{pipeline.name}' from {path}: "
        f"{len(pipeline.processes)} processes, {len(pipeline.nodes)} nodes"
    )
    return pipeline


def reload(pipeline: PipeLine, path: pathlib.Path | str) -> PipeLine:
    """Replace the contents of ``pipeline`` with what is stored at ``path``."""
    fresh = read(path)
    pipeline.name = fresh.name
    pipeline.nodes = fresh.nodes
    pipeline.processes = fresh.processes
    pipeline.job_counter = fresh.job_counter
    return pipeline
