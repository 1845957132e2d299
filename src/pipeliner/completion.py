"""
Derive job completion from the presence of output files.

This is polling, not notification: call it as often as needed. A file that
is still being written may look absent, in which case the next poll picks
it up. Only RUNNING processes ever change, and only to FINISHED.
"""

from __future__ import annotations

import logging
import pathlib
import typing

from pipeliner import markers
from pipeliner.data.components import ProcessStatus

if typing.TYPE_CHECKING:
    from pipeliner.data.pipeline import PipeLine

__all__ = ["check_process_completion", "outputs_exist"]

logger = logging.getLogger(__name__)


def outputs_exist(
    pipeline: PipeLine, process_handle: int, project_dir: pathlib.Path | str
) -> bool:
    """Whether the files of all outputs of a process are on disk."""
    process = pipeline.get_process(process_handle)
    return all(
        markers.node_path(pipeline.get_node(node_handle), project_dir).exists()
        for node_handle in process.outputs
    )


def check_process_completion(
    pipeline: PipeLine,
    project_dir: pathlib.Path | str = ".",
    marker_dir: pathlib.Path | str | None = None,
) -> list[int]:
    """
    Mark running processes whose outputs all exist as finished.

    Relative node names are resolved against ``project_dir``. If a
    ``marker_dir`` is given, markers for the outputs of newly finished
    processes are touched. Returns the handles of the processes that changed.
    """
    finished = []
    for pos, process in pipeline.iter_processes(ProcessStatus.RUNNING):
        if not outputs_exist(pipeline, pos, project_dir):
            continue
        process.status = ProcessStatus.FINISHED
        finished.append(pos)
        logger.info(f"process '{process.name}' finished")
        if marker_dir is not None:
            for node_handle in process.outputs:
                markers.touch_node_marker(
                    pipeline.nodes[node_handle], project_dir, marker_dir
                )
    return finished
