"""
Mirror pipeline nodes as empty marker files.

File browsers offering nodes as job inputs look into the marker directory
instead of the whole project. Each node gets an empty file at
``<marker dir>/<node type>/<node name>``.
"""

from __future__ import annotations

import logging
import pathlib
import shutil
import typing

from pipeliner.data.components import ProcessStatus

if typing.TYPE_CHECKING:
    from pipeliner.data.components import Node
    from pipeliner.data.pipeline import PipeLine

__all__ = [
    "MARKER_DIR",
    "make_node_directory",
    "marker_path",
    "node_path",
    "remove_stale_markers",
    "touch_node_marker",
]

MARKER_DIR = ".Nodes"

logger = logging.getLogger(__name__)


def node_path(node: Node, project_dir: pathlib.Path | str) -> pathlib.Path:
    """Where the file a node stands for lives."""
    path = pathlib.Path(node.name)
    if path.is_absolute():
        return path
    return pathlib.Path(project_dir) / path


def marker_path(node: Node, marker_dir: pathlib.Path | str) -> pathlib.Path:
    """Where the marker of a node lives."""
    relative = pathlib.PurePath(node.name)
    if relative.is_absolute():
        relative = relative.relative_to(relative.anchor)
    return pathlib.Path(marker_dir) / node.type.value / relative


def touch_node_marker(
    node: Node,
    project_dir: pathlib.Path | str,
    marker_dir: pathlib.Path | str,
    force: bool = False,
) -> bool:
    """
    Create the marker for a node if its file exists (or ``force`` is set).

    Returns whether a marker was written.
    """
    if not (force or node_path(node, project_dir).exists()):
        return False
    marker = marker_path(node, marker_dir)
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.touch()
    return True


def make_node_directory(
    pipeline: PipeLine,
    project_dir: pathlib.Path | str,
    marker_dir: pathlib.Path | str,
) -> int:
    """
    Rebuild the marker directory from scratch.

    Only nodes that were imported or produced by a finished process get a
    marker. Returns the number of markers written.
    """
    marker_dir = pathlib.Path(marker_dir)
    if marker_dir.exists():
        shutil.rmtree(marker_dir)
    written = 0
    for node in pipeline.nodes:
        producer = node.produced_by
        if (
            producer is None
            or pipeline.processes[producer].status is ProcessStatus.FINISHED
        ):
            written += touch_node_marker(node, project_dir, marker_dir)
    logger.debug(f"wrote {written} node markers to {marker_dir}")
    return written


def remove_stale_markers(
    pipeline: PipeLine, marker_dir: pathlib.Path | str
) -> list[pathlib.Path]:
    """Delete markers of nodes no longer in the pipeline, return what was removed."""
    marker_dir = pathlib.Path(marker_dir)
    if not marker_dir.is_dir():
        return []
    expected = {marker_path(node, marker_dir) for node in pipeline.nodes}
    stale = [
        path
        for path in marker_dir.rglob("*")
        if path.is_file() and path not in expected
    ]
    for path in stale:
        path.unlink()
        logger.debug(f"removed stale marker {path}")

    for directory in sorted(
        (p for p in marker_dir.rglob("*") if p.is_dir()),
        key=lambda p: len(p.parts),
        reverse=True,
    ):
        if not any(directory.iterdir()):
            directory.rmdir()
    return stale
