"""
Drop entries from node and process lists and renumber every handle in one pass.

Handles are list positions, so removing anything shifts the positions of
everything after it. Rather than patching references while removing, build a
complete old -> new map for both lists first and then rebuild every entry
from it. References to dropped entries disappear with the entries.
"""

from __future__ import annotations

import dataclasses
import typing

from pipeliner.data.components import Node, Process

if typing.TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

__all__ = ["Compacted", "compact", "handle_map"]


@dataclasses.dataclass
class Compacted:
    """Result of a compaction, with the maps that produced it."""

    nodes: list[Node]
    processes: list[Process]
    node_map: dict[int, int]
    process_map: dict[int, int]


def handle_map(size: int, dropped: Iterable[int]) -> dict[int, int]:
    """Map each surviving position in a list of ``size`` to its new position."""
    dropped = set(dropped)
    survivors = (old for old in range(size) if old not in dropped)
    return {old: new for new, old in enumerate(survivors)}


def compact(
    nodes: Sequence[Node],
    processes: Sequence[Process],
    drop_nodes: Iterable[int] = (),
    drop_processes: Iterable[int] = (),
) -> Compacted:
    """
    Build new node and process lists without the dropped entries.

    The input lists are left untouched. Nodes whose producer is dropped but
    which survive themselves end up without a producer.
    """
    node_map = handle_map(len(nodes), drop_nodes)
    process_map = handle_map(len(processes), drop_processes)

    new_nodes = [
        Node(
            name=node.name,
            type=node.type,
            produced_by=process_map.get(node.produced_by)
            if node.produced_by is not None
            else None,
            consumed_by=[process_map[p] for p in node.consumed_by if p in process_map],
        )
        for old, node in enumerate(nodes)
        if old in node_map
    ]
    new_processes = [
        Process(
            name=process.name,
            type=process.type,
            status=process.status,
            inputs=[node_map[n] for n in process.inputs if n in node_map],
            outputs=[node_map[n] for n in process.outputs if n in node_map],
        )
        for old, process in enumerate(processes)
        if old in process_map
    ]
    return Compacted(
        nodes=new_nodes,
        processes=new_processes,
        node_map=node_map,
        process_map=process_map,
    )
