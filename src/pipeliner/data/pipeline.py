"""
The pipeline graph: nodes, processes and the edges between them.

Nodes and processes live in two flat lists and refer to each other by
position ("handle"). Edges are stored in both directions: a process knows
its input and output nodes, a node knows its producer and its consumers.
Only ``PipeLine.delete_process`` renumbers handles.
"""

from __future__ import annotations

import collections
import dataclasses
import logging
import typing

import networkx as nx
from typing_extensions import Self

from pipeliner.data import compaction
from pipeliner.data.components import Node, Process, ProcessStatus, ProcessType
from pipeliner.errors import (
    CycleError,
    DuplicateNameError,
    NodeNotFoundError,
    ProcessNotFoundError,
    ProducerConflictError,
)

if typing.TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = ["DeletionResult", "PipeLine"]

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class DeletionResult:
    """What a call to ``PipeLine.delete_process`` removed."""

    found: bool
    processes: list[str] = dataclasses.field(default_factory=list)
    nodes: list[str] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class PipeLine:
    """A dependency graph of data nodes and the processes connecting them."""

    name: str = "default"
    nodes: list[Node] = dataclasses.field(default_factory=list)
    processes: list[Process] = dataclasses.field(default_factory=list)
    job_counter: int = 0

    def clear(self: Self) -> None:
        """Forget all nodes and processes."""
        self.nodes.clear()
        self.processes.clear()
        self.job_counter = 0

    def set_name(self: Self, name: str) -> None:
        self.name = name

    # lookup

    def find_node_by_name(self: Self, name: str) -> int | None:
        """Return the handle of the named node, or None."""
        for pos, node in enumerate(self.nodes):
            if node.name == name:
                return pos
        return None

    def find_process_by_name(self: Self, name: str) -> int | None:
        """Return the handle of the named process, or None."""
        for pos, process in enumerate(self.processes):
            if process.name == name:
                return pos
        return None

    def get_node(self: Self, handle: int) -> Node:
        """Return the node at ``handle``."""
        if not self.has_node(handle):
            raise NodeNotFoundError(handle)
        return self.nodes[handle]

    def get_process(self: Self, handle: int) -> Process:
        """Return the process at ``handle``."""
        if not self.has_process(handle):
            raise ProcessNotFoundError(handle)
        return self.processes[handle]

    def has_node(self: Self, handle: int) -> bool:
        return 0 <= handle < len(self.nodes)

    def has_process(self: Self, handle: int) -> bool:
        return 0 <= handle < len(self.processes)

    def iter_processes(
        self: Self, status: ProcessStatus | None = None
    ) -> Iterator[tuple[int, Process]]:
        """Iterate over (handle, process) pairs, optionally filtered by status."""
        for pos, process in enumerate(self.processes):
            if status is None or process.status is status:
                yield pos, process

    def new_process_name(self: Self, process_type: ProcessType) -> str:
        """Mint the name the next added process of this type would get."""
        return f"{process_type.label}/job{self.job_counter + 1:03d}/"

    # registration and edges

    def add_node(self: Self, node: Node) -> int:
        """
        Register a node unless one of that name exists, return its handle.

        Only name and type are taken from ``node``; edges are made through
        ``add_new_input_edge`` and ``add_new_output_edge``.
        """
        if not node.name:
            msg = "nodes need a non-empty name"
            raise ValueError(msg)
        found = self.find_node_by_name(node.name)
        if found is not None:
            if self.nodes[found].type is not node.type:
                logger.warning(
                    f"node '{node.name}' is already registered as "
                    f"{self.nodes[found].type.value}, ignoring type {node.type.value}"
                )
            return found
        self.nodes.append(Node(name=node.name, type=node.type))
        logger.debug(f"registered node {len(self.nodes) - 1}: {node.name}")
        return len(self.nodes) - 1

    def add_new_process(self: Self, process: Process, overwrite: bool = False) -> int:
        """
        Register a process and return its handle.

        Only name, type and status are taken from ``process``. An existing
        process of the same name is only replaced if ``overwrite`` is set: it
        keeps its handle, takes the new type and status and loses its edges.
        """
        found = self.find_process_by_name(process.name)
        if found is None:
            self.processes.append(
                Process(name=process.name, type=process.type, status=process.status)
            )
            self.job_counter += 1
            logger.debug(f"registered process {len(self.processes) - 1}: {process.name}")
            return len(self.processes) - 1
        if not overwrite:
            raise DuplicateNameError(process.name)

        existing = self.processes[found]
        for node_handle in existing.inputs:
            consumers = self.nodes[node_handle].consumed_by
            if found in consumers:
                consumers.remove(found)
        for node_handle in existing.outputs:
            if self.nodes[node_handle].produced_by == found:
                self.nodes[node_handle].produced_by = None
        existing.type = process.type
        existing.status = process.status
        existing.inputs = []
        existing.outputs = []
        logger.info(f"overwrote process {found}: {process.name}")
        return found

    def add_new_input_edge(self: Self, node: Node, process_handle: int) -> int:
        """
        Make the process consume the node, registering the node if needed.

        Declaring the same edge twice changes nothing. Returns the node handle.
        Consuming a node that already depends on the process raises
        ``CycleError``.
        """
        process = self.get_process(process_handle)
        existing = self.find_node_by_name(node.name) if node.name else None
        if existing is not None and self._reaches(
            ("process", process_handle), ("node", existing)
        ):
            raise CycleError(node=node.name, process=process.name)
        node_handle = self.add_node(node)
        target = self.nodes[node_handle]
        if process_handle not in target.consumed_by:
            target.consumed_by.append(process_handle)
        if node_handle not in process.inputs:
            process.inputs.append(node_handle)
        return node_handle

    def add_new_output_edge(self: Self, process_handle: int, node: Node) -> int:
        """
        Make the process produce the node, registering the node if needed.

        A node has at most one producer; asking for a second one raises
        ``ProducerConflictError`` and leaves the graph alone. Producing a node
        the process already depends on raises ``CycleError``.
        """
        process = self.get_process(process_handle)
        existing = self.find_node_by_name(node.name) if node.name else None
        if existing is not None:
            producer = self.nodes[existing].produced_by
            if producer is not None and producer != process_handle:
                raise ProducerConflictError(
                    node=node.name,
                    producer=self.processes[producer].name,
                    requested=process.name,
                )
            if self._reaches(("node", existing), ("process", process_handle)):
                raise CycleError(node=node.name, process=process.name)

        node_handle = self.add_node(node)
        self.nodes[node_handle].produced_by = process_handle
        if node_handle not in process.outputs:
            process.outputs.append(node_handle)
        return node_handle

    # deletion

    def dependants(self: Self, process_handle: int) -> list[int]:
        """Handles of the processes a cascading delete would remove, in order."""
        if not self.has_process(process_handle):
            return []
        return self._collect_deletions(process_handle, cascade=True)

    def delete_process(
        self: Self, process_handle: int, cascade: bool = False
    ) -> DeletionResult:
        """
        Remove a process together with the nodes it produced.

        Without ``cascade`` the consumers of those nodes stay and simply lose
        the input edges. With ``cascade`` they are removed too, recursively.
        Handles are renumbered once all removals are known.
        """
        if not self.has_process(process_handle):
            logger.warning(f"process {process_handle} not found, nothing deleted")
            return DeletionResult(found=False)

        doomed_processes = self._collect_deletions(process_handle, cascade)
        doomed_nodes = [
            node_handle
            for pos in doomed_processes
            for node_handle in self.processes[pos].outputs
            if self.has_node(node_handle)
        ]
        result = DeletionResult(
            found=True,
            processes=[self.processes[pos].name for pos in doomed_processes],
            nodes=[self.nodes[pos].name for pos in dict.fromkeys(doomed_nodes)],
        )

        compacted = compaction.compact(
            self.nodes, self.processes, doomed_nodes, doomed_processes
        )
        self.nodes = compacted.nodes
        self.processes = compacted.processes
        logger.info(
            f"deleted {len(result.processes)} process(es) "
            f"and {len(result.nodes)} node(s) starting from '{result.processes[0]}'"
        )
        return result

    def delete_process_by_name(
        self: Self, name: str, cascade: bool = False
    ) -> DeletionResult:
        """Look up a process by name and delete it."""
        handle = self.find_process_by_name(name)
        if handle is None:
            logger.warning(f"process '{name}' not found, nothing deleted")
            return DeletionResult(found=False)
        return self.delete_process(handle, cascade=cascade)

    def _collect_deletions(self: Self, start: int, cascade: bool) -> list[int]:
        """Walk consumers of output nodes depth-first, starting from ``start``."""
        doomed: list[int] = []
        stack = [start]
        while stack:
            current = stack.pop()
            if current in doomed:
                continue
            doomed.append(current)
            if not cascade:
                continue
            process = self.processes[current]
            for node_handle in reversed(process.outputs):
                if not self.has_node(node_handle):
                    logger.warning(
                        f"process '{process.name}' lists missing output node "
                        f"{node_handle}, skipping it"
                    )
                    continue
                for consumer in reversed(self.nodes[node_handle].consumed_by):
                    if not self.has_process(consumer):
                        logger.warning(
                            f"node '{self.nodes[node_handle].name}' lists missing "
                            f"consumer {consumer}, skipping it"
                        )
                        continue
                    if consumer not in doomed:
                        stack.append(consumer)
        return doomed

    # consistency

    def to_digraph(self: Self) -> nx.DiGraph:
        """
        Build a networkx view of the graph.

        Vertices are ``("node", handle)`` and ``("process", handle)``; edges
        point from input nodes to processes and from processes to outputs.
        """
        graph = nx.DiGraph()
        graph.add_nodes_from(("node", pos) for pos in range(len(self.nodes)))
        graph.add_nodes_from(("process", pos) for pos in range(len(self.processes)))
        for pos, process in enumerate(self.processes):
            graph.add_edges_from((("node", n), ("process", pos)) for n in process.inputs)
            graph.add_edges_from((("process", pos), ("node", n)) for n in process.outputs)
        return graph

    def _reaches(self: Self, source: tuple[str, int], target: tuple[str, int]) -> bool:
        """Whether following edges leads from ``source`` to ``target``."""
        return nx.has_path(self.to_digraph(), source, target)

    def problems(self: Self) -> list[str]:
        """Describe every broken graph invariant, an empty list means consistent."""
        found: list[str] = []
        for kind, entries in (("node", self.nodes), ("process", self.processes)):
            counts = collections.Counter(entry.name for entry in entries)
            found.extend(
                f"duplicate {kind} name '{name}'"
                for name, count in counts.items()
                if count > 1
            )

        for pos, node in enumerate(self.nodes):
            if node.produced_by is not None:
                if not self.has_process(node.produced_by):
                    found.append(
                        f"node '{node.name}' names missing producer {node.produced_by}"
                    )
                elif pos not in self.processes[node.produced_by].outputs:
                    found.append(
                        f"node '{node.name}' is not an output of its producer "
                        f"'{self.processes[node.produced_by].name}'"
                    )
            for consumer in node.consumed_by:
                if not self.has_process(consumer):
                    found.append(f"node '{node.name}' names missing consumer {consumer}")
                elif pos not in self.processes[consumer].inputs:
                    found.append(
                        f"node '{node.name}' is not an input of its consumer "
                        f"'{self.processes[consumer].name}'"
                    )

        for pos, process in enumerate(self.processes):
            for node_handle in process.inputs:
                if not self.has_node(node_handle):
                    found.append(
                        f"process '{process.name}' names missing input {node_handle}"
                    )
                elif pos not in self.nodes[node_handle].consumed_by:
                    found.append(
                        f"input '{self.nodes[node_handle].name}' does not list "
                        f"'{process.name}' as a consumer"
                    )
            for node_handle in process.outputs:
                if not self.has_node(node_handle):
                    found.append(
                        f"process '{process.name}' names missing output {node_handle}"
                    )
                elif self.nodes[node_handle].produced_by != pos:
                    found.append(
                        f"output '{self.nodes[node_handle].name}' is not produced "
                        f"by '{process.name}'"
                    )

        if not found and not nx.is_directed_acyclic_graph(self.to_digraph()):
            found.append("the graph contains a cycle")
        return found
