"""Building blocks of a pipeline: data nodes, processes and their type tags."""

from __future__ import annotations

import dataclasses
import enum

from typing_extensions import Self

__all__ = ["Node", "NodeType", "Process", "ProcessStatus", "ProcessType"]


class NodeType(enum.Enum):
    """Kind of data artifact a node stands for."""

    MOVIE = "movie"  # e.g. Falcon001_movie.mrcs or micrograph_movies.star
    MIC = "micrograph"  # e.g. Falcon001.mrc or micrographs.star
    TOMO = "tomogram"
    MIC_COORD = "micrograph_coordinates"  # *_autopick.star
    PART_DATA = "particle_data"  # particles.star or run1_data.star
    MOVIE_DATA = "movie_data"  # particle movie-frames
    REF = "reference"  # 2D or 3D reference(s)
    MASK = "mask"
    MODEL = "model"  # model STAR file for class selection
    OPTIMISER = "optimiser"  # for job continuation
    HALFMAP = "halfmap"  # unfiltered half-maps from 3D auto-refine
    FINALMAP = "final_map"  # sharpened map from post-processing
    RESMAP = "resmap"  # local resolution map

    @property
    def usable_as_input(self: Self) -> bool:
        """Whether jobs may take this kind of node as input."""
        return self not in (NodeType.FINALMAP, NodeType.RESMAP)


class ProcessType(enum.Enum):
    """
    Kind of job a process runs.

    Member order is the order jobs are offered in when browsing.
    """

    IMPORT = "import"
    MOTIONCORR = "motioncorr"
    CTFFIND = "ctffind"
    MANUALPICK = "manualpick"
    AUTOPICK = "autopick"
    SORT = "sort"
    EXTRACT = "extract"
    CLASS2D = "class2d"
    CLASS3D = "class3d"
    CLASSSELECT = "class_select"
    AUTO3D = "refine3d"
    POLISH = "polish"
    POST = "postprocess"
    RESMAP = "resmap"

    @property
    def label(self: Self) -> str:
        """Directory label used when minting job names."""
        return _PROCESS_LABELS[self]


_PROCESS_LABELS = {
    ProcessType.IMPORT: "Import",
    ProcessType.MOTIONCORR: "MotionCorr",
    ProcessType.CTFFIND: "CtfFind",
    ProcessType.MANUALPICK: "ManualPick",
    ProcessType.AUTOPICK: "AutoPick",
    ProcessType.SORT: "Sort",
    ProcessType.EXTRACT: "Extract",
    ProcessType.CLASS2D: "Class2D",
    ProcessType.CLASS3D: "Class3D",
    ProcessType.CLASSSELECT: "Select",
    ProcessType.AUTO3D: "Refine3D",
    ProcessType.POLISH: "Polish",
    ProcessType.POST: "PostProcess",
    ProcessType.RESMAP: "LocalRes",
}


class ProcessStatus(enum.Enum):
    """Lifecycle state of a process."""

    RUNNING = "running"
    SCHEDULED = "scheduled"
    FINISHED = "finished"
    CANCELLED = "cancelled"


@dataclasses.dataclass
class Node:
    """
    A named data artifact.

    The name doubles as the path of the file the node stands for.
    Handles stored here are positions in the owning pipeline's process list.
    """

    name: str
    type: NodeType
    produced_by: int | None = None
    consumed_by: list[int] = dataclasses.field(default_factory=list)

    @property
    def is_imported(self: Self) -> bool:
        """Nodes without a producer came from outside the pipeline."""
        return self.produced_by is None


@dataclasses.dataclass
class Process:
    """
    A job converting input nodes into output nodes.

    Handles stored here are positions in the owning pipeline's node list.
    """

    name: str
    type: ProcessType
    status: ProcessStatus = ProcessStatus.SCHEDULED
    inputs: list[int] = dataclasses.field(default_factory=list)
    outputs: list[int] = dataclasses.field(default_factory=list)
