"""Common fixtures."""

from __future__ import annotations

import pathlib

import pytest

from pipeliner import project
from pipeliner.data import Node, NodeType, PipeLine, Process, ProcessStatus, ProcessType


@pytest.fixture
def pipeline() -> PipeLine:
    """Provide an empty pipeline."""
    return PipeLine()


@pytest.fixture
def import_then_pick() -> PipeLine:
    """
    Set up the smallest pipeline with a dependency.

    A --> mic.star --> B --> coords.star

    Where:
    - A imports micrographs
    - B picks particles on them
    """
    result = PipeLine()
    a = result.add_new_process(
        Process(name="A", type=ProcessType.IMPORT, status=ProcessStatus.SCHEDULED)
    )
    result.add_new_output_edge(a, Node("mic.star", NodeType.MIC))
    b = result.add_new_process(Process(name="B", type=ProcessType.AUTOPICK))
    result.add_new_input_edge(Node("mic.star", NodeType.MIC), b)
    result.add_new_output_edge(b, Node("coords.star", NodeType.MIC_COORD))
    return result


@pytest.fixture
def chain() -> PipeLine:
    """
    Set up a longer pipeline with a side branch.

    movies.star (imported) --> Import --> mics.star --> CtfFind --> ctf.star
                                                    \\-> AutoPick --> coords.star
    ctf.star + coords.star --> Extract --> particles.star
    mics.star --> ManualPick --> manual.star
    """
    result = PipeLine()
    imp = result.add_new_process(
        Process("Import/job001/", ProcessType.IMPORT, ProcessStatus.FINISHED)
    )
    result.add_new_input_edge(Node("movies.star", NodeType.MOVIE), imp)
    result.add_new_output_edge(imp, Node("Import/job001/mics.star", NodeType.MIC))

    ctf = result.add_new_process(
        Process("CtfFind/job002/", ProcessType.CTFFIND, ProcessStatus.FINISHED)
    )
    result.add_new_input_edge(Node("Import/job001/mics.star", NodeType.MIC), ctf)
    result.add_new_output_edge(ctf, Node("CtfFind/job002/ctf.star", NodeType.MIC))

    pick = result.add_new_process(
        Process("AutoPick/job003/", ProcessType.AUTOPICK, ProcessStatus.RUNNING)
    )
    result.add_new_input_edge(Node("Import/job001/mics.star", NodeType.MIC), pick)
    result.add_new_output_edge(
        pick, Node("AutoPick/job003/coords.star", NodeType.MIC_COORD)
    )

    extract = result.add_new_process(
        Process("Extract/job004/", ProcessType.EXTRACT, ProcessStatus.SCHEDULED)
    )
    result.add_new_input_edge(Node("CtfFind/job002/ctf.star", NodeType.MIC), extract)
    result.add_new_input_edge(
        Node("AutoPick/job003/coords.star", NodeType.MIC_COORD), extract
    )
    result.add_new_output_edge(
        extract, Node("Extract/job004/particles.star", NodeType.PART_DATA)
    )

    manual = result.add_new_process(
        Process("ManualPick/job005/", ProcessType.MANUALPICK, ProcessStatus.FINISHED)
    )
    result.add_new_input_edge(Node("Import/job001/mics.star", NodeType.MIC), manual)
    result.add_new_output_edge(
        manual, Node("ManualPick/job005/manual.star", NodeType.MIC_COORD)
    )
    return result


@pytest.fixture
def example_project(tmp_path: pathlib.Path) -> project.Project:
    """Provide an initialized project with an empty pipeline."""
    this = project.Project(tmp_path)
    this.config = project.Config(name=tmp_path.name)
    this.save_pipeline(PipeLine())
    return this
