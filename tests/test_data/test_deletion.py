"""Test deleting processes, with and without cascading."""

from __future__ import annotations

import pytest

from pipeliner.data import Node, NodeType, PipeLine, Process, ProcessType


def names(pipeline: PipeLine) -> tuple[list[str], list[str]]:
    """Process and node names, for compact assertions."""
    return [p.name for p in pipeline.processes], [n.name for n in pipeline.nodes]


def test_cascade_removes_everything(import_then_pick: PipeLine) -> None:
    """Deleting the importer with cascade leaves nothing behind."""
    result = import_then_pick.delete_process(0, cascade=True)
    assert result.found
    assert result.processes == ["A", "B"]
    assert result.nodes == ["mic.star", "coords.star"]
    assert import_then_pick.nodes == []
    assert import_then_pick.processes == []


def test_no_cascade_keeps_consumer(import_then_pick: PipeLine) -> None:
    """Without cascade the consumer stays but loses its input edge."""
    result = import_then_pick.delete_process(0, cascade=False)
    assert result.processes == ["A"]
    assert result.nodes == ["mic.star"]
    assert names(import_then_pick) == (["B"], ["coords.star"])
    b = import_then_pick.processes[0]
    assert b.inputs == []
    assert b.outputs == [0]
    assert import_then_pick.nodes[0].produced_by == 0
    assert import_then_pick.problems() == []


def test_delete_leaf_renumbers_nothing_else(import_then_pick: PipeLine) -> None:
    """Deleting the downstream job keeps the upstream one intact."""
    import_then_pick.delete_process(1)
    assert names(import_then_pick) == (["A"], ["mic.star"])
    assert import_then_pick.nodes[0].consumed_by == []
    assert import_then_pick.problems() == []


def test_delete_missing_is_noop(
    import_then_pick: PipeLine, caplog: pytest.LogCaptureFixture
) -> None:
    """Unknown handles are reported, not fatal."""
    result = import_then_pick.delete_process(9, cascade=True)
    assert not result.found
    assert result.processes == []
    assert names(import_then_pick) == (["A", "B"], ["mic.star", "coords.star"])
    assert "not found" in caplog.text


def test_delete_by_name(chain: PipeLine) -> None:
    """Deleting by name resolves the handle first."""
    assert not chain.delete_process_by_name("Nope/job999/").found
    result = chain.delete_process_by_name("ManualPick/job005/")
    assert result.processes == ["ManualPick/job005/"]
    assert chain.find_node_by_name("ManualPick/job005/manual.star") is None


def test_cascade_is_transitive(chain: PipeLine) -> None:
    """Everything downstream of the importer goes, imported inputs stay."""
    result = chain.delete_process(0, cascade=True)
    assert set(result.processes) == {
        "Import/job001/",
        "CtfFind/job002/",
        "AutoPick/job003/",
        "Extract/job004/",
        "ManualPick/job005/",
    }
    assert names(chain) == ([], ["movies.star"])
    assert chain.nodes[0].consumed_by == []


def test_cascade_from_middle(chain: PipeLine) -> None:
    """Deleting the picker removes extraction but not the CTF branch."""
    chain.delete_process(2, cascade=True)
    assert names(chain) == (
        ["Import/job001/", "CtfFind/job002/", "ManualPick/job005/"],
        [
            "movies.star",
            "Import/job001/mics.star",
            "CtfFind/job002/ctf.star",
            "ManualPick/job005/manual.star",
        ],
    )
    mics = chain.nodes[1]
    assert mics.produced_by == 0
    assert [chain.processes[p].name for p in mics.consumed_by] == [
        "CtfFind/job002/",
        "ManualPick/job005/",
    ]
    assert chain.nodes[2].consumed_by == []
    assert chain.processes[2].inputs == [1]
    assert chain.processes[2].outputs == [3]
    assert chain.problems() == []


def test_no_cascade_from_middle(chain: PipeLine) -> None:
    """Extraction survives with only the CTF input left."""
    chain.delete_process(2)
    extract = chain.processes[chain.find_process_by_name("Extract/job004/")]
    assert [chain.nodes[n].name for n in extract.inputs] == ["CtfFind/job002/ctf.star"]
    assert [chain.nodes[n].name for n in extract.outputs] == [
        "Extract/job004/particles.star"
    ]
    assert chain.problems() == []


def test_dependants(chain: PipeLine) -> None:
    """Dependants are what a cascade would delete, depth first."""
    deps = [chain.processes[p].name for p in chain.dependants(1)]
    assert deps == ["CtfFind/job002/", "Extract/job004/"]
    assert chain.dependants(42) == []


def test_cascade_skips_dangling_consumer(
    import_then_pick: PipeLine, caplog: pytest.LogCaptureFixture
) -> None:
    """A consumer handle pointing nowhere is logged and skipped."""
    import_then_pick.nodes[0].consumed_by.append(17)
    result = import_then_pick.delete_process(0, cascade=True)
    assert result.processes == ["A", "B"]
    assert "missing consumer 17" in caplog.text
    assert import_then_pick.processes == []


def test_shared_input_survives(pipeline: PipeLine) -> None:
    """Inputs of a deleted process are not its to delete."""
    a = pipeline.add_new_process(Process("A", ProcessType.IMPORT))
    pipeline.add_new_output_edge(a, Node("mic.star", NodeType.MIC))
    b = pipeline.add_new_process(Process("B", ProcessType.CTFFIND))
    c = pipeline.add_new_process(Process("C", ProcessType.MANUALPICK))
    for proc in (b, c):
        pipeline.add_new_input_edge(Node("mic.star", NodeType.MIC), proc)
    pipeline.delete_process(b, cascade=True)
    assert names(pipeline) == (["A", "C"], ["mic.star"])
    assert pipeline.nodes[0].consumed_by == [1]
    assert pipeline.problems() == []
