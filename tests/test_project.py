"""Test project configuration and pipeline storage locations."""

from __future__ import annotations

import pathlib

import pytest

from pipeliner import project
from pipeliner.data import Node, NodeType, PipeLine, Process, ProcessType


def test_config_round_trip(tmp_path: pathlib.Path) -> None:
    """The config file stores all settings."""
    this = project.Project(tmp_path)
    assert not this.is_initialized
    this.config = project.Config(
        name="betagal", pipeline_name="betagal", marker_dir=".markers", log_level="info"
    )
    assert this.is_initialized
    assert this.config == project.Config(
        name="betagal", pipeline_name="betagal", marker_dir=".markers", log_level="info"
    )
    assert this.pipeline_file == tmp_path / "betagal_pipeline.yaml"
    assert this.marker_dir == tmp_path / ".markers"
    assert "name: betagal" in this.config_file.read_text()


def test_defaults(example_project: project.Project) -> None:
    """Unset settings fall back to defaults."""
    assert example_project.config_file.name == "pipeliner.yaml"
    assert example_project.pipeline_file.name == "default_pipeline.yaml"
    assert example_project.marker_dir.name == ".Nodes"


def test_log_level_from_environment(
    example_project: project.Project, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The environment overrides the configured log level."""
    monkeypatch.delenv(project.LOG_LEVEL_ENVVAR, raising=False)
    assert example_project.log_level == "WARNING"
    monkeypatch.setenv(project.LOG_LEVEL_ENVVAR, "debug")
    assert example_project.log_level == "DEBUG"


def test_load_missing_pipeline(tmp_path: pathlib.Path) -> None:
    """Without a pipeline file a fresh pipeline is started."""
    this = project.Project(tmp_path)
    this.config = project.Config(name="fresh", pipeline_name="fresh")
    loaded = this.load_pipeline()
    assert loaded.name == "fresh"
    assert loaded.processes == []


def test_save_and_load(example_project: project.Project) -> None:
    """Saved pipelines load back."""
    pipeline = PipeLine()
    handle = pipeline.add_new_process(Process("Import/job001/", ProcessType.IMPORT))
    pipeline.add_new_output_edge(handle, Node("movies.star", NodeType.MOVIE))
    example_project.save_pipeline(pipeline)

    loaded = example_project.load_pipeline()
    assert [p.name for p in loaded.processes] == ["Import/job001/"]
    assert loaded.nodes[0].produced_by == 0


def test_save_with_exclusions(example_project: project.Project) -> None:
    """Exclusions pass through to the stored file."""
    pipeline = PipeLine()
    handle = pipeline.add_new_process(Process("Import/job001/", ProcessType.IMPORT))
    pipeline.add_new_output_edge(handle, Node("movies.star", NodeType.MOVIE))
    pipeline.add_node(Node("stray.star", NodeType.MIC))
    example_project.save_pipeline(pipeline, exclude_nodes=[1])
    assert [n.name for n in example_project.load_pipeline().nodes] == ["movies.star"]
