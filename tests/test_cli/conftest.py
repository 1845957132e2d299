"""Fixtures for CLI tests."""

from __future__ import annotations

import pathlib

import pytest
import typer.testing

from pipeliner import cli, project


@pytest.fixture(scope="session")
def runner() -> typer.testing.CliRunner:
    """One cli runner is enough."""
    return typer.testing.CliRunner()


@pytest.fixture
def empty_project(
    tmp_path: pathlib.Path, runner: typer.testing.CliRunner
) -> project.Project:
    """Provide an initialized project with nothing else going on yet."""
    runner.invoke(cli.app, ["init", "--name", tmp_path.name, str(tmp_path)])
    return project.Project(tmp_path)


@pytest.fixture
def picking_project(
    empty_project: project.Project, runner: typer.testing.CliRunner
) -> project.Project:
    """Provide a project with an import job feeding a picking job."""
    path = str(empty_project.path)
    runner.invoke(
        cli.app,
        [
            "add-process", path,
            "--type", "import",
            "--status", "finished",
            "--input", "movies.star:movie",
            "--output", "Import/job001/mics.star:micrograph",
        ],
    )  # fmt: skip
    runner.invoke(
        cli.app,
        [
            "add-process", path,
            "--type", "autopick",
            "--input", "Import/job001/mics.star:micrograph",
            "--output", "AutoPick/job002/coords.star:micrograph_coordinates",
        ],
    )  # fmt: skip
    return empty_project
