"""Functionality for working with pipeline projects."""

from __future__ import annotations

import dataclasses
import os
import pathlib
import typing

import cattrs
from cattrs.preconf.pyyaml import make_converter
from typing_extensions import Self

from pipeliner import storage
from pipeliner.data.pipeline import PipeLine
from pipeliner.markers import MARKER_DIR

if typing.TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["LOG_LEVEL_ENVVAR", "Config", "Project"]

LOG_LEVEL_ENVVAR = "PIPELINER_LOG_LEVEL"


@dataclasses.dataclass
class Config:
    """Project Configuration."""

    name: str
    pipeline_name: str = "default"
    marker_dir: str = MARKER_DIR
    log_level: str = "WARNING"


@dataclasses.dataclass
class Project:
    """A directory holding a pipeline, its config and its job outputs."""

    path: pathlib.Path
    converter: cattrs.preconf.pyyaml.PyyamlConverter = dataclasses.field(
        default_factory=make_converter
    )

    @property
    def config_file(self: Self) -> pathlib.Path:
        """Location of the config file of this project."""
        return self.path / "pipeliner.yaml"

    @property
    def config(self: Self) -> Config:
        """Read config object from file."""
        return self.converter.loads(self.config_file.read_text(), Config)

    @config.setter
    def config(self: Self, config: Config) -> None:
        """Store the config object to file."""
        self.config_file.write_text(self.converter.dumps(config, sort_keys=False))

    @property
    def is_initialized(self: Self) -> bool:
        return self.config_file.exists()

    @property
    def pipeline_file(self: Self) -> pathlib.Path:
        """Where the pipeline graph is stored."""
        return self.path / f"{self.config.pipeline_name}_pipeline.yaml"

    @property
    def marker_dir(self: Self) -> pathlib.Path:
        """Where node markers are mirrored."""
        return self.path / self.config.marker_dir

    @property
    def log_level(self: Self) -> str:
        """Configured log level, the environment takes precedence."""
        return os.environ.get(LOG_LEVEL_ENVVAR, self.config.log_level).upper()

    def load_pipeline(self: Self) -> PipeLine:
        """Read the stored pipeline, or start an empty one."""
        if not self.pipeline_file.exists():
            return PipeLine(name=self.config.pipeline_name)
        return storage.read(self.pipeline_file)

    def save_pipeline(
        self: Self,
        pipeline: PipeLine,
        exclude_nodes: Iterable[int] = (),
        exclude_processes: Iterable[int] = (),
    ) -> None:
        """Store the pipeline, optionally leaving out some entries."""
        storage.write(
            pipeline,
            self.pipeline_file,
            exclude_nodes=exclude_nodes,
            exclude_processes=exclude_processes,
        )
