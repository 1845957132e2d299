"""User communication utils for the pipeliner commandline."""

from __future__ import annotations

import dataclasses
import textwrap

import rich.console
import rich.markdown

from pipeliner.errors import PipelineError

__all__ = ["Communicator"]


@dataclasses.dataclass
class Communicator:
    """Standardize user communication from the pipeliner cli."""

    console: rich.console.Console = dataclasses.field(
        default_factory=rich.console.Console
    )

    def report_success(self, msg: str) -> None:
        """Communicate something was successfully completed."""
        self.console.print(textwrap.indent(msg, prefix=" ✅ "))

    def report_fail(self, msg: str) -> None:
        """Communicate something could not be done."""
        self.console.print(textwrap.indent(msg, prefix=" ❌ "))

    def report_error(self, err: PipelineError) -> None:
        """Communicate a pipeline error in red."""
        self.console.print(
            textwrap.indent(str(err), prefix=" ❌ "), style="red", markup=False
        )

    def next_step(self, msg: str) -> None:
        """Communicate that there is a likely followup step."""
        self.console.print(rich.markdown.Markdown(textwrap.dedent(msg)))
