"""
The pipeliner CLI.

Commands:
- init: start tracking a pipeline in a project directory
- add-process: register a job and its input / output nodes
- delete: delete a job, optionally with everything depending on it
- check: mark running jobs with all outputs on disk as finished
- markers: rebuild the node marker directory
- show: list jobs and nodes
- gc: drop orphaned nodes from the stored pipeline
"""

from __future__ import annotations

from pipeliner.cli import check_cmd, init_cmd, process_cmd, show_cmd
from pipeliner.cli.app import app

__all__ = ["app", "check_cmd", "init_cmd", "process_cmd", "show_cmd"]
