"""Error taxonomy for demo runs.

Fatal errors (ConfigurationError, ExecutionTimeout) propagate to the CLI,
which turns them into exit status 1. TaskFailure is collected per task
from `taskFailed` events and only shows up in the final report.
"""

from __future__ import annotations


class DemoError(Exception):
    """Base class for every error raised by repochief_demo."""


class ConfigurationError(DemoError, ValueError):
    """Unknown scenario, invalid preset, missing API key or backend."""


class TaskFailure(DemoError):
    """A single task failed. Siblings keep running."""

    def __init__(self, task_id: str, message: str) -> None:
        super().__init__(f"{task_id}: {message}")
        self.task_id = task_id
        self.message = message


class ExecutionTimeout(DemoError, TimeoutError):
    """Completion was not signalled before the deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Execution timeout after {timeout:g} seconds")
        self.timeout = timeout
