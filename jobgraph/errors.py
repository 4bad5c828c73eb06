"""Errors raised while registering or running tasks."""

from __future__ import annotations


class JobGraphError(Exception):
    """Base class for every jobgraph failure."""


class DuplicateTaskError(JobGraphError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' is already registered")


class TaskExecutionError(JobGraphError):
    """A task's action raised. The run stops at the first one."""

    def __init__(self, task_id: str, cause: BaseException):
        self.task_id = task_id
        self.cause = cause
        super().__init__(f"Task '{task_id}' failed: {cause}")


class DependencyError(JobGraphError):
    """No pending task could run: a cycle or a reference to an unknown task.

    ``missing`` maps a stuck task to the dependencies that were never
    registered. Tasks stuck only on each other have no entry.
    """

    def __init__(self, task_ids: list[str], missing: dict[str, list[str]] | None = None):
        self.task_ids = list(task_ids)
        self.missing = dict(missing or {})
        msg = f"Unsatisfiable dependencies for: {', '.join(self.task_ids)}"
        if self.missing:
            details = "; ".join(f"{t} -> {', '.join(deps)}" for t, deps in self.missing.items())
            msg += f" (unknown: {details})"
        super().__init__(msg)
