"""Run lifecycle hooks. Subclass RunObserver and override what you need."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .executor import RunState
    from .registry import Task

logger = logging.getLogger(__name__)


class RunObserver:
    def task_started(self, task: Task) -> None:
        pass

    def task_succeeded(self, task: Task) -> None:
        pass

    def task_failed(self, task: Task, error: BaseException) -> None:
        pass

    def run_aborted(self, error: BaseException) -> None:
        pass

    def run_completed(self, state: RunState) -> None:
        pass


class LoggingObserver(RunObserver):
    """Narrates a run through the ``jobgraph`` loggers."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def task_started(self, task):
        self.log.info("▶ %s (%s)", task.id, task.display_name)

    def task_succeeded(self, task):
        self.log.info("✓ %s", task.id)

    def task_failed(self, task, error):
        self.log.error("✗ %s: %s", task.id, error)

    def run_aborted(self, error):
        self.log.error("run aborted: %s", error)

    def run_completed(self, state):
        self.log.info("run completed: %d task(s)", len(state.completed))
