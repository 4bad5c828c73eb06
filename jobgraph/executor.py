"""Dependency-ordered executor — wavefront sweeps over a TaskRegistry.

Each sweep walks the pending tasks in registration order and runs every task
whose dependencies are all completed, one at a time. A sweep that completes
nothing means the remaining tasks can never run (a cycle, or a dependency that
was never registered) and the run aborts with DependencyError. The first task
that raises aborts the run with TaskExecutionError; tasks already completed
stay completed.
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import NoReturn

from .errors import DependencyError, TaskExecutionError
from .observers import LoggingObserver, RunObserver
from .registry import Task, TaskRegistry

logger = logging.getLogger(__name__)


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class RunStatus(str, enum.Enum):
    IDLE = "idle"
    EXECUTING = "executing"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class RunState:
    pending: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    tasks: dict[str, TaskStatus] = field(default_factory=dict)
    status: RunStatus = RunStatus.IDLE
    error: BaseException | None = None

    @classmethod
    def for_registry(cls, registry: TaskRegistry) -> RunState:
        ids = registry.all_ids()
        return cls(pending=ids, tasks={task_id: TaskStatus.PENDING for task_id in ids})


def _is_ready(task: Task, completed: Iterable[str]) -> bool:
    done = set(completed)
    return all(dep in done for dep in task.depends_on)


def _stuck_error(registry: TaskRegistry, pending: list[str]) -> DependencyError:
    missing = {}
    for task_id in pending:
        unknown = [dep for dep in registry.get(task_id).depends_on if dep not in registry]
        if unknown:
            missing[task_id] = unknown
    return DependencyError(pending, missing)


async def _wait(awaitable):
    return await awaitable


def _invoke(task: Task) -> None:
    result = task.action()
    if not inspect.isawaitable(result):
        return
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(_wait(result))
        return
    # asyncio.run cannot nest inside a running loop
    if inspect.iscoroutine(result):
        result.close()
    raise RuntimeError(f"Task '{task.id}' returned an awaitable inside a running event loop")


class Executor:
    def __init__(self, observers: Iterable[RunObserver] | None = None):
        self.observers = list(observers) if observers is not None else [LoggingObserver()]
        self.state = RunState()

    def _notify(self, event: str, *args) -> None:
        for observer in self.observers:
            getattr(observer, event)(*args)

    def plan(self, registry: TaskRegistry) -> list[str]:
        """Order `run` would execute the registry in. Invokes nothing."""
        pending = registry.all_ids()
        order: list[str] = []
        while pending:
            progress = False
            for task_id in list(pending):
                if _is_ready(registry.get(task_id), order):
                    pending.remove(task_id)
                    order.append(task_id)
                    progress = True
            if not progress:
                raise _stuck_error(registry, pending)
        return order

    def run(self, registry: TaskRegistry) -> RunState:
        """Run every task in dependency order. Returns the final RunState.

        Raises TaskExecutionError or DependencyError; `self.state` keeps what
        completed before the abort.
        """
        state = self.state = RunState.for_registry(registry)
        state.status = RunStatus.EXECUTING
        logger.debug("run starting with %d task(s)", len(state.pending))

        try:
            while state.pending:
                progress = False
                for task_id in list(state.pending):
                    task = registry.get(task_id)
                    if not _is_ready(task, state.completed):
                        continue
                    self._run_task(state, task)
                    progress = True
                if not progress:
                    self._abort(state, _stuck_error(registry, state.pending))
        except BaseException as e:
            # observer errors and interrupts abort the run too
            if state.status is not RunStatus.ABORTED:
                state.status = RunStatus.ABORTED
                state.error = e
                self._notify("run_aborted", e)
            raise

        state.status = RunStatus.COMPLETED
        self._notify("run_completed", state)
        return state

    def _run_task(self, state: RunState, task: Task) -> None:
        state.tasks[task.id] = TaskStatus.RUNNING
        self._notify("task_started", task)
        try:
            _invoke(task)
        except Exception as e:
            state.tasks[task.id] = TaskStatus.FAILED
            self._notify("task_failed", task, e)
            error = TaskExecutionError(task.id, e)
            error.__cause__ = e
            self._abort(state, error)
        state.pending.remove(task.id)
        state.completed.append(task.id)
        state.tasks[task.id] = TaskStatus.COMPLETED
        self._notify("task_succeeded", task)

    def _abort(self, state: RunState, error: Exception) -> NoReturn:
        state.status = RunStatus.ABORTED
        state.error = error
        self._notify("run_aborted", error)
        raise error
