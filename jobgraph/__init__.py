"""jobgraph — run named tasks in dependency order."""

from .errors import DependencyError, DuplicateTaskError, JobGraphError, TaskExecutionError
from .executor import Executor, RunState, RunStatus, TaskStatus
from .loader import Job, list_jobs, load_job
from .observers import LoggingObserver, RunObserver
from .registry import Task, TaskRegistry

__all__ = [
    "Task",
    "TaskRegistry",
    "Executor",
    "RunState",
    "RunStatus",
    "TaskStatus",
    "RunObserver",
    "LoggingObserver",
    "Job",
    "load_job",
    "list_jobs",
    "JobGraphError",
    "DuplicateTaskError",
    "TaskExecutionError",
    "DependencyError",
]
