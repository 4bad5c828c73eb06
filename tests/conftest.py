from pathlib import Path

import pytest

from jobgraph import RunObserver

JOBS_DIR = Path(__file__).resolve().parent.parent / "jobs"


@pytest.fixture
def jobs_dir():
    return JOBS_DIR


class EventRecorder(RunObserver):
    """Collects lifecycle events as tuples, in emission order."""

    def __init__(self):
        self.events = []

    def task_started(self, task):
        self.events.append(("started", task.id))

    def task_succeeded(self, task):
        self.events.append(("succeeded", task.id))

    def task_failed(self, task, error):
        self.events.append(("failed", task.id))

    def run_aborted(self, error):
        self.events.append(("aborted", type(error).__name__))

    def run_completed(self, state):
        self.events.append(("completed", None))

    def of(self, kind):
        return [task_id for k, task_id in self.events if k == kind]


@pytest.fixture
def recorder():
    return EventRecorder()
