"""Task and TaskRegistry — the declared graph a run is driven from."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .errors import DuplicateTaskError


@dataclass(frozen=True)
class Task:
    id: str
    action: Callable[[], object] = field(repr=False)
    depends_on: tuple[str, ...] = ()
    name: str | None = None

    def __post_init__(self):
        # accept any sequence for depends_on, store it immutably
        object.__setattr__(self, "depends_on", tuple(self.depends_on))

    @property
    def display_name(self) -> str:
        return self.name or self.id


class TaskRegistry:
    """Insertion-ordered id -> Task mapping. Dependencies are not checked here;
    the executor finds unknown ids when it runs."""

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: dict[str, Task] = {}
        for task in tasks or []:
            self.register(task)

    def register(self, task: Task) -> Task:
        if task.id in self._tasks:
            raise DuplicateTaskError(task.id)
        self._tasks[task.id] = task
        return task

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def all_ids(self) -> list[str]:
        """Every registered id, in registration order."""
        return list(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)
