"""YAML loading, inheritance resolution, and validation for job definitions."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from ._schema import REQUIRED_TOP_KEYS, REQUIRED_TASK_KEYS, VALID_TASK_KEYS
from .actions import ShellAction
from .registry import Task, TaskRegistry


@dataclass
class Job:
    name: str
    description: str
    registry: TaskRegistry


# Search order: env var, ~/.jobgraph/jobs/, shared data dir, bundled with repo
def _find_jobs_dir() -> Path:
    import os
    import sysconfig

    env = os.getenv("JOBGRAPH_JOBS_DIR")
    if env:
        return Path(env)
    user_dir = Path.home() / ".jobgraph" / "jobs"
    if user_dir.exists():
        return user_dir
    shared = Path(sysconfig.get_path("data")) / "share" / "jobgraph" / "jobs"
    if shared.exists():
        return shared
    return Path(__file__).resolve().parent.parent / "jobs"


def _load_yaml(path: Path) -> dict:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _job_path(jobs_dir: Path, name: str) -> Path:
    filename = f"_{name}.yaml" if name == "base" else f"{name}.yaml"
    return jobs_dir / filename


def _merge_tasks(base_tasks: dict, override_tasks: dict | None) -> dict:
    """Per-task merge: override keys replace base keys, new tasks go last.
    Entries that are not mappings pass through for _validate to reject."""
    override_tasks = override_tasks or {}
    merged = {}
    for task_id, base_cfg in base_tasks.items():
        override = override_tasks.get(task_id)
        if isinstance(base_cfg, dict) and isinstance(override, dict):
            merged[task_id] = {**base_cfg, **override}
        elif override is not None:
            merged[task_id] = override
        else:
            merged[task_id] = dict(base_cfg) if isinstance(base_cfg, dict) else base_cfg
    for task_id, cfg in override_tasks.items():
        if task_id not in merged:
            merged[task_id] = dict(cfg) if isinstance(cfg, dict) else cfg
    return merged


def _resolve_inheritance(raw: dict, jobs_dir: Path, seen: tuple[str, ...] = ()) -> dict:
    """If the job has `inherits`, load the parent and merge."""
    parent_name = raw.get("inherits")
    if not parent_name:
        return raw
    if parent_name in seen:
        raise ValueError(f"Circular inheritance: {' -> '.join((*seen, parent_name))}")
    parent_path = _job_path(jobs_dir, parent_name)
    if not parent_path.exists():
        raise FileNotFoundError(f"Parent job '{parent_name}' not found at {parent_path}")
    parent_raw = _load_yaml(parent_path)
    parent_raw = _resolve_inheritance(parent_raw, jobs_dir, (*seen, parent_name))
    merged_tasks = _merge_tasks(parent_raw.get("tasks") or {}, raw.get("tasks"))
    result = {**parent_raw, **raw}
    result["tasks"] = merged_tasks
    result.pop("inherits", None)
    return result


def _validate(raw: dict, name: str) -> None:
    """Required keys, known task keys, every task has a command."""
    missing = REQUIRED_TOP_KEYS - set(raw.keys())
    if missing:
        raise ValueError(f"Job '{name}' missing required keys: {sorted(missing)}")
    tasks = raw.get("tasks") or {}
    if not tasks:
        raise ValueError(f"Job '{name}' has no tasks")
    for task_id, cfg in tasks.items():
        cfg = cfg or {}
        if not isinstance(cfg, dict):
            raise ValueError(f"Job '{name}', task '{task_id}': task must be a mapping")
        unknown = set(cfg) - VALID_TASK_KEYS
        if unknown:
            raise ValueError(f"Job '{name}', task '{task_id}': unknown keys {sorted(unknown)}")
        if REQUIRED_TASK_KEYS - set(cfg):
            raise ValueError(f"Job '{name}', task '{task_id}': task must have 'run'")
        if not isinstance(cfg.get("depends_on", []), list):
            raise ValueError(f"Job '{name}', task '{task_id}': 'depends_on' must be a list")


def _build_task(task_id: str, cfg: dict) -> Task:
    return Task(
        id=str(task_id),
        action=ShellAction(cfg["run"], cwd=cfg.get("cwd")),
        depends_on=tuple(str(dep) for dep in cfg.get("depends_on", [])),
        name=cfg.get("name"),
    )


def load_job(name: str, jobs_dir: str | Path | None = None) -> Job:
    """Load a job by name into a fresh TaskRegistry. Resolves inheritance."""
    jobs_path = Path(jobs_dir) if jobs_dir else _find_jobs_dir()
    job_path = _job_path(jobs_path, name)
    if not job_path.exists():
        raise FileNotFoundError(f"Job '{name}' not found at {job_path}")
    raw = _load_yaml(job_path)
    raw = _resolve_inheritance(raw, jobs_path, (name,))
    _validate(raw, name)
    registry = TaskRegistry()
    for task_id, cfg in raw["tasks"].items():
        registry.register(_build_task(task_id, cfg))
    return Job(name=raw["name"], description=raw.get("description", ""), registry=registry)


def list_jobs(jobs_dir: str | Path | None = None) -> list[str]:
    """List available job names."""
    jobs_path = Path(jobs_dir) if jobs_dir else _find_jobs_dir()
    names = []
    for p in sorted(jobs_path.glob("*.yaml")):
        name = p.stem
        if name.startswith("_"):
            name = name[1:]
        names.append(name)
    return names
