"""Validation constants for job definition YAML schema."""

REQUIRED_TASK_KEYS = {"run"}
VALID_TASK_KEYS = {"name", "depends_on", "run", "cwd"}
REQUIRED_TOP_KEYS = {"name", "description", "tasks"}
VALID_TOP_KEYS = {"name", "description", "tasks", "inherits"}
