"""Click CLI entrypoint — `jobgraph <subcommand>`.

JSON output by default, --human for tables, --compact for terse text.
"""

from __future__ import annotations

import json
import logging
import sys

import click


def _output(data, human: bool = False, compact: bool = False) -> None:
    """Route output: JSON (default), compact, or human (tables)."""
    if isinstance(data, dict) and "error" in data:
        click.echo(json.dumps(data, indent=2, default=str), err=True)
        sys.exit(1)
    if compact:
        click.echo(_format_compact(data))
    elif human:
        _print_human(data)
    else:
        click.echo(json.dumps(data, indent=2, default=str))


def _print_human(data) -> None:
    if isinstance(data, list):
        if not data:
            click.echo("(none)")
            return
        if isinstance(data[0], dict):
            keys = list(data[0].keys())
            widths = {k: max(len(k), *(len(_cell(row.get(k, ""))) for row in data)) for k in keys}
            header = "  ".join(k.upper().ljust(widths[k]) for k in keys)
            click.echo(header)
            for row in data:
                click.echo("  ".join(_cell(row.get(k, "")).ljust(widths[k]) for k in keys))
        else:
            for item in data:
                click.echo(item)
    elif isinstance(data, dict):
        for k, v in data.items():
            if isinstance(v, list) and v and isinstance(v[0], dict):
                click.echo(f"{k}:")
                _print_human(v)
            elif isinstance(v, (list, dict)):
                click.echo(f"{k}: {json.dumps(v, default=str)}")
            else:
                click.echo(f"{k}: {v}")
    else:
        click.echo(data)


def _cell(value) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) or "—"
    if value is None:
        return "—"
    return str(value)


def _format_compact(data) -> str:
    """Format CLI output as concise text."""
    if isinstance(data, list):
        if not data:
            return "(none)"
        return "\n".join(str(x) for x in data)

    if isinstance(data, dict):
        # Run result
        if "status" in data and "completed" in data:
            lines = [f"{data.get('job', '?')}: {data['status']}"]
            lines.extend(f"  ✓ {task_id}" for task_id in data["completed"])
            return "\n".join(lines)

        # Plan
        if "order" in data:
            return " → ".join(data["order"]) or "(none)"

        # Job info
        if "tasks" in data:
            lines = [f"job: {data.get('name', '?')}"]
            for t in data["tasks"]:
                deps = f" ← {', '.join(t['depends_on'])}" if t.get("depends_on") else ""
                lines.append(f"  {t['id']}{deps}")
            return "\n".join(lines)

        return json.dumps(data, default=str)

    return str(data)


def _configure_logging(verbose: int) -> None:
    """-v → INFO, -vv → DEBUG. Otherwise JOBGRAPH_LOG_LEVEL, default WARNING."""
    import os

    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        name = os.getenv("JOBGRAPH_LOG_LEVEL", "WARNING").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            _output({"error": f"Unknown log level '{name}' in JOBGRAPH_LOG_LEVEL"})
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def _load(ctx, name: str):
    """Load a job or emit an error payload."""
    from jobgraph import load_job

    try:
        return load_job(name, ctx.obj["jobs_dir"])
    except (FileNotFoundError, ValueError) as e:
        _output({"error": str(e)})


@click.group()
@click.option("--human", is_flag=True, help="Human-readable table output")
@click.option("--compact", is_flag=True, help="Compact text output")
@click.option(
    "--jobs-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory of job YAML files (default: $JOBGRAPH_JOBS_DIR or search path)",
)
@click.option("-v", "--verbose", count=True, help="Log task progress (-vv for command output)")
@click.pass_context
def main(ctx, human, compact, jobs_dir, verbose):
    """jobgraph — run tasks in dependency order."""
    ctx.ensure_object(dict)
    ctx.obj["human"] = human
    ctx.obj["compact"] = compact
    ctx.obj["jobs_dir"] = jobs_dir
    _configure_logging(verbose)


@main.command("list-jobs")
@click.pass_context
def list_jobs_cmd(ctx):
    """List available jobs."""
    from jobgraph import list_jobs

    result = list_jobs(ctx.obj["jobs_dir"])
    _output(result, ctx.obj["human"], ctx.obj["compact"])


@main.command("show-job")
@click.argument("name")
@click.pass_context
def show_job(ctx, name):
    """Show a job's tasks and their dependencies."""
    job = _load(ctx, name)
    tasks = []
    for task in job.registry:
        tasks.append({
            "id": task.id,
            "name": task.display_name,
            "depends_on": list(task.depends_on),
            "run": getattr(task.action, "command", None),
        })
    out = {"name": job.name, "description": job.description, "tasks": tasks}
    _output(out, ctx.obj["human"], ctx.obj["compact"])


@main.command("plan")
@click.argument("name")
@click.pass_context
def plan(ctx, name):
    """Show the order tasks would run in, without running them."""
    from jobgraph import DependencyError, Executor

    job = _load(ctx, name)
    try:
        order = Executor(observers=[]).plan(job.registry)
    except DependencyError as e:
        _output({"error": str(e), "stuck": e.task_ids, "missing": e.missing})
        return
    _output({"job": job.name, "order": order}, ctx.obj["human"], ctx.obj["compact"])


@main.command("run")
@click.argument("name")
@click.pass_context
def run(ctx, name):
    """Run a job's tasks in dependency order; stop at the first failure."""
    from jobgraph import DependencyError, Executor, TaskExecutionError

    job = _load(ctx, name)
    executor = Executor()
    try:
        state = executor.run(job.registry)
    except TaskExecutionError as e:
        _output({
            "error": str(e),
            "job": job.name,
            "failed_task": e.task_id,
            "completed": executor.state.completed,
        })
        return
    except DependencyError as e:
        _output({
            "error": str(e),
            "job": job.name,
            "stuck": e.task_ids,
            "missing": e.missing,
            "completed": executor.state.completed,
        })
        return
    out = {"job": job.name, "status": state.status.value, "completed": state.completed}
    _output(out, ctx.obj["human"], ctx.obj["compact"])
