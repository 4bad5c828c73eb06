import pytest

from jobgraph import Executor, list_jobs, load_job
from jobgraph.actions import ShellAction


def test_load_base(jobs_dir):
    job = load_job("base", jobs_dir)
    assert job.name == "base"
    assert job.registry.all_ids() == ["data", "preprocess", "train", "validate", "deploy"]
    assert job.registry.get("train").depends_on == ("preprocess",)
    assert job.registry.get("train").display_name == "Train model"
    assert isinstance(job.registry.get("data").action, ShellAction)


def test_inheritance_keeps_parent_tasks(jobs_dir):
    job = load_job("ml-pipeline", jobs_dir)
    assert job.name == "ml-pipeline"
    assert len(job.registry) == 5


def test_inheritance_overrides_and_appends(jobs_dir):
    job = load_job("nightly", jobs_dir)
    ids = job.registry.all_ids()
    assert ids[-1] == "report"
    deploy = job.registry.get("deploy")
    assert deploy.display_name == "Deploy to staging"
    # depends_on inherited from base even though deploy was overridden
    assert deploy.depends_on == ("validate",)
    assert job.registry.get("report").action.command == ["echo", "report written"]


def test_plan_out_of_order_file(jobs_dir):
    job = load_job("docs", jobs_dir)
    assert Executor([]).plan(job.registry) == ["build", "linkcheck", "publish"]


def test_load_nonexistent(jobs_dir):
    with pytest.raises(FileNotFoundError):
        load_job("nonexistent", jobs_dir)


def test_missing_parent(tmp_path):
    (tmp_path / "child.yaml").write_text(
        "name: child\ndescription: d\ninherits: ghost\ntasks:\n  a:\n    run: 'true'\n"
    )
    with pytest.raises(FileNotFoundError, match="ghost"):
        load_job("child", tmp_path)


def test_circular_inheritance(tmp_path):
    (tmp_path / "a.yaml").write_text("name: a\ndescription: d\ninherits: b\n")
    (tmp_path / "b.yaml").write_text("name: b\ndescription: d\ninherits: a\n")
    with pytest.raises(ValueError, match="Circular inheritance"):
        load_job("a", tmp_path)


def test_task_without_run(tmp_path):
    (tmp_path / "broken.yaml").write_text(
        "name: broken\n"
        "description: bad\n"
        "tasks:\n"
        "  data:\n"
        "    name: no command\n"
    )
    with pytest.raises(ValueError, match="must have 'run'"):
        load_job("broken", tmp_path)


def test_unknown_task_key(tmp_path):
    (tmp_path / "typo.yaml").write_text(
        "name: typo\ndescription: d\ntasks:\n  a:\n    run: 'true'\n    dependson: [b]\n"
    )
    with pytest.raises(ValueError, match="unknown keys"):
        load_job("typo", tmp_path)


def test_missing_top_keys(tmp_path):
    (tmp_path / "bare.yaml").write_text("name: bare\n")
    with pytest.raises(ValueError, match="missing required keys"):
        load_job("bare", tmp_path)


def test_depends_on_must_be_list(tmp_path):
    (tmp_path / "scalar.yaml").write_text(
        "name: scalar\ndescription: d\ntasks:\n  a:\n    run: 'true'\n    depends_on: b\n"
    )
    with pytest.raises(ValueError, match="must be a list"):
        load_job("scalar", tmp_path)


def test_list_jobs(jobs_dir):
    names = list_jobs(jobs_dir)
    assert names == ["base", "docs", "ml-pipeline", "nightly"]


def test_env_var_jobs_dir(tmp_path, monkeypatch):
    (tmp_path / "solo.yaml").write_text("name: solo\ndescription: d\ntasks:\n  a:\n    run: 'true'\n")
    monkeypatch.setenv("JOBGRAPH_JOBS_DIR", str(tmp_path))
    assert list_jobs() == ["solo"]
    assert load_job("solo").registry.all_ids() == ["a"]


def test_task_not_a_mapping(tmp_path):
    (tmp_path / "flat.yaml").write_text("name: flat\ndescription: d\ntasks:\n  data: echo hi\n")
    with pytest.raises(ValueError, match="task must be a mapping"):
        load_job("flat", tmp_path)


def test_inherited_task_overridden_by_non_mapping(tmp_path):
    (tmp_path / "parent.yaml").write_text(
        "name: parent\ndescription: d\ntasks:\n  data:\n    run: 'true'\n"
    )
    (tmp_path / "child.yaml").write_text(
        "name: child\ndescription: d\ninherits: parent\ntasks:\n  data: echo hi\n"
    )
    with pytest.raises(ValueError, match="task must be a mapping"):
        load_job("child", tmp_path)
